"""Running services under uvicorn.

uvicorn traps SIGINT/SIGTERM: it stops accepting connections, waits for
in-flight requests to finish and then runs the app's lifespan shutdown.
"""

import signal
from types import FrameType

import uvicorn
from fastapi import FastAPI

from waypoint.config.models.services import ListenerConfig
from waypoint.observability.logging import get_logger

logger = get_logger(__name__)


class Server(uvicorn.Server):
    """uvicorn server that records the signal that stopped it.

    uvicorn's own loggers are disabled so structlog owns the output.
    """

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        logger.info("shutdown_signal_received", signal=signal.Signals(sig).name)
        super().handle_exit(sig, frame)


def build_server(app: FastAPI, listener: ListenerConfig) -> Server:
    """Create the server for an app without starting it.

    Args:
        app: Application to serve
        listener: Host and port to bind
    """
    config = uvicorn.Config(
        app,
        host=listener.host,
        port=listener.port,
        lifespan="on",
        log_config=None,
    )
    return Server(config)


def serve(app: FastAPI, listener: ListenerConfig) -> None:
    """Serve an app until a termination signal is received.

    Args:
        app: Application to serve
        listener: Host and port to bind
    """
    server = build_server(app, listener)

    logger.info("server_listening", host=listener.host, port=listener.port)
    server.run()
    logger.info("server_exited", host=listener.host, port=listener.port)
