"""HTTP application plumbing shared by the demo services."""
