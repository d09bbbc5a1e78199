"""Command-line demos that record spans without serving HTTP."""
