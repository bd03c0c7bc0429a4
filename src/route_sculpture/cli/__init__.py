"""Command-line interface for route sculptures."""

from route_sculpture.cli.main import main

__all__ = ["main"]
