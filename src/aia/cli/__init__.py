"""Command-line interface for aia."""

from aia.cli.app import entrypoint, main

__all__ = ["entrypoint", "main"]
