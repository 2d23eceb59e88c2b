"""Command-line interface for bibkeys."""

from bibkeys.cli.main import cli, main

__all__ = ["cli", "main"]
