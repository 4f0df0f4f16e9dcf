"""Command-line interface for PropJournal."""

from propjournal.cli.main import cli, main

__all__ = ["cli", "main"]
