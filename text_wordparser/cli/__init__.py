"""Command line interface for text-wordparser."""

from text_wordparser.cli.main import cli, main

__all__ = ["cli", "main"]
