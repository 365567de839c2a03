"""CLI commands for text-wordparser."""

from text_wordparser.cli.commands.fonts import fonts
from text_wordparser.cli.commands.words import words

__all__ = ["fonts", "words"]
