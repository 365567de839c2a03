"""Exception hierarchy for text-wordparser.

All errors raised by the library derive from WordParserError so callers
can catch a single base class. An empty buffer is never an error: it
simply produces zero words.
"""

from __future__ import annotations

from typing import Any


class WordParserError(Exception):
    """Base class for all text-wordparser errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{key}={value!r}" for key, value in self.details.items())
        return f"{self.message} ({extra})"


class ShapingError(WordParserError):
    """Shaping or attribute data is unavailable for an item that must be measured.

    This is an internal-consistency failure, not a retryable condition. The
    word parser leaves the Word Sequence cleared when it propagates.
    """

    def __init__(
        self,
        message: str,
        item_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if item_index is not None:
            details["item"] = item_index
        super().__init__(message, details)
        self.item_index = item_index


class FontNotFoundError(WordParserError):
    """A font family could not be resolved or loaded."""

    def __init__(
        self,
        family: str,
        weight: int = 400,
        style: str = "normal",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            f"Font '{family}' w={weight} s={style} not found",
            details,
        )
        self.family = family
        self.weight = weight
        self.style = style


class ConfigError(WordParserError):
    """Configuration file or environment values are invalid."""
