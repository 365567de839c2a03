"""Bidirectional level resolution.

Wraps the UAX #9 implementation from python-bidi to produce one embedding
level per character of the buffer.
"""

from __future__ import annotations

import logging

from bidi.algorithm import (
    explicit_embed_and_overrides,
    get_embedding_levels,
    get_empty_storage,
    resolve_implicit_levels,
    resolve_neutral_types,
    resolve_weak_types,
)

logger = logging.getLogger(__name__)


def is_rtl(level: int) -> bool:
    """Return True for right-to-left embedding levels."""
    return level % 2 == 1


def resolve_levels(text: str, base_rtl: bool = False) -> list[int]:
    """Return the resolved embedding level of every character in ``text``.

    Rule X9 drops embedding controls and boundary neutrals from the
    algorithm's working list; those characters keep the level assigned to
    them before removal so the result stays aligned with ``text``.
    """
    if not text:
        return []

    storage = get_empty_storage()
    storage["base_level"] = 1 if base_rtl else 0
    storage["base_dir"] = "R" if base_rtl else "L"

    get_embedding_levels(text, storage, upper_is_rtl=False, debug=False)
    entries = list(storage["chars"])

    explicit_embed_and_overrides(storage, debug=False)
    resolve_weak_types(storage, debug=False)
    resolve_neutral_types(storage, debug=False)
    resolve_implicit_levels(storage, debug=False)

    levels = [entry["level"] for entry in entries]
    logger.debug("bidi: %d chars, max level %d", len(levels), max(levels))
    return levels


class BidiAnalysis:
    """Bidi levels for one text buffer, computed once on construction."""

    def __init__(self, text: str, base_rtl: bool = False) -> None:
        self.base_rtl = base_rtl
        self.levels = resolve_levels(text, base_rtl)
