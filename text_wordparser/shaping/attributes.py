"""Per-character break attributes.

Line break opportunities follow UAX #14 and grapheme cluster boundaries
follow UAX #29, both as implemented by ``apsw.unicode``.
"""

from __future__ import annotations

from apsw import unicode as uni

from text_wordparser.shaping.items import CharAttributes


def line_break_positions(text: str) -> set[int]:
    """Return indices before which a line may be broken (excluding 0)."""
    positions: set[int] = set()
    offset = 0
    length = len(text)
    while offset < length:
        offset = uni.line_break_next_break(text, offset)
        if offset < length:
            positions.add(offset)
    return positions


def grapheme_boundaries(text: str) -> set[int]:
    """Return indices where an extended grapheme cluster starts."""
    positions: set[int] = set()
    offset = 0
    length = len(text)
    while offset < length:
        positions.add(offset)
        offset = uni.grapheme_next_break(text, offset)
    return positions


def char_attributes(text: str) -> list[CharAttributes]:
    """Build the attribute table for ``text``, one record per character."""
    if not text:
        return []
    breaks = line_break_positions(text)
    graphemes = grapheme_boundaries(text)
    return [
        CharAttributes(
            line_break=index in breaks,
            white_space=char.isspace(),
            grapheme_boundary=index in graphemes,
        )
        for index, char in enumerate(text)
    ]
