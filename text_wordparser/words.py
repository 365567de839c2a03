"""Word records produced by the word parser.

Widths are kept in 26.6 fixed point (64 units per pixel) so that sums of
glyph advances stay exact and repeated parses are bit-identical.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass

FIXED_SCALE = 64


def to_fixed(px: float) -> int:
    """Convert a pixel value to 26.6 fixed point."""
    return round(px * FIXED_SCALE)


def from_fixed(value: int) -> float:
    """Convert a 26.6 fixed point value to pixels."""
    return value / FIXED_SCALE


@dataclass
class Word:
    """One indivisible layout unit.

    A word spans from its ``position`` up to the position of the next word
    in the sequence. ``rbearing`` is the magnitude of a negative right side
    bearing of the last glyph, ``rpadding`` the width of trailing whitespace
    attached to the word. Newline records carry the style run index of the
    separator instead of any width.
    """

    position: int
    width: int = 0
    rbearing: int = 0
    rpadding: int = 0
    unfinished: bool = False
    newline: bool = False
    newline_block_index: int = 0

    @classmethod
    def newline_at(cls, position: int, block_index: int) -> Word:
        return cls(position, newline=True, newline_block_index=block_index)

    def add_rpadding(self, padding: int) -> None:
        self.rpadding += padding

    @property
    def f_width(self) -> float:
        return from_fixed(self.width)

    @property
    def f_rbearing(self) -> float:
        return from_fixed(self.rbearing)

    @property
    def f_rpadding(self) -> float:
        return from_fixed(self.rpadding)


def word_ranges(words: Sequence[Word], length: int) -> Iterator[tuple[int, int]]:
    """Yield the ``(start, end)`` character range of each word.

    Each word ends where the next one starts; the last word ends at
    ``length``, the size of the buffer the words were produced from.
    """
    for index, word in enumerate(words):
        if index + 1 < len(words):
            yield word.position, words[index + 1].position
        else:
            yield word.position, length
