"""The enclosing text object: buffer, style runs, inline objects and words."""

from __future__ import annotations

import math
from bisect import bisect_right
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from text_wordparser.words import Word

if TYPE_CHECKING:
    from text_wordparser.fonts.engine import FontEngine
    from text_wordparser.shaping.engine import ShapingEngine

SEPARATORS = frozenset("\n\r\u2028\u2029")
OBJECT_REPLACEMENT = "\ufffc"
NBSP = "\xa0"


@dataclass(frozen=True)
class StyleRun:
    """Formatting applied to ``text[start:end]``."""

    start: int
    end: int
    font: FontEngine | None = None


@dataclass(frozen=True)
class InlineObject:
    """A non-text element occupying one U+FFFC character, ``width`` in pixels."""

    position: int
    width: float


class TextString:
    """A text buffer together with its formatting and parsed words.

    Args:
        text: The character buffer.
        runs: Ordered, non-overlapping style runs. Defaults to one run
            covering the whole buffer.
        objects: Inline objects; each must sit on a U+FFFC character.
        min_resize_width: Width in pixels a word without break
            opportunities may reach before it is split at grapheme
            boundaries. Infinite by default (never split).

    Callers must serialize mutations and parses of one instance.
    """

    def __init__(
        self,
        text: str,
        runs: Iterable[StyleRun] | None = None,
        objects: Iterable[InlineObject] | None = None,
        min_resize_width: float = math.inf,
    ) -> None:
        self.text = text
        self.runs = list(runs or ()) or [StyleRun(0, len(text))]
        self.objects = {obj.position: obj for obj in objects or ()}
        self.min_resize_width = min_resize_width
        self.words: list[Word] = []
        self._run_starts = [run.start for run in self.runs]
        self._validate()

    def _validate(self) -> None:
        previous_end = 0
        for index, run in enumerate(self.runs):
            if run.start < previous_end or run.end < run.start or run.end > len(self.text):
                raise ValueError(
                    f"style run {index} [{run.start}, {run.end}) overlaps or exceeds the text"
                )
            previous_end = run.end
        for position in self.objects:
            if not 0 <= position < len(self.text) or self.text[position] != OBJECT_REPLACEMENT:
                raise ValueError(f"inline object at {position} is not on U+FFFC")

    def __len__(self) -> int:
        return len(self.text)

    def block_index(self, position: int) -> int:
        """Return the index of the last style run starting at or before ``position``."""
        return max(bisect_right(self._run_starts, position) - 1, 0)

    def parse(
        self,
        engine: ShapingEngine | None = None,
        font: FontEngine | None = None,
    ) -> list[Word]:
        """Rebuild :attr:`words` and return it.

        Without an explicit ``engine`` the text is analysed with the bidi
        algorithm and shaped with HarfBuzz, using ``font`` for runs that
        carry no font of their own.
        """
        from text_wordparser.parser import WordParser

        WordParser(self, engine=engine, font=font)
        return self.words
