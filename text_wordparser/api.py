"""High-level API for text-wordparser.

Example:
    >>> from text_wordparser import WordSegmenter
    >>> segmenter = WordSegmenter()
    >>> result = segmenter.segment("Hello world")
    >>> result.word_texts()
    ['Hello ', 'world']
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from text_wordparser.config import Config
from text_wordparser.fonts.cache import FontCache
from text_wordparser.fonts.engine import FontEngine, TTFontEngine
from text_wordparser.text import InlineObject, StyleRun, TextString
from text_wordparser.words import Word, word_ranges

logger = logging.getLogger(__name__)


@dataclass
class SegmentationResult:
    """Words produced for one text."""

    text: str
    words: list[Word]

    def ranges(self) -> list[tuple[int, int]]:
        """Character range of every word."""
        return list(word_ranges(self.words, len(self.text)))

    def word_texts(self) -> list[str]:
        return [self.text[start:end] for start, end in self.ranges()]


class WordSegmenter:
    """Segments texts into words using one default font.

    Args:
        font: Font for style runs without their own font. Resolved from
            the config (``font_path``, else ``font_family``) on first use
            when omitted.
        config: Settings; defaults to :class:`Config` defaults.
        min_resize_width: Overrides ``config.min_resize_width`` (pixels).
    """

    def __init__(
        self,
        font: FontEngine | None = None,
        config: Config | None = None,
        min_resize_width: float | None = None,
        font_cache: FontCache | None = None,
    ) -> None:
        self.config = config or Config()
        self._font = font
        self._font_cache = font_cache
        if min_resize_width is None:
            self.min_resize_width = self.config.resize_threshold
        else:
            self.min_resize_width = min_resize_width

    @property
    def font(self) -> FontEngine:
        """The default font, loaded on first access."""
        if self._font is None:
            if self.config.font_path is not None:
                self._font = TTFontEngine.from_path(
                    self.config.font_path, size=self.config.font_size
                )
            else:
                if self._font_cache is None:
                    self._font_cache = FontCache()
                self._font = self._font_cache.get_font(
                    self.config.font_family, size=self.config.font_size
                )
            logger.debug("default font: %r", self._font)
        return self._font

    def segment(
        self,
        text: str,
        runs: Iterable[StyleRun] | None = None,
        objects: Iterable[InlineObject] | None = None,
    ) -> SegmentationResult:
        """Segment ``text`` into words.

        Raises:
            ShapingError: If a text item cannot be shaped.
            FontNotFoundError: If the default font is needed but cannot be loaded.
        """
        string = TextString(text, runs, objects, min_resize_width=self.min_resize_width)
        needs_default = bool(text) and any(run.font is None for run in string.runs)
        string.parse(font=self.font if needs_default else self._font)
        logger.debug("segmented %d chars into %d words", len(text), len(string.words))
        return SegmentationResult(text, string.words)
