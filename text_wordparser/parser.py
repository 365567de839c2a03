"""Word segmentation of shaped text.

A single forward pass over the shaping items of a text object turns the
buffer into the ordered word sequence a line-breaking pass consumes. Four
signals are interleaved while scanning: line break opportunities,
whitespace runs, item kinds (separators and inline objects) and grapheme
cluster boundaries. Widths are accumulated per glyph cluster, so
combining marks never separate from their base character.

Words that grow past the text's ``min_resize_width`` without any break
opportunity are cut into unfinished words at grapheme boundaries: first
retroactively at the last remembered boundary, then at every boundary
until the next real break.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from text_wordparser.exceptions import ShapingError
from text_wordparser.shaping.bidi import BidiAnalysis
from text_wordparser.shaping.harfbuzz import HarfBuzzEngine
from text_wordparser.shaping.items import CharAttributes, GlyphLayout, ItemKind, ShapingItem
from text_wordparser.text import NBSP
from text_wordparser.words import FIXED_SCALE, Word

if TYPE_CHECKING:
    from text_wordparser.fonts.engine import FontEngine
    from text_wordparser.shaping.engine import ShapingEngine
    from text_wordparser.text import TextString

logger = logging.getLogger(__name__)

# A line break right after one of these is suppressed (urls, paths, numbers).
NO_BREAK_AFTER = "/."


class SplitMode(Enum):
    NORMAL = "normal"
    FORCED = "forced"


class WordKind(Enum):
    FINISHED = "finished"
    UNFINISHED = "unfinished"
    NEWLINE = "newline"


class Segment(Enum):
    """What the scan cursor is looking at."""

    SEPARATOR = "separator"
    OBJECT = "object"
    SPACE_BREAK = "space_break"
    CONTENT = "content"


@dataclass
class ScriptLine:
    length: int = 0
    width: int = 0

    def reset(self) -> None:
        self.length = 0
        self.width = 0


@dataclass(frozen=True)
class SavedGlyph:
    glyph: int
    font: FontEngine


@dataclass(frozen=True)
class GraphemeMark:
    """Fallback cut point: a grapheme boundary and the line measured up to it."""

    position: int
    line: ScriptLine


class LineBreakHelper:
    """Mutable scan state of one parse."""

    def __init__(self) -> None:
        self.tmp_data = ScriptLine()
        self.space_data = ScriptLine()
        self.glyphs = GlyphLayout()
        self.log_clusters: Sequence[int] = ()
        self.item_start = 0
        self.glyph_count = 0
        self.current_position = 0
        self.word_start = 0
        self.previous_glyph: SavedGlyph | None = None
        self.right_bearing = 0
        self.font: FontEngine | None = None
        self.white_space_or_object = True
        self.split_mode = SplitMode.NORMAL
        self.grapheme_mark: GraphemeMark | None = None

    def enter_item(self, item: ShapingItem) -> None:
        self.current_position = item.position
        self.item_start = item.position
        self.glyphs = item.glyphs or GlyphLayout()
        self.log_clusters = item.log_clusters or ()
        self.font = item.font

    def cluster_at(self, position: int) -> int:
        return self.log_clusters[position - self.item_start]

    def current_glyph(self) -> int | None:
        """Glyph of the character just before the cursor, if it is in this item."""
        offset = self.current_position - 1 - self.item_start
        if offset < 0 or offset >= len(self.log_clusters):
            return None
        index = self.log_clusters[offset]
        if index >= self.glyphs.num_glyphs:
            return None
        return self.glyphs.glyphs[index]

    def save_current_glyph(self) -> None:
        glyph = self.current_glyph()
        if glyph is not None and self.font is not None:
            self.previous_glyph = SavedGlyph(glyph, self.font)
        else:
            self.previous_glyph = None

    def calculate_right_bearing(self) -> None:
        glyph = self.current_glyph()
        if glyph is not None and self.font is not None and not self.white_space_or_object:
            # Positive bearings clamp to zero.
            self.right_bearing = min(self.font.right_bearing(glyph), 0)
        else:
            self.right_bearing = 0

    def calculate_right_bearing_for_previous_glyph(self) -> None:
        saved = self.previous_glyph
        if saved is not None and saved.glyph > 0:
            self.right_bearing = min(saved.font.right_bearing(saved.glyph), 0)
        else:
            self.right_bearing = 0

    @property
    def negative_right_bearing(self) -> int:
        return abs(self.right_bearing)

    def add_next_cluster(self, end: int, line: ScriptLine) -> None:
        """Advance the cursor past one glyph cluster, adding its width to ``line``."""
        glyph_position = self.cluster_at(self.current_position)
        while True:
            self.current_position += 1
            line.length += 1
            if not (
                self.current_position < end
                and self.cluster_at(self.current_position) == glyph_position
            ):
                break

        glyphs = self.glyphs
        while True:
            if not glyphs.dont_print[glyph_position]:
                line.width += glyphs.advances[glyph_position]
            glyph_position += 1
            if not (
                glyph_position < glyphs.num_glyphs
                and not glyphs.cluster_start[glyph_position]
            ):
                break

        if not (
            (self.current_position == end and glyph_position == glyphs.num_glyphs)
            or self.cluster_at(self.current_position) == glyph_position
        ):
            raise ShapingError(
                "cluster map inconsistent with glyphs",
                details={"position": self.current_position, "glyph": glyph_position},
            )
        self.glyph_count += 1

    def remember_grapheme_boundary(self) -> None:
        self.grapheme_mark = GraphemeMark(self.current_position, replace(self.tmp_data))
        self.save_current_glyph()

    def reset_split_tracking(self) -> None:
        self.split_mode = SplitMode.NORMAL
        self.grapheme_mark = None


class WordParser:
    """Rebuilds ``string.words`` from the shaped text.

    Parsing happens on construction. Without an explicit ``engine`` the
    buffer goes through :class:`BidiAnalysis` and :class:`HarfBuzzEngine`.

    Raises:
        ShapingError: If attribute or glyph data is missing. The word
            sequence is left empty.
    """

    def __init__(
        self,
        string: TextString,
        engine: ShapingEngine | None = None,
        font: FontEngine | None = None,
    ) -> None:
        self.string = string
        self._text = string.text
        self._words = string.words
        if engine is None:
            analysis = BidiAnalysis(string.text)
            engine = HarfBuzzEngine(string, analysis.levels, default_font=font)
        self._engine = engine
        self._threshold = string.min_resize_width * FIXED_SCALE
        self.parse()

    def parse(self) -> None:
        self._words.clear()
        if not self._text:
            return
        try:
            self._scan()
        except ShapingError:
            self._words.clear()
            raise
        logger.debug("parsed %d chars into %d words", len(self._text), len(self._words))

    def _scan(self) -> None:
        engine = self._engine
        attributes = engine.attributes()
        if attributes is None or len(attributes) != len(self._text):
            raise ShapingError("attribute table unavailable")

        lbh = LineBreakHelper()
        items = engine.items
        item_index = -1
        new_item = engine.find_item(0)
        end = 0

        while new_item < len(items):
            if new_item != item_index:
                item_index = new_item
                item = self._enter(item_index)
                lbh.enter_item(item)
                end = item.end
            item = items[item_index]

            segment = self._classify(item, lbh.current_position, end, attributes)
            if segment is Segment.SEPARATOR:
                self._separator(lbh, end)
            elif segment is Segment.OBJECT:
                self._object(lbh, item, end)
            elif segment is Segment.SPACE_BREAK:
                self._space_break(lbh, attributes, end)
            else:
                self._content(lbh, attributes, end)

            if segment in (Segment.SEPARATOR, Segment.OBJECT) or lbh.current_position == end:
                new_item = item_index + 1

    def _enter(self, index: int) -> ShapingItem:
        item = self._engine.shape(index)
        if item.kind is not ItemKind.TEXT:
            return item
        if (
            item.glyphs is None
            or item.log_clusters is None
            or item.glyphs.num_glyphs == 0
            or not item.glyphs.validate()
            or len(item.log_clusters) != item.length
        ):
            raise ShapingError("glyph data unavailable", item_index=index)
        return item

    def _classify(
        self,
        item: ShapingItem,
        position: int,
        end: int,
        attributes: Sequence[CharAttributes],
    ) -> Segment:
        if item.kind is ItemKind.SEPARATOR:
            return Segment.SEPARATOR
        if item.kind is ItemKind.OBJECT:
            return Segment.OBJECT
        if self._at_space_break(attributes, position, end):
            return Segment.SPACE_BREAK
        return Segment.CONTENT

    def _at_space_break(
        self, attributes: Sequence[CharAttributes], position: int, end: int
    ) -> bool:
        """True if a space break follows, with only whitespace before it."""
        for index in range(position, end):
            if not attributes[index].white_space:
                return False
            if self._is_space_break(attributes, index):
                return True
        return False

    def _is_line_break(self, attributes: Sequence[CharAttributes], index: int) -> bool:
        return attributes[index].line_break and (
            index <= 0 or self._text[index - 1] not in NO_BREAK_AFTER
        )

    def _is_space_break(self, attributes: Sequence[CharAttributes], index: int) -> bool:
        return attributes[index].white_space and self._text[index] != NBSP

    def _flush(
        self,
        lbh: LineBreakHelper,
        kind: WordKind,
        next_start: int = 0,
        cut: GraphemeMark | None = None,
    ) -> None:
        """Push the pending word and start the next one.

        With ``cut`` the word ends at that earlier grapheme boundary instead
        and the remainder stays pending.
        """
        if kind is WordKind.NEWLINE:
            word = Word.newline_at(lbh.word_start, self._engine.block_index(lbh.word_start))
        elif cut is not None:
            lbh.calculate_right_bearing_for_previous_glyph()
            word = Word(
                lbh.word_start, cut.line.width, lbh.negative_right_bearing, unfinished=True
            )
        else:
            lbh.calculate_right_bearing()
            word = Word(
                lbh.word_start,
                lbh.tmp_data.width,
                lbh.negative_right_bearing,
                unfinished=kind is WordKind.UNFINISHED,
            )
        self._words.append(word)

        if cut is not None:
            lbh.tmp_data.width -= cut.line.width
            lbh.tmp_data.length -= cut.line.length
            lbh.word_start = cut.position
        else:
            lbh.tmp_data.reset()
            lbh.word_start = next_start

    def _flush_pending(self, lbh: LineBreakHelper) -> None:
        if lbh.word_start < lbh.current_position:
            self._flush(lbh, WordKind.FINISHED, lbh.current_position)
            lbh.reset_split_tracking()

    def _separator(self, lbh: LineBreakHelper, end: int) -> None:
        self._flush_pending(lbh)
        lbh.white_space_or_object = True
        lbh.tmp_data.length += 1
        lbh.glyph_count += 1
        self._flush(lbh, WordKind.NEWLINE, end)
        lbh.reset_split_tracking()

    def _object(self, lbh: LineBreakHelper, item: ShapingItem, end: int) -> None:
        self._flush_pending(lbh)
        lbh.white_space_or_object = True
        lbh.tmp_data.length += 1
        lbh.tmp_data.width += item.width
        lbh.glyph_count += 1
        self._flush(lbh, WordKind.FINISHED, end)
        lbh.reset_split_tracking()

    def _space_break(
        self, lbh: LineBreakHelper, attributes: Sequence[CharAttributes], end: int
    ) -> None:
        self._flush_pending(lbh)
        lbh.white_space_or_object = True
        while lbh.current_position < end and attributes[lbh.current_position].white_space:
            lbh.add_next_cluster(end, lbh.space_data)

        if not self._words:
            # Leading whitespace pads an empty first word.
            self._flush(lbh, WordKind.FINISHED, lbh.word_start)
        self._words[-1].add_rpadding(lbh.space_data.width)
        lbh.space_data.reset()
        lbh.word_start = lbh.current_position
        lbh.reset_split_tracking()

    def _content(
        self, lbh: LineBreakHelper, attributes: Sequence[CharAttributes], end: int
    ) -> None:
        lbh.white_space_or_object = False
        text_length = len(self._text)
        while True:
            lbh.add_next_cluster(end, lbh.tmp_data)
            position = lbh.current_position
            if (
                position >= text_length
                or self._is_space_break(attributes, position)
                or self._is_line_break(attributes, position)
            ):
                self._flush(lbh, WordKind.FINISHED, position)
                lbh.reset_split_tracking()
                return
            if attributes[position].grapheme_boundary:
                self._grapheme_boundary(lbh, position)
            if position >= end:
                return

    def _grapheme_boundary(self, lbh: LineBreakHelper, position: int) -> None:
        if lbh.split_mode is SplitMode.NORMAL and lbh.tmp_data.width > self._threshold:
            if lbh.grapheme_mark is not None:
                self._flush(lbh, WordKind.UNFINISHED, cut=lbh.grapheme_mark)
            lbh.split_mode = SplitMode.FORCED
        if lbh.split_mode is SplitMode.FORCED:
            self._flush(lbh, WordKind.UNFINISHED, position)
        else:
            lbh.remember_grapheme_boundary()
