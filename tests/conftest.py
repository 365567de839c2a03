"""Pytest configuration and shared fixtures for text-wordparser tests."""

from __future__ import annotations

import unicodedata
from collections.abc import Sequence
from dataclasses import replace
from io import BytesIO
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from text_wordparser.fonts.engine import FontEngine, TTFontEngine
from text_wordparser.shaping.engine import ShapingEngine
from text_wordparser.shaping.items import CharAttributes, GlyphLayout, ShapingItem
from text_wordparser.text import TextString
from text_wordparser.words import Word, to_fixed, word_ranges

# Test font: 1000 units per em, shaped at 16px (1 unit = 0.016px).
UNITS_PER_EM = 1000
FONT_SIZE = 16.0


def _rect(x_min: int, x_max: int) -> object:
    pen = TTGlyphPen(None)
    pen.moveTo((x_min, 0))
    pen.lineTo((x_min, 700))
    pen.lineTo((x_max, 700))
    pen.lineTo((x_max, 0))
    pen.closePath()
    return pen.glyph()


def _empty() -> object:
    return TTGlyphPen(None).glyph()


def build_test_font() -> bytes:
    """Build a tiny TrueType font.

    Letters a-e advance 500 with ink inside the advance; "f" advances 500
    but its ink reaches 600 (right bearing -100). Space advances 250.
    """
    # name: (advance, ink x range or None for an empty glyph)
    outlines = {
        ".notdef": (500, (50, 450)),
        "space": (250, None),
        "a": (500, (50, 450)),
        "b": (500, (50, 450)),
        "c": (500, (50, 450)),
        "d": (500, (50, 450)),
        "e": (500, (50, 450)),
        "f": (500, (50, 600)),
        "period": (200, (50, 150)),
        "slash": (300, (0, 300)),
        "acutecomb": (0, (-300, -100)),
    }
    cmap = {
        ord(" "): "space",
        0xA0: "space",
        ord("a"): "a",
        ord("b"): "b",
        ord("c"): "c",
        ord("d"): "d",
        ord("e"): "e",
        ord("f"): "f",
        ord("."): "period",
        ord("/"): "slash",
        0x0301: "acutecomb",
    }
    order = list(outlines)

    fb = FontBuilder(UNITS_PER_EM, isTTF=True)
    fb.setupGlyphOrder(order)
    fb.setupCharacterMap(cmap)
    fb.setupGlyf(
        {name: _rect(*ink) if ink else _empty() for name, (_, ink) in outlines.items()}
    )
    fb.setupHorizontalMetrics(
        {name: (advance, ink[0] if ink else 0) for name, (advance, ink) in outlines.items()}
    )
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": "WordTest", "styleName": "Regular"})
    fb.setupOS2(sTypoAscender=800, sTypoDescender=-200, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buf = BytesIO()
    fb.save(buf)
    return buf.getvalue()


@pytest.fixture(scope="session")
def font_bytes() -> bytes:
    """Return the raw bytes of the in-memory test font."""
    return build_test_font()


@pytest.fixture
def font(font_bytes: bytes) -> TTFontEngine:
    """Return the test font at 16px."""
    return TTFontEngine.from_bytes(font_bytes, size=FONT_SIZE, name="WordTest")


@pytest.fixture
def font_file(tmp_path: Path, font_bytes: bytes) -> Path:
    """Write the test font to disk and return its path."""
    path = tmp_path / "WordTest.ttf"
    path.write_bytes(font_bytes)
    return path


class TableFont(FontEngine):
    """Font engine with right bearings looked up in a table (fixed point)."""

    def __init__(self, bearings: dict[int, int] | None = None) -> None:
        self.bearings = bearings or {}
        self.queries: list[int] = []

    def right_bearing(self, glyph: int) -> int:
        self.queries.append(glyph)
        return self.bearings.get(glyph, 0)


class FixedEngine(ShapingEngine):
    """Deterministic shaping: one glyph per character, glyph id = code point.

    Every character advances ``advance`` pixels unless listed in
    ``advances``. Nonspacing marks join the cluster of the preceding
    character with zero width. ``line_breaks`` replaces the computed line
    break flags when given.
    """

    def __init__(
        self,
        string: TextString,
        advance: float = 10.0,
        advances: dict[str, float] | None = None,
        font: FontEngine | None = None,
        levels: Sequence[int] | None = None,
        line_breaks: set[int] | None = None,
    ) -> None:
        self.advance = advance
        self.advances = advances or {}
        self.line_breaks = line_breaks
        self.shape_calls: list[int] = []
        if levels is None:
            levels = [0] * len(string.text)
        super().__init__(string, levels, default_font=font or TableFont())

    def compute_attributes(self) -> list[CharAttributes] | None:
        attributes = super().compute_attributes()
        if self.line_breaks is None or attributes is None:
            return attributes
        return [
            replace(attribute, line_break=index in self.line_breaks)
            for index, attribute in enumerate(attributes)
        ]

    def shape_item(self, item: ShapingItem) -> None:
        self.shape_calls.append(item.position)
        layout = GlyphLayout()
        clusters: list[int] = []
        for index, char in enumerate(self.text[item.position : item.end]):
            is_mark = index > 0 and unicodedata.category(char) == "Mn"
            if is_mark:
                clusters.append(clusters[-1])
                advance = self.advances.get(char, 0.0)
            else:
                clusters.append(layout.num_glyphs)
                advance = self.advances.get(char, self.advance)
            layout.glyphs.append(ord(char))
            layout.advances.append(to_fixed(advance))
            layout.dont_print.append(False)
            layout.cluster_start.append(not is_mark)
        item.glyphs = layout
        item.log_clusters = clusters


def fixed_parse(text: str, **kwargs) -> list[Word]:
    """Parse ``text`` with a FixedEngine; TextString kwargs are split off."""
    string_kwargs = {
        key: kwargs.pop(key) for key in ("runs", "objects", "min_resize_width") if key in kwargs
    }
    string = TextString(text, **string_kwargs)
    return string.parse(engine=FixedEngine(string, **kwargs))


def assert_covers(words: Sequence[Word], text: str) -> None:
    """Word ranges are non-empty, strictly increasing and tile the whole text."""
    if not text:
        assert list(words) == []
        return
    assert words[0].position == 0
    ranges = list(word_ranges(words, len(text)))
    for start, end in ranges:
        assert start < end
    assert "".join(text[start:end] for start, end in ranges) == text
