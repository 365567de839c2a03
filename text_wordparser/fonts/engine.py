"""Font-engine handles used for shaping and bearing queries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from io import BytesIO
from pathlib import Path

import uharfbuzz as hb
from fontTools.pens.boundsPen import BoundsPen
from fontTools.ttLib import TTFont

from text_wordparser.words import to_fixed


class FontEngine(ABC):
    """A font at a given pixel size."""

    @abstractmethod
    def right_bearing(self, glyph: int) -> int:
        """Return the signed right side bearing of ``glyph`` in 26.6 fixed point.

        Negative values mean the ink extends past the advance width.
        """


class TTFontEngine(FontEngine):
    """Font engine backed by fontTools (metrics) and uharfbuzz (shaping)."""

    def __init__(
        self,
        ttfont: TTFont,
        blob: bytes,
        face_index: int = 0,
        size: float = 16.0,
        name: str | None = None,
    ) -> None:
        self.ttfont = ttfont
        self.blob = blob
        self.face_index = face_index
        self.size = size
        self.name = name or "<memory>"
        self.path: Path | None = None
        self.units_per_em = ttfont["head"].unitsPerEm
        self._glyph_set = ttfont.getGlyphSet()
        self._hb_font: hb.Font | None = None

    @classmethod
    def from_bytes(
        cls,
        blob: bytes,
        size: float = 16.0,
        face_index: int = 0,
        name: str | None = None,
    ) -> TTFontEngine:
        if blob[:4] == b"ttcf":
            ttfont = TTFont(BytesIO(blob), fontNumber=face_index)
        else:
            ttfont = TTFont(BytesIO(blob))
        return cls(ttfont, blob, face_index=face_index, size=size, name=name)

    @classmethod
    def from_path(
        cls, path: str | Path, size: float = 16.0, face_index: int = 0
    ) -> TTFontEngine:
        path = Path(path)
        engine = cls.from_bytes(
            path.read_bytes(), size=size, face_index=face_index, name=path.name
        )
        engine.path = path
        return engine

    @property
    def hb_font(self) -> hb.Font:
        """HarfBuzz font scaled to font units, created on first use."""
        if self._hb_font is None:
            face = hb.Face(hb.Blob(self.blob), self.face_index)
            font = hb.Font(face)
            font.scale = (self.units_per_em, self.units_per_em)
            self._hb_font = font
        return self._hb_font

    def to_fixed(self, units: float) -> int:
        """Convert font units to 26.6 fixed point pixels at this size."""
        return to_fixed(units * self.size / self.units_per_em)

    def right_bearing(self, glyph: int) -> int:
        name = self.ttfont.getGlyphName(glyph)
        if name not in self._glyph_set:
            return 0
        outline = self._glyph_set[name]
        pen = BoundsPen(self._glyph_set)
        outline.draw(pen)
        if pen.bounds is None:
            return 0
        x_max = pen.bounds[2]
        return self.to_fixed(outline.width - x_max)

    def __repr__(self) -> str:
        return f"TTFontEngine({self.name!r}, size={self.size})"
