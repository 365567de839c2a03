"""Text shaping for text-wordparser.

This subpackage provides:
- Per-character break attributes (UAX #14 line breaks, UAX #29 graphemes)
- BiDi (bidirectional) level resolution
- Itemization and HarfBuzz shaping of text items
"""

from text_wordparser.shaping.attributes import char_attributes
from text_wordparser.shaping.bidi import BidiAnalysis, is_rtl, resolve_levels
from text_wordparser.shaping.engine import ShapingEngine
from text_wordparser.shaping.harfbuzz import HarfBuzzEngine, shape_run
from text_wordparser.shaping.items import (
    CharAttributes,
    GlyphLayout,
    ItemKind,
    ShapingItem,
)

__all__ = [
    "char_attributes",
    "BidiAnalysis",
    "is_rtl",
    "resolve_levels",
    "ShapingEngine",
    "HarfBuzzEngine",
    "shape_run",
    "CharAttributes",
    "GlyphLayout",
    "ItemKind",
    "ShapingItem",
]
