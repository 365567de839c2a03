"""text-wordparser: Split shaped rich text into measured words for line wrapping.

This library provides:
- HarfBuzz text shaping of bidi-resolved text items
- UAX #14 line break and UAX #29 grapheme cluster attributes
- A single-pass word parser producing widths, right bearings and
  trailing-space padding per word
- Forced splitting of overlong unbreakable words at grapheme boundaries

Example:
    >>> from text_wordparser import TextString, TTFontEngine
    >>> font = TTFontEngine.from_path("DejaVuSans.ttf", size=16)
    >>> words = TextString("Hello world").parse(font=font)
"""

from text_wordparser.api import SegmentationResult, WordSegmenter
from text_wordparser.config import Config
from text_wordparser.exceptions import (
    ConfigError,
    FontNotFoundError,
    ShapingError,
    WordParserError,
)
from text_wordparser.fonts import FontCache, FontEngine, TTFontEngine
from text_wordparser.parser import WordParser
from text_wordparser.text import InlineObject, StyleRun, TextString
from text_wordparser.words import Word, from_fixed, to_fixed, word_ranges

__version__ = "0.1.0"

__all__ = [
    # Main API
    "WordSegmenter",
    "SegmentationResult",
    "TextString",
    "StyleRun",
    "InlineObject",
    "WordParser",
    "Word",
    "word_ranges",
    "to_fixed",
    "from_fixed",
    "Config",
    # Font handling
    "FontCache",
    "FontEngine",
    "TTFontEngine",
    # Exceptions
    "WordParserError",
    "ShapingError",
    "FontNotFoundError",
    "ConfigError",
    # Metadata
    "__version__",
]
