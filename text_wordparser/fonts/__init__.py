"""Font handling for text-wordparser.

This subpackage provides:
- Font-engine handles (advance scaling, right bearing queries)
- fontconfig-based font resolution with caching
"""

from text_wordparser.exceptions import FontNotFoundError
from text_wordparser.fonts.cache import FontCache
from text_wordparser.fonts.engine import FontEngine, TTFontEngine

__all__ = ["FontCache", "FontEngine", "FontNotFoundError", "TTFontEngine"]
