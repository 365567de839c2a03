"""HarfBuzz shaping for text items."""

from __future__ import annotations

import logging
import unicodedata
from bisect import bisect_right
from collections.abc import Sequence
from typing import TYPE_CHECKING

import uharfbuzz as hb

from text_wordparser.exceptions import ShapingError
from text_wordparser.fonts.engine import TTFontEngine
from text_wordparser.shaping.engine import ShapingEngine
from text_wordparser.shaping.items import GlyphLayout, ShapingItem

if TYPE_CHECKING:
    from text_wordparser.fonts.engine import FontEngine
    from text_wordparser.text import TextString

logger = logging.getLogger(__name__)


def _is_invisible(char: str) -> bool:
    """Control and format characters are shaped but never painted."""
    return char != "\t" and unicodedata.category(char) in ("Cc", "Cf")


def shape_run(
    text: str,
    font: TTFontEngine,
    rtl: bool = False,
    features: dict[str, bool] | None = None,
) -> tuple[GlyphLayout, list[int]]:
    """Shape ``text`` with one font and direction.

    Returns the glyph layout in logical order and the cluster map: for each
    character of ``text``, the index of the first glyph of its cluster.
    """
    if not text:
        raise ShapingError("cannot shape an empty run")

    buf = hb.Buffer()
    buf.add_str(text)
    buf.direction = "rtl" if rtl else "ltr"
    buf.guess_segment_properties()
    hb.shape(font.hb_font, buf, features or {})

    infos = list(buf.glyph_infos or ())
    positions = list(buf.glyph_positions or ())
    if rtl:
        # HarfBuzz returns RTL runs in visual order
        infos.reverse()
        positions.reverse()
    if not infos:
        raise ShapingError("shaper produced no glyphs", details={"text": text})

    layout = GlyphLayout()
    first_glyph: dict[int, int] = {}
    previous_cluster = None
    for index, (info, pos) in enumerate(zip(infos, positions)):
        starts_cluster = info.cluster != previous_cluster
        if starts_cluster:
            first_glyph.setdefault(info.cluster, index)
        layout.glyphs.append(info.codepoint)
        layout.advances.append(font.to_fixed(pos.x_advance))
        layout.dont_print.append(_is_invisible(text[info.cluster]))
        layout.cluster_start.append(starts_cluster)
        previous_cluster = info.cluster

    cluster_values = sorted(first_glyph)
    log_clusters = []
    for char_index in range(len(text)):
        slot = max(bisect_right(cluster_values, char_index) - 1, 0)
        log_clusters.append(first_glyph[cluster_values[slot]])
    return layout, log_clusters


class HarfBuzzEngine(ShapingEngine):
    """Shaping engine that shapes text items with uharfbuzz."""

    def __init__(
        self,
        string: TextString,
        levels: Sequence[int],
        default_font: FontEngine | None = None,
        features: dict[str, bool] | None = None,
    ) -> None:
        super().__init__(string, levels, default_font)
        self.features = features

    def shape_item(self, item: ShapingItem) -> None:
        font = item.font
        if not isinstance(font, TTFontEngine):
            raise ShapingError(
                "text item has no HarfBuzz-capable font",
                details={"position": item.position, "font": repr(font)},
            )
        chunk = self.text[item.position : item.end]
        item.glyphs, item.log_clusters = shape_run(
            chunk, font, rtl=item.is_rtl, features=self.features
        )
        logger.debug(
            "shaped item at %d: %d chars -> %d glyphs (%s)",
            item.position,
            item.length,
            item.glyphs.num_glyphs,
            "rtl" if item.is_rtl else "ltr",
        )
