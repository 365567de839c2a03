"""Shaping engine base: itemization and lazy glyph data."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from bisect import bisect_right
from collections.abc import Sequence
from typing import TYPE_CHECKING

from text_wordparser.shaping.attributes import char_attributes
from text_wordparser.shaping.items import CharAttributes, ItemKind, ShapingItem
from text_wordparser.text import SEPARATORS
from text_wordparser.words import to_fixed

if TYPE_CHECKING:
    from text_wordparser.fonts.engine import FontEngine
    from text_wordparser.text import TextString

logger = logging.getLogger(__name__)


class ShapingEngine(ABC):
    """Splits a text object into shaping items and shapes them on demand.

    Items are built eagerly on construction; glyph data is attached by
    :meth:`shape` the first time an item is needed.
    """

    def __init__(
        self,
        string: TextString,
        levels: Sequence[int],
        default_font: FontEngine | None = None,
    ) -> None:
        if len(levels) != len(string.text):
            raise ValueError(
                f"expected {len(string.text)} bidi levels, got {len(levels)}"
            )
        self.string = string
        self.text = string.text
        self.levels = list(levels)
        self.default_font = default_font
        self._attributes: list[CharAttributes] | None = None
        self.items = self.itemize()
        self._item_starts = [item.position for item in self.items]
        logger.debug("itemized %d chars into %d items", len(self.text), len(self.items))

    def _kind_at(self, position: int) -> ItemKind:
        if self.text[position] in SEPARATORS:
            return ItemKind.SEPARATOR
        if position in self.string.objects:
            return ItemKind.OBJECT
        return ItemKind.TEXT

    def font_for_run(self, run_index: int) -> FontEngine | None:
        return self.string.runs[run_index].font or self.default_font

    def itemize(self) -> list[ShapingItem]:
        """Split the buffer into items.

        Separators and objects get one item per character. Text items end
        wherever the style run or the bidi level changes.
        """
        items: list[ShapingItem] = []
        length = len(self.text)
        start = 0
        while start < length:
            kind = self._kind_at(start)
            level = self.levels[start]
            run_index = self.string.block_index(start)
            end = start + 1
            if kind is ItemKind.TEXT:
                while (
                    end < length
                    and self._kind_at(end) is ItemKind.TEXT
                    and self.levels[end] == level
                    and self.string.block_index(end) == run_index
                ):
                    end += 1

            item = ShapingItem(
                position=start,
                length=end - start,
                kind=kind,
                level=level,
                run_index=run_index,
                font=self.font_for_run(run_index),
            )
            if kind is ItemKind.OBJECT:
                item.width = to_fixed(self.string.objects[start].width)
            items.append(item)
            start = end
        return items

    def attributes(self) -> list[CharAttributes] | None:
        """Return the attribute table, one record per character."""
        if self._attributes is None:
            self._attributes = self.compute_attributes()
        return self._attributes

    def compute_attributes(self) -> list[CharAttributes] | None:
        return char_attributes(self.text)

    def find_item(self, position: int) -> int:
        """Return the index of the item containing ``position``."""
        return max(bisect_right(self._item_starts, position) - 1, 0)

    def block_index(self, position: int) -> int:
        return self.string.block_index(position)

    def shape(self, index: int) -> ShapingItem:
        """Attach glyph data to text item ``index`` if it has none yet."""
        item = self.items[index]
        if item.kind is ItemKind.TEXT and not item.shaped:
            self.shape_item(item)
        return item

    @abstractmethod
    def shape_item(self, item: ShapingItem) -> None:
        """Fill ``item.glyphs`` and ``item.log_clusters``."""
