"""Data passed from the shaping engine to the word parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from text_wordparser.fonts.engine import FontEngine


class ItemKind(Enum):
    """Classification of a shaping item."""

    TEXT = "text"
    SEPARATOR = "separator"
    OBJECT = "object"


@dataclass(frozen=True)
class CharAttributes:
    """Break flags for one character of the buffer.

    ``line_break`` means a line may be broken *before* this character.
    """

    line_break: bool = False
    white_space: bool = False
    grapheme_boundary: bool = False


@dataclass
class GlyphLayout:
    """Shaped glyphs of one item, in logical order.

    All lists are parallel, one entry per glyph. Advances are 26.6 fixed
    point pixels.
    """

    glyphs: list[int] = field(default_factory=list)
    advances: list[int] = field(default_factory=list)
    dont_print: list[bool] = field(default_factory=list)
    cluster_start: list[bool] = field(default_factory=list)

    @property
    def num_glyphs(self) -> int:
        return len(self.glyphs)

    def validate(self) -> bool:
        count = len(self.glyphs)
        return (
            len(self.advances) == count
            and len(self.dont_print) == count
            and len(self.cluster_start) == count
        )


@dataclass
class ShapingItem:
    """A maximal run of the buffer with uniform direction and style.

    ``log_clusters`` has one entry per character of the item holding the
    index of the first glyph of the cluster the character belongs to.
    It and ``glyphs`` stay ``None`` until the item is shaped.
    """

    position: int
    length: int
    kind: ItemKind = ItemKind.TEXT
    level: int = 0
    run_index: int = 0
    font: FontEngine | None = None
    width: int = 0
    glyphs: GlyphLayout | None = None
    log_clusters: list[int] | None = None

    @property
    def end(self) -> int:
        return self.position + self.length

    @property
    def is_rtl(self) -> bool:
        return self.level % 2 == 1

    @property
    def shaped(self) -> bool:
        return self.glyphs is not None and self.log_clusters is not None
