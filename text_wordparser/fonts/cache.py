"""Font resolution and caching through fontconfig."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from fontTools.ttLib import TTLibError

from text_wordparser.exceptions import FontNotFoundError
from text_wordparser.fonts.engine import TTFontEngine

logger = logging.getLogger(__name__)


class FontCache:
    """Cache loaded font engines, matching families with fontconfig."""

    GENERIC_FAMILIES = {
        "sans": "sans-serif",
        "sans-serif": "sans-serif",
        "serif": "serif",
        "monospace": "monospace",
        "mono": "monospace",
    }

    WEIGHT_STYLES = {
        100: "Thin",
        200: "ExtraLight",
        300: "Light",
        400: "Regular",
        500: "Medium",
        600: "SemiBold",
        700: "Bold",
        800: "ExtraBold",
        900: "Black",
    }

    def __init__(self) -> None:
        self._fonts: dict[str, TTFontEngine] = {}

    def _patterns(self, family: str, weight: int, style: str) -> list[str]:
        """Build fontconfig patterns from specific to generic."""
        patterns = []
        style_name = self.WEIGHT_STYLES.get(weight)
        if weight == 400 and style == "normal":
            patterns.append(f"{family}:style=Regular:weight=400")
        if weight == 400 and style == "italic":
            patterns.append(f"{family}:style=Italic:weight=400:slant=italic")
        if style_name and weight != 400:
            patterns.append(f"{family}:style={style_name}")
        if weight != 400:
            patterns.append(f"{family}:weight={weight}")

        base = family
        if style in ("italic", "oblique"):
            base += f":slant={style}"
        patterns.append(base)
        return patterns

    def _match_font_with_fc(
        self, family: str, weight: int = 400, style: str = "normal"
    ) -> tuple[Path, int] | None:
        """Ask fc-match for the best face; returns (path, face_index) or None."""
        for pattern in self._patterns(family, weight, style):
            try:
                result = subprocess.run(
                    ["fc-match", "--format=%{file}\\n%{index}", pattern],
                    capture_output=True,
                    text=True,
                    timeout=5,
                )
            except (OSError, subprocess.TimeoutExpired) as e:
                logger.debug("fc-match failed for %r: %s", pattern, e)
                continue

            if result.returncode != 0:
                continue
            lines = result.stdout.strip().split("\n")
            if len(lines) < 2:
                continue
            font_file = Path(lines[0])
            font_index = int(lines[1]) if lines[1].isdigit() else 0
            if font_file.exists():
                return font_file, font_index
        return None

    def get_font(
        self,
        family: str,
        size: float = 16.0,
        weight: int = 400,
        style: str = "normal",
    ) -> TTFontEngine:
        """Return a font engine for ``family`` at ``size`` pixels.

        Raises:
            FontNotFoundError: If fontconfig has no match or loading fails.
        """
        family = self.GENERIC_FAMILIES.get(family.strip().lower(), family.strip())
        cache_key = f"{family}:{weight}:{style}:{size}".lower()

        if cache_key not in self._fonts:
            match = self._match_font_with_fc(family, weight, style)
            if match is None and family == "sans-serif":
                match = self._match_font_with_fc("sans", weight, style)
            if match is None:
                raise FontNotFoundError(family, weight, style)

            font_path, font_index = match
            try:
                engine = TTFontEngine.from_path(font_path, size=size, face_index=font_index)
            except (OSError, TTLibError) as e:
                raise FontNotFoundError(
                    family, weight, style, details={"path": str(font_path), "error": str(e)}
                ) from e

            self._fonts[cache_key] = engine
            logger.info(
                "Loaded: %s w=%d s=%s -> %s:%d", family, weight, style, font_path.name, font_index
            )

        return self._fonts[cache_key]
