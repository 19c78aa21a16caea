"""
Module: report_engine.layout.fonts

Purpose:
    Font/metrics provider for the layout engine. Resolves the three font
    families a report uses (regular, bold, mono) to fonts registered with
    ReportLab and answers "width of text at size" queries.

Key Functions:
    - load_report_fonts(): Register TrueType candidates, fall back to Type1

Key Classes:
    - FontSet: Resolved regular/bold/mono font names with width queries

Dependencies:
    - reportlab.pdfbase: Font registration and string metrics

Used By:
    - report_engine.layout.context: One FontSet per report
    - report_engine.layout.text: Wrapping and measurement
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional, Sequence

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

logger = logging.getLogger(__name__)

FONT_REGULAR = "regular"
FONT_BOLD = "bold"
FONT_MONO = "mono"
FONT_FAMILIES = (FONT_REGULAR, FONT_BOLD, FONT_MONO)

# Built-in Type1 fallbacks
STANDARD_REGULAR = "Helvetica"
STANDARD_BOLD = "Helvetica-Bold"
STANDARD_MONO = "Courier"

REGULAR_CANDIDATES: Sequence[str] = (
    "NotoSans-Regular.ttf",
    "LiberationSans-Regular.ttf",
    "DejaVuSans.ttf",
    "Inter-Regular.ttf",
)
BOLD_CANDIDATES: Sequence[str] = (
    "NotoSans-SemiBold.ttf",
    "NotoSans-Bold.ttf",
    "LiberationSans-Bold.ttf",
    "DejaVuSans-Bold.ttf",
    "Inter-SemiBold.ttf",
    "Inter-Bold.ttf",
)
MONO_CANDIDATES: Sequence[str] = (
    "NotoSansMono-Regular.ttf",
    "LiberationMono-Regular.ttf",
    "DejaVuSansMono.ttf",
)


@dataclass(frozen=True)
class FontSet:
    """
    Resolved font names for one report (immutable).

    Attributes:
        regular: Registered name of the body font
        bold: Registered name of the bold font
        mono: Registered name of the monospace font

    Example:
        >>> fonts = FontSet.standard()
        >>> fonts.name_for("mono")
        'Courier'
    """

    regular: str = STANDARD_REGULAR
    bold: str = STANDARD_BOLD
    mono: str = STANDARD_MONO

    @classmethod
    def standard(cls) -> "FontSet":
        """Type1 Helvetica / Helvetica-Bold / Courier."""
        return cls()

    def name_for(self, family: str) -> str:
        """Map a family ("regular", "bold", "mono") to a font name."""
        if family == FONT_BOLD:
            return self.bold
        if family == FONT_MONO:
            return self.mono
        if family == FONT_REGULAR:
            return self.regular
        raise ValueError(f"Unknown font family {family!r}; expected one of {', '.join(FONT_FAMILIES)}")

    def width(self, text: str, family: str, size: float) -> float:
        """Width of text in points when set in family at size."""
        return pdfmetrics.stringWidth(text, self.name_for(family), size)


def _register_first(
    search_dirs: Sequence[Path],
    candidates: Sequence[str],
    registered_name: str,
) -> Optional[str]:
    for directory in search_dirs:
        for filename in candidates:
            path = directory / filename
            if not path.is_file():
                continue
            try:
                pdfmetrics.registerFont(TTFont(registered_name, str(path)))
            except (OSError, TTFError) as exc:
                logger.warning(f"Could not register font {path}: {exc}")
                continue
            logger.debug(f"Registered {registered_name} from {path}")
            return registered_name
    return None


def load_report_fonts(search_dirs: Iterable[Path]) -> FontSet:
    """
    Register the first usable TrueType fonts found in search_dirs.

    Each family falls back independently: a missing bold font reuses the
    regular TrueType font if one was found, otherwise Helvetica-Bold; a
    missing mono font falls back to Courier.

    Args:
        search_dirs: Directories to search, in priority order

    Returns:
        FontSet naming the registered (or built-in) fonts
    """
    dirs = [Path(d) for d in search_dirs]
    regular = _register_first(dirs, REGULAR_CANDIDATES, "ReportSans")
    bold = _register_first(dirs, BOLD_CANDIDATES, "ReportSans-Bold")
    mono = _register_first(dirs, MONO_CANDIDATES, "ReportMono")

    fonts = FontSet(
        regular=regular or STANDARD_REGULAR,
        bold=bold or regular or STANDARD_BOLD,
        mono=mono or STANDARD_MONO,
    )
    if regular is None:
        logger.info("No TrueType report fonts found, using built-in Type1 fonts")
    return fonts
