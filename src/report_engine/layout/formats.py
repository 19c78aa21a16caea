"""
Module: report_engine.layout.formats

Purpose:
    Versioned, immutable report formats (page geometry, typography,
    layout constants, table defaults, watermark and palette) plus the
    named table presets layered on top of a format's table defaults.

Key Functions:
    - get_report_format(): Look up a format by version tag

Key Classes:
    - ReportFormat: Complete immutable theme for one report
    - TablePreset: Density adjustments selected by preset name

Dependencies:
    - reportlab.lib.colors: Palette values

Used By:
    - report_engine.layout.context: Cursor bounds and page size
    - report_engine.layout.sections / table: Typography and colors
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from reportlab.lib.colors import Color

# Style version tags
STYLE_V2 = "v2"
STYLE_V3 = "v3"
REPORT_STYLE_VERSIONS: Tuple[str, ...] = (STYLE_V2, STYLE_V3)

DEFAULT_WORD_BREAKS: Tuple[str, ...] = (" ", "/", "-", "_", "|", ":")

# A4 in points
A4_WIDTH_PT = 595.28
A4_HEIGHT_PT = 841.89


@dataclass(frozen=True)
class PageGeometry:
    """
    Page size and margins in points (immutable).

    Example:
        >>> geometry = PageGeometry(width=600, height=800, margin_top=50,
        ...                         margin_right=40, margin_bottom=40, margin_left=40)
        >>> geometry.content_width
        520
    """

    width: float = A4_WIDTH_PT
    height: float = A4_HEIGHT_PT
    margin_top: float = 54
    margin_right: float = 42
    margin_bottom: float = 42
    margin_left: float = 42

    def __post_init__(self) -> None:
        """Validate geometry on construction."""
        if self.width <= 0:
            raise ValueError(f"page width must be positive: {self.width}")
        if self.height <= 0:
            raise ValueError(f"page height must be positive: {self.height}")
        if min(self.margin_top, self.margin_right, self.margin_bottom, self.margin_left) < 0:
            raise ValueError("Margins must be non-negative")
        if self.content_width <= 0:
            raise ValueError("Margins exceed page width")
        if self.content_height <= 0:
            raise ValueError("Margins exceed page height")

    @property
    def content_width(self) -> float:
        """Width available for content (excluding margins)."""
        return self.width - self.margin_left - self.margin_right

    @property
    def content_height(self) -> float:
        """Height available for content (excluding margins)."""
        return self.height - self.margin_top - self.margin_bottom


@dataclass(frozen=True)
class Typography:
    title_size: float
    heading_size: float
    body_size: float
    small_size: float
    line_height: float


@dataclass(frozen=True)
class LayoutConstants:
    baseline: float
    gutter: float
    section_gap: float
    key_value_label_width: float
    header_band_height: float
    footer_band_height: float
    metric_card_min_height: float
    widow_orphan_min_lines: int


@dataclass(frozen=True)
class TableDefaults:
    font_size: float
    header_font_size: float
    line_height: float
    cell_padding_x: float
    cell_padding_y: float
    max_cell_lines: int
    striped_rows: bool


@dataclass(frozen=True)
class WatermarkStyle:
    angle_deg: float
    text_size: float
    text_opacity: float
    brand_opacity: float


@dataclass(frozen=True)
class Palette:
    text: Color
    muted: Color
    subtle: Color
    border: Color
    strong_border: Color
    panel: Color
    panel_alt: Color
    footer_panel: Color
    accent: Color
    white: Color


@dataclass(frozen=True)
class ReportFormat:
    """
    Complete report theme (immutable).

    One format is selected per report and never mutated while the
    report is laid out.

    Attributes:
        id: Version tag ("v2" or "v3")
        page: Page geometry
        typography: Font sizes and base line height
        layout: Spacing and band constants
        table_defaults: Table typography before preset adjustments
        watermark: Watermark angle, size and opacities
        colors: Color palette
        word_breaks: Characters a wrapped line may break after
    """

    id: str
    page: PageGeometry
    typography: Typography
    layout: LayoutConstants
    table_defaults: TableDefaults
    watermark: WatermarkStyle
    colors: Palette
    word_breaks: Tuple[str, ...] = DEFAULT_WORD_BREAKS

    def __post_init__(self) -> None:
        if self.layout.widow_orphan_min_lines < 1:
            raise ValueError(
                f"widow_orphan_min_lines must be at least 1: {self.layout.widow_orphan_min_lines}"
            )
        if self.layout.footer_band_height > self.page.margin_bottom:
            raise ValueError("Footer band must fit inside the bottom margin")


@dataclass(frozen=True)
class TablePreset:
    """
    Density adjustments applied on top of a format's TableDefaults.

    Deltas are added to the defaults; None keeps the default value.
    """

    name: str
    font_size_delta: float = 0.0
    header_font_size_delta: float = 0.0
    line_height_delta: float = 0.0
    cell_padding_x_delta: float = 0.0
    cell_padding_y: Optional[float] = None
    max_cell_lines: Optional[int] = None


REPORT_FORMAT_V2 = ReportFormat(
    id=STYLE_V2,
    page=PageGeometry(
        width=A4_WIDTH_PT,
        height=A4_HEIGHT_PT,
        margin_top=54,
        margin_right=42,
        margin_bottom=42,
        margin_left=42,
    ),
    typography=Typography(
        title_size=21,
        heading_size=12.6,
        body_size=10.35,
        small_size=8.7,
        line_height=14.6,
    ),
    layout=LayoutConstants(
        baseline=4,
        gutter=10,
        section_gap=9,
        key_value_label_width=180,
        header_band_height=78,
        footer_band_height=24,
        metric_card_min_height=62,
        widow_orphan_min_lines=2,
    ),
    table_defaults=TableDefaults(
        font_size=8.8,
        header_font_size=9.1,
        line_height=10.2,
        cell_padding_x=6,
        cell_padding_y=4,
        max_cell_lines=2,
        striped_rows=True,
    ),
    watermark=WatermarkStyle(
        angle_deg=31,
        text_size=30,
        text_opacity=0.045,
        brand_opacity=0.09,
    ),
    colors=Palette(
        text=Color(0.105, 0.12, 0.15),
        muted=Color(0.275, 0.31, 0.36),
        subtle=Color(0.45, 0.49, 0.56),
        border=Color(0.84, 0.86, 0.9),
        strong_border=Color(0.73, 0.77, 0.82),
        panel=Color(0.962, 0.971, 0.987),
        panel_alt=Color(0.981, 0.986, 0.997),
        footer_panel=Color(0.952, 0.964, 0.981),
        accent=Color(0.082, 0.255, 0.525),
        white=Color(1, 1, 1),
    ),
)

REPORT_FORMAT_V3 = ReportFormat(
    id=STYLE_V3,
    page=PageGeometry(
        width=A4_WIDTH_PT,
        height=A4_HEIGHT_PT,
        margin_top=52,
        margin_right=38,
        margin_bottom=40,
        margin_left=38,
    ),
    typography=Typography(
        title_size=20,
        heading_size=12.2,
        body_size=10.2,
        small_size=8.6,
        line_height=14.2,
    ),
    layout=LayoutConstants(
        baseline=4,
        gutter=10,
        section_gap=9,
        key_value_label_width=174,
        header_band_height=74,
        footer_band_height=22,
        metric_card_min_height=60,
        widow_orphan_min_lines=2,
    ),
    table_defaults=TableDefaults(
        font_size=8.7,
        header_font_size=8.95,
        line_height=10.1,
        cell_padding_x=5.5,
        cell_padding_y=4,
        max_cell_lines=2,
        striped_rows=True,
    ),
    watermark=WatermarkStyle(
        angle_deg=31,
        text_size=29,
        text_opacity=0.042,
        brand_opacity=0.085,
    ),
    colors=Palette(
        text=Color(0.1, 0.118, 0.145),
        muted=Color(0.27, 0.302, 0.35),
        subtle=Color(0.44, 0.475, 0.54),
        border=Color(0.835, 0.855, 0.895),
        strong_border=Color(0.71, 0.75, 0.81),
        panel=Color(0.958, 0.969, 0.986),
        panel_alt=Color(0.979, 0.985, 0.996),
        footer_panel=Color(0.949, 0.962, 0.979),
        accent=Color(0.078, 0.243, 0.505),
        white=Color(1, 1, 1),
    ),
)

_FORMATS: Mapping[str, ReportFormat] = MappingProxyType({
    STYLE_V2: REPORT_FORMAT_V2,
    STYLE_V3: REPORT_FORMAT_V3,
})

# Table "voices": evidence keeps long identifiers readable, analytics is
# denser, receipts is airier for short delivery rows.
TABLE_PRESETS: Mapping[str, TablePreset] = MappingProxyType({
    "default": TablePreset(name="default"),
    "evidence": TablePreset(
        name="evidence",
        header_font_size_delta=-0.1,
        line_height_delta=0.2,
        max_cell_lines=3,
    ),
    "analytics": TablePreset(
        name="analytics",
        font_size_delta=-0.3,
        header_font_size_delta=-0.2,
        line_height_delta=-0.3,
        cell_padding_y=3.5,
        max_cell_lines=2,
    ),
    "receipts": TablePreset(
        name="receipts",
        font_size_delta=0.2,
        line_height_delta=0.4,
        cell_padding_x_delta=0.5,
        cell_padding_y=4.5,
        max_cell_lines=2,
    ),
})


def get_report_format(style_version: str) -> ReportFormat:
    """
    Get the immutable format for a version tag.

    Args:
        style_version: "v2" or "v3" (case-insensitive, surrounding
            whitespace ignored)

    Returns:
        The matching ReportFormat

    Raises:
        ValueError: If the tag is not a known version

    Example:
        >>> get_report_format("v3").page.margin_left
        38
    """
    key = str(style_version or "").strip().lower()
    try:
        return _FORMATS[key]
    except KeyError:
        raise ValueError(
            f"Unknown report style {style_version!r}; expected one of {', '.join(REPORT_STYLE_VERSIONS)}"
        ) from None


def get_table_preset(name: Optional[str]) -> TablePreset:
    """Look up a table preset; None selects "default"."""
    key = name or "default"
    try:
        return TABLE_PRESETS[key]
    except KeyError:
        raise ValueError(
            f"Unknown table preset {name!r}; expected one of {', '.join(TABLE_PRESETS)}"
        ) from None
