"""
Module: report_engine.layout

Purpose:
    Paginated report layout. Turns report content (headers, sections,
    paragraphs, key/value rows, metric cards, tables) into positioned
    draw operations on fixed-size pages.

Key Functions:
    - draw_report_header(), draw_section_heading(), draw_paragraph()
    - draw_key_value_list(), draw_metric_cards(), draw_table()
    - finalize_footers(): Terminal footer pass

Key Classes:
    - ReportFormat: Immutable format preset ("v2", "v3")
    - LayoutContext: Per-report cursor and page list
    - TableSpec / TableColumn: Table definitions

Dependencies:
    - reportlab: Font metrics and colors
    - PIL: Logo images

Used By:
    - report_engine.output.renderer: Serializes laid-out pages
"""

from .formats import (
    REPORT_FORMAT_V2,
    REPORT_FORMAT_V3,
    ReportFormat,
    TablePreset,
    get_report_format,
    get_table_preset,
)
from .fonts import FontSet, load_report_fonts
from .models import Page, ReportDocument, ReportImage, TextBlockRequest, TextBlockResult
from .context import LayoutContext, LayoutError
from .text import draw_text_block, measure_text_block_height, wrap_text_to_lines
from .sections import (
    KeyValueItem,
    Metric,
    MetricGridResult,
    draw_key_value_list,
    draw_key_value_row,
    draw_metric_cards,
    draw_note,
    draw_paragraph,
    draw_report_header,
    draw_section_heading,
    draw_watermark,
    finalize_footers,
    watermark_hook,
)
from .table import (
    TableColumn,
    TableLayoutResult,
    TableSpec,
    draw_table,
    resolve_column,
    resolve_column_widths,
    resolve_table_style,
)

__all__ = [
    # Formats
    "REPORT_FORMAT_V2",
    "REPORT_FORMAT_V3",
    "ReportFormat",
    "TablePreset",
    "get_report_format",
    "get_table_preset",
    # Fonts and models
    "FontSet",
    "load_report_fonts",
    "Page",
    "ReportDocument",
    "ReportImage",
    "TextBlockRequest",
    "TextBlockResult",
    # Context
    "LayoutContext",
    "LayoutError",
    # Text
    "draw_text_block",
    "measure_text_block_height",
    "wrap_text_to_lines",
    # Sections
    "KeyValueItem",
    "Metric",
    "MetricGridResult",
    "draw_key_value_list",
    "draw_key_value_row",
    "draw_metric_cards",
    "draw_note",
    "draw_paragraph",
    "draw_report_header",
    "draw_section_heading",
    "draw_watermark",
    "finalize_footers",
    "watermark_hook",
    # Tables
    "TableColumn",
    "TableLayoutResult",
    "TableSpec",
    "draw_table",
    "resolve_column",
    "resolve_column_widths",
    "resolve_table_style",
]
