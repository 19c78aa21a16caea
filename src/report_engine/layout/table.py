"""
Module: report_engine.layout.table

Purpose:
    Table layout engine. Resolves column widths, wraps and caps cell
    text, paginates rows with header repetition and stripes rows by
    their index in the data (not their position on the page).

Key Functions:
    - resolve_column_widths(): Distribute available width across columns
    - resolve_column(): Apply semantic defaults to a column
    - resolve_table_style(): Format defaults + preset + per-table overrides
    - draw_table(): Lay out a table at the cursor

Key Classes:
    - TableColumn: Column definition with a row -> text extractor
    - TableSpec: Columns, rows and typography overrides
    - TableLayoutResult: Widths and pagination outcome

Dependencies:
    - report_engine.layout.context: Page flow
    - report_engine.layout.text: Wrapping, truncation, line drawing

Used By:
    - Report assembly code (evidence, analytics and receipt tables)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from .context import EPSILON, LayoutContext
from .fonts import FONT_BOLD, FONT_FAMILIES, FONT_MONO, FONT_REGULAR
from .formats import ReportFormat, get_table_preset
from .text import draw_lines, truncate_lines, wrap_text_to_lines

logger = logging.getLogger(__name__)

MIN_COLUMN_WIDTH = 24
MIN_WRAP_WIDTH = 8
# Widest standard glyph is about 1.015 em; narrow columns set type below the wrap width
NARROW_COLUMN_EM = 0.9
TABLE_GAP_AFTER = 6

WIDTH_FIXED = "fixed"
WIDTH_FLEX = "flex"
ALIGN_LEFT = "left"
ALIGN_RIGHT = "right"

SEMANTIC_TEXT = "text"
SEMANTIC_IDENTIFIER = "identifier"
SEMANTIC_METRIC = "metric"
SEMANTIC_STATUS = "status"
SEMANTIC_DATETIME = "datetime"
SEMANTIC_TAGS = (SEMANTIC_TEXT, SEMANTIC_IDENTIFIER, SEMANTIC_METRIC, SEMANTIC_STATUS, SEMANTIC_DATETIME)


@dataclass(frozen=True)
class TableColumn:
    """
    One table column (immutable).

    Attributes:
        key: Column identifier
        header: Header label
        value: Extracts the cell text from a row
        width: Requested width; a column with a width is fixed
        min_width: Minimum width (floored at 24pt)
        mode: "fixed" or "flex" (None = flex unless width is set)
        align: "left" or "right" (None = semantic default, else left)
        max_lines: Line cap for cells (None = semantic or table default)
        font: "regular", "bold" or "mono" (None = semantic default)
        semantic: "text", "identifier", "metric", "status" or "datetime"

    Example:
        >>> TableColumn("id", "ID", lambda r: r["id"], semantic="identifier")
    """

    key: str
    header: str
    value: Callable[[Any], str]
    width: Optional[float] = None
    min_width: Optional[float] = None
    mode: Optional[str] = None
    align: Optional[str] = None
    max_lines: Optional[int] = None
    font: Optional[str] = None
    semantic: Optional[str] = None

    def __post_init__(self) -> None:
        if self.mode not in (None, WIDTH_FIXED, WIDTH_FLEX):
            raise ValueError(f"Column {self.key!r}: unknown width mode {self.mode!r}")
        if self.align not in (None, ALIGN_LEFT, ALIGN_RIGHT):
            raise ValueError(f"Column {self.key!r}: unknown alignment {self.align!r}")
        if self.font is not None and self.font not in FONT_FAMILIES:
            raise ValueError(f"Column {self.key!r}: unknown font family {self.font!r}")
        if self.semantic is not None and self.semantic not in SEMANTIC_TAGS:
            raise ValueError(
                f"Column {self.key!r}: unknown semantic tag {self.semantic!r}; "
                f"expected one of {', '.join(SEMANTIC_TAGS)}"
            )

    @property
    def is_fixed(self) -> bool:
        return self.mode == WIDTH_FIXED or self.width is not None


@dataclass(frozen=True)
class ResolvedColumn:
    """Column with semantic defaults applied; every setting is concrete."""

    key: str
    header: str
    value: Callable[[Any], str]
    width: Optional[float]
    min_width: Optional[float]
    fixed: bool
    align: str
    max_lines: Optional[int]
    font: str

    @property
    def is_fixed(self) -> bool:
        return self.fixed


def resolve_column(column: TableColumn) -> ResolvedColumn:
    """
    Apply semantic defaults to a column.

    identifier -> monospace font, metric -> right alignment,
    status/datetime -> single line. Settings given on the column win.
    """
    font = FONT_REGULAR
    align = ALIGN_LEFT
    max_lines = None

    if column.semantic == SEMANTIC_IDENTIFIER:
        font = FONT_MONO
    elif column.semantic == SEMANTIC_METRIC:
        align = ALIGN_RIGHT
    elif column.semantic in (SEMANTIC_STATUS, SEMANTIC_DATETIME):
        max_lines = 1

    return ResolvedColumn(
        key=column.key,
        header=column.header,
        value=column.value,
        width=column.width,
        min_width=column.min_width,
        fixed=column.is_fixed,
        align=column.align if column.align is not None else align,
        max_lines=column.max_lines if column.max_lines is not None else max_lines,
        font=column.font if column.font is not None else font,
    )


def resolve_column_widths(columns: Sequence[TableColumn], available_width: float) -> List[float]:
    """
    Distribute available_width across columns.

    1. Every column starts at max(24, min_width)
    2. If the minimums overflow, all are scaled down proportionally
    3. Otherwise fixed columns grow toward their requested width in
       declaration order, then flex columns share what is left evenly
    4. Rounding drift goes to the last column

    Args:
        columns: Column definitions (TableColumn or ResolvedColumn)
        available_width: Table width in points

    Returns:
        Widths in column order; they sum to available_width

    Example:
        >>> cols = [TableColumn(k, k, str, min_width=24) for k in "abc"]
        >>> [round(w, 2) for w in resolve_column_widths(cols, 40)]
        [13.33, 13.33, 13.33]
    """
    if not columns:
        return []

    min_widths = [max(MIN_COLUMN_WIDTH, col.min_width or MIN_COLUMN_WIDTH) for col in columns]
    min_total = sum(min_widths)

    if min_total > available_width:
        logger.warning(
            f"Column minimums ({min_total:.1f}pt) exceed table width "
            f"({available_width:.1f}pt); scaling {len(columns)} columns down"
        )
        widths = [w / min_total * available_width for w in min_widths]
        widths[-1] += available_width - sum(widths)
        return widths

    widths = list(min_widths)
    remaining = available_width - min_total

    for i, col in enumerate(columns):
        if not col.is_fixed:
            continue
        requested = max(min_widths[i], col.width if col.width is not None else min_widths[i])
        grow = min(requested - min_widths[i], remaining)
        widths[i] += grow
        remaining -= grow

    flex = [i for i, col in enumerate(columns) if not col.is_fixed]
    if remaining > 0 and flex:
        share = remaining / len(flex)
        for i in flex:
            widths[i] += share

    widths[-1] += available_width - sum(widths)
    return widths


@dataclass(frozen=True)
class TableStyle:
    font_size: float
    header_font_size: float
    line_height: float
    cell_padding_x: float
    cell_padding_y: float
    max_cell_lines: Optional[int]
    striped_rows: bool


@dataclass(frozen=True)
class TableSpec:
    """
    A table to lay out.

    Typography fields left as None come from the format's table
    defaults adjusted by the preset.

    Attributes:
        columns: Column definitions in display order
        rows: Row objects passed to each column's value extractor
        x: Left edge (None = content left margin)
        max_width: Table width (None = to the right margin)
        preset: "default", "evidence", "analytics" or "receipts"
        repeat_header: Redraw the header at the top of continuation pages
    """

    columns: Sequence[TableColumn]
    rows: Sequence[Any]
    x: Optional[float] = None
    max_width: Optional[float] = None
    preset: Optional[str] = None
    font_size: Optional[float] = None
    header_font_size: Optional[float] = None
    line_height: Optional[float] = None
    cell_padding_x: Optional[float] = None
    cell_padding_y: Optional[float] = None
    repeat_header: bool = True
    max_cell_lines: Optional[int] = None
    striped_rows: Optional[bool] = None


def resolve_table_style(
    report_format: ReportFormat,
    preset: Optional[str] = None,
    spec: Optional[TableSpec] = None,
) -> TableStyle:
    """
    Combine format table defaults, preset adjustments and table overrides.

    Raises:
        ValueError: If preset is not a known preset name
    """
    defaults = report_format.table_defaults
    adjust = get_table_preset(preset)

    style = TableStyle(
        font_size=defaults.font_size + adjust.font_size_delta,
        header_font_size=defaults.header_font_size + adjust.header_font_size_delta,
        line_height=defaults.line_height + adjust.line_height_delta,
        cell_padding_x=defaults.cell_padding_x + adjust.cell_padding_x_delta,
        cell_padding_y=adjust.cell_padding_y if adjust.cell_padding_y is not None else defaults.cell_padding_y,
        max_cell_lines=adjust.max_cell_lines if adjust.max_cell_lines is not None else defaults.max_cell_lines,
        striped_rows=defaults.striped_rows,
    )
    if spec is None:
        return style

    def pick(override, fallback):
        return fallback if override is None else override

    return TableStyle(
        font_size=pick(spec.font_size, style.font_size),
        header_font_size=pick(spec.header_font_size, style.header_font_size),
        line_height=pick(spec.line_height, style.line_height),
        cell_padding_x=pick(spec.cell_padding_x, style.cell_padding_x),
        cell_padding_y=pick(spec.cell_padding_y, style.cell_padding_y),
        max_cell_lines=pick(spec.max_cell_lines, style.max_cell_lines),
        striped_rows=pick(spec.striped_rows, style.striped_rows),
    )


@dataclass(frozen=True)
class TableLayoutResult:
    """
    Outcome of draw_table().

    Attributes:
        widths: Resolved column widths
        row_count: Data rows drawn
        header_draws: Times the header row was drawn
        pages: Indices of pages the table drew on
    """

    widths: Tuple[float, ...]
    row_count: int
    header_draws: int
    pages: Tuple[int, ...]


# =============================================================================
# Drawing
# =============================================================================

def _row_height(line_count: int, style: TableStyle) -> float:
    return max(1, line_count) * style.line_height + 2 * style.cell_padding_y


@dataclass(frozen=True)
class _CellBox:
    pad: float
    wrap_width: float
    font_size: float
    header_font_size: float


def _cell_box(width: float, style: TableStyle) -> _CellBox:
    """Padding, wrap width and type sizes that keep a column's text inside it."""
    if width >= 2 * style.cell_padding_x + MIN_WRAP_WIDTH:
        return _CellBox(
            pad=style.cell_padding_x,
            wrap_width=width - 2 * style.cell_padding_x,
            font_size=style.font_size,
            header_font_size=style.header_font_size,
        )
    pad = min(style.cell_padding_x, width / 4)
    wrap_width = max(1.0, width - 2 * pad)
    glyph_limit = wrap_width * NARROW_COLUMN_EM
    return _CellBox(
        pad=pad,
        wrap_width=wrap_width,
        font_size=min(style.font_size, glyph_limit),
        header_font_size=min(style.header_font_size, glyph_limit),
    )


def draw_table(ctx: LayoutContext, spec: TableSpec) -> TableLayoutResult:
    """
    Lay out a table at the cursor, paginating as needed.

    Every row is measured before it is drawn; a row that does not fit
    below the cursor moves to a new page, where the header is drawn
    again unless repeat_header is False. The first header is never left
    alone at a page bottom. A row taller than a whole page is clamped to
    the lines that fit.

    Args:
        ctx: Layout context
        spec: Table definition

    Returns:
        TableLayoutResult describing widths and pagination

    Raises:
        ValueError: If the preset is unknown
    """
    ctx.check_open()
    if not spec.columns:
        return TableLayoutResult(widths=(), row_count=0, header_draws=0, pages=())

    colors = ctx.format.colors
    style = resolve_table_style(ctx.format, spec.preset, spec)
    columns = [resolve_column(col) for col in spec.columns]
    x = spec.x if spec.x is not None else ctx.cursor.min_x
    table_width = spec.max_width if spec.max_width is not None else ctx.cursor.max_x - x
    widths = resolve_column_widths(columns, table_width)
    boxes = [_cell_box(w, style) for w in widths]
    narrow = [i for i, box in enumerate(boxes) if box.pad < style.cell_padding_x]
    if narrow:
        logger.debug(f"Table columns {narrow} are too narrow for full padding; shrinking padding and type")
    word_breaks = ctx.format.word_breaks

    header_lines = [
        wrap_text_to_lines(
            ctx.fonts, col.header, boxes[i].wrap_width, boxes[i].header_font_size, FONT_BOLD, word_breaks
        )
        for i, col in enumerate(columns)
    ]
    header_height = _row_height(max(len(lines) for lines in header_lines), style)

    # Tallest row a page can hold below the header
    page_room = ctx.content_height - (header_height if spec.repeat_header else 0)
    max_row_lines = max(1, int((page_room - 2 * style.cell_padding_y + EPSILON) // style.line_height))

    pages: List[int] = []
    header_draws = 0

    def touch_page() -> None:
        if not pages or pages[-1] != ctx.page.index:
            pages.append(ctx.page.index)

    def draw_header() -> None:
        nonlocal header_draws
        ctx.ensure_space(header_height + 1)
        top = ctx.cursor.y
        ctx.page.draw_rect(
            x, top - header_height, table_width, header_height,
            fill=colors.panel, stroke=colors.strong_border,
        )
        col_x = x
        for i, lines in enumerate(header_lines):
            draw_lines(
                ctx,
                lines,
                col_x + boxes[i].pad,
                top - style.cell_padding_y,
                family=FONT_BOLD,
                size=boxes[i].header_font_size,
                line_height=style.line_height,
            )
            col_x += widths[i]
        ctx.cursor.y = top - header_height
        ctx.page.draw_line((x, ctx.cursor.y), (x + table_width, ctx.cursor.y), color=colors.border, thickness=1)
        header_draws += 1
        touch_page()

    def measure_row(row: Any) -> Tuple[List[List[str]], float]:
        cells: List[List[str]] = []
        for i, col in enumerate(columns):
            limit = col.max_lines if col.max_lines is not None else style.max_cell_lines
            wrapped = wrap_text_to_lines(
                ctx.fonts, str(col.value(row)), boxes[i].wrap_width, boxes[i].font_size, col.font, word_breaks
            )
            cells.append(truncate_lines(ctx.fonts, wrapped, limit, boxes[i].wrap_width, boxes[i].font_size, col.font))

        line_count = max(len(lines) for lines in cells)
        if line_count > max_row_lines:
            logger.warning(
                f"Table row needs {line_count} lines but a page holds {max_row_lines}; clamping"
            )
            cells = [
                truncate_lines(
                    ctx.fonts, lines, max_row_lines, boxes[i].wrap_width, boxes[i].font_size, columns[i].font
                )
                for i, lines in enumerate(cells)
            ]
            line_count = max_row_lines
        return cells, _row_height(line_count, style)

    rows = list(spec.rows)
    measured = measure_row(rows[0]) if rows else None
    if measured is not None:
        # Keep the first header with the first row
        ctx.ensure_space(header_height + measured[1])
    draw_header()

    for index, row in enumerate(rows):
        cells, row_height = measured if index == 0 else measure_row(row)

        if ctx.ensure_space(row_height) and spec.repeat_header:
            draw_header()

        top = ctx.cursor.y
        if style.striped_rows and index % 2 == 1:
            ctx.page.draw_rect(x, top - row_height, table_width, row_height, fill=colors.panel_alt)

        col_x = x
        for i, col in enumerate(columns):
            draw_lines(
                ctx,
                cells[i],
                col_x + boxes[i].pad,
                top - style.cell_padding_y,
                family=col.font,
                size=boxes[i].font_size,
                line_height=style.line_height,
                align=col.align,
                box_width=boxes[i].wrap_width,
            )
            col_x += widths[i]

        ctx.cursor.y = top - row_height
        ctx.page.draw_line((x, ctx.cursor.y), (x + table_width, ctx.cursor.y), color=colors.border, thickness=1)
        touch_page()

    ctx.cursor.y = max(ctx.cursor.min_y, ctx.cursor.y - TABLE_GAP_AFTER)
    logger.debug(
        f"Table with {len(columns)} columns and {len(rows)} rows spanned {len(pages)} page(s)"
    )
    return TableLayoutResult(
        widths=tuple(widths),
        row_count=len(rows),
        header_draws=header_draws,
        pages=tuple(pages),
    )
