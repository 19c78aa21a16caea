"""
Module: report_engine.layout.sections

Purpose:
    Section and metric primitives: header band, section headings,
    paragraphs, key/value rows, notes, metric card grids, watermarks and
    the terminal footer pass.

Key Functions:
    - draw_report_header(): Header band, brand, title and subtitle
    - draw_section_heading(): Heading kept with following content
    - draw_paragraph(): Wrapped paragraph, split across pages if needed
    - draw_key_value_row() / draw_key_value_list(): Label/value rows
    - draw_note(): Panel with an accent edge
    - draw_metric_cards(): Grid of metric cards with per-row heights
    - draw_watermark() / watermark_hook(): Diagonal per-page watermark
    - finalize_footers(): Stamp footers once the page count is known

Dependencies:
    - report_engine.layout.context: Cursor and page flow
    - report_engine.layout.text: Wrapping, measuring and drawing

Used By:
    - Report assembly code (callers of the engine)

Layout happens in two passes: content primitives run in reading order
and mutate the cursor, then finalize_footers() stamps every page.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from typing import Iterable, Optional, Sequence, Tuple, Union

from .context import EPSILON, LayoutContext, PageHook
from .fonts import FONT_BOLD, FONT_REGULAR
from .models import ReportImage, TextBlockRequest, TextBlockResult
from .text import (
    CAP_HEIGHT_RATIO,
    default_line_height,
    draw_lines,
    draw_text_block,
    measure_text_block_height,
    text_width,
    truncate_lines,
    wrap_text_to_lines,
)

logger = logging.getLogger(__name__)

# Header band
ACCENT_STRIPE_HEIGHT = 3
LOGO_TARGET_HEIGHT = 18
LOGO_MIN_WIDTH = 12
BRAND_TEXT_SIZE = 12
TITLE_TOP_GAP = 18

# Section heading
TICK_WIDTH = 3
TICK_INDENT = 9
RULE_GAP = 4
AFTER_RULE_GAP = 10

PARAGRAPH_GAP = 2
KEY_VALUE_LABEL_GAP = 8
KEY_VALUE_ROW_PADDING = 4

NOTE_PADDING = 8
NOTE_EDGE_WIDTH = 3

# Metric cards
CARD_BAR_HEIGHT = 3
CARD_PADDING = 8
CARD_LABEL_MAX_LINES = 2
CARD_VALUE_MAX_LINES = 3
CARD_LABEL_VALUE_GAP = 4

FOOTER_LOGO_HEIGHT = 9
FOOTER_GROUP_GAP = 4


@dataclass(frozen=True)
class Metric:
    label: str
    value: str


@dataclass(frozen=True)
class MetricGridResult:
    """
    Outcome of a metric card grid.

    Attributes:
        columns: Cards per row actually used
        row_heights: Drawn height of each row
        grid_height: Sum of row heights plus inter-row gaps
    """

    columns: int
    row_heights: Tuple[float, ...]
    grid_height: float


@dataclass(frozen=True)
class KeyValueItem:
    key: str
    value: str
    value_family: str = FONT_REGULAR


def _advance(ctx: LayoutContext, amount: float) -> None:
    """Move the cursor down without leaving the content rectangle."""
    ctx.cursor.y = max(ctx.cursor.min_y, ctx.cursor.y - amount)


def _keep_with_next(ctx: LayoutContext, block_height: float, line_height: float) -> bool:
    """
    Break before a block unless it fits together with the minimum
    number of following lines (widow/orphan control).
    """
    min_lines = ctx.format.layout.widow_orphan_min_lines
    needed = block_height + min_lines * line_height
    if ctx.remaining_height() < needed:
        logger.debug(
            f"Keeping {block_height:.1f}pt block with next content: "
            f"{ctx.remaining_height():.1f}pt left, {needed:.1f}pt needed"
        )
    return ctx.ensure_space(needed)


def _lines_that_fit(height: float, line_height: float) -> int:
    return max(1, int((height + EPSILON) // line_height))


def _fit_single_line(ctx: LayoutContext, text: str, family: str, size: float, max_width: float) -> str:
    lines = wrap_text_to_lines(ctx.fonts, text, max(1.0, max_width), size, family, ctx.format.word_breaks)
    return truncate_lines(ctx.fonts, lines, 1, max(1.0, max_width), size, family)[0]


def _logo_size(logo: ReportImage, target_height: float, preferred_width: Optional[float], max_width: float):
    width, height = logo.scaled_to_height(target_height)
    limit = max_width
    if preferred_width is not None and preferred_width > 0:
        limit = min(limit, max(LOGO_MIN_WIDTH, preferred_width))
    if width > limit and width > 0:
        height = height * limit / width
        width = limit
    return width, height


# =============================================================================
# Header
# =============================================================================

def draw_report_header(
    ctx: LayoutContext,
    title: str,
    *,
    subtitle: Optional[str] = None,
    eyebrow: Optional[str] = None,
    right_meta: Optional[str] = None,
    logo: Optional[ReportImage] = None,
    logo_width_px: Optional[float] = None,
    brand_name: Optional[str] = None,
) -> None:
    """
    Draw the report header band at the top of a fresh page.

    Draws a full-width panel band with an accent stripe, the logo (or
    the brand name when there is no logo), right-aligned metadata, the
    optional eyebrow, the wrapped title and subtitle, and a separating
    rule. The cursor ends one section gap below the rule.

    Args:
        ctx: Layout context
        title: Report title (wrapped)
        subtitle: Optional muted line(s) below the title
        eyebrow: Optional small accent label above the title
        right_meta: Optional right-aligned metadata in the band
        logo: Optional logo, scaled to the band's logo height
        logo_width_px: Preferred maximum logo width
        brand_name: Text fallback when no logo is given
    """
    ctx.check_open()
    if not ctx.at_page_top:
        ctx.add_page()

    fmt = ctx.format
    colors = fmt.colors
    typo = fmt.typography
    page_width = fmt.page.width
    band_height = fmt.layout.header_band_height
    top = fmt.page.height
    content_width = ctx.content_width
    left = fmt.page.margin_left
    right = page_width - fmt.page.margin_right

    ctx.page.draw_rect(0, top - band_height, page_width, band_height, fill=colors.panel)
    ctx.page.draw_rect(0, top - ACCENT_STRIPE_HEIGHT, page_width, ACCENT_STRIPE_HEIGHT, fill=colors.accent)

    band_mid = top - ACCENT_STRIPE_HEIGHT - (band_height - ACCENT_STRIPE_HEIGHT) / 2
    brand_right = left
    if logo is not None:
        width, height = _logo_size(logo, LOGO_TARGET_HEIGHT, logo_width_px, content_width / 2)
        ctx.page.draw_image(logo, left, band_mid - height / 2, width, height)
        brand_right = left + width
    elif brand_name:
        brand = _fit_single_line(ctx, brand_name, FONT_BOLD, BRAND_TEXT_SIZE, content_width / 2)
        ctx.page.draw_text(
            brand,
            left,
            band_mid - BRAND_TEXT_SIZE * CAP_HEIGHT_RATIO / 2,
            font_name=ctx.fonts.bold,
            size=BRAND_TEXT_SIZE,
            color=colors.text,
        )
        brand_right = left + text_width(ctx, brand, FONT_BOLD, BRAND_TEXT_SIZE)

    if right_meta:
        meta_width = max(1.0, right - brand_right - fmt.layout.gutter)
        meta = _fit_single_line(ctx, right_meta, FONT_REGULAR, typo.small_size, meta_width)
        ctx.page.draw_text(
            meta,
            right - text_width(ctx, meta, FONT_REGULAR, typo.small_size),
            band_mid - typo.small_size * CAP_HEIGHT_RATIO / 2,
            font_name=ctx.fonts.regular,
            size=typo.small_size,
            color=colors.muted,
        )

    y = top - band_height - TITLE_TOP_GAP
    if eyebrow:
        result = draw_text_block(ctx, TextBlockRequest(
            text=eyebrow,
            x=left,
            y=y,
            max_width=content_width,
            family=FONT_BOLD,
            size=typo.small_size,
            line_height=typo.small_size + 3,
            max_lines=1,
            color=colors.accent,
        ))
        y = result.next_y - 2

    result = draw_text_block(ctx, TextBlockRequest(
        text=title,
        x=left,
        y=y,
        max_width=content_width,
        family=FONT_BOLD,
        size=typo.title_size,
        line_height=typo.title_size + 4,
    ))
    y = result.next_y - 2

    if subtitle:
        result = draw_text_block(ctx, TextBlockRequest(
            text=subtitle,
            x=left,
            y=y,
            max_width=content_width,
            size=typo.body_size,
            line_height=typo.body_size + 3,
            color=colors.muted,
        ))
        y = result.next_y

    y -= RULE_GAP
    ctx.page.draw_line((left, y), (right, y), color=colors.border, thickness=1)
    ctx.cursor.y = min(ctx.cursor.max_y, max(ctx.cursor.min_y, y - fmt.layout.section_gap))


# =============================================================================
# Headings and text
# =============================================================================

def _heading_requests(ctx: LayoutContext, label: str, subtitle: Optional[str]):
    typo = ctx.format.typography
    x = ctx.cursor.min_x + TICK_INDENT
    width = ctx.content_width - TICK_INDENT
    label_request = TextBlockRequest(
        text=label,
        x=x,
        max_width=width,
        family=FONT_BOLD,
        size=typo.heading_size,
        line_height=typo.heading_size + 3,
    )
    subtitle_request = None
    if subtitle:
        subtitle_request = TextBlockRequest(
            text=subtitle,
            x=x,
            max_width=width,
            size=typo.small_size,
            line_height=typo.small_size + 3,
            color=ctx.format.colors.muted,
        )
    return label_request, subtitle_request


def measure_section_heading(ctx: LayoutContext, label: str, subtitle: Optional[str] = None) -> float:
    """Height draw_section_heading() advances the cursor by."""
    label_request, subtitle_request = _heading_requests(ctx, label, subtitle)
    height = measure_text_block_height(ctx, label_request)
    if subtitle_request is not None:
        height += 1 + measure_text_block_height(ctx, subtitle_request)
    return height + RULE_GAP + AFTER_RULE_GAP


def draw_section_heading(ctx: LayoutContext, label: str, subtitle: Optional[str] = None) -> None:
    """
    Draw a section heading that is never stranded at a page bottom.

    Breaks the page first unless the heading plus the format's
    widow/orphan minimum of body lines fits below the cursor.

    Args:
        ctx: Layout context
        label: Heading text (wrapped)
        subtitle: Optional muted small text under the label
    """
    typo = ctx.format.typography
    colors = ctx.format.colors
    _keep_with_next(ctx, measure_section_heading(ctx, label, subtitle), typo.line_height)

    label_request, subtitle_request = _heading_requests(ctx, label, subtitle)
    top = ctx.cursor.y
    tick_height = typo.heading_size
    tick_top = top - (typo.heading_size + 3 - tick_height) / 2
    ctx.page.draw_rect(ctx.cursor.min_x, tick_top - tick_height, TICK_WIDTH, tick_height, fill=colors.accent)

    result = draw_text_block(ctx, _at(label_request, top))
    y = result.next_y
    if subtitle_request is not None:
        result = draw_text_block(ctx, _at(subtitle_request, y - 1))
        y = result.next_y

    y -= RULE_GAP
    ctx.page.draw_line((ctx.cursor.min_x, y), (ctx.cursor.max_x, y), color=colors.border, thickness=1)
    ctx.cursor.y = max(ctx.cursor.min_y, y - AFTER_RULE_GAP)


def _at(request: TextBlockRequest, y: float) -> TextBlockRequest:
    return replace(request, y=y)


def draw_paragraph(
    ctx: LayoutContext,
    text: str,
    *,
    muted: bool = False,
    size: Optional[float] = None,
    max_width: Optional[float] = None,
    family: str = FONT_REGULAR,
) -> TextBlockResult:
    """
    Draw a wrapped paragraph at the cursor.

    Short paragraphs move to the next page whole. Longer ones are split
    between pages, keeping at least the widow/orphan minimum of lines on
    each side of the break.

    Args:
        ctx: Layout context
        text: Paragraph text
        muted: Use the muted palette color
        size: Font size (default body size)
        max_width: Wrap width (default content width)
        family: Font family

    Returns:
        TextBlockResult covering all lines; next_y is the final cursor y
    """
    size = size if size is not None else ctx.format.typography.body_size
    line_height = default_line_height(ctx, size)
    width = max_width if max_width is not None else ctx.content_width
    color = ctx.format.colors.muted if muted else ctx.format.colors.text
    min_lines = ctx.format.layout.widow_orphan_min_lines

    lines = wrap_text_to_lines(ctx.fonts, text, width, size, family, ctx.format.word_breaks)
    total = len(lines) * line_height

    if len(lines) < 2 * min_lines:
        ctx.ensure_space(total)
    else:
        ctx.ensure_space(min(total, min_lines * line_height))

    index = 0
    while index < len(lines):
        fit = int((ctx.remaining_height() + EPSILON) // line_height)
        if fit <= 0:
            if not ctx.at_page_top:
                ctx.add_page()
                continue
            # Content area shorter than one line
            fit = 1
        take = min(fit, len(lines) - index)
        rest = len(lines) - index - take
        if 0 < rest < min_lines:
            take = max(1, take - (min_lines - rest))
            if index == 0 and take < min_lines and not ctx.at_page_top:
                ctx.add_page()
                continue

        chunk = lines[index:index + take]
        next_y = draw_lines(
            ctx,
            chunk,
            ctx.cursor.min_x,
            ctx.cursor.y,
            family=family,
            size=size,
            line_height=line_height,
            color=color,
        )
        ctx.cursor.y = max(ctx.cursor.min_y, next_y)
        index += take
        if index < len(lines):
            ctx.add_page()

    _advance(ctx, PARAGRAPH_GAP)
    return TextBlockResult(lines=tuple(lines), consumed_height=total, next_y=ctx.cursor.y)


def draw_key_value_row(
    ctx: LayoutContext,
    key: str,
    value: str,
    *,
    label_width: Optional[float] = None,
    value_family: str = FONT_REGULAR,
) -> float:
    """
    Draw one label/value row.

    The label column has the format's key/value label width (or
    label_width); the value takes the rest. The row is as tall as the
    taller of the two wrapped blocks plus padding.

    Returns:
        Height the cursor advanced by
    """
    typo = ctx.format.typography
    colors = ctx.format.colors
    line_height = typo.line_height
    label_width = label_width if label_width is not None else ctx.format.layout.key_value_label_width
    label_width = min(label_width, ctx.content_width / 2)
    value_width = ctx.content_width - label_width
    max_lines = _lines_that_fit(ctx.content_height - KEY_VALUE_ROW_PADDING, line_height)

    label_request = TextBlockRequest(
        text=key,
        x=ctx.cursor.min_x,
        max_width=max(1.0, label_width - KEY_VALUE_LABEL_GAP),
        family=FONT_BOLD,
        size=typo.body_size,
        line_height=line_height,
        max_lines=max_lines,
        color=colors.muted,
    )
    value_request = TextBlockRequest(
        text=value,
        x=ctx.cursor.min_x + label_width,
        max_width=value_width,
        family=value_family,
        size=typo.body_size,
        line_height=line_height,
        max_lines=max_lines,
    )
    row_height = max(
        measure_text_block_height(ctx, label_request),
        measure_text_block_height(ctx, value_request),
    ) + KEY_VALUE_ROW_PADDING
    ctx.ensure_space(row_height)

    top = ctx.cursor.y
    draw_text_block(ctx, _at(label_request, top))
    draw_text_block(ctx, _at(value_request, top))
    _advance(ctx, row_height)
    return row_height


def draw_key_value_list(
    ctx: LayoutContext,
    items: Iterable[Union[KeyValueItem, Tuple[str, str]]],
    *,
    gap_after: Optional[float] = None,
    label_width: Optional[float] = None,
) -> None:
    """Draw consecutive key/value rows followed by a gap (default section gap)."""
    for item in items:
        if not isinstance(item, KeyValueItem):
            item = KeyValueItem(*item)
        draw_key_value_row(
            ctx,
            item.key,
            item.value,
            label_width=label_width,
            value_family=item.value_family,
        )
    _advance(ctx, ctx.format.layout.section_gap if gap_after is None else gap_after)


def draw_note(ctx: LayoutContext, text: str, *, muted: bool = False) -> None:
    """Draw text inside a panel with an accent edge."""
    typo = ctx.format.typography
    colors = ctx.format.colors
    inner_x = ctx.cursor.min_x + NOTE_EDGE_WIDTH + NOTE_PADDING
    inner_width = ctx.content_width - NOTE_EDGE_WIDTH - 2 * NOTE_PADDING
    line_height = default_line_height(ctx, typo.body_size)
    request = TextBlockRequest(
        text=text,
        x=inner_x,
        max_width=inner_width,
        size=typo.body_size,
        line_height=line_height,
        max_lines=_lines_that_fit(ctx.content_height - 2 * NOTE_PADDING, line_height),
        color=colors.muted if muted else colors.text,
    )
    box_height = measure_text_block_height(ctx, request) + 2 * NOTE_PADDING
    ctx.ensure_space(box_height)

    top = ctx.cursor.y
    ctx.page.draw_rect(
        ctx.cursor.min_x, top - box_height, ctx.content_width, box_height,
        fill=colors.panel, stroke=colors.border,
    )
    ctx.page.draw_rect(ctx.cursor.min_x, top - box_height, NOTE_EDGE_WIDTH, box_height, fill=colors.accent)
    draw_text_block(ctx, _at(request, top - NOTE_PADDING))
    _advance(ctx, box_height + ctx.format.layout.section_gap)


# =============================================================================
# Metric cards
# =============================================================================

def _card_requests(ctx: LayoutContext, metric: Metric, card_width: float):
    typo = ctx.format.typography
    inner_width = max(1.0, card_width - 2 * CARD_PADDING)
    label_request = TextBlockRequest(
        text=metric.label,
        max_width=inner_width,
        family=FONT_BOLD,
        size=typo.small_size,
        line_height=typo.small_size + 2,
        max_lines=CARD_LABEL_MAX_LINES,
        color=ctx.format.colors.muted,
    )
    value_request = TextBlockRequest(
        text=metric.value,
        max_width=inner_width,
        family=FONT_BOLD,
        size=typo.body_size + 1,
        line_height=typo.body_size + 2,
        max_lines=CARD_VALUE_MAX_LINES,
    )
    return label_request, value_request


def measure_metric_card(ctx: LayoutContext, metric: Metric, card_width: float) -> float:
    """Height one card needs, floored at the format's minimum card height."""
    label_request, value_request = _card_requests(ctx, metric, card_width)
    needed = (
        CARD_BAR_HEIGHT
        + CARD_PADDING
        + measure_text_block_height(ctx, label_request)
        + CARD_LABEL_VALUE_GAP
        + measure_text_block_height(ctx, value_request)
        + CARD_PADDING
    )
    return max(ctx.format.layout.metric_card_min_height, needed)


def draw_metric_cards(
    ctx: LayoutContext,
    metrics: Sequence[Union[Metric, Tuple[str, str]]],
    *,
    columns: Optional[int] = None,
    gap_after: Optional[float] = None,
) -> MetricGridResult:
    """
    Draw metrics as a grid of cards.

    Each row is as tall as its tallest card and every card in the row
    is drawn at that height. A grid that fits a page is reserved with a
    single ensure_space() call and the cursor advances past it in one
    step. A taller grid breaks between rows, never inside a card.

    Args:
        ctx: Layout context
        metrics: Metric or (label, value) pairs
        columns: Cards per row (default: all on one row)
        gap_after: Space below the grid (default section gap)

    Returns:
        MetricGridResult with per-row heights and the grid height

    Example:
        >>> result = draw_metric_cards(ctx, [("Sent", "12"), ("Opened", "9")])
        >>> len(result.row_heights)
        1
    """
    items = [m if isinstance(m, Metric) else Metric(*m) for m in metrics]
    if not items:
        return MetricGridResult(columns=0, row_heights=(), grid_height=0.0)

    gap = ctx.format.layout.gutter
    columns = max(1, min(columns or len(items), len(items)))
    card_width = (ctx.content_width - gap * (columns - 1)) / columns
    rows = [items[i:i + columns] for i in range(0, len(items), columns)]
    row_heights = tuple(max(measure_metric_card(ctx, m, card_width) for m in row) for row in rows)
    grid_height = sum(row_heights) + gap * (len(rows) - 1)

    gap_after = ctx.format.layout.section_gap if gap_after is None else gap_after

    if grid_height <= ctx.content_height + EPSILON:
        ctx.ensure_space(grid_height)
        row_top = ctx.cursor.y
        for row, row_height in zip(rows, row_heights):
            _draw_card_row(ctx, row, row_top, row_height, card_width, gap)
            row_top -= row_height + gap
        _advance(ctx, grid_height + gap_after)
    else:
        logger.debug(f"Metric grid of {len(rows)} rows ({grid_height:.1f}pt) exceeds a page; breaking between rows")
        for index, (row, row_height) in enumerate(zip(rows, row_heights)):
            if index:
                _advance(ctx, gap)
            ctx.ensure_space(row_height)
            _draw_card_row(ctx, row, ctx.cursor.y, row_height, card_width, gap)
            _advance(ctx, row_height)
        _advance(ctx, gap_after)
    return MetricGridResult(columns=columns, row_heights=row_heights, grid_height=grid_height)


def _draw_card_row(
    ctx: LayoutContext,
    row: Sequence[Metric],
    row_top: float,
    row_height: float,
    card_width: float,
    gap: float,
) -> None:
    colors = ctx.format.colors
    for col, metric in enumerate(row):
        x = ctx.cursor.min_x + col * (card_width + gap)
        ctx.page.draw_rect(
            x, row_top - row_height, card_width, row_height,
            fill=colors.white, stroke=colors.border,
        )
        ctx.page.draw_rect(x, row_top - CARD_BAR_HEIGHT, card_width, CARD_BAR_HEIGHT, fill=colors.accent)

        label_request, value_request = _card_requests(ctx, metric, card_width)
        inner_x = x + CARD_PADDING
        label = draw_text_block(ctx, _at_xy(label_request, inner_x, row_top - CARD_BAR_HEIGHT - CARD_PADDING))
        draw_text_block(ctx, _at_xy(value_request, inner_x, label.next_y - CARD_LABEL_VALUE_GAP))


def _at_xy(request: TextBlockRequest, x: float, y: float) -> TextBlockRequest:
    return replace(request, x=x, y=y)


# =============================================================================
# Watermark and footers
# =============================================================================

def draw_watermark(ctx: LayoutContext, text: Optional[str] = None, *, logo: Optional[ReportImage] = None) -> None:
    """
    Draw a diagonal, low-opacity watermark centered on the current page.

    The logo (if any) sits above the text at the brand opacity.
    """
    mark = ctx.format.watermark
    page_width = ctx.format.page.width
    page_height = ctx.format.page.height
    cx, cy = page_width / 2, page_height / 2

    if logo is not None:
        width, height = logo.scaled_to_height(mark.text_size * 2)
        if width > page_width / 2:
            height = height * (page_width / 2) / width
            width = page_width / 2
        ctx.page.draw_image(logo, cx - width / 2, cy + mark.text_size, width, height, opacity=mark.brand_opacity)

    if text:
        angle = math.radians(mark.angle_deg)
        mark_width = text_width(ctx, text, FONT_BOLD, mark.text_size)
        ctx.page.draw_text(
            text,
            cx - math.cos(angle) * mark_width / 2,
            cy - math.sin(angle) * mark_width / 2,
            font_name=ctx.fonts.bold,
            size=mark.text_size,
            color=ctx.format.colors.subtle,
            rotation=mark.angle_deg,
            opacity=mark.text_opacity,
        )


def watermark_hook(
    text: Optional[str] = None,
    *,
    logo: Optional[ReportImage] = None,
    enabled: bool = True,
) -> PageHook:
    """Page hook drawing the watermark on every page (no-op when disabled)."""
    def _hook(ctx: LayoutContext) -> None:
        if enabled:
            draw_watermark(ctx, text, logo=logo)
    return _hook


def finalize_footers(
    ctx: LayoutContext,
    label: str,
    *,
    powered_by_brand: Optional[str] = None,
    powered_by_logo: Optional[ReportImage] = None,
) -> None:
    """
    Stamp the footer on every page once all content is laid out.

    Each page gets a footer band, a top rule, the label on the left, a
    centered "Powered by <brand>" group (with the optional logo) and a
    right-aligned "Page i of N" counter. Closes the context: further
    content raises LayoutError.

    Args:
        ctx: Layout context with all content pages
        label: Left-aligned footer label
        powered_by_brand: Brand shown in the centered group
        powered_by_logo: Optional small logo shown before the brand

    Raises:
        LayoutError: If footers were already finalized
    """
    ctx.mark_finalized()

    fmt = ctx.format
    colors = fmt.colors
    size = fmt.typography.small_size
    band_height = fmt.layout.footer_band_height
    page_width = fmt.page.width
    left = fmt.page.margin_left
    right = page_width - fmt.page.margin_right
    baseline = (band_height - size * CAP_HEIGHT_RATIO) / 2
    total = ctx.page_count

    prefix = "Powered by "
    logo_width = logo_height = 0.0
    if powered_by_logo is not None:
        logo_width, logo_height = powered_by_logo.scaled_to_height(FOOTER_LOGO_HEIGHT)
    group_width = 0.0
    if powered_by_brand:
        group_width = text_width(ctx, prefix, FONT_REGULAR, size) + text_width(ctx, powered_by_brand, FONT_BOLD, size)
        if powered_by_logo is not None:
            group_width += logo_width + FOOTER_GROUP_GAP
    group_left = (page_width - group_width) / 2

    for index, page in enumerate(ctx.pages, start=1):
        counter = f"Page {index} of {total}"
        counter_width = text_width(ctx, counter, FONT_REGULAR, size)

        page.draw_rect(0, 0, page_width, band_height, fill=colors.footer_panel)
        page.draw_line((left, band_height), (right, band_height), color=colors.border, thickness=1)

        label_limit = (group_left if powered_by_brand else right - counter_width) - left - FOOTER_GROUP_GAP
        page.draw_text(
            _fit_single_line(ctx, label, FONT_REGULAR, size, label_limit),
            left,
            baseline,
            font_name=ctx.fonts.regular,
            size=size,
            color=colors.muted,
        )

        if powered_by_brand:
            x = group_left
            page.draw_text(prefix, x, baseline, font_name=ctx.fonts.regular, size=size, color=colors.subtle)
            x += text_width(ctx, prefix, FONT_REGULAR, size)
            if powered_by_logo is not None:
                page.draw_image(powered_by_logo, x, (band_height - logo_height) / 2, logo_width, logo_height)
                x += logo_width + FOOTER_GROUP_GAP
            page.draw_text(powered_by_brand, x, baseline, font_name=ctx.fonts.bold, size=size, color=colors.muted)

        page.draw_text(
            counter,
            right - counter_width,
            baseline,
            font_name=ctx.fonts.regular,
            size=size,
            color=colors.muted,
        )

    logger.info(f"Stamped footers on {total} pages")
