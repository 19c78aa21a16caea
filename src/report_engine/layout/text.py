"""
Module: report_engine.layout.text

Purpose:
    Text measurement and wrapping. Measuring and drawing share one
    wrapping routine, so a measured height always equals the height a
    draw consumes for the same request.

Key Functions:
    - wrap_text_to_lines(): Greedy wrap that never exceeds max_width
    - measure_text_block_height(): Height of a block without drawing
    - draw_text_block(): Draw a block and report the next free y
    - truncate_lines(): Apply a max_lines cap with optional ellipsis

Algorithm:
    1. Split text into paragraphs on newlines
    2. Split each paragraph into word and separator tokens
       (whitespace and single-character word breaks)
    3. Pack tokens greedily; a token wider than max_width on its own
       is hard-split character by character

Dependencies:
    - report_engine.layout.fonts: FontSet width queries

Used By:
    - report_engine.layout.sections: All section primitives
    - report_engine.layout.table: Cell wrapping
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple

from reportlab.lib.colors import Color

from .context import LayoutContext
from .fonts import FontSet
from .formats import DEFAULT_WORD_BREAKS
from .models import TextBlockRequest, TextBlockResult

ELLIPSIS = "…"
TRUNCATE_ELLIPSIS = "ellipsis"
TRUNCATE_CLIP = "clip"

# Approximate cap height of the report fonts as a fraction of size
CAP_HEIGHT_RATIO = 0.72


@lru_cache(maxsize=32)
def _token_pattern(word_breaks: Tuple[str, ...]) -> "re.Pattern[str]":
    chars = "".join(re.escape(t) for t in word_breaks if len(t) == 1 and not t.isspace())
    return re.compile(f"([\\s{chars}]+)")


def _split_oversized_token(token: str, max_width: float, measure: Callable[[str], float]) -> List[str]:
    out: List[str] = []
    chunk = ""
    for char in token:
        candidate = chunk + char
        if not chunk or measure(candidate) <= max_width:
            chunk = candidate
            continue
        out.append(chunk)
        chunk = char
    if chunk:
        out.append(chunk)
    return out


def wrap_text_to_lines(
    fonts: FontSet,
    text: str,
    max_width: float,
    size: float,
    family: str = "regular",
    word_breaks: Sequence[str] = DEFAULT_WORD_BREAKS,
) -> List[str]:
    """
    Wrap text into lines no wider than max_width.

    Args:
        fonts: Font set used for width queries
        text: Text to wrap; newlines force line breaks
        max_width: Maximum line width in points
        size: Font size
        family: "regular", "bold" or "mono"
        word_breaks: Characters a line may break after

    Returns:
        Wrapped lines; empty lines are returned as " " so they keep
        their height

    Example:
        >>> wrap_text_to_lines(FontSet.standard(), "a/b/c", 1000, 10)
        ['a/b/c']
    """
    def measure(value: str) -> float:
        return fonts.width(value, family, size)

    pattern = _token_pattern(tuple(word_breaks))
    lines: List[str] = []
    paragraphs = str(text if text is not None else "").replace("\r\n", "\n").split("\n")

    for paragraph in paragraphs:
        tokens = [token for token in pattern.split(paragraph) if token]
        line = ""

        for token in tokens:
            candidate = line + token
            if measure(candidate) <= max_width:
                line = candidate
                continue

            clean = token.strip()
            if clean and measure(clean) > max_width:
                parts = _split_oversized_token(clean, max_width, measure)
                if line.strip():
                    lines.append(line.rstrip())
                lines.extend(parts[:-1])
                line = parts[-1]
            else:
                if line.strip():
                    lines.append(line.rstrip())
                line = token.lstrip()

        lines.append(line.rstrip())

    return [line if line else " " for line in lines]


def truncate_lines(
    fonts: FontSet,
    lines: Sequence[str],
    max_lines: Optional[int],
    max_width: float,
    size: float,
    family: str = "regular",
    mode: str = TRUNCATE_ELLIPSIS,
) -> List[str]:
    """
    Cap lines at max_lines.

    In "ellipsis" mode the last kept line is shortened until the
    ellipsis fits within max_width; "clip" drops the rest silently.
    """
    if not max_lines or max_lines <= 0 or len(lines) <= max_lines:
        return list(lines)

    kept = list(lines[:max_lines])
    if mode == TRUNCATE_CLIP:
        return kept

    if fonts.width(ELLIPSIS, family, size) > max_width:
        return kept

    last = kept[-1].rstrip()
    while last and fonts.width(f"{last.rstrip()}{ELLIPSIS}", family, size) > max_width:
        last = last[:-1]
    kept[-1] = f"{last.rstrip()}{ELLIPSIS}"
    return kept


def text_width(ctx: LayoutContext, text: str, family: str, size: float) -> float:
    return ctx.fonts.width(text, family, size)


def baseline_offset(size: float, line_height: float) -> float:
    """Distance from the top of a line box to its baseline."""
    return (line_height + size * CAP_HEIGHT_RATIO) / 2


def default_line_height(ctx: LayoutContext, size: float) -> float:
    return max(size + 2, ctx.format.typography.line_height)


def _resolve_request(ctx: LayoutContext, request: TextBlockRequest):
    x = request.x if request.x is not None else ctx.cursor.x
    y = request.y if request.y is not None else ctx.cursor.y
    max_width = request.max_width if request.max_width is not None else ctx.cursor.max_x - x
    size = request.size if request.size is not None else ctx.format.typography.body_size
    line_height = request.line_height if request.line_height is not None else default_line_height(ctx, size)
    return x, y, max_width, size, line_height


def _block_lines(ctx: LayoutContext, request: TextBlockRequest, max_width: float, size: float) -> List[str]:
    wrapped = wrap_text_to_lines(
        ctx.fonts, request.text, max_width, size, request.family, ctx.format.word_breaks
    )
    return truncate_lines(
        ctx.fonts, wrapped, request.max_lines, max_width, size, request.family, request.truncate_mode
    )


def measure_text_block_height(ctx: LayoutContext, request: TextBlockRequest) -> float:
    """
    Height the block would consume, without drawing.

    Args:
        ctx: Layout context (fonts, format, cursor defaults)
        request: Text block request

    Returns:
        Line count (after max_lines) times line height
    """
    _, _, max_width, size, line_height = _resolve_request(ctx, request)
    return len(_block_lines(ctx, request, max_width, size)) * line_height


def draw_text_block(ctx: LayoutContext, request: TextBlockRequest) -> TextBlockResult:
    """
    Draw a wrapped text block with its top at request.y.

    Does not move the cursor; callers chain with
    `ctx.cursor.y = result.next_y - spacing`.

    Args:
        ctx: Layout context
        request: Text block request

    Returns:
        TextBlockResult with the drawn lines, consumed height and the
        y coordinate immediately below the block
    """
    x, y, max_width, size, line_height = _resolve_request(ctx, request)
    lines = _block_lines(ctx, request, max_width, size)
    next_y = draw_lines(
        ctx,
        lines,
        x,
        y,
        family=request.family,
        size=size,
        line_height=line_height,
        color=request.color,
    )
    return TextBlockResult(lines=tuple(lines), consumed_height=len(lines) * line_height, next_y=next_y)


def draw_lines(
    ctx: LayoutContext,
    lines: Sequence[str],
    x: float,
    y: float,
    *,
    family: str,
    size: float,
    line_height: float,
    color: Optional[Color] = None,
    align: str = "left",
    box_width: float = 0.0,
) -> float:
    """
    Draw already-wrapped lines with the first line box topped at y.

    With align="right" each line is flushed to x + box_width.

    Returns:
        y immediately below the last line
    """
    ctx.check_open()
    font_name = ctx.fonts.name_for(family)
    color = color if color is not None else ctx.format.colors.text

    first_baseline = y - baseline_offset(size, line_height)
    for i, line in enumerate(lines):
        if not line.strip():
            continue
        line_x = x
        if align == "right":
            line_x = x + box_width - ctx.fonts.width(line, family, size)
        ctx.page.draw_text(
            line,
            line_x,
            first_baseline - i * line_height,
            font_name=font_name,
            size=size,
            color=color,
        )
    return y - len(lines) * line_height
