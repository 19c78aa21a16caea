"""
Module: report_engine.layout.models

Purpose:
    Data models for report layout: the drawable page abstraction (a
    display list of draw operations per page), the layout cursor, and
    text block requests/results.

Key Classes:
    - ReportDocument: Growing list of fixed-size pages
    - Page: One page; records rectangles, lines, text and images
    - LayoutCursor: Mutable write position and content bounds
    - TextBlockRequest / TextBlockResult: Text block input and outcome
    - ReportImage: Decoded image handle with pixel size

Dependencies:
    - PIL: Image type
    - reportlab.lib.colors: Color values

Used By:
    - report_engine.layout.context: Owns the document and cursor
    - report_engine.output.renderer: Replays pages onto a PDF canvas

Coordinates are PDF points with the origin at the bottom-left corner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

from PIL import Image
from reportlab.lib.colors import Color


@dataclass(frozen=True)
class ReportImage:
    """
    Decoded image ready to be placed on a page.

    Attributes:
        image: PIL image
        width: Pixel width
        height: Pixel height
    """

    image: Image.Image
    width: int
    height: int

    @classmethod
    def from_pil(cls, image: Image.Image) -> "ReportImage":
        return cls(image=image, width=image.width, height=image.height)

    def scaled_to_height(self, target_height: float) -> Tuple[float, float]:
        """(width, height) keeping aspect ratio at target_height."""
        if self.height <= 0:
            return 0.0, 0.0
        scale = target_height / self.height
        return self.width * scale, target_height


@dataclass(frozen=True)
class RectOp:
    x: float
    y: float
    width: float
    height: float
    fill: Optional[Color] = None
    stroke: Optional[Color] = None
    stroke_width: float = 1.0
    opacity: float = 1.0

    @property
    def top(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    thickness: float = 1.0


@dataclass(frozen=True)
class TextOp:
    """A single line of text; y is the baseline."""

    text: str
    x: float
    y: float
    font_name: str
    size: float
    color: Color
    rotation: float = 0.0
    opacity: float = 1.0


@dataclass(frozen=True)
class ImageOp:
    image: ReportImage
    x: float
    y: float
    width: float
    height: float
    opacity: float = 1.0


DrawOp = Union[RectOp, LineOp, TextOp, ImageOp]


@dataclass
class Page:
    """
    One fixed-size page recording its draw operations in order.

    Attributes:
        index: Page number (0-indexed)
        width: Page width in points
        height: Page height in points
        ops: Draw operations in paint order
    """

    index: int
    width: float
    height: float
    ops: List[DrawOp] = field(default_factory=list)

    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        fill: Optional[Color] = None,
        stroke: Optional[Color] = None,
        stroke_width: float = 1.0,
        opacity: float = 1.0,
    ) -> None:
        self.ops.append(RectOp(x, y, width, height, fill, stroke, stroke_width, opacity))

    def draw_line(
        self,
        start: Tuple[float, float],
        end: Tuple[float, float],
        *,
        color: Color,
        thickness: float = 1.0,
    ) -> None:
        self.ops.append(LineOp(start[0], start[1], end[0], end[1], color, thickness))

    def draw_text(
        self,
        text: str,
        x: float,
        y: float,
        *,
        font_name: str,
        size: float,
        color: Color,
        rotation: float = 0.0,
        opacity: float = 1.0,
    ) -> None:
        self.ops.append(TextOp(text, x, y, font_name, size, color, rotation, opacity))

    def draw_image(
        self,
        image: ReportImage,
        x: float,
        y: float,
        width: float,
        height: float,
        *,
        opacity: float = 1.0,
    ) -> None:
        self.ops.append(ImageOp(image, x, y, width, height, opacity))

    @property
    def texts(self) -> List[TextOp]:
        """Text operations on this page, in paint order."""
        return [op for op in self.ops if isinstance(op, TextOp)]

    @property
    def rects(self) -> List[RectOp]:
        return [op for op in self.ops if isinstance(op, RectOp)]

    @property
    def lines(self) -> List[LineOp]:
        return [op for op in self.ops if isinstance(op, LineOp)]

    @property
    def images(self) -> List[ImageOp]:
        return [op for op in self.ops if isinstance(op, ImageOp)]


@dataclass
class ReportDocument:
    """Growing list of same-size pages."""

    width: float
    height: float
    pages: List[Page] = field(default_factory=list)

    def new_page(self) -> Page:
        page = Page(index=len(self.pages), width=self.width, height=self.height)
        self.pages.append(page)
        return page

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass
class LayoutCursor:
    """
    Write position and content rectangle on the current page.

    y is the top of the free area; a block of height h occupies
    [y - h, y]. Invariant before drawing: min_y <= y <= max_y.
    """

    x: float
    y: float
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x


@dataclass(frozen=True)
class TextBlockRequest:
    """
    Text block to measure or draw.

    Attributes:
        text: Text; "\\n" starts a new paragraph line
        x: Left edge (None = cursor.min_x)
        y: Top of the block (None = cursor.y)
        max_width: Wrap width (None = cursor.max_x - x)
        family: "regular", "bold" or "mono"
        size: Font size (None = body size)
        line_height: Line advance (None = max(size + 2, format line height))
        max_lines: Cap on drawn lines (None or <= 0 = unlimited)
        color: Text color (None = palette text)
        truncate_mode: "ellipsis" marks cut text, "clip" drops it silently
    """

    text: str
    x: Optional[float] = None
    y: Optional[float] = None
    max_width: Optional[float] = None
    family: str = "regular"
    size: Optional[float] = None
    line_height: Optional[float] = None
    max_lines: Optional[int] = None
    color: Optional[Color] = None
    truncate_mode: str = "ellipsis"


@dataclass(frozen=True)
class TextBlockResult:
    lines: Tuple[str, ...]
    consumed_height: float
    next_y: float
