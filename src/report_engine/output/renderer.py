"""
Module: report_engine.output.renderer

Purpose:
    Render a laid-out report to PDF bytes using ReportLab.
    Each Page becomes one PDF page; its draw operations are replayed
    in paint order.

Key Functions:
    - render_report(): Serialize a LayoutContext to PDF bytes

Key Classes:
    - ReportMetadata: Document information dictionary values

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
    - report_engine.layout.models: Page and draw operations

Used By:
    - Report assembly code after finalize_footers()
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from PIL import Image
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from report_engine.layout.context import LayoutContext
from report_engine.layout.models import ImageOp, LineOp, Page, RectOp, ReportImage, TextOp

logger = logging.getLogger(__name__)

DEFAULT_PRODUCER = "report-engine"


@dataclass(frozen=True)
class ReportMetadata:
    """
    PDF document information.

    Attributes:
        title: Document title
        author: Author shown by PDF viewers
        subject: Short description
        creator: Application that created the content
        producer: Library that wrote the PDF
    """

    title: str = ""
    author: str = ""
    subject: str = ""
    creator: str = ""
    producer: str = DEFAULT_PRODUCER


def render_report(
    ctx: LayoutContext,
    metadata: Optional[ReportMetadata] = None,
    *,
    deterministic: bool = False,
) -> bytes:
    """
    Render every page of a layout context to PDF bytes.

    Args:
        ctx: Context holding the laid-out pages (footers normally finalized)
        metadata: Optional document information
        deterministic: Write invariant output (fixed dates and IDs) so the
            same layout always yields identical bytes

    Returns:
        The PDF file contents

    Example:
        >>> finalize_footers(ctx, "Quarterly report")
        >>> pdf = render_report(ctx, ReportMetadata(title="Q3"))
    """
    if not ctx.finalized:
        logger.warning("Rendering a report whose footers were not finalized")

    metadata = metadata or ReportMetadata()
    buf = io.BytesIO()
    c = canvas.Canvas(
        buf,
        pagesize=(ctx.format.page.width, ctx.format.page.height),
        invariant=1 if deterministic else 0,
    )
    c.setTitle(metadata.title)
    c.setAuthor(metadata.author)
    c.setSubject(metadata.subject)
    c.setCreator(metadata.creator)
    c.setProducer(metadata.producer)

    readers: Dict[int, ImageReader] = {}
    for page in ctx.pages:
        _render_page(c, page, readers)
        c.showPage()

    c.save()
    pdf = buf.getvalue()
    logger.info(f"Rendered {ctx.page_count} pages ({len(pdf)} bytes)")
    return pdf


def _render_page(c: canvas.Canvas, page: Page, readers: Dict[int, ImageReader]) -> None:
    for op in page.ops:
        if isinstance(op, RectOp):
            _draw_rect(c, op)
        elif isinstance(op, LineOp):
            c.saveState()
            c.setStrokeColor(op.color)
            c.setLineWidth(op.thickness)
            c.line(op.x1, op.y1, op.x2, op.y2)
            c.restoreState()
        elif isinstance(op, TextOp):
            _draw_text(c, op)
        elif isinstance(op, ImageOp):
            _draw_image(c, op, readers)


def _draw_rect(c: canvas.Canvas, op: RectOp) -> None:
    if op.fill is None and op.stroke is None:
        return
    c.saveState()
    if op.fill is not None:
        c.setFillColor(op.fill)
        c.setFillAlpha(op.opacity)
    if op.stroke is not None:
        c.setStrokeColor(op.stroke)
        c.setStrokeAlpha(op.opacity)
        c.setLineWidth(op.stroke_width)
    c.rect(op.x, op.y, op.width, op.height, stroke=int(op.stroke is not None), fill=int(op.fill is not None))
    c.restoreState()


def _draw_text(c: canvas.Canvas, op: TextOp) -> None:
    c.saveState()
    c.setFillColor(op.color)
    c.setFillAlpha(op.opacity)
    c.setFont(op.font_name, op.size)
    if op.rotation:
        c.translate(op.x, op.y)
        c.rotate(op.rotation)
        c.drawString(0, 0, op.text)
    else:
        c.drawString(op.x, op.y, op.text)
    c.restoreState()


def _draw_image(c: canvas.Canvas, op: ImageOp, readers: Dict[int, ImageReader]) -> None:
    # One reader per image so repeated logos are embedded once
    key = id(op.image)
    reader = readers.get(key)
    if reader is None:
        reader = readers[key] = _image_reader(op.image)
    c.saveState()
    c.setFillAlpha(op.opacity)
    c.drawImage(reader, op.x, op.y, width=op.width, height=op.height, mask="auto")
    c.restoreState()


def _image_reader(image: ReportImage) -> ImageReader:
    return _pil_to_reader(image.image)


def _pil_to_reader(img: Image.Image) -> ImageReader:
    """
    Convert PIL image to ReportLab ImageReader.

    Args:
        img: PIL Image object

    Returns:
        ImageReader for use with ReportLab
    """
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return ImageReader(buf)
