"""
Module: report_engine.output.images

Purpose:
    Decode logo bytes into ReportImage handles. Only PNG and JPEG are
    accepted; anything else is reported and skipped so a bad logo never
    fails a report.

Key Functions:
    - sniff_image_format(): Identify PNG/JPEG by magic bytes
    - load_report_image(): Decode bytes into a ReportImage or None

Dependencies:
    - PIL: Image decoding
"""

from __future__ import annotations

import io
import logging
from typing import Optional

from PIL import Image, UnidentifiedImageError

from report_engine.layout.models import ReportImage

logger = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
JPEG_SIGNATURE = b"\xff\xd8\xff"


def sniff_image_format(data: bytes) -> Optional[str]:
    """Return "png" or "jpeg" from the leading bytes, else None."""
    if data.startswith(PNG_SIGNATURE):
        return "png"
    if data.startswith(JPEG_SIGNATURE):
        return "jpeg"
    return None


def load_report_image(data: Optional[bytes]) -> Optional[ReportImage]:
    """
    Decode PNG or JPEG bytes into a ReportImage.

    Args:
        data: Raw image bytes (None or empty means no image)

    Returns:
        ReportImage, or None for missing, unsupported or corrupt data
    """
    if not data:
        return None

    kind = sniff_image_format(data)
    if kind is None:
        logger.warning(f"Ignoring image of {len(data)} bytes: not PNG or JPEG")
        return None

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            # Keep alpha for PNG logos; JPEG has none
            decoded = img.convert("RGBA" if kind == "png" else "RGB")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        logger.warning(f"Could not decode {kind} image: {exc}")
        return None

    return ReportImage.from_pil(decoded)
