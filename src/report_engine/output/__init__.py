"""
Module: report_engine.output

Purpose:
    PDF serialization and image decoding for laid-out reports.

Key Functions:
    - render_report(): Render a LayoutContext to PDF bytes
    - load_report_image(): Decode PNG/JPEG logo bytes

Dependencies:
    - reportlab: PDF generation
    - PIL: Image handling
"""

from .images import load_report_image, sniff_image_format
from .renderer import ReportMetadata, render_report

__all__ = [
    "ReportMetadata",
    "render_report",
    "load_report_image",
    "sniff_image_format",
]
