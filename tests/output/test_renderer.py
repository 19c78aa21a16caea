"""
Tests for PDF rendering. Output is read back with PyMuPDF.
"""

import fitz
import pytest

from report_engine.layout import (
    LayoutContext,
    Metric,
    TableColumn,
    TableSpec,
    draw_metric_cards,
    draw_paragraph,
    draw_report_header,
    draw_section_heading,
    draw_table,
    finalize_footers,
    watermark_hook,
)
from report_engine.output import ReportMetadata, render_report


def _build_report(logo=None):
    ctx = LayoutContext.create("v3", on_page_added=watermark_hook("SAMPLE", logo=logo))
    draw_report_header(ctx, "Delivery report", subtitle="September 2026", logo=logo, brand_name="Acme")
    draw_section_heading(ctx, "Summary")
    draw_metric_cards(ctx, [Metric("Sent", "1,024"), Metric("Delivered", "1,001"), Metric("Bounced", "23")])
    draw_paragraph(ctx, "Bounces were concentrated on two receiving domains.")
    draw_section_heading(ctx, "Messages")
    columns = [
        TableColumn(key="id", header="Message ID", value=lambda r: f"msg-{r:04d}", semantic="identifier"),
        TableColumn(key="status", header="Status", value=lambda r: "delivered", semantic="status"),
        TableColumn(key="size", header="Size", value=lambda r: f"{r * 3} KB", semantic="metric"),
    ]
    draw_table(ctx, TableSpec(columns=columns, rows=list(range(80)), preset="evidence"))
    finalize_footers(ctx, "Acme delivery report", powered_by_brand="Acme", powered_by_logo=logo)
    return ctx


class TestRenderReport:
    """Tests for render_report()."""

    def test_render_when_report_built_then_pages_match(self):
        # Arrange
        ctx = _build_report()

        # Act
        pdf = render_report(ctx)

        # Assert
        assert pdf.startswith(b"%PDF")
        with fitz.open(stream=pdf, filetype="pdf") as doc:
            assert doc.page_count == ctx.page_count
            assert doc.page_count >= 2

    def test_render_when_footers_finalized_then_page_counter_readable(self):
        ctx = _build_report()

        pdf = render_report(ctx)

        with fitz.open(stream=pdf, filetype="pdf") as doc:
            total = doc.page_count
            for index, page in enumerate(doc, start=1):
                assert f"Page {index} of {total}" in page.get_text()
            assert "Message ID" in doc[total - 1].get_text()

    def test_render_when_metadata_given_then_written(self):
        ctx = _build_report()

        pdf = render_report(ctx, ReportMetadata(title="Delivery report", author="Ops"))

        with fitz.open(stream=pdf, filetype="pdf") as doc:
            assert doc.metadata["title"] == "Delivery report"
            assert doc.metadata["author"] == "Ops"

    def test_render_when_deterministic_then_identical_bytes(self, logo_image):
        first = render_report(_build_report(logo_image), deterministic=True)
        second = render_report(_build_report(logo_image), deterministic=True)

        assert first == second

    def test_render_when_logo_then_images_embedded(self, logo_image):
        pdf = render_report(_build_report(logo_image))

        with fitz.open(stream=pdf, filetype="pdf") as doc:
            assert len(doc[0].get_images()) >= 1

    def test_render_when_not_finalized_then_warns(self, ctx_v3, caplog):
        draw_paragraph(ctx_v3, "Draft")

        pdf = render_report(ctx_v3)

        assert pdf.startswith(b"%PDF")
        assert "not finalized" in caplog.text
