"""
Unit tests for the table layout engine: pagination, header repetition,
striping, semantic column defaults and presets.
"""

import logging

import pytest
from reportlab.pdfbase import pdfmetrics

from report_engine.layout import (
    TableColumn,
    TableSpec,
    draw_table,
    get_report_format,
    resolve_column,
    resolve_table_style,
)


def _columns(count=5):
    return [
        TableColumn(key=f"c{j}", header=f"Col {j}", value=lambda row, j=j: f"r{row}c{j}")
        for j in range(count)
    ]


def _page_height_for_rows(style_version, preset, rows_per_page):
    """Page height whose content area holds the header plus rows_per_page single-line rows."""
    fmt = get_report_format(style_version)
    style = resolve_table_style(fmt, preset)
    row_height = style.line_height + 2 * style.cell_padding_y
    content = row_height * (rows_per_page + 1) + 0.5
    return fmt.page.margin_top + fmt.page.margin_bottom + content


def _row_texts(page, column=0):
    return [op for op in page.texts if op.text.startswith("r") and op.text.endswith(f"c{column}")]


def _stripes(ctx):
    return [[r for r in page.rects if r.fill is ctx.format.colors.panel_alt] for page in ctx.pages]


@pytest.fixture
def evidence_ctx(make_context):
    """v3 context whose pages hold a header plus 12 evidence rows."""
    return make_context("v3", page_height=_page_height_for_rows("v3", "evidence", 12))


class TestTablePagination:
    """Tests for row pagination and header repetition."""

    def test_table_when_forty_rows_at_twelve_per_page_then_four_pages(self, evidence_ctx):
        # Arrange
        spec = TableSpec(columns=_columns(5), rows=list(range(40)), preset="evidence")

        # Act
        result = draw_table(evidence_ctx, spec)

        # Assert
        assert result.row_count == 40
        assert evidence_ctx.page_count == 4
        assert result.pages == (0, 1, 2, 3)
        assert result.header_draws == 4
        assert [len(_row_texts(page)) for page in evidence_ctx.pages] == [12, 12, 12, 4]

    def test_table_when_paginated_then_header_tops_every_page(self, evidence_ctx):
        spec = TableSpec(columns=_columns(5), rows=list(range(40)), preset="evidence")

        draw_table(evidence_ctx, spec)

        for page in evidence_ctx.pages:
            headers = [op for op in page.texts if op.text == "Col 0"]
            assert len(headers) == 1
            assert all(headers[0].y > op.y for op in _row_texts(page))

    def test_table_when_paginated_then_stripes_follow_row_index(self, evidence_ctx):
        spec = TableSpec(columns=_columns(5), rows=list(range(40)), preset="evidence")

        draw_table(evidence_ctx, spec)

        assert sum(len(stripes) for stripes in _stripes(evidence_ctx)) == 20

    def test_table_when_odd_rows_per_page_then_striping_not_reset(self, make_context):
        """Row 5 opens page two and is striped because its index is odd."""
        # Arrange
        ctx = make_context("v3", page_height=_page_height_for_rows("v3", "default", 5))
        spec = TableSpec(columns=_columns(2), rows=list(range(10)))
        style = resolve_table_style(ctx.format, None)
        header_height = style.line_height + 2 * style.cell_padding_y

        # Act
        draw_table(ctx, spec)

        # Assert
        stripes = _stripes(ctx)
        assert [len(s) for s in stripes] == [2, 3]
        assert stripes[1][0].top == pytest.approx(ctx.cursor.max_y - header_height)

    def test_table_when_repeat_header_disabled_then_header_once(self, evidence_ctx):
        spec = TableSpec(columns=_columns(3), rows=list(range(40)), preset="evidence", repeat_header=False)

        result = draw_table(evidence_ctx, spec)

        assert result.header_draws == 1
        assert all(op.text != "Col 0" for page in evidence_ctx.pages[1:] for op in page.texts)

    def test_table_when_repeat_header_disabled_then_continuation_pages_hold_extra_row(self, evidence_ctx):
        # Arrange
        spec = TableSpec(columns=_columns(3), rows=list(range(40)), preset="evidence", repeat_header=False)

        # Act
        draw_table(evidence_ctx, spec)

        # Assert
        assert [len(_row_texts(page)) for page in evidence_ctx.pages] == [12, 13, 13, 2]
        for page in evidence_ctx.pages:
            assert all(op.y >= evidence_ctx.cursor.min_y for op in page.texts)

    def test_table_when_header_would_be_orphaned_then_moves_with_first_row(self, ctx_v3):
        # Arrange
        style = resolve_table_style(ctx_v3.format, None)
        ctx_v3.cursor.y = ctx_v3.cursor.min_y + style.line_height + 2 * style.cell_padding_y + 2

        # Act
        result = draw_table(ctx_v3, TableSpec(columns=_columns(2), rows=[1, 2]))

        # Assert
        assert result.pages == (1,)
        assert ctx_v3.pages[0].ops == []

    def test_table_when_row_taller_than_page_then_clamped(self, ctx_v3, caplog):
        # Arrange
        column = TableColumn(key="notes", header="Notes", value=str)
        spec = TableSpec(columns=[column], rows=["word " * 4000], max_cell_lines=0)

        # Act
        with caplog.at_level(logging.WARNING):
            draw_table(ctx_v3, spec)

        # Assert
        assert ctx_v3.page_count == 1
        assert "clamping" in caplog.text
        assert all(op.y >= ctx_v3.cursor.min_y for op in ctx_v3.page.texts)

    def test_table_when_no_columns_then_nothing_drawn(self, ctx_v3):
        start = ctx_v3.cursor.y

        result = draw_table(ctx_v3, TableSpec(columns=[], rows=[1, 2, 3]))

        assert result.widths == ()
        assert ctx_v3.page.ops == []
        assert ctx_v3.cursor.y == start

    def test_table_when_no_rows_then_header_only(self, ctx_v3):
        result = draw_table(ctx_v3, TableSpec(columns=_columns(3), rows=[]))

        assert result.header_draws == 1
        assert [op.text for op in ctx_v3.page.texts] == ["Col 0", "Col 1", "Col 2"]

    def test_table_when_stripes_disabled_then_no_stripes(self, ctx_v3):
        draw_table(ctx_v3, TableSpec(columns=_columns(2), rows=list(range(6)), striped_rows=False))

        assert _stripes(ctx_v3) == [[]]


class TestColumnRendering:
    """Tests for cell alignment, fonts and line caps."""

    def test_cell_when_metric_column_then_right_aligned(self, ctx_v3):
        # Arrange
        columns = [
            TableColumn(key="name", header="Name", value=lambda r: r[0]),
            TableColumn(key="count", header="Count", value=lambda r: r[1], semantic="metric"),
        ]
        style = resolve_table_style(ctx_v3.format, None)

        # Act
        result = draw_table(ctx_v3, TableSpec(columns=columns, rows=[("alpha", "1,024")]))

        # Assert
        op = [o for o in ctx_v3.page.texts if o.text == "1,024"][0]
        right_edge = ctx_v3.cursor.min_x + sum(result.widths) - style.cell_padding_x
        assert op.x + ctx_v3.fonts.width("1,024", "regular", style.font_size) == pytest.approx(right_edge)

    def test_cell_when_identifier_column_then_monospace(self, ctx_v3):
        columns = [TableColumn(key="id", header="Message ID", value=str, semantic="identifier")]

        draw_table(ctx_v3, TableSpec(columns=columns, rows=["msg-001"]))

        op = [o for o in ctx_v3.page.texts if o.text == "msg-001"][0]
        assert op.font_name == ctx_v3.fonts.mono

    def test_cell_when_status_column_then_single_line(self, ctx_v3):
        columns = [
            TableColumn(key="status", header="Status", value=str, semantic="status", width=40),
            TableColumn(key="notes", header="Notes", value=lambda r: "x"),
        ]

        draw_table(ctx_v3, TableSpec(columns=columns, rows=["delivered to primary mailbox after retry"]))

        status_lines = [o for o in ctx_v3.page.texts if o.x < ctx_v3.cursor.min_x + 40 and o.text != "Status"]
        assert len(status_lines) == 1
        assert status_lines[0].text.endswith("…")

    def test_table_when_columns_narrower_than_padding_then_text_stays_inside(self, ctx_v3, caplog):
        # Arrange
        x = ctx_v3.cursor.min_x
        spec = TableSpec(columns=_columns(5), rows=list(range(3)), max_width=40)

        # Act
        with caplog.at_level(logging.WARNING):
            result = draw_table(ctx_v3, spec)

        # Assert
        assert "scaling 5 columns down" in caplog.text
        assert result.widths == pytest.approx((8, 8, 8, 8, 8))
        assert ctx_v3.page.texts
        for op in ctx_v3.page.texts:
            column = int((op.x - x) // 8)
            assert 0 <= column < 5
            end = op.x + pdfmetrics.stringWidth(op.text, op.font_name, op.size)
            assert end <= x + (column + 1) * 8 + 1e-6
            assert end <= x + 40 + 1e-6


class TestSemanticDefaults:
    """Tests for resolve_column()."""

    def test_resolve_when_identifier_then_mono(self):
        assert resolve_column(TableColumn("id", "ID", str, semantic="identifier")).font == "mono"

    def test_resolve_when_metric_then_right(self):
        assert resolve_column(TableColumn("n", "N", str, semantic="metric")).align == "right"

    @pytest.mark.parametrize("semantic", ["status", "datetime"])
    def test_resolve_when_status_or_datetime_then_one_line(self, semantic):
        assert resolve_column(TableColumn("s", "S", str, semantic=semantic)).max_lines == 1

    def test_resolve_when_explicit_settings_then_override_semantics(self):
        column = TableColumn("id", "ID", str, semantic="identifier", font="bold")
        metric = TableColumn("n", "N", str, semantic="metric", align="left")
        status = TableColumn("s", "S", str, semantic="status", max_lines=2)

        assert resolve_column(column).font == "bold"
        assert resolve_column(metric).align == "left"
        assert resolve_column(status).max_lines == 2

    def test_resolve_when_plain_text_then_defaults(self):
        resolved = resolve_column(TableColumn("t", "T", str, semantic="text"))

        assert (resolved.font, resolved.align, resolved.max_lines) == ("regular", "left", None)

    def test_column_when_unknown_semantic_then_raises(self):
        with pytest.raises(ValueError, match="semantic"):
            TableColumn("x", "X", str, semantic="currency")

    def test_column_when_unknown_alignment_then_raises(self):
        with pytest.raises(ValueError, match="alignment"):
            TableColumn("x", "X", str, align="center")


class TestTableStyle:
    """Tests for resolve_table_style()."""

    def test_style_when_default_preset_then_format_defaults(self):
        fmt = get_report_format("v3")

        style = resolve_table_style(fmt, "default")

        defaults = fmt.table_defaults
        assert style.font_size == defaults.font_size
        assert style.cell_padding_x == defaults.cell_padding_x
        assert style.max_cell_lines == defaults.max_cell_lines

    def test_style_when_analytics_then_denser(self):
        fmt = get_report_format("v2")

        style = resolve_table_style(fmt, "analytics")

        assert style.font_size == pytest.approx(fmt.table_defaults.font_size - 0.3)
        assert style.line_height < fmt.table_defaults.line_height
        assert style.cell_padding_y == 3.5

    def test_style_when_receipts_then_airier(self):
        fmt = get_report_format("v3")

        style = resolve_table_style(fmt, "receipts")

        assert style.cell_padding_x == pytest.approx(fmt.table_defaults.cell_padding_x + 0.5)
        assert style.cell_padding_y == 4.5

    def test_style_when_spec_overrides_then_overrides_win(self):
        fmt = get_report_format("v3")
        spec = TableSpec(columns=[], rows=[], preset="evidence", font_size=7, max_cell_lines=5, striped_rows=False)

        style = resolve_table_style(fmt, spec.preset, spec)

        assert style.font_size == 7
        assert style.max_cell_lines == 5
        assert style.striped_rows is False
        assert style.line_height == pytest.approx(fmt.table_defaults.line_height + 0.2)

    def test_draw_when_unknown_preset_then_raises(self, ctx_v3):
        with pytest.raises(ValueError):
            draw_table(ctx_v3, TableSpec(columns=_columns(1), rows=[1], preset="dense"))
