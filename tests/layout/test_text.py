"""
Unit tests for text wrapping, truncation and measure/draw parity.
"""

import pytest

from report_engine.layout import (
    FontSet,
    TextBlockRequest,
    draw_text_block,
    measure_text_block_height,
    wrap_text_to_lines,
)
from report_engine.layout.text import ELLIPSIS, TRUNCATE_CLIP, truncate_lines

FONTS = FontSet.standard()

LOREM = (
    "Delivery evidence for campaign 2024-Q3 covers every recipient, the "
    "provider/message identifiers and the timestamps recorded by the relay "
    "when each message was accepted, deferred or bounced."
)


class TestWrapTextToLines:
    """Tests for wrap_text_to_lines()."""

    @pytest.mark.parametrize("max_width", [40, 90, 150, 300])
    @pytest.mark.parametrize("family", ["regular", "bold", "mono"])
    def test_wrap_when_any_width_then_no_line_exceeds_it(self, max_width, family):
        lines = wrap_text_to_lines(FONTS, LOREM, max_width, 10, family)

        assert all(FONTS.width(line, family, 10) <= max_width for line in lines)

    def test_wrap_when_text_fits_then_single_line(self):
        assert wrap_text_to_lines(FONTS, "short text", 500, 10) == ["short text"]

    def test_wrap_when_token_oversized_then_hard_splits(self):
        # Arrange
        token = "X" * 120

        # Act
        lines = wrap_text_to_lines(FONTS, token, 50, 10)

        # Assert
        assert len(lines) > 1
        assert "".join(lines) == token
        assert all(FONTS.width(line, "regular", 10) <= 50 for line in lines)

    def test_wrap_when_oversized_token_follows_words_then_words_keep_own_line(self):
        lines = wrap_text_to_lines(FONTS, "id: " + "9" * 60, 60, 10)

        assert lines[0] == "id:"
        assert "".join(lines[1:]) == "9" * 60

    def test_wrap_when_slash_separated_then_breaks_after_slash(self):
        # Arrange
        width = FONTS.width("alpha/", "regular", 10) + 1
        assert FONTS.width("alpha/beta", "regular", 10) > width

        # Act
        lines = wrap_text_to_lines(FONTS, "alpha/beta/gamma", width, 10)

        # Assert
        assert lines[0] == "alpha/"
        assert "".join(lines) == "alpha/beta/gamma"

    def test_wrap_when_newlines_then_forces_breaks_and_keeps_blank_lines(self):
        lines = wrap_text_to_lines(FONTS, "one\n\nthree", 500, 10)

        assert lines == ["one", " ", "three"]

    def test_wrap_when_empty_then_one_blank_line(self):
        assert wrap_text_to_lines(FONTS, "", 100, 10) == [" "]


class TestTruncateLines:
    """Tests for truncate_lines()."""

    def test_truncate_when_under_limit_then_unchanged(self):
        assert truncate_lines(FONTS, ["a", "b"], 3, 100, 10) == ["a", "b"]

    def test_truncate_when_over_limit_then_ellipsis_on_last_kept_line(self):
        # Arrange
        lines = wrap_text_to_lines(FONTS, LOREM, 120, 10)

        # Act
        kept = truncate_lines(FONTS, lines, 2, 120, 10)

        # Assert
        assert len(kept) == 2
        assert kept[-1].endswith(ELLIPSIS)
        assert FONTS.width(kept[-1], "regular", 10) <= 120

    def test_truncate_when_clip_mode_then_no_ellipsis(self):
        kept = truncate_lines(FONTS, ["one", "two", "three"], 2, 100, 10, mode=TRUNCATE_CLIP)

        assert kept == ["one", "two"]


class TestMeasureDrawParity:
    """Measured height must equal the height a draw consumes."""

    @pytest.mark.parametrize("max_lines", [None, 1, 3])
    def test_draw_when_same_request_then_consumes_measured_height(self, ctx_v3, max_lines):
        # Arrange
        request = TextBlockRequest(text=LOREM, x=60, y=500, max_width=140, size=9, max_lines=max_lines)

        # Act
        measured = measure_text_block_height(ctx_v3, request)
        result = draw_text_block(ctx_v3, request)

        # Assert
        assert result.consumed_height == pytest.approx(measured)
        assert 500 - result.next_y == pytest.approx(measured)
        if max_lines:
            assert len(result.lines) <= max_lines

    def test_draw_when_called_then_does_not_move_cursor(self, ctx_v3):
        before = ctx_v3.cursor.y

        draw_text_block(ctx_v3, TextBlockRequest(text="Hello"))

        assert ctx_v3.cursor.y == before

    def test_draw_when_defaults_then_uses_cursor_and_body_size(self, ctx_v3):
        draw_text_block(ctx_v3, TextBlockRequest(text="Hello"))

        op = ctx_v3.page.texts[0]
        assert op.x == ctx_v3.cursor.min_x
        assert op.size == ctx_v3.format.typography.body_size
        assert op.y < ctx_v3.cursor.y
