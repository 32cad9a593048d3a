"""Tests for pngn_render -- end-to-end styled text rendering."""

from __future__ import annotations

import time

from pngn_canvas import RecordingCanvas
from pngn_render import render_styled_text

WHITE = (255, 255, 255, 255)
RED = (220, 80, 80, 255)
GREEN = (80, 220, 80, 255)


def placed(canvas: RecordingCanvas) -> list[tuple[str, float, float]]:
    return [(run.text, run.x, run.y) for run in canvas.runs]


# ---------------------------------------------------------------------------
# colors and runs
# ---------------------------------------------------------------------------


class TestStyledRuns:
    def test_color_then_reset(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[31mHello\x1b[0m World", canvas)
        assert placed(canvas) == [("Hello", 0, 0), (" World", 40, 0)]
        assert [run.color for run in canvas.runs] == [RED, WHITE]
        assert all("\x1b" not in text for text in canvas.texts)

    def test_plain_text_is_one_default_run(self) -> None:
        canvas = RecordingCanvas()
        final = render_styled_text("plain text", canvas)
        assert canvas.texts == ["plain text"]
        assert canvas.runs[0].color == WHITE
        assert canvas.runs[0].bold is False
        assert final == (80, 0)

    def test_256_color(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[38;5;196mRed", canvas)
        assert canvas.texts == ["Red"]
        assert canvas.runs[0].color == (255, 0, 0, 255)

    def test_truecolor(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[38;2;10;20;30mTrue", canvas)
        assert canvas.runs[0].color == (10, 20, 30, 255)

    def test_bold_toggles_per_run(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[1mB\x1b[22mN", canvas)
        assert [(run.text, run.bold) for run in canvas.runs] == [("B", True), ("N", False)]

    def test_reset_clears_color_and_bold(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[1;31mX\x1b[0mY", canvas)
        assert [(run.color, run.bold) for run in canvas.runs] == [(RED, True), (WHITE, False)]

    def test_bare_reset_sequence(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[31m\x1b[mX", canvas)
        assert canvas.runs[0].color == WHITE

    def test_adjacent_sequences_emit_no_empty_runs(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[1m\x1b[32mgo", canvas)
        assert canvas.texts == ["go"]
        assert canvas.runs[0].color == GREEN
        assert canvas.runs[0].bold is True

    def test_style_does_not_leak_between_calls(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[31mred", canvas)
        render_styled_text("plain", canvas)
        assert placed(canvas) == [("red", 0, 0), ("plain", 24, 0)]
        assert canvas.runs[1].color == WHITE

    def test_wide_characters_use_two_cells(self) -> None:
        canvas = RecordingCanvas()
        final = render_styled_text("你a", canvas)
        assert canvas.texts == ["你a"]
        assert final == (24, 0)


# ---------------------------------------------------------------------------
# control characters
# ---------------------------------------------------------------------------


class TestControlCharacters:
    def test_tab_stop(self) -> None:
        canvas = RecordingCanvas(glyph_width=10)
        render_styled_text("a\tb", canvas)
        assert placed(canvas) == [("a", 0, 0), ("b", 80, 0)]

    def test_newline(self) -> None:
        canvas = RecordingCanvas()
        final = render_styled_text("a\nb", canvas)
        assert placed(canvas) == [("a", 0, 0), ("b", 0, 16)]
        assert final == (8, 16)

    def test_crlf_advances_once(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("a\r\nb", canvas)
        assert placed(canvas) == [("a", 0, 0), ("b", 0, 16)]

    def test_lines_start_at_the_starting_x(self) -> None:
        canvas = RecordingCanvas(origin=(100.0, 50.0))
        render_styled_text("ab\ncd", canvas)
        assert placed(canvas) == [("ab", 100, 50), ("cd", 100, 66)]

    def test_tab_is_measured_from_the_starting_x(self) -> None:
        canvas = RecordingCanvas(glyph_width=10, origin=(100.0, 0.0))
        render_styled_text("a\tb", canvas)
        assert placed(canvas) == [("a", 100, 0), ("b", 180, 0)]

    def test_backspace(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("ab\bc", canvas)
        assert placed(canvas) == [("ab", 0, 0), ("c", 8, 0)]

    def test_other_controls_are_dropped(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("a\x07b", canvas)
        assert placed(canvas) == [("a", 0, 0), ("b", 8, 0)]

    def test_colored_text_across_lines(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[32mok\nstill green\x1b[0m", canvas)
        assert [(run.text, run.color) for run in canvas.runs] == [
            ("ok", GREEN), ("still green", GREEN)]


# ---------------------------------------------------------------------------
# cursor finalization
# ---------------------------------------------------------------------------


class TestFinalCursor:
    def test_cursor_is_written_back(self) -> None:
        canvas = RecordingCanvas()
        final = render_styled_text("abc", canvas)
        assert canvas.cursor_position() == final == (24, 0)

    def test_trailing_newline(self) -> None:
        canvas = RecordingCanvas()
        assert render_styled_text("a\n", canvas) == (0, 32)

    def test_trailing_crlf(self) -> None:
        canvas = RecordingCanvas()
        assert render_styled_text("a\r\n", canvas) == (0, 16)

    def test_trailing_carriage_return(self) -> None:
        canvas = RecordingCanvas()
        assert render_styled_text("abc\r", canvas) == (0, 0)

    def test_trailing_sequence_does_not_move_cursor(self) -> None:
        canvas = RecordingCanvas()
        assert render_styled_text("ab\x1b[0m", canvas) == (16, 0)


# ---------------------------------------------------------------------------
# malformed input
# ---------------------------------------------------------------------------


class TestMalformedInput:
    def test_unterminated_sequence_draws_nothing(self) -> None:
        canvas = RecordingCanvas()
        final = render_styled_text("\x1b[31", canvas)
        assert canvas.runs == []
        assert final == (0, 0)

    def test_text_after_bad_parameter_is_literal(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[31Xhi", canvas)
        assert canvas.texts == ["Xhi"]
        assert canvas.runs[0].color == RED

    def test_incomplete_truecolor_keeps_color(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[32m\x1b[38;2;10;20mX", canvas)
        assert canvas.runs[0].color == GREEN

    def test_lone_escape_is_literal_by_default(self) -> None:
        canvas = RecordingCanvas()
        final = render_styled_text("a\x1bb", canvas)
        assert canvas.texts == ["a\x1bb"]
        assert final == (16, 0)

    def test_lone_escape_can_be_stripped(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("a\x1bb", canvas, strip_lone_escape=True)
        assert placed(canvas) == [("a", 0, 0), ("b", 8, 0)]

    def test_escape_at_end_of_input(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("ab\x1b", canvas)
        assert canvas.texts == ["ab\x1b"]

    def test_stripped_escape_before_sequence(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b\x1b[31mx", canvas, strip_lone_escape=True)
        assert canvas.texts == ["x"]
        assert canvas.runs[0].color == RED

    def test_long_parameter_renders_quickly(self) -> None:
        canvas = RecordingCanvas()
        text = "\x1b[38;5;" + "9" * 200_000 + "mX"
        started = time.perf_counter()
        render_styled_text(text, canvas)
        elapsed = time.perf_counter() - started
        assert canvas.texts == ["X"]
        assert canvas.runs[0].color == (238, 238, 238, 255)
        assert elapsed < 2.0

# ---------------------------------------------------------------------------
# input bounds
# ---------------------------------------------------------------------------


class TestInputBounds:
    def test_none_is_a_no_op(self) -> None:
        canvas = RecordingCanvas(origin=(5.0, 7.0))
        assert render_styled_text(None, canvas) == (5.0, 7.0)
        assert canvas.runs == []

    def test_empty_is_a_no_op(self) -> None:
        canvas = RecordingCanvas(origin=(5.0, 7.0))
        assert render_styled_text("", canvas) == (5.0, 7.0)
        assert canvas.runs == []

    def test_explicit_length_cuts_input(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("abc\x1b[31mdef", canvas, length=3)
        assert canvas.texts == ["abc"]

    def test_zero_length_is_a_no_op(self) -> None:
        canvas = RecordingCanvas()
        assert render_styled_text("abc", canvas, length=0) == (0, 0)
        assert canvas.runs == []

    def test_length_past_end_is_clamped(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("abc", canvas, length=100)
        assert canvas.texts == ["abc"]

    def test_stops_at_nul_without_length(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("ab\0cd", canvas)
        assert canvas.texts == ["ab"]

    def test_nul_is_skipped_with_length(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("ab\0cd", canvas, length=5)
        assert placed(canvas) == [("ab", 0, 0), ("cd", 16, 0)]

    def test_sequence_cut_by_length(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("\x1b[31mab", canvas, length=4)
        assert canvas.runs == []

    def test_bytes_input(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text(b"\x1b[32mok", canvas)
        assert canvas.texts == ["ok"]
        assert canvas.runs[0].color == GREEN

    def test_bytes_stop_at_nul(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text(b"hi\0there", canvas)
        assert canvas.texts == ["hi"]

    def test_bytes_length_counts_bytes(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text("é!".encode("utf-8"), canvas, length=2)
        assert canvas.texts == ["é"]

    def test_invalid_utf8_is_replaced(self) -> None:
        canvas = RecordingCanvas()
        render_styled_text(b"a\xffb", canvas)
        assert canvas.texts == ["a\ufffdb"]
