"""Tests for the line-oriented Reader."""

from __future__ import annotations

import pytest

from pizarra.errors import ReaderPositionError
from pizarra.reader import Reader, ReaderPosition, Segment


class TestSegment:
    """Tests for Segment."""

    def test_len_and_value(self) -> None:
        seg = Segment(2, 5)
        assert len(seg) == 3
        assert seg.value("abcdefg") == "cde"

    def test_with_start_and_stop(self) -> None:
        seg = Segment(2, 8)
        assert seg.with_start(4) == Segment(4, 8)
        assert seg.with_stop(6) == Segment(2, 6)

    def test_is_frozen(self) -> None:
        seg = Segment(0, 1)
        with pytest.raises(AttributeError):
            seg.start = 3  # type: ignore[misc]


class TestReaderLines:
    """Tests for line peeking and advancing."""

    def test_empty_source(self) -> None:
        reader = Reader("")
        assert reader.line_count == 0
        assert reader.at_end
        assert reader.peek_line() is None
        assert reader.peek_char() == ""

    def test_trailing_newline_does_not_add_line(self) -> None:
        assert Reader("a\nb\n").line_count == 2
        assert Reader("a\nb").line_count == 2

    def test_peek_line_includes_newline(self) -> None:
        reader = Reader("a $x$\nb\n")
        assert reader.peek_line() == ("a $x$\n", Segment(0, 6))

    def test_peek_line_does_not_consume(self) -> None:
        reader = Reader("abc\n")
        reader.peek_line()
        reader.peek_line()
        assert reader.offset == 0

    def test_advance_line(self) -> None:
        reader = Reader("one\ntwo\n")
        reader.advance_line()
        assert reader.lineno == 2
        assert reader.peek_line() == ("two\n", Segment(4, 8))
        reader.advance_line()
        assert reader.at_end
        assert reader.peek_line() is None

    def test_advance_line_at_end_is_noop(self) -> None:
        reader = Reader("x")
        reader.advance_line()
        reader.advance_line()
        assert reader.at_end
        assert reader.offset == 1

    def test_advance_within_line(self) -> None:
        reader = Reader("abcdef\n")
        reader.advance(2)
        assert reader.column == 2
        assert reader.peek_line() == ("cdef\n", Segment(2, 7))
        assert reader.peek_char() == "c"

    def test_advance_crosses_lines(self) -> None:
        reader = Reader("ab\ncd")
        reader.advance(4)
        assert reader.line_index == 1
        assert reader.column == 1
        assert reader.peek_char() == "d"

    def test_advance_clamps_to_end(self) -> None:
        reader = Reader("ab")
        reader.advance(100)
        assert reader.offset == 2
        assert reader.at_end

    def test_first_lineno(self) -> None:
        reader = Reader("a\nb\n", first_lineno=10)
        assert reader.lineno == 10
        reader.advance_line()
        assert reader.lineno == 11

    def test_value(self) -> None:
        reader = Reader("hello world")
        assert reader.value(Segment(6, 11)) == "world"


class TestReaderPositions:
    """Tests for save and restore."""

    def test_round_trip(self) -> None:
        reader = Reader("first\nsecond\nthird\n")
        reader.advance_line()
        reader.advance(3)
        saved = reader.position()

        reader.advance_line()
        reader.advance(2)
        reader.set_position(saved)

        assert reader.position() == saved
        assert reader.peek_line() == ("ond\n", Segment(9, 13))

    def test_end_position_round_trips(self) -> None:
        reader = Reader("a\nb\n")
        reader.advance_line()
        reader.advance_line()
        end = reader.position()
        assert end == ReaderPosition(2, 4)

        reader.set_position(ReaderPosition(0, 0))
        reader.set_position(end)
        assert reader.at_end

    def test_positions_are_ordered(self) -> None:
        assert ReaderPosition(0, 3) < ReaderPosition(1, 4)
        assert ReaderPosition(1, 4) < ReaderPosition(1, 5)

    def test_line_out_of_range(self) -> None:
        reader = Reader("a\nb\n")
        with pytest.raises(ReaderPositionError, match="line index out of range"):
            reader.set_position(ReaderPosition(7, 0))

    def test_offset_outside_line(self) -> None:
        reader = Reader("ab\ncd\n")
        with pytest.raises(ReaderPositionError, match="offset outside of line"):
            reader.set_position(ReaderPosition(0, 4))

    def test_bad_end_position(self) -> None:
        reader = Reader("ab\n")
        with pytest.raises(ReaderPositionError):
            reader.set_position(ReaderPosition(1, 0))

    def test_failed_restore_keeps_cursor(self) -> None:
        reader = Reader("ab\ncd\n")
        reader.advance(1)
        with pytest.raises(ReaderPositionError):
            reader.set_position(ReaderPosition(0, 99))
        assert reader.position() == ReaderPosition(0, 1)

    def test_position_at(self) -> None:
        reader = Reader("ab\ncd\n")
        assert reader.position_at(4) == ReaderPosition(1, 4)
        assert reader.position_at(99) == ReaderPosition(2, 6)
        reader.set_position(reader.position_at(4))
        assert reader.peek_char() == "d"
