"""Line-oriented source reader with save/restore positions.

Every block and inline syntax consumes input through a Reader. Scanners
that look ahead save ``position()`` first and hand it back to
``set_position()`` when the lookahead does not produce a match, so an
abandoned attempt leaves no trace.

Offsets are absolute indices into the source string. A line segment
includes its trailing newline when the source has one.

Thread Safety:
    A Reader is mutable and owned by a single parse. Segments and
    positions are frozen and may be shared freely.

"""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass

from pizarra.errors import ReaderPositionError


@dataclass(frozen=True, slots=True)
class Segment:
    """Half-open ``[start, stop)`` range of the source."""

    start: int
    stop: int

    def __len__(self) -> int:
        return self.stop - self.start

    def value(self, source: str) -> str:
        return source[self.start : self.stop]

    def with_start(self, start: int) -> Segment:
        return Segment(start, self.stop)

    def with_stop(self, stop: int) -> Segment:
        return Segment(self.start, stop)


@dataclass(frozen=True, slots=True, order=True)
class ReaderPosition:
    """Saved cursor: 0-based line index and absolute offset.

    Only positions returned by ``Reader.position()`` or
    ``Reader.position_at()`` are guaranteed to restore.
    """

    line: int
    offset: int


class Reader:
    """Cursor over a source string, one line at a time.

    Example:
        >>> r = Reader("a $x$\\nb\\n")
        >>> r.peek_line()
        ('a $x$\\n', Segment(start=0, stop=6))
        >>> r.advance(2)
        >>> r.peek_line()[0]
        '$x$\\n'
        >>> r.advance_line()
        >>> r.lineno
        2

    """

    __slots__ = ("_source", "_starts", "_line", "_offset", "_first_lineno")

    def __init__(self, source: str, *, first_lineno: int = 1) -> None:
        self._source = source
        self._first_lineno = first_lineno
        starts = [0]
        pos = source.find("\n")
        while pos != -1 and pos + 1 < len(source):
            starts.append(pos + 1)
            pos = source.find("\n", pos + 1)
        if not source:
            starts = []
        self._starts = starts
        self._line = 0
        self._offset = 0

    @property
    def source(self) -> str:
        return self._source

    @property
    def offset(self) -> int:
        """Absolute offset of the cursor."""
        return self._offset

    @property
    def line_index(self) -> int:
        """0-based index of the current line (equals line_count at EOF)."""
        return self._line

    @property
    def line_count(self) -> int:
        return len(self._starts)

    @property
    def lineno(self) -> int:
        """1-based line number of the cursor, shifted by ``first_lineno``."""
        return self._first_lineno + self._line

    @property
    def column(self) -> int:
        """0-based column of the cursor within its line."""
        if self._line >= len(self._starts):
            return 0
        return self._offset - self._starts[self._line]

    @property
    def at_end(self) -> bool:
        return self._line >= len(self._starts)

    def _line_end(self, line: int) -> int:
        if line + 1 < len(self._starts):
            return self._starts[line + 1]
        return len(self._source)

    def peek_line(self) -> tuple[str, Segment] | None:
        """Return the rest of the current line without consuming it.

        Returns None at end of input.
        """
        if self._line >= len(self._starts):
            return None
        seg = Segment(self._offset, self._line_end(self._line))
        return self._source[seg.start : seg.stop], seg

    def peek_char(self) -> str:
        """Character under the cursor, or empty string at end of input."""
        if self._offset >= len(self._source):
            return ""
        return self._source[self._offset]

    def advance(self, n: int) -> None:
        """Move the cursor ``n`` characters forward, crossing lines as needed."""
        if n <= 0:
            return
        self._offset = min(self._offset + n, len(self._source))
        self._sync_line()

    def advance_line(self) -> None:
        """Skip the rest of the current line. No-op at end of input."""
        if self._line >= len(self._starts):
            return
        self._offset = self._line_end(self._line)
        self._line += 1

    def position(self) -> ReaderPosition:
        return ReaderPosition(self._line, self._offset)

    def set_position(self, pos: ReaderPosition) -> None:
        """Restore a saved position.

        Raises:
            ReaderPositionError: If ``pos`` does not denote a valid cursor in
                this source.
        """
        line, offset = pos.line, pos.offset
        if line == len(self._starts):
            if offset != len(self._source):
                raise ReaderPositionError(line, offset, "end-of-input position must sit at the end")
        elif not 0 <= line < len(self._starts):
            raise ReaderPositionError(line, offset, "line index out of range")
        elif not self._starts[line] <= offset < self._line_end(line):
            raise ReaderPositionError(line, offset, "offset outside of line")
        self._line = line
        self._offset = offset

    def position_at(self, offset: int) -> ReaderPosition:
        """Position for an absolute offset (clamped to the source)."""
        offset = max(0, min(offset, len(self._source)))
        if offset >= len(self._source):
            return ReaderPosition(len(self._starts), len(self._source))
        return ReaderPosition(bisect_right(self._starts, offset) - 1, offset)

    def value(self, segment: Segment) -> str:
        return self._source[segment.start : segment.stop]

    def _sync_line(self) -> None:
        if self._offset >= len(self._source):
            self._line = len(self._starts)
        else:
            self._line = bisect_right(self._starts, self._offset) - 1

    def __repr__(self) -> str:
        return f"Reader(line={self._line}, offset={self._offset}, lines={len(self._starts)})"


__all__ = ["Reader", "ReaderPosition", "Segment"]
