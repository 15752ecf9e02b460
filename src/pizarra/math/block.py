"""Block math scanner.

A confirm-before-commit state machine. ``open()`` only commits after a
lookahead has seen the closer further down the document; it runs on a
saved position that is always restored, so a rejected opener leaves the
reader exactly where it was.

Lifecycle::

    CLOSED --open()--> OPEN --proceed()*--> COMPLETE --close()--> CLOSED

The flavor and the captured line segments live on the scanner instance.
Create one scanner per parse; it is reusable after ``close()``.

"""

from __future__ import annotations

from enum import Enum, auto

from pizarra.math.delimiters import MathFlavor, classify
from pizarra.math.unit import MathUnit
from pizarra.reader import Reader, Segment
from pizarra.utils.logger import get_logger

logger = get_logger(__name__)

_MAX_INDENT = 3


class ScannerState(Enum):
    CLOSED = auto()
    OPEN = auto()
    COMPLETE = auto()


class BlockMathScanner:
    """Accumulates the lines of one block math region.

    Args:
        lookahead_limit: Maximum number of lines the opening lookahead may
            inspect after the opener line. ``None`` walks to the end of input.

    Example:
        >>> r = Reader("\\\\[\\nx + y\\n\\\\]\\n")
        >>> s = BlockMathScanner()
        >>> s.open(r)
        True
        >>> s.proceed(r)
        <ScannerState.OPEN: 2>
        >>> s.proceed(r)
        <ScannerState.COMPLETE: 3>
        >>> s.close().source
        '\\nx + y\\n'

    """

    __slots__ = ("_lookahead_limit", "_state", "_flavor", "_closer", "_segments", "_source")

    def __init__(self, lookahead_limit: int | None = None) -> None:
        self._lookahead_limit = lookahead_limit
        self._state = ScannerState.CLOSED
        self._flavor: MathFlavor | None = None
        self._closer = ""
        self._segments: list[Segment] = []
        self._source = ""

    @property
    def state(self) -> ScannerState:
        return self._state

    @property
    def flavor(self) -> MathFlavor | None:
        """Flavor fixed at open time, None while closed."""
        return self._flavor

    def open(self, reader: Reader) -> bool:
        """Try to open a block at the cursor.

        Returns False (and leaves the reader untouched) when the line is not
        an opener, when the closer is on the same line, or when the lookahead
        does not find a line holding the closer exactly once.
        """
        if self._state is not ScannerState.CLOSED:
            raise RuntimeError(f"open() called while scanner is {self._state.name}")

        peeked = reader.peek_line()
        if peeked is None:
            return False
        line, _ = peeked

        indent = len(line) - len(line.lstrip(" "))
        if indent > _MAX_INDENT:
            return False
        delim = classify(line[indent:])
        if delim is None:
            return False

        body_start = indent + len(delim.begin)
        if delim.end in line[body_start:]:
            return False

        if not self._closer_ahead(reader, delim.end):
            logger.debug(
                "Block math opener %r at line %d has no matching %r",
                delim.begin,
                reader.lineno,
                delim.end,
            )
            return False

        reader.advance(body_start)
        rest = reader.peek_line()
        self._segments = [rest[1]] if rest is not None else []
        self._source = reader.source
        self._flavor = delim.flavor
        self._closer = delim.end
        self._state = ScannerState.OPEN
        reader.advance_line()
        return True

    def _closer_ahead(self, reader: Reader, closer: str) -> bool:
        saved = reader.position()
        try:
            walked = 0
            while True:
                reader.advance_line()
                peeked = reader.peek_line()
                if peeked is None:
                    return False
                count = peeked[0].count(closer)
                if count == 1:
                    return True
                if count > 1:
                    return False
                walked += 1
                if self._lookahead_limit is not None and walked >= self._lookahead_limit:
                    return False
        finally:
            reader.set_position(saved)

    def proceed(self, reader: Reader) -> ScannerState:
        """Consume the current line into the accumulator.

        Moves to COMPLETE once the closer is consumed, otherwise stays OPEN.
        """
        if self._state is not ScannerState.OPEN:
            raise RuntimeError(f"proceed() called while scanner is {self._state.name}")

        peeked = reader.peek_line()
        if peeked is None:
            return self._state
        line, seg = peeked

        idx = line.find(self._closer)
        if idx != -1:
            self._segments.append(seg.with_stop(seg.start + idx))
            reader.advance(idx + len(self._closer))
            self._state = ScannerState.COMPLETE
            return self._state

        self._segments.append(seg)
        reader.advance_line()
        return self._state

    def close(self) -> MathUnit:
        """Join the captured segments into a unit and reset."""
        if self._state is ScannerState.CLOSED or self._flavor is None:
            raise RuntimeError("close() called on a scanner that is not open")

        source = "".join(seg.value(self._source) for seg in self._segments)
        unit = MathUnit(source, self._flavor)

        self._segments = []
        self._source = ""
        self._flavor = None
        self._closer = ""
        self._state = ScannerState.CLOSED
        return unit


__all__ = ["BlockMathScanner", "ScannerState"]
