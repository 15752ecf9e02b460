"""Inline math scanner.

Recognizes ``$...$``, ``$$...$$``, ``\\(...\\)`` and ``\\[...\\]`` at the
cursor. The closer is searched on the current line first; failing that,
exactly one following line is inspected. Nothing further is scanned.

When the closer sits on the following line, the unit's source is that
line's text up to the closer. Text between the opener and the end of the
first line is not part of the unit.

Thread Safety:
    The scanner holds no state. One instance may serve any number of
    concurrent parses.

"""

from __future__ import annotations

from pizarra.math.delimiters import classify
from pizarra.math.unit import MathUnit
from pizarra.reader import Reader


class InlineMathScanner:
    """Scan one inline math unit at the reader's cursor."""

    __slots__ = ()

    def scan(self, reader: Reader) -> MathUnit | None:
        """Consume one math unit, or return None leaving the cursor untouched.

        On success the cursor sits immediately after the closer.
        """
        peeked = reader.peek_line()
        if peeked is None:
            return None
        line, _ = peeked

        delim = classify(line)
        if delim is None:
            return None

        begin_len = len(delim.begin)
        idx = line.find(delim.end, begin_len)
        if idx != -1:
            reader.advance(idx + len(delim.end))
            return MathUnit(line[begin_len:idx], delim.flavor)

        saved = reader.position()
        reader.advance_line()
        peeked = reader.peek_line()
        if peeked is None:
            reader.set_position(saved)
            return None

        next_line, _ = peeked
        idx = next_line.find(delim.end)
        if idx == -1:
            reader.set_position(saved)
            return None

        reader.advance(idx + len(delim.end))
        return MathUnit(next_line[:idx], delim.flavor)


__all__ = ["InlineMathScanner"]
