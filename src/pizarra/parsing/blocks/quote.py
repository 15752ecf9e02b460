"""Block quotes.

Lines starting with ``>`` (up to three spaces of indentation) are
collected with the marker and one optional space removed, then parsed
as a nested document. A non-blank line without a marker continues the
quote lazily unless it would open a block of its own.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pizarra.nodes import Block, BlockQuote
from pizarra.parsing.charsets import is_blank, leading_columns, strip_columns
from pizarra.parsing.protocols import BlockState

if TYPE_CHECKING:
    from pizarra.location import SourceLocation
    from pizarra.parsing.protocols import BlockBuilder, BlockContext
    from pizarra.reader import Reader


def _strip_marker(line: str) -> str | None:
    """Content after ``>`` or None when the line has no quote marker."""
    cols, chars = leading_columns(line)
    if cols > 3 or line[chars : chars + 1] != ">":
        return None
    return strip_columns(line[chars + 1 :], 1)


class BlockQuoteSyntax:
    __slots__ = ()

    name = "block_quote"
    triggers = frozenset(">")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        content = _strip_marker(peeked[0])
        if content is None:
            return None
        builder = _BlockQuoteBuilder(ctx.location(reader), reader.lineno, content, ctx)
        reader.advance_line()
        return builder, BlockState.CONTINUE


class _BlockQuoteBuilder:
    __slots__ = ("_location", "_first_lineno", "_lines", "_ctx")

    def __init__(
        self, location: SourceLocation, first_lineno: int, first: str, ctx: BlockContext
    ) -> None:
        self._location = location
        self._first_lineno = first_lineno
        self._lines = [first]
        self._ctx = ctx

    def proceed(self, reader: Reader) -> BlockState:
        peeked = reader.peek_line()
        if peeked is None:
            return BlockState.CLOSE
        line = peeked[0]

        content = _strip_marker(line)
        if content is not None:
            self._lines.append(content)
            reader.advance_line()
            return BlockState.CONTINUE

        if is_blank(line):
            return BlockState.CLOSE

        # Lazy continuation
        if not is_blank(self._lines[-1]) and not self._ctx.would_interrupt(reader):
            self._lines.append(line)
            reader.advance_line()
            return BlockState.CONTINUE
        return BlockState.CLOSE

    def close(self) -> Block:
        nested = self._ctx.parse_nested("".join(self._lines), self._first_lineno)
        return BlockQuote(location=self._location, children=nested.blocks)


__all__ = ["BlockQuoteSyntax"]
