"""Raw HTML blocks.

The block keeps its lines verbatim, including the indentation of the
opening line. Kinds 1-5 run until the line holding their end marker (that
line included); kinds 6 and 7 run until a blank line.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pizarra.nodes import Block, HtmlBlock
from pizarra.parsing.blocks.core import FinishedBlock
from pizarra.parsing.charsets import is_blank
from pizarra.parsing.html import HtmlBlockStart, classify_html_block, ends_html_block
from pizarra.parsing.protocols import BlockState

if TYPE_CHECKING:
    from pizarra.location import SourceLocation
    from pizarra.parsing.protocols import BlockBuilder, BlockContext
    from pizarra.reader import Reader


class HtmlBlockSyntax:
    """CommonMark HTML blocks, kinds 1 through 7."""

    __slots__ = ()

    name = "html_block"
    triggers = frozenset("<")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        line = peeked[0]
        start = classify_html_block(line)
        if start is None or (start.kind == 7 and ctx.paragraph_open):
            return None

        location = ctx.location(reader)
        first = reader.source[reader.offset - reader.column : reader.offset] + line
        if not first.endswith("\n"):
            first += "\n"
        reader.advance_line()

        if start.end is not None and ends_html_block(start, line, from_offset=1):
            return FinishedBlock(HtmlBlock(location=location, html=first)), BlockState.CLOSE
        return _HtmlBlockBuilder(location, start, first), BlockState.CONTINUE


class _HtmlBlockBuilder:
    __slots__ = ("_location", "_start", "_lines")

    def __init__(self, location: SourceLocation, start: HtmlBlockStart, first_line: str) -> None:
        self._location = location
        self._start = start
        self._lines = [first_line]

    def proceed(self, reader: Reader) -> BlockState:
        peeked = reader.peek_line()
        if peeked is None:
            return BlockState.CLOSE
        line = peeked[0]

        if self._start.end is None:
            if is_blank(line):
                return BlockState.CLOSE
            self._lines.append(line)
            reader.advance_line()
            return BlockState.CONTINUE

        self._lines.append(line)
        reader.advance_line()
        if ends_html_block(self._start, line):
            return BlockState.CLOSE
        return BlockState.CONTINUE

    def close(self) -> Block:
        html = "".join(self._lines)
        if not html.endswith("\n"):
            html += "\n"
        return HtmlBlock(location=self._location, html=html)


__all__ = ["HtmlBlockSyntax"]
