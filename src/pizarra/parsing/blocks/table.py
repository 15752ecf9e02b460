"""Pipe table parsing.

Table structure:
| Header 1 | Header 2 |   <- header row
|----------|----------|   <- delimiter row (required)
| Cell 1   | Cell 2   |   <- body rows

The header row must start with ``|`` and the delimiter row must have the
same number of cells. Body rows run until a blank line, a line without
``|`` or a line that opens another block. Short body rows are padded with
empty cells and long ones truncated to the header's width.

Cells are split on unescaped pipes before inline parsing, so a pipe
inside a code span or math needs ``\\|``.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pizarra.nodes import Alignment, Block, Table, TableCell, TableRow
from pizarra.parsing.charsets import leading_columns
from pizarra.parsing.protocols import BlockState

if TYPE_CHECKING:
    from pizarra.location import SourceLocation
    from pizarra.parsing.protocols import BlockBuilder, BlockContext
    from pizarra.reader import Reader


def split_row(line: str) -> list[str] | None:
    """Split a table row into raw cell texts.

    Returns None if the line holds no pipe.
    """
    line = line.strip()
    if "|" not in line:
        return None

    if line.startswith("|"):
        line = line[1:]
    if line.endswith("|") and not line.endswith("\\|"):
        line = line[:-1]

    cells: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(line):
        if line[i] == "\\" and i + 1 < len(line) and line[i + 1] == "|":
            current.append("|")
            i += 2
        elif line[i] == "|":
            cells.append("".join(current))
            current = []
            i += 1
        else:
            current.append(line[i])
            i += 1
    cells.append("".join(current))
    return cells


def parse_delimiter_row(line: str) -> tuple[Alignment, ...] | None:
    """Column alignments from a delimiter row like ``|:---|:---:|---:|``.

    Returns None if the line is not a delimiter row.
    """
    cells = split_row(line)
    if not cells:
        return None

    alignments: list[Alignment] = []
    for cell in cells:
        part = cell.strip()
        left = part.startswith(":")
        right = part.endswith(":") and len(part) > 1
        inner = part[int(left) : len(part) - int(right)]
        if not inner or inner.strip("-"):
            return None

        if left and right:
            alignments.append("center")
        elif left:
            alignments.append("left")
        elif right:
            alignments.append("right")
        else:
            alignments.append(None)
    return tuple(alignments)


class TableSyntax:
    """Header row at the cursor followed by a delimiter row."""

    __slots__ = ()

    name = "table"
    triggers = frozenset("|")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        header = split_row(peeked[0])
        if not header:
            return None

        saved = reader.position()
        location = ctx.location(reader)
        reader.advance_line()
        delimiter = reader.peek_line()
        alignments = parse_delimiter_row(delimiter[0]) if delimiter is not None else None
        if alignments is None or len(alignments) != len(header):
            reader.set_position(saved)
            return None

        reader.advance_line()
        builder = _TableBuilder(ctx, alignments)
        builder.add_row(header, location, is_header=True)
        return builder, BlockState.CONTINUE


class _TableBuilder:
    __slots__ = ("_ctx", "_alignments", "_head", "_body")

    def __init__(self, ctx: BlockContext, alignments: tuple[Alignment, ...]) -> None:
        self._ctx = ctx
        self._alignments = alignments
        self._head: list[TableRow] = []
        self._body: list[TableRow] = []

    def add_row(
        self, cells: list[str], location: SourceLocation, *, is_header: bool
    ) -> None:
        width = len(self._alignments)
        cells = (cells + [""] * width)[:width]
        row = TableRow(
            location=location,
            cells=tuple(
                TableCell(
                    location=location,
                    children=self._ctx.parse_inline(text.strip(), location),
                    is_header=is_header,
                    align=align,
                )
                for text, align in zip(cells, self._alignments, strict=True)
            ),
            is_header=is_header,
        )
        (self._head if is_header else self._body).append(row)

    def proceed(self, reader: Reader) -> BlockState:
        peeked = reader.peek_line()
        if peeked is None:
            return BlockState.CLOSE
        line = peeked[0]
        if leading_columns(line)[0] >= 4 or self._ctx.would_interrupt(reader):
            return BlockState.CLOSE
        cells = split_row(line)
        if cells is None:
            return BlockState.CLOSE
        self.add_row(cells, self._ctx.location(reader), is_header=False)
        reader.advance_line()
        return BlockState.CONTINUE

    def close(self) -> Block:
        head = tuple(self._head)
        return Table(
            location=head[0].location,
            head=head,
            body=tuple(self._body),
            alignments=self._alignments,
        )


__all__ = ["TableSyntax", "parse_delimiter_row", "split_row"]
