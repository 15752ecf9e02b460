"""Bullet and ordered lists.

Each item's lines are collected with the item's content indentation
removed and parsed as a nested document. Items continue while lines are
indented to the content column; a marker of the same type further left
starts the next item.

Tight vs loose:
    A list is loose when a blank line separates two items, or separates
    two blocks directly inside an item. Blank lines at the very end of the
    list do not count.

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NamedTuple

from pizarra.nodes import Block, List, ListItem
from pizarra.parsing.blocks.core import is_thematic_break
from pizarra.parsing.charsets import is_blank, leading_columns, strip_columns
from pizarra.parsing.protocols import BlockState

if TYPE_CHECKING:
    from pizarra.location import SourceLocation
    from pizarra.parsing.protocols import BlockBuilder, BlockContext
    from pizarra.reader import Reader

_MARKER = re.compile(r"(?:([-*+])|(\d{1,9})([.)]))(?=[ \t\r\n]|$)")


class ListMarker(NamedTuple):
    """A parsed item marker.

    Attributes:
        kind: Bullet character, or the ``.``/``)`` delimiter of an ordered list
        ordered: True for numbered markers
        number: The item number (1 for bullets)
        content_col: Column where item content starts, relative to the line
        content: First line of item content with the marker removed

    """

    kind: str
    ordered: bool
    number: int
    content_col: int
    content: str


def parse_marker(line: str) -> ListMarker | None:
    """Parse a list item marker at the start of ``line`` (indentation included)."""
    indent, chars = leading_columns(line)
    if indent > 3:
        return None
    m = _MARKER.match(line, chars)
    if m is None:
        return None
    if m.group(1) and is_thematic_break(line):
        return None

    rest = line[m.end() :]
    marker_cols = m.end() - chars
    if is_blank(rest):
        padding = 1
        content = ""
    else:
        padding = leading_columns(rest)[0]
        if padding > 4:
            padding = 1
        content = strip_columns(rest, padding)

    if m.group(1):
        return ListMarker(m.group(1), False, 1, indent + marker_cols + padding, content)
    return ListMarker(m.group(3), True, int(m.group(2)), indent + marker_cols + padding, content)


class _Item:
    __slots__ = ("location", "lineno", "lines")

    def __init__(self, location: SourceLocation, lineno: int, first: str) -> None:
        self.location = location
        self.lineno = lineno
        self.lines: list[str] = [first] if first else []


class ListSyntax:
    __slots__ = ()

    name = "list"
    triggers = frozenset("-*+0123456789")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        line_start = reader.offset - reader.column
        marker = parse_marker(reader.source[line_start : peeked[1].stop])
        if marker is None:
            return None
        # Only non-empty lists starting at 1 may interrupt a paragraph
        if ctx.paragraph_open and (not marker.content or marker.number != 1):
            return None

        builder = _ListBuilder(marker, ctx.location(reader), reader.lineno, ctx)
        reader.advance_line()
        return builder, BlockState.CONTINUE


class _ListBuilder:
    __slots__ = (
        "_ctx",
        "_location",
        "_kind",
        "_ordered",
        "_start",
        "_content_col",
        "_items",
        "_pending",
        "_loose",
        "trailing_blank",
    )

    def __init__(
        self, marker: ListMarker, location: SourceLocation, lineno: int, ctx: BlockContext
    ) -> None:
        self._ctx = ctx
        self._location = location
        self._kind = marker.kind
        self._ordered = marker.ordered
        self._start = marker.number
        self._content_col = marker.content_col
        self._items = [_Item(location, lineno, marker.content)]
        self._pending = 0
        self._loose = False
        self.trailing_blank = False

    def proceed(self, reader: Reader) -> BlockState:
        peeked = reader.peek_line()
        if peeked is None:
            return BlockState.CLOSE
        line = peeked[0]
        item = self._items[-1]

        if is_blank(line):
            self._pending += 1
            reader.advance_line()
            return BlockState.CONTINUE

        cols = leading_columns(line)[0]
        if cols >= self._content_col:
            item.lines.extend("\n" * self._pending)
            self._pending = 0
            item.lines.append(strip_columns(line, self._content_col))
            reader.advance_line()
            return BlockState.CONTINUE

        marker = parse_marker(line)
        if marker is not None and marker.kind == self._kind:
            if self._pending:
                self._loose = True
            self._pending = 0
            self._content_col = marker.content_col
            location = self._ctx.location(reader)
            self._items.append(_Item(location, reader.lineno, marker.content))
            reader.advance_line()
            return BlockState.CONTINUE

        # Lazy continuation of the last item's paragraph
        if (
            not self._pending
            and item.lines
            and not is_blank(item.lines[-1])
            and not self._ctx.would_interrupt(reader)
        ):
            item.lines.append(line)
            reader.advance_line()
            return BlockState.CONTINUE

        self.trailing_blank = self._pending > 0
        return BlockState.CLOSE

    def close(self) -> Block:
        if self._pending:
            self.trailing_blank = True

        loose = self._loose
        items: list[ListItem] = []
        for item in self._items:
            nested = self._ctx.parse_nested("".join(item.lines), item.lineno)
            loose = loose or nested.blank_between
            items.append(ListItem(location=item.location, children=nested.blocks))

        return List(
            location=self._location,
            items=tuple(items),
            ordered=self._ordered,
            start=self._start,
            tight=not loose,
        )


__all__ = ["ListMarker", "ListSyntax", "parse_marker"]
