"""Leaf block syntaxes: thematic breaks, ATX headings and code blocks.

Each syntax inspects the line at the cursor (indentation already skipped
by the driver, except for indented code) and either declines without
touching the reader or returns a builder for the block.

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pizarra.nodes import Block, FencedCode, Heading, IndentedCode, ThematicBreak
from pizarra.parsing.charsets import is_blank, leading_columns, strip_columns
from pizarra.parsing.protocols import BlockState

if TYPE_CHECKING:
    from pizarra.parsing.protocols import BlockBuilder, BlockContext
    from pizarra.reader import Reader

_THEMATIC_BREAK = re.compile(r"^(?:(?:\*[ \t]*){3,}|(?:-[ \t]*){3,}|(?:_[ \t]*){3,})$")
_ATX_HEADING = re.compile(r"^(#{1,6})(?:[ \t]+(.*?))?(?:[ \t]+#+)?[ \t]*$")
_CLOSING_HASHES = re.compile(r"^#+$")
_FENCE_OPEN = re.compile(r"^(`{3,}|~{3,})(.*)$")
_ESCAPE = re.compile(r"\\([!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])")
_SETEXT_UNDERLINE = re.compile(r"^ {0,3}(=+|-+)[ \t]*$")


def is_thematic_break(line: str) -> bool:
    return bool(_THEMATIC_BREAK.match(line.rstrip("\r\n")))


def setext_level(line: str) -> int | None:
    """Heading level for a setext underline, or None."""
    m = _SETEXT_UNDERLINE.match(line.rstrip("\r\n"))
    if m is None:
        return None
    return 1 if m.group(1)[0] == "=" else 2


class FinishedBlock:
    """Builder for blocks that are complete after their first line."""

    __slots__ = ("_node",)

    def __init__(self, node: Block) -> None:
        self._node = node

    def proceed(self, reader: Reader) -> BlockState:
        return BlockState.CLOSE

    def close(self) -> Block:
        return self._node


class ThematicBreakSyntax:
    """``***``, ``---`` or ``___`` (three or more, spaces allowed)."""

    __slots__ = ()

    name = "thematic_break"
    triggers = frozenset("-*_")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None or not is_thematic_break(peeked[0]):
            return None
        location = ctx.location(reader)
        reader.advance_line()
        return FinishedBlock(ThematicBreak(location=location)), BlockState.CLOSE


class AtxHeadingSyntax:
    """``#`` through ``######`` headings with optional closing hashes."""

    __slots__ = ()

    name = "atx_heading"
    triggers = frozenset("#")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        m = _ATX_HEADING.match(peeked[0].rstrip("\r\n"))
        if m is None:
            return None

        content = m.group(2) or ""
        if _CLOSING_HASHES.match(content):
            content = ""
        location = ctx.location(reader)
        reader.advance_line()

        heading = Heading(
            location=location,
            level=len(m.group(1)),  # type: ignore[arg-type]
            children=ctx.parse_inline(content.strip(), location),
        )
        return FinishedBlock(heading), BlockState.CLOSE


class FencedCodeSyntax:
    """Backtick or tilde fences of three or more characters."""

    __slots__ = ()

    name = "fenced_code"
    triggers = frozenset("`~")
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        m = _FENCE_OPEN.match(peeked[0].rstrip("\r\n"))
        if m is None:
            return None
        fence, info = m.group(1), m.group(2).strip()
        if fence[0] == "`" and "`" in info:
            return None

        builder = _FencedCodeBuilder(
            location=ctx.location(reader),
            fence=fence,
            info=_ESCAPE.sub(r"\1", info) or None,
            fence_indent=reader.column,
        )
        reader.advance_line()
        return builder, BlockState.CONTINUE


class _FencedCodeBuilder:
    __slots__ = ("_location", "_fence", "_info", "_fence_indent", "_lines")

    def __init__(self, location, fence: str, info: str | None, fence_indent: int) -> None:
        self._location = location
        self._fence = fence
        self._info = info
        self._fence_indent = fence_indent
        self._lines: list[str] = []

    def _is_closing(self, line: str) -> bool:
        cols, chars = leading_columns(line)
        if cols > 3:
            return False
        body = line[chars:].rstrip(" \t\r\n")
        marker = self._fence[0]
        return len(body) >= len(self._fence) and body == marker * len(body)

    def proceed(self, reader: Reader) -> BlockState:
        peeked = reader.peek_line()
        if peeked is None:
            return BlockState.CLOSE
        line = peeked[0]
        reader.advance_line()
        if self._is_closing(line):
            return BlockState.CLOSE
        self._lines.append(strip_columns(line, self._fence_indent))
        return BlockState.CONTINUE

    def close(self) -> Block:
        code = "".join(self._lines)
        if code and not code.endswith("\n"):
            code += "\n"
        return FencedCode(
            location=self._location,
            code=code,
            info=self._info,
            marker=self._fence[0],  # type: ignore[arg-type]
            fence_indent=self._fence_indent,
        )


class IndentedCodeSyntax:
    """Four or more columns of indentation outside a paragraph.

    The driver hands these lines over without skipping indentation, so the
    trigger characters are the indentation characters themselves.
    """

    __slots__ = ()

    name = "indented_code"
    triggers = frozenset(" \t")
    can_interrupt_paragraph = False

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        peeked = reader.peek_line()
        if peeked is None:
            return None
        line = peeked[0]
        if is_blank(line) or leading_columns(line)[0] < 4:
            return None
        builder = _IndentedCodeBuilder(ctx.location(reader), strip_columns(line, 4))
        reader.advance_line()
        return builder, BlockState.CONTINUE


class _IndentedCodeBuilder:
    __slots__ = ("_location", "_lines", "_pending", "trailing_blank")

    def __init__(self, location, first_line: str) -> None:
        self._location = location
        self._lines = [first_line]
        self._pending: list[str] = []
        self.trailing_blank = False

    def proceed(self, reader: Reader) -> BlockState:
        peeked = reader.peek_line()
        if peeked is None:
            return BlockState.CLOSE
        line = peeked[0]
        if is_blank(line):
            rest = strip_columns(line, 4)
            self._pending.append(rest if rest.endswith("\n") else rest + "\n")
            reader.advance_line()
            return BlockState.CONTINUE
        if leading_columns(line)[0] >= 4:
            self._lines.extend(self._pending)
            self._pending.clear()
            self._lines.append(strip_columns(line, 4))
            reader.advance_line()
            return BlockState.CONTINUE
        return BlockState.CLOSE

    def close(self) -> Block:
        self.trailing_blank = bool(self._pending)
        code = "".join(self._lines)
        if not code.endswith("\n"):
            code += "\n"
        return IndentedCode(location=self._location, code=code)


__all__ = [
    "AtxHeadingSyntax",
    "FencedCodeSyntax",
    "FinishedBlock",
    "IndentedCodeSyntax",
    "ThematicBreakSyntax",
    "is_thematic_break",
    "setext_level",
]
