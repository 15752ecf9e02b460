"""Extension points of the parsing pipeline.

The block driver and the inline tokenizer both consult explicit,
priority-ordered lists of syntax objects:

- ``BlockSyntax.try_open(reader, ctx)`` decides whether a line opens a
  block and returns a ``BlockBuilder`` that consumes the following lines.
- ``InlineSyntax.try_match(reader, ctx)`` consumes one inline construct at
  a trigger character and returns a token.

A syntax that declines must leave the reader exactly where it found it.
Lower ``priority`` values are tried first.

Thread Safety:
    Syntax objects are shared by every parse and hold no per-parse state.
    Builders are created per block and owned by one parse.

"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

from pizarra.location import SourceLocation

if TYPE_CHECKING:
    from pizarra.config import ParseConfig
    from pizarra.nodes import Block, Inline
    from pizarra.parsing.inline.tokens import InlineToken
    from pizarra.reader import Reader


class Prioritized[T](NamedTuple):
    """A syntax paired with its ordering key (lower runs first)."""

    value: T
    priority: int


class BlockState(Enum):
    """What the driver should do with a builder after a call."""

    CONTINUE = auto()
    CLOSE = auto()


@runtime_checkable
class BlockBuilder(Protocol):
    """Accumulates the lines of one open block."""

    def proceed(self, reader: Reader) -> BlockState:
        """Consume the current line, or return CLOSE without consuming it."""
        ...

    def close(self) -> Block:
        """Produce the finished node. Called exactly once."""
        ...


@runtime_checkable
class BlockSyntax(Protocol):
    """Recognizes the opening line of a block construct."""

    @property
    def name(self) -> str: ...

    @property
    def triggers(self) -> frozenset[str]:
        """First characters (after indentation) that may open this block."""
        ...

    @property
    def can_interrupt_paragraph(self) -> bool: ...

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        """Open a block at the cursor, or return None with the reader untouched."""
        ...


@runtime_checkable
class InlineSyntax(Protocol):
    """Recognizes one inline construct at a trigger character."""

    @property
    def triggers(self) -> frozenset[str]: ...

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        """Consume one construct, or return None with the reader untouched."""
        ...


@dataclass(frozen=True, slots=True)
class BlockContext:
    """What a block syntax may ask of the driver.

    Attributes:
        config: Active parse configuration
        source_file: Path used in locations (optional)
        paragraph_open: True when the line would otherwise continue a paragraph
        parse_inline: Parse inline text into nodes
        parse_nested: Parse a container's collected lines into blocks
        would_interrupt: Whether the line at the cursor opens an
            interrupting block (checks without consuming)

    """

    config: ParseConfig
    source_file: str | None
    paragraph_open: bool
    parse_inline: Callable[[str, SourceLocation], tuple[Inline, ...]]
    parse_nested: Callable[[str, int], NestedBlocks]
    would_interrupt: Callable[[Reader], bool]

    def location(self, reader: Reader, end_lineno: int | None = None) -> SourceLocation:
        return SourceLocation(
            lineno=reader.lineno,
            col_offset=reader.column + 1,
            offset=reader.offset,
            end_lineno=end_lineno,
            source_file=self.source_file,
        )


class NestedBlocks(NamedTuple):
    """Result of parsing a container's content."""

    blocks: tuple[Block, ...]
    blank_between: bool  # a blank line separated two top-level blocks


@dataclass(frozen=True, slots=True)
class InlineContext:
    """What an inline syntax may ask of the tokenizer.

    Attributes:
        location: Location of the enclosing block
        parse_inline: Parse nested inline text (link labels, image alt)

    """

    location: SourceLocation
    parse_inline: Callable[[str], tuple[Inline, ...]]


__all__ = [
    "BlockBuilder",
    "BlockContext",
    "BlockState",
    "BlockSyntax",
    "InlineContext",
    "InlineSyntax",
    "NestedBlocks",
    "Prioritized",
]
