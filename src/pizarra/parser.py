"""Line-driven block parser producing a typed AST.

Walks the source one line at a time with a ``Reader``. A line either
continues the open block builder, opens a new block through the
priority-ordered block syntaxes, or becomes paragraph text. Paragraph and
heading text is parsed by an ``InlineParser`` built from the same
configuration.

Thread Safety:
- Parser produces immutable AST (frozen dataclasses)
- Configuration is read from ContextVar (thread-local)
- Safe to share AST across threads

"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

from pizarra.config import ParseConfig, get_parse_config
from pizarra.location import SourceLocation
from pizarra.nodes import Block, Heading, Paragraph
from pizarra.parsing.blocks import DEFAULT_BLOCK_SYNTAXES, setext_level
from pizarra.parsing.charsets import is_blank, leading_columns
from pizarra.parsing.inline import DEFAULT_INLINE_SYNTAXES, InlineParser
from pizarra.parsing.protocols import BlockContext, BlockState, NestedBlocks
from pizarra.reader import Reader

if TYPE_CHECKING:
    from pizarra.parsing.protocols import BlockBuilder, BlockSyntax


@lru_cache(maxsize=32)
def _prepare(config: ParseConfig) -> tuple[dict[str, tuple[BlockSyntax, ...]], InlineParser]:
    """Block dispatch table and inline parser for a configuration.

    Cached so nested parsers (block quotes, list items) reuse them.
    """
    dispatch: dict[str, list[BlockSyntax]] = {}
    entries = sorted((*DEFAULT_BLOCK_SYNTAXES, *config.block_syntaxes), key=lambda p: p.priority)
    for entry in entries:
        for char in entry.value.triggers:
            dispatch.setdefault(char, []).append(entry.value)
    inline = InlineParser(
        (*DEFAULT_INLINE_SYNTAXES, *config.inline_syntaxes),
        text_transformer=config.text_transformer,
    )
    return {char: tuple(syntaxes) for char, syntaxes in dispatch.items()}, inline


class Parser:
    """Block parser for Markdown with pluggable syntaxes.

    Usage:
        >>> parser = Parser("# Hello\\n\\nWorld")
        >>> blocks = parser.parse()
        >>> blocks[0].level
        1

    Thread Safety:
        Parser instances are single-use and not thread-safe. Create one per
        parse operation. Configuration is read from ContextVar (thread-local),
        so nested parsers inherit it without copying.

    """

    __slots__ = (
        "_source",
        "_source_file",
        "_first_lineno",
        "_config",
        "_dispatch",
        "_inline",
        # Per-parse state
        "_blocks",
        "_paragraph",
        "_paragraph_location",
        "_builder",
        "_seen_blank",
        "_blank_between",
        "_ctx",
        "_paragraph_ctx",
    )

    def __init__(
        self,
        source: str,
        source_file: str | None = None,
        *,
        first_lineno: int = 1,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: Markdown source text
            source_file: Optional source file path for locations and errors
            first_lineno: Line number of the first source line (nested parsers)

        """
        self._source = source.replace("\r\n", "\n")
        self._source_file = source_file
        self._first_lineno = first_lineno
        self._config = get_parse_config()
        self._dispatch, self._inline = _prepare(self._config)

        self._blocks: list[Block] = []
        self._paragraph: list[str] = []
        self._paragraph_location: SourceLocation | None = None
        self._builder: BlockBuilder | None = None
        self._seen_blank = False
        self._blank_between = False
        self._ctx = self._make_context(paragraph_open=False)
        self._paragraph_ctx = self._make_context(paragraph_open=True)

    def _make_context(self, *, paragraph_open: bool) -> BlockContext:
        return BlockContext(
            config=self._config,
            source_file=self._source_file,
            paragraph_open=paragraph_open,
            parse_inline=self._inline.parse,
            parse_nested=self._parse_nested,
            would_interrupt=self._would_interrupt,
        )

    def parse(self) -> tuple[Block, ...]:
        """Parse source into AST blocks."""
        return self.parse_nested().blocks

    def parse_nested(self) -> NestedBlocks:
        """Parse source, also reporting whether blank lines separated blocks.

        Container syntaxes use the flag to tell tight lists from loose ones.
        """
        reader = Reader(self._source, first_lineno=self._first_lineno)

        while True:
            peeked = reader.peek_line()
            if peeked is None:
                break
            if self._builder is not None:
                self._step_builder(reader)
            else:
                self._step_line(reader, peeked[0])

        if self._builder is not None:
            self._finish_builder(self._builder)
        self._flush_paragraph()
        return NestedBlocks(tuple(self._blocks), self._blank_between)

    # =========================================================================
    # Line handling
    # =========================================================================

    def _step_line(self, reader: Reader, line: str) -> None:
        if is_blank(line):
            self._flush_paragraph()
            self._seen_blank = True
            reader.advance_line()
            return

        cols, chars = leading_columns(line)

        if self._paragraph:
            if cols >= 4:
                self._paragraph.append(line[chars:])
                reader.advance_line()
                return
            level = setext_level(line)
            if level is not None:
                self._setext_heading(level)
                reader.advance_line()
                return

        if cols < 4:
            reader.advance(chars)
        if self._try_open(reader):
            return

        self._append_paragraph(reader, line[chars:])
        reader.advance_line()

    def _try_open(self, reader: Reader) -> bool:
        paragraph_open = bool(self._paragraph)
        ctx = self._paragraph_ctx if paragraph_open else self._ctx
        line_before = reader.line_index
        offset_before = reader.offset

        for syntax in self._dispatch.get(reader.peek_char(), ()):
            if paragraph_open and not syntax.can_interrupt_paragraph:
                continue
            opened = syntax.try_open(reader, ctx)
            if opened is None:
                continue

            builder, state = opened
            self._flush_paragraph()
            self._start_block()
            if state is BlockState.CLOSE:
                self._finish_builder(builder)
                if reader.offset == offset_before:
                    reader.advance_line()
                elif reader.line_index == line_before:
                    self._skip_blank_rest(reader)
            else:
                self._builder = builder
                if reader.line_index == line_before:
                    reader.advance_line()
            return True
        return False

    def _step_builder(self, reader: Reader) -> None:
        builder = self._builder
        assert builder is not None
        line_before = reader.line_index
        offset_before = reader.offset

        state = builder.proceed(reader)
        if state is BlockState.CONTINUE:
            if reader.offset == offset_before:
                reader.advance_line()
            return

        self._builder = None
        self._finish_builder(builder)
        # An unconsumed line is handled again; a partially consumed one is
        # handled again only when text follows the block on that line.
        if reader.offset != offset_before and reader.line_index == line_before:
            self._skip_blank_rest(reader)

    @staticmethod
    def _skip_blank_rest(reader: Reader) -> None:
        peeked = reader.peek_line()
        if peeked is not None and is_blank(peeked[0]):
            reader.advance_line()

    def _would_interrupt(self, reader: Reader) -> bool:
        """Whether the line at the cursor opens a paragraph-interrupting block.

        The reader is restored before returning.
        """
        peeked = reader.peek_line()
        if peeked is None:
            return False
        line = peeked[0]
        if is_blank(line):
            return True
        cols, chars = leading_columns(line)
        if cols >= 4:
            return False

        saved = reader.position()
        try:
            reader.advance(chars)
            for syntax in self._dispatch.get(reader.peek_char(), ()):
                if not syntax.can_interrupt_paragraph:
                    continue
                if syntax.try_open(reader, self._paragraph_ctx) is not None:
                    return True
            return False
        finally:
            reader.set_position(saved)

    # =========================================================================
    # Block assembly
    # =========================================================================

    def _start_block(self) -> None:
        if self._seen_blank and self._blocks:
            self._blank_between = True
        self._seen_blank = False

    def _finish_builder(self, builder: BlockBuilder) -> None:
        self._builder = None
        self._blocks.append(builder.close())
        if getattr(builder, "trailing_blank", False):
            self._seen_blank = True

    def _append_paragraph(self, reader: Reader, text: str) -> None:
        if not self._paragraph:
            self._start_block()
            self._paragraph_location = self._ctx.location(reader)
        self._paragraph.append(text)

    def _paragraph_text(self) -> tuple[str, SourceLocation]:
        text = "".join(self._paragraph).rstrip()
        location = self._paragraph_location or SourceLocation.unknown()
        self._paragraph = []
        self._paragraph_location = None
        return text, location

    def _flush_paragraph(self) -> None:
        if not self._paragraph:
            return
        text, location = self._paragraph_text()
        if text:
            self._blocks.append(
                Paragraph(location=location, children=self._inline.parse(text, location))
            )

    def _setext_heading(self, level: int) -> None:
        text, location = self._paragraph_text()
        self._blocks.append(
            Heading(
                location=location,
                level=level,  # type: ignore[arg-type]
                children=self._inline.parse(text, location),
            )
        )

    def _parse_nested(self, source: str, first_lineno: int) -> NestedBlocks:
        """Parse a container's content with a sub-parser.

        Configuration is inherited via ContextVar, no copying needed.
        """
        if not source.strip():
            return NestedBlocks((), False)
        sub_parser = Parser(source, self._source_file, first_lineno=first_lineno)
        return sub_parser.parse_nested()


__all__ = ["Parser"]
