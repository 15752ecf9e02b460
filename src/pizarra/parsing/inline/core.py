"""Inline tokenizer and AST builder.

Parsing happens in three phases:

1. Tokenize: walk the text with a ``Reader``. At a trigger character the
   registered syntaxes are tried in priority order; the first token wins.
   A trigger nobody claims becomes literal text.
2. Match: ``process_emphasis`` pairs delimiter runs in a ``MatchRegistry``.
3. Build: turn tokens plus matches into a tuple of inline nodes.

Thread Safety:
An InlineParser is immutable after construction and can be shared. Each
``parse()`` call owns its reader, token list and registry.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

from pizarra.errors import ParseError
from pizarra.nodes import (
    CodeSpan,
    Emphasis,
    Inline,
    LineBreak,
    SoftBreak,
    Strikethrough,
    Strong,
    Text,
)
from pizarra.parsing.inline.emphasis import process_emphasis
from pizarra.parsing.inline.match_registry import MatchRegistry
from pizarra.parsing.inline.tokens import (
    CodeSpanToken,
    DelimiterToken,
    HardBreakToken,
    InlineToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)
from pizarra.parsing.protocols import InlineContext
from pizarra.reader import Reader

if TYPE_CHECKING:
    from pizarra.location import SourceLocation
    from pizarra.parsing.protocols import InlineSyntax, Prioritized


class InlineParser:
    """Parses inline text with a fixed, priority-ordered set of syntaxes.

    Args:
        syntaxes: Prioritized inline syntaxes; lower priority is tried first.
            Ties keep their given order.
        text_transformer: Optional callback applied to every Text node.

    """

    __slots__ = ("_dispatch", "_specials", "_text_transformer")

    def __init__(
        self,
        syntaxes: Iterable[Prioritized[InlineSyntax]],
        *,
        text_transformer: Callable[[str], str] | None = None,
    ) -> None:
        dispatch: dict[str, list[InlineSyntax]] = {}
        for entry in sorted(syntaxes, key=lambda p: p.priority):
            for char in entry.value.triggers:
                dispatch.setdefault(char, []).append(entry.value)
        self._dispatch: dict[str, tuple[InlineSyntax, ...]] = {
            char: tuple(candidates) for char, candidates in dispatch.items()
        }
        self._specials = frozenset(self._dispatch) | {"\n"}
        self._text_transformer = text_transformer

    def candidates(self, char: str) -> tuple[InlineSyntax, ...]:
        """Syntaxes tried at ``char``, in order."""
        return self._dispatch.get(char, ())

    def parse(self, text: str, location: SourceLocation) -> tuple[Inline, ...]:
        if not text:
            return ()
        tokens = self.tokenize(text, location)
        registry = process_emphasis(tokens)
        return self._build(tokens, registry, location, 0, len(tokens))

    # =========================================================================
    # Phase 1: tokenize
    # =========================================================================

    def tokenize(self, text: str, location: SourceLocation) -> list[InlineToken]:
        reader = Reader(text, first_lineno=location.lineno)
        ctx = InlineContext(location=location, parse_inline=lambda t: self.parse(t, location))
        tokens: list[InlineToken] = []
        specials = self._specials
        n = len(text)

        while not reader.at_end:
            char = reader.peek_char()

            if char == "\n":
                self._line_break(reader, tokens)
                continue

            candidates = self._dispatch.get(char)
            if candidates is not None:
                for syntax in candidates:
                    before = reader.offset
                    token = syntax.try_match(reader, ctx)
                    if token is None:
                        continue
                    if reader.offset == before:
                        raise ParseError(
                            f"{type(syntax).__name__} produced a token without consuming input",
                            lineno=reader.lineno,
                            source_file=location.source_file,
                        )
                    _append(tokens, token)
                    break
                else:
                    _append(tokens, TextToken(char))
                    reader.advance(1)
                continue

            start = reader.offset
            end = start + 1
            while end < n and text[end] not in specials:
                end += 1
            _append(tokens, TextToken(text[start:end]))
            reader.advance(end - start)

        return tokens

    def _line_break(self, reader: Reader, tokens: list[InlineToken]) -> None:
        """Soft or hard break at a newline; strips spaces on both sides."""
        source = reader.source
        pos = reader.offset - 1
        spaces = 0
        while pos >= 0 and source[pos] == " ":
            spaces += 1
            pos -= 1

        if spaces and tokens and isinstance(tokens[-1], TextToken):
            content = tokens[-1].content.rstrip(" ")
            if content:
                tokens[-1] = TextToken(content)
            else:
                tokens.pop()

        tokens.append(HardBreakToken() if spaces >= 2 else SoftBreakToken())
        reader.advance(1)
        while reader.peek_char() in (" ", "\t"):
            reader.advance(1)

    # =========================================================================
    # Phase 3: build
    # =========================================================================

    def _text(self, content: str, location: SourceLocation) -> Text:
        if self._text_transformer is not None:
            content = self._text_transformer(content)
        return Text(location=location, content=content)

    def _wrap(
        self, char: str, count: int, children: tuple[Inline, ...], location: SourceLocation
    ) -> Inline:
        if char == "~":
            return Strikethrough(location=location, children=children)
        if count == 2:
            return Strong(location=location, children=children)
        return Emphasis(location=location, children=children)

    def _build(
        self,
        tokens: list[InlineToken],
        registry: MatchRegistry,
        location: SourceLocation,
        start: int,
        end: int,
    ) -> tuple[Inline, ...]:
        """Build nodes for ``tokens[start:end]`` without slicing."""
        result: list[Inline] = []
        idx = start

        while idx < end:
            token = tokens[idx]
            match token:
                case TextToken(content=content):
                    result.append(self._text(content, location))
                    idx += 1

                case CodeSpanToken(code=code):
                    result.append(CodeSpan(location=location, code=code))
                    idx += 1

                case NodeToken(node=node):
                    result.append(node)  # type: ignore[arg-type]
                    idx += 1

                case HardBreakToken():
                    result.append(LineBreak(location=location))
                    idx += 1

                case SoftBreakToken():
                    result.append(SoftBreak(location=location))
                    idx += 1

                case DelimiterToken(char=char, count=count):
                    matches = registry.matches_for_opener(idx)
                    if not matches or matches[0].closer_idx <= idx:
                        remaining = registry.remaining_count(idx, count)
                        if remaining > 0:
                            result.append(self._text(char * remaining, location))
                        idx += 1
                        continue

                    ordered = sorted(matches, key=lambda m: m.closer_idx)
                    leftover = count - sum(m.match_count for m in matches)
                    if leftover > 0:
                        result.append(self._text(char * leftover, location))

                    # Innermost closer first; each match wraps everything so far
                    wrapped: tuple[Inline, ...] = ()
                    boundary = idx + 1
                    for m in ordered:
                        segment = (
                            self._build(tokens, registry, location, boundary, m.closer_idx)
                            if boundary < m.closer_idx
                            else ()
                        )
                        wrapped = (self._wrap(char, m.match_count, wrapped + segment, location),)
                        boundary = m.closer_idx + 1
                    result.extend(wrapped)

                    last_closer = ordered[-1].closer_idx
                    closer = tokens[last_closer]
                    if isinstance(closer, DelimiterToken):
                        if len({m.closer_idx for m in ordered}) == 1:
                            tail = registry.remaining_count(last_closer, closer.count)
                        else:
                            tail = closer.count - ordered[-1].match_count
                        if tail > 0:
                            result.append(self._text(closer.char * tail, location))
                    idx = last_closer + 1

                case _:
                    idx += 1

        return tuple(result)


def _append(tokens: list[InlineToken], token: InlineToken) -> None:
    """Append, merging adjacent text tokens."""
    if isinstance(token, TextToken) and tokens and isinstance(tokens[-1], TextToken):
        tokens[-1] = TextToken(tokens[-1].content + token.content)
    else:
        tokens.append(token)


__all__ = ["InlineParser"]
