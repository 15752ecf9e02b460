"""Typed inline tokens.

The tokenizer turns a paragraph's text into a flat list of these
NamedTuples. Delimiter runs stay unresolved until the emphasis pass; match
state is tracked in a ``MatchRegistry`` so the tokens themselves never
change.

Usage:
    match token:
        case DelimiterToken(char="*", count=count):
            print(f"asterisk run of {count}")

Thread Safety:
All tokens are immutable and safe to share across threads.

"""

from __future__ import annotations

from typing import Literal, NamedTuple

# PEP 695 type alias for delimiter characters
type DelimiterChar = Literal["*", "_", "~"]


class DelimiterToken(NamedTuple):
    """A run of emphasis or strikethrough delimiter characters.

    Attributes:
        char: The delimiter character ("*", "_", or "~").
        count: Length of the run.
        can_open: Left-flanking (after the underscore rules).
        can_close: Right-flanking (after the underscore rules).

    """

    char: DelimiterChar
    count: int
    can_open: bool
    can_close: bool


class TextToken(NamedTuple):
    """Literal text."""

    content: str


class CodeSpanToken(NamedTuple):
    """Code span content, already normalized per CommonMark."""

    code: str


class NodeToken(NamedTuple):
    """A finished inline node (link, image, autolink, math)."""

    node: object


class HardBreakToken(NamedTuple):
    """Backslash-newline or two trailing spaces."""


class SoftBreakToken(NamedTuple):
    """Plain newline inside a paragraph."""


# PEP 695 type alias for all inline tokens
type InlineToken = (
    DelimiterToken | TextToken | CodeSpanToken | NodeToken | HardBreakToken | SoftBreakToken
)


__all__ = [
    "CodeSpanToken",
    "DelimiterChar",
    "DelimiterToken",
    "HardBreakToken",
    "InlineToken",
    "NodeToken",
    "SoftBreakToken",
    "TextToken",
]
