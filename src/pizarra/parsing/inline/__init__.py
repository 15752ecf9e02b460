"""Inline parsing subsystem.

Built-in syntaxes, in the order they are tried at a shared trigger:

| priority | syntax           | triggers |
|----------|------------------|----------|
| 100      | code span        | `        |
| 200      | link / image     | [ !      |
| 300      | autolink         | <        |
| 350      | raw HTML         | <        |
| 500      | emphasis         | * _      |
| 800      | entity reference | &        |
| 900      | backslash escape | \\        |

Plugins add more (math at 50 on ``$`` and ``\\``, strikethrough on ``~``).
Line breaks are handled by the tokenizer itself.

Architecture:
Uses the CommonMark delimiter algorithm for emphasis.
See: https://spec.commonmark.org/0.31.2/#emphasis-and-strong-emphasis

"""

from __future__ import annotations

from pizarra.parsing.inline.core import InlineParser
from pizarra.parsing.inline.emphasis import EmphasisSyntax, process_emphasis
from pizarra.parsing.inline.links import LinkSyntax
from pizarra.parsing.inline.match_registry import DelimiterMatch, MatchRegistry
from pizarra.parsing.inline.special import (
    AutolinkSyntax,
    CodeSpanSyntax,
    EntitySyntax,
    EscapeSyntax,
    RawHtmlSyntax,
)
from pizarra.parsing.inline.tokens import (
    CodeSpanToken,
    DelimiterToken,
    HardBreakToken,
    InlineToken,
    NodeToken,
    SoftBreakToken,
    TextToken,
)
from pizarra.parsing.protocols import InlineSyntax, Prioritized

DEFAULT_INLINE_SYNTAXES: tuple[Prioritized[InlineSyntax], ...] = (
    Prioritized(CodeSpanSyntax(), 100),
    Prioritized(LinkSyntax(), 200),
    Prioritized(AutolinkSyntax(), 300),
    Prioritized(RawHtmlSyntax(), 350),
    Prioritized(EmphasisSyntax(), 500),
    Prioritized(EntitySyntax(), 800),
    Prioritized(EscapeSyntax(), 900),
)


__all__ = [
    "DEFAULT_INLINE_SYNTAXES",
    "AutolinkSyntax",
    "CodeSpanSyntax",
    "CodeSpanToken",
    "DelimiterMatch",
    "DelimiterToken",
    "EmphasisSyntax",
    "EntitySyntax",
    "EscapeSyntax",
    "HardBreakToken",
    "InlineParser",
    "InlineToken",
    "LinkSyntax",
    "MatchRegistry",
    "NodeToken",
    "RawHtmlSyntax",
    "SoftBreakToken",
    "TextToken",
    "process_emphasis",
]
