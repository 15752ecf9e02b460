"""Strikethrough plugin for Pizarra.

Adds support for ~~deleted~~ syntax.

Usage:
    >>> md = Markdown(plugins=["strikethrough"])
    >>> md("~~deleted text~~")
    '<p><del>deleted text</del></p>\\n'

Syntax:
~~text~~ → <del>text</del>

Strikethrough can contain other inline elements:
~~**bold deleted**~~ → <del><strong>bold deleted</strong></del>

Only runs of exactly two tildes are delimiters; other runs stay literal.

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pizarra.parsing.inline.emphasis import (
    is_left_flanking,
    is_right_flanking,
    surrounding_chars,
)
from pizarra.parsing.inline.tokens import DelimiterToken, InlineToken, TextToken
from pizarra.parsing.protocols import Prioritized
from pizarra.plugins import register_plugin

if TYPE_CHECKING:
    from pizarra.parsing.protocols import InlineContext
    from pizarra.reader import Reader

INLINE_PRIORITY = 500


class StrikethroughSyntax:
    """``~~`` delimiter runs, matched by the emphasis pass."""

    __slots__ = ()

    triggers = frozenset("~")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        source = reader.source
        start = reader.offset
        stop = start
        while stop < len(source) and source[stop] == "~":
            stop += 1
        count = stop - start
        reader.advance(count)
        if count != 2:
            return TextToken("~" * count)

        before, after = surrounding_chars(reader, start, stop)
        return DelimiterToken(
            "~", 2, is_left_flanking(before, after), is_right_flanking(before, after)
        )


@register_plugin("strikethrough")
class StrikethroughPlugin:
    """Plugin adding ~~strikethrough~~ support.

    Rendering is built into ``HtmlRenderer``.

    """

    __slots__ = ()

    @property
    def name(self) -> str:
        return "strikethrough"

    def block_syntaxes(self) -> tuple[()]:
        return ()

    def inline_syntaxes(self) -> tuple[Prioritized[StrikethroughSyntax], ...]:
        return (Prioritized(StrikethroughSyntax(), INLINE_PRIORITY),)

    def node_renderers(self) -> dict[type, object]:
        return {}


__all__ = ["StrikethroughPlugin", "StrikethroughSyntax"]
