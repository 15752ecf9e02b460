"""Code spans, autolinks, raw HTML, entity references and backslash escapes.

Each class is an ``InlineSyntax``: it consumes one construct at its
trigger character or returns None without moving the reader.

"""

from __future__ import annotations

import html
import re
from typing import TYPE_CHECKING

from pizarra.nodes import HtmlInline, Link, Text
from pizarra.parsing.charsets import ASCII_PUNCTUATION, DIGITS, HEX_DIGITS
from pizarra.parsing.html import match_inline_html
from pizarra.parsing.inline.tokens import (
    CodeSpanToken,
    HardBreakToken,
    InlineToken,
    NodeToken,
    TextToken,
)

if TYPE_CHECKING:
    from pizarra.parsing.protocols import InlineContext
    from pizarra.reader import Reader

# CommonMark 6.5: scheme of 2-32 chars, no spaces, < or > in the URI
_URI_AUTOLINK = re.compile(r"<([A-Za-z][A-Za-z0-9+.\-]{1,31}:[^<>\x00-\x20]*)>")
_EMAIL_AUTOLINK = re.compile(
    r"<([a-zA-Z0-9.!#$%&'*+/=?^_`{|}~\-]+@[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*)>"
)


class CodeSpanSyntax:
    """Backtick code spans. An unmatched run becomes literal backticks."""

    __slots__ = ()

    triggers = frozenset("`")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        source = reader.source
        start = reader.offset
        pos = start
        while pos < len(source) and source[pos] == "`":
            pos += 1
        count = pos - start

        close = find_backtick_run(source, pos, count)
        if close == -1:
            reader.advance(count)
            return TextToken("`" * count)

        code = source[pos:close].replace("\n", " ")
        if len(code) >= 2 and code[0] == " " and code[-1] == " " and code.strip(" "):
            code = code[1:-1]
        reader.advance(close + count - start)
        return CodeSpanToken(code)


def find_backtick_run(text: str, start: int, count: int) -> int:
    """Offset of the next run of exactly ``count`` backticks, or -1."""
    pos = start
    while True:
        idx = text.find("`", pos)
        if idx == -1:
            return -1
        end = idx
        while end < len(text) and text[end] == "`":
            end += 1
        if end - idx == count:
            return idx
        pos = end


class AutolinkSyntax:
    """``<scheme:...>`` and ``<user@host>``."""

    __slots__ = ()

    triggers = frozenset("<")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        source = reader.source
        start = reader.offset
        m = _URI_AUTOLINK.match(source, start)
        if m:
            url = m.group(1)
        else:
            m = _EMAIL_AUTOLINK.match(source, start)
            if m is None:
                return None
            url = "mailto:" + m.group(1)
        reader.advance(m.end() - start)
        label = (Text(location=ctx.location, content=m.group(1)),)
        return NodeToken(Link(location=ctx.location, url=url, title=None, children=label))


class RawHtmlSyntax:
    """Open and closing tags, comments, declarations and CDATA, passed through."""

    __slots__ = ()

    triggers = frozenset("<")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        start = reader.offset
        end = match_inline_html(reader.source, start)
        if end is None:
            return None
        reader.advance(end - start)
        return NodeToken(HtmlInline(location=ctx.location, html=reader.source[start:end]))


class EntitySyntax:
    """Named, decimal and hexadecimal character references."""

    __slots__ = ()

    triggers = frozenset("&")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        result = decode_entity(reader.source, reader.offset)
        if result is None:
            return None
        decoded, end = result
        reader.advance(end - reader.offset)
        return TextToken(decoded)


def decode_entity(text: str, pos: int) -> tuple[str, int] | None:
    """Decode the character reference starting at ``text[pos] == "&"``.

    Returns:
        (decoded text, offset after the ``;``) or None.
    """
    n = len(text)
    end = pos + 1
    if end < n and text[end] == "#":
        end += 1
        hexadecimal = end < n and text[end] in "xX"
        if hexadecimal:
            end += 1
        digits = HEX_DIGITS if hexadecimal else DIGITS
        max_digits = 6 if hexadecimal else 7
        digit_start = end
        while end < n and text[end] in digits:
            end += 1
        if not 1 <= end - digit_start <= max_digits:
            return None
        if end >= n or text[end] != ";":
            return None
        codepoint = int(text[digit_start:end], 16 if hexadecimal else 10)
        if codepoint == 0 or codepoint > 0x10FFFF:
            return "\ufffd", end + 1
        return chr(codepoint), end + 1

    if end < n and text[end].isalpha():
        limit = min(pos + 33, n)
        while end < limit and text[end].isalnum():
            end += 1
        if end < n and text[end] == ";":
            entity = text[pos : end + 1]
            decoded = html.unescape(entity)
            if decoded != entity:
                return decoded, end + 1
    return None


class EscapeSyntax:
    """Backslash escapes and backslash hard breaks.

    A backslash before anything else is left to the tokenizer, which emits
    it as literal text.
    """

    __slots__ = ()

    triggers = frozenset("\\")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        source = reader.source
        nxt = reader.offset + 1
        if nxt >= len(source):
            return None
        char = source[nxt]
        if char == "\n":
            reader.advance(2)
            while reader.peek_char() == " ":
                reader.advance(1)
            return HardBreakToken()
        if char in ASCII_PUNCTUATION:
            reader.advance(2)
            return TextToken(char)
        return None


__all__ = [
    "AutolinkSyntax",
    "CodeSpanSyntax",
    "EntitySyntax",
    "EscapeSyntax",
    "RawHtmlSyntax",
    "decode_entity",
    "find_backtick_run",
]
