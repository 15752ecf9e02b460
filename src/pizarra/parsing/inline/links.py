"""Inline links and images: ``[text](url "title")`` and ``![alt](url)``.

Link text is parsed recursively, so it may hold emphasis, code or math.
Destinations follow CommonMark 6.5: either ``<...>`` (spaces allowed, no
newlines) or a raw run of non-space characters with balanced parentheses.

"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from pizarra.nodes import Image, Inline, Link
from pizarra.parsing.charsets import ASCII_PUNCTUATION
from pizarra.parsing.inline.special import find_backtick_run
from pizarra.parsing.inline.tokens import InlineToken, NodeToken
from pizarra.text import extract_text

if TYPE_CHECKING:
    from pizarra.parsing.protocols import InlineContext
    from pizarra.reader import Reader

_ESCAPE = re.compile(r"\\([!\"#$%&'()*+,\-./:;<=>?@\[\\\]^_`{|}~])")
_TITLE_CLOSERS = {'"': '"', "'": "'", "(": ")"}
_SPACE = " \t\n\r"


def _unescape(text: str) -> str:
    return _ESCAPE.sub(r"\1", text)


def _skip_space(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _SPACE:
        pos += 1
    return pos


def find_closing_bracket(text: str, start: int) -> int:
    """Offset of the ``]`` closing the label opened just before ``start``.

    Nested brackets balance; code spans and escaped characters are
    skipped. Returns -1 when there is none.
    """
    pos = start
    depth = 0
    n = len(text)
    while pos < n:
        char = text[pos]
        if char == "\\":
            pos += 2
            continue
        if char == "`":
            run_start = pos
            while pos < n and text[pos] == "`":
                pos += 1
            count = pos - run_start
            close = find_backtick_run(text, pos, count)
            if close != -1:
                pos = close + count
            continue
        if char == "[":
            depth += 1
        elif char == "]":
            if depth == 0:
                return pos
            depth -= 1
        pos += 1
    return -1


def parse_destination(text: str, pos: int) -> tuple[str, int] | None:
    """Parse a link destination at ``pos``; return (url, end) or None."""
    n = len(text)
    if pos < n and text[pos] == "<":
        pos += 1
        start = pos
        while pos < n:
            char = text[pos]
            if char == ">":
                return _unescape(text[start:pos]), pos + 1
            if char in "\n<":
                return None
            pos += 2 if char == "\\" else 1
        return None

    start = pos
    depth = 0
    while pos < n:
        char = text[pos]
        if char in _SPACE or ord(char) < 0x20:
            break
        if char == "(":
            depth += 1
        elif char == ")":
            if depth == 0:
                break
            depth -= 1
        elif char == "\\" and pos + 1 < n and text[pos + 1] in ASCII_PUNCTUATION:
            pos += 1
        pos += 1
    if depth:
        return None
    return _unescape(text[start:pos]), pos


def parse_title(text: str, pos: int) -> tuple[str, int] | None:
    """Parse a quoted or parenthesized title at ``pos``."""
    if pos >= len(text) or text[pos] not in _TITLE_CLOSERS:
        return None
    closer = _TITLE_CLOSERS[text[pos]]
    pos += 1
    start = pos
    while pos < len(text):
        char = text[pos]
        if char == closer:
            return _unescape(text[start:pos]), pos + 1
        pos += 2 if char == "\\" else 1
    return None


def parse_link_tail(text: str, pos: int) -> tuple[str, str | None, int] | None:
    """Parse ``(dest "title")`` starting at the ``(``.

    Returns:
        (url, title, offset after ``)``) or None.
    """
    if pos >= len(text) or text[pos] != "(":
        return None
    pos = _skip_space(text, pos + 1)
    if pos < len(text) and text[pos] == ")":
        return "", None, pos + 1

    dest = parse_destination(text, pos)
    if dest is None:
        return None
    url, pos = dest

    after_dest = pos
    pos = _skip_space(text, pos)
    title: str | None = None
    if pos > after_dest:
        parsed = parse_title(text, pos)
        if parsed is not None:
            title, pos = parsed
            pos = _skip_space(text, pos)
    if pos >= len(text) or text[pos] != ")":
        return None
    return url, title, pos + 1


def _contains_link(children: tuple[Inline, ...]) -> bool:
    for child in children:
        if isinstance(child, Link):
            return True
        nested = getattr(child, "children", None)
        if nested and _contains_link(nested):
            return True
    return False


class LinkSyntax:
    """Inline links and images."""

    __slots__ = ()

    triggers = frozenset("[!")

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        source = reader.source
        start = reader.offset
        is_image = source[start] == "!"
        label_start = start + 2 if is_image else start + 1
        if is_image and (label_start > len(source) or source[start + 1 : label_start] != "["):
            return None

        bracket = find_closing_bracket(source, label_start)
        if bracket == -1:
            return None
        tail = parse_link_tail(source, bracket + 1)
        if tail is None:
            return None
        url, title, end = tail

        label = source[label_start:bracket]
        children = ctx.parse_inline(label)
        if is_image:
            alt = "".join(extract_text(child) for child in children)
            node: Inline = Image(location=ctx.location, url=url, alt=alt, title=title)
        else:
            # Links may not contain other links
            if _contains_link(children):
                return None
            node = Link(location=ctx.location, url=url, title=title, children=children)

        reader.advance(end - start)
        return NodeToken(node)


__all__ = [
    "LinkSyntax",
    "find_closing_bracket",
    "parse_destination",
    "parse_link_tail",
    "parse_title",
]
