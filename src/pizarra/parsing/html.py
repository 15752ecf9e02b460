"""Raw HTML recognition shared by the block and inline parsers.

CommonMark 6.6 defines the inline forms (open and closing tags, comments,
processing instructions, declarations, CDATA). CommonMark 4.6 defines the
seven kinds of HTML block by their start and end conditions:

| kind | starts with                          | ends at                 |
|------|--------------------------------------|-------------------------|
| 1    | <pre, <script, <style, <textarea     | matching closing tag    |
| 2    | <!--                                 | -->                     |
| 3    | <?                                   | ?>                      |
| 4    | <! plus a letter                     | >                       |
| 5    | <![CDATA[                            | ]]>                     |
| 6    | a block-level tag name               | blank line              |
| 7    | any complete tag alone on its line   | blank line              |

Kind 7 cannot interrupt a paragraph.

"""

from __future__ import annotations

import re
from typing import NamedTuple

# CommonMark HTML block kind 1 tags (case-insensitive)
HTML_BLOCK_TYPE1_TAGS = frozenset({"pre", "script", "style", "textarea"})

# CommonMark HTML block kind 6 tags (case-insensitive)
HTML_BLOCK_TYPE6_TAGS = frozenset(
    {
        "address", "article", "aside", "base", "basefont", "blockquote", "body",
        "caption", "center", "col", "colgroup", "dd", "details", "dialog", "dir",
        "div", "dl", "dt", "fieldset", "figcaption", "figure", "footer", "form",
        "frame", "frameset", "h1", "h2", "h3", "h4", "h5", "h6", "head", "header",
        "hr", "html", "iframe", "legend", "li", "link", "main", "menu", "menuitem",
        "nav", "noframes", "ol", "optgroup", "option", "p", "param", "search",
        "section", "summary", "table", "tbody", "td", "tfoot", "th", "thead",
        "title", "tr", "track", "ul",
    }
)  # fmt: skip

_TAG_NAME = r"[A-Za-z][A-Za-z0-9-]*"
_ATTRIBUTE = (
    r"(?:[ \t\n]+[A-Za-z_:][A-Za-z0-9_.:-]*"
    r"(?:[ \t\n]*=[ \t\n]*(?:[^ \t\n\"'=<>`]+|'[^']*'|\"[^\"]*\"))?)"
)
OPEN_TAG = rf"<{_TAG_NAME}{_ATTRIBUTE}*[ \t\n]*/?>"
CLOSING_TAG = rf"</{_TAG_NAME}[ \t\n]*>"

_INLINE_HTML = re.compile(
    "|".join(
        (
            OPEN_TAG,
            CLOSING_TAG,
            r"<!-->",
            r"<!--->",
            r"<!--[\s\S]*?-->",
            r"<\?[\s\S]*?\?>",
            r"<![A-Za-z][^>]*>",
            r"<!\[CDATA\[[\s\S]*?\]\]>",
        )
    )
)

_TYPE1_START = re.compile(r"<(?:pre|script|style|textarea)(?:[ \t>]|$)", re.IGNORECASE)
_TYPE1_END = re.compile(r"</(?:pre|script|style|textarea)>", re.IGNORECASE)
_TYPE6_START = re.compile(rf"</?({_TAG_NAME})(?:[ \t]|/?>|$)")
_TYPE7_LINE = re.compile(rf"(?:{OPEN_TAG}|{CLOSING_TAG})[ \t]*$")


class HtmlBlockStart(NamedTuple):
    """Kind of an HTML block and the marker that ends it (None: blank line)."""

    kind: int
    end: re.Pattern[str] | str | None


def match_inline_html(text: str, pos: int) -> int | None:
    """Offset just past the raw HTML starting at ``text[pos]``, or None."""
    m = _INLINE_HTML.match(text, pos)
    return m.end() if m else None


def classify_html_block(line: str) -> HtmlBlockStart | None:
    """Recognize the first line of an HTML block.

    Args:
        line: Line content with indentation already removed

    """
    if not line.startswith("<"):
        return None
    content = line.rstrip("\r\n")

    if _TYPE1_START.match(content):
        return HtmlBlockStart(1, _TYPE1_END)
    if content.startswith("<!--"):
        return HtmlBlockStart(2, "-->")
    if content.startswith("<?"):
        return HtmlBlockStart(3, "?>")
    if content.startswith("<![CDATA["):
        return HtmlBlockStart(5, "]]>")
    if len(content) > 2 and content[1] == "!" and content[2].isalpha():
        return HtmlBlockStart(4, ">")

    m = _TYPE6_START.match(content)
    if m and m.group(1).lower() in HTML_BLOCK_TYPE6_TAGS:
        return HtmlBlockStart(6, None)

    if _TYPE7_LINE.match(content):
        name = _TYPE6_START.match(content)
        if name is None or name.group(1).lower() not in HTML_BLOCK_TYPE1_TAGS:
            return HtmlBlockStart(7, None)
    return None


def ends_html_block(start: HtmlBlockStart, line: str, *, from_offset: int = 0) -> bool:
    """Whether ``line`` satisfies the end condition of a kind 1-5 block."""
    if start.end is None:
        return False
    if isinstance(start.end, str):
        return start.end in line[from_offset:]
    return start.end.search(line, from_offset) is not None


__all__ = [
    "CLOSING_TAG",
    "HTML_BLOCK_TYPE1_TAGS",
    "HTML_BLOCK_TYPE6_TAGS",
    "OPEN_TAG",
    "HtmlBlockStart",
    "classify_html_block",
    "ends_html_block",
    "match_inline_html",
]
