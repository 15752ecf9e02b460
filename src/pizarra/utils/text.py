"""Text helpers shared by the renderer.

Example:
    >>> from pizarra.utils.text import slugify
    >>> slugify("Euler's identity: $e^{i\\pi}$")
    'eulers-identity-eipi'
"""

from __future__ import annotations

import html as html_module
import re

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATOR_RUN = re.compile(r"[-\s]+")


def slugify(text: str, *, separator: str = "-", max_length: int | None = None) -> str:
    """Convert heading text to a URL-safe anchor.

    Unicode word characters are kept, so non-English headings produce
    readable anchors. HTML entities are decoded before slugging.

    Args:
        text: Text to slugify
        separator: Character placed between words
        max_length: Truncate to this many characters, preferring a word boundary

    Returns:
        Lowercase slug, possibly empty

    Examples:
        >>> slugify("Hello World!")
        'hello-world'
        >>> slugify("Área &amp; Volumen")
        'área-volumen'
    """
    if not text:
        return ""

    slug = html_module.unescape(text).lower().strip()
    slug = _NON_WORD.sub("", slug)
    slug = _SEPARATOR_RUN.sub(separator, slug).strip(separator)

    if max_length is not None and len(slug) > max_length:
        cut = slug[:max_length]
        head, sep, _ = cut.rpartition(separator)
        slug = head if sep else cut

    return slug


def escape_html(text: str) -> str:
    """Escape text for use inside a quoted HTML attribute.

    Unlike the body escaper in the HTML renderer, single quotes are
    escaped too.

    Examples:
        >>> escape_html("<a title='x'>")
        '&lt;a title=&#x27;x&#x27;&gt;'
    """
    if not text:
        return ""
    return html_module.escape(text, quote=True)
