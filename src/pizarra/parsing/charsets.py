"""Character sets shared by the block and inline syntaxes.

All sets are module-level frozensets (O(1) membership, immutable).

Reference: CommonMark 0.31.2 specification
"""

import unicodedata

# https://spec.commonmark.org/0.31.2/#ascii-punctuation-character
ASCII_PUNCTUATION: frozenset[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")

WHITESPACE: frozenset[str] = frozenset(" \t\n\r\f\v")

DIGITS: frozenset[str] = frozenset("0123456789")
HEX_DIGITS: frozenset[str] = frozenset("0123456789abcdefABCDEF")

FENCE_CHARS: frozenset[str] = frozenset("`~")
BULLET_MARKERS: frozenset[str] = frozenset("-*+")
THEMATIC_BREAK_CHARS: frozenset[str] = frozenset("-*_")
INDENT_CHARS: frozenset[str] = frozenset(" \t")


def is_unicode_punctuation(char: str) -> bool:
    """Unicode punctuation or symbol (P* and S* categories), for flanking rules."""
    if not char:
        return False
    if char in ASCII_PUNCTUATION:
        return True
    cat = unicodedata.category(char)
    return cat[0] in "PS"


def is_unicode_whitespace(char: str) -> bool:
    """Unicode whitespace; the empty string (text boundary) counts too."""
    if not char:
        return True
    if char in WHITESPACE:
        return True
    return unicodedata.category(char) == "Zs"


def is_blank(line: str) -> bool:
    return not line.strip(" \t\r\n")


def leading_columns(line: str) -> tuple[int, int]:
    """Return (columns, chars) of leading indentation, tabs stopping at 4."""
    cols = 0
    chars = 0
    for ch in line:
        if ch == " ":
            cols += 1
        elif ch == "\t":
            cols += 4 - (cols % 4)
        else:
            break
        chars += 1
    return cols, chars


def strip_columns(line: str, count: int) -> str:
    """Remove up to ``count`` columns of leading indentation.

    A tab that straddles the boundary is replaced by the spaces left over.
    """
    cols = 0
    i = 0
    while i < len(line) and cols < count:
        ch = line[i]
        if ch == " ":
            cols += 1
        elif ch == "\t":
            width = 4 - (cols % 4)
            if cols + width > count:
                return " " * (cols + width - count) + line[i + 1 :]
            cols += width
        else:
            break
        i += 1
    return line[i:]
