"""Math delimiter catalog.

A fixed, ordered table of the four recognized delimiter pairs. Order
matters: ``$$`` must be tried before ``$`` so that ``$$x$$`` is display
math and never two empty inline spans.

| begin | end  | flavor            |
|-------|------|-------------------|
| $$    | $$   | DISPLAY | DOLLAR  |
| $     | $    | INLINE | DOLLAR   |
| \\(    | \\)   | INLINE | BRACKET  |
| \\[    | \\]   | DISPLAY | BRACKET |

Thread Safety:
    The catalog is built at import time and never mutated.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntFlag


class MathFlavor(IntFlag):
    """Two orthogonal axes: presentation and delimiter family.

    A valid flavor has exactly one bit set on each axis.
    """

    INLINE = 1
    DISPLAY = 2
    DOLLAR = 4
    BRACKET = 8

    @property
    def is_inline(self) -> bool:
        return bool(self & MathFlavor.INLINE)

    @property
    def is_display(self) -> bool:
        return bool(self & MathFlavor.DISPLAY)


_PRESENTATION = MathFlavor.INLINE | MathFlavor.DISPLAY
_FAMILY = MathFlavor.DOLLAR | MathFlavor.BRACKET


def validate_flavor(flavor: MathFlavor) -> MathFlavor:
    """Return ``flavor`` unchanged if it has one bit per axis.

    Raises:
        ValueError: If either axis has zero or two bits set, or unknown bits
            are present.
    """
    if int(flavor) & ~int(_PRESENTATION | _FAMILY):
        raise ValueError(f"unknown math flavor bits in {int(flavor)}")
    flavor = MathFlavor(flavor)
    presentation = flavor & _PRESENTATION
    family = flavor & _FAMILY
    if presentation not in (MathFlavor.INLINE, MathFlavor.DISPLAY):
        raise ValueError(f"ambiguous math flavor {flavor!r}: need exactly one of INLINE, DISPLAY")
    if family not in (MathFlavor.DOLLAR, MathFlavor.BRACKET):
        raise ValueError(f"ambiguous math flavor {flavor!r}: need exactly one of DOLLAR, BRACKET")
    return flavor


@dataclass(frozen=True, slots=True)
class Delimiter:
    """One catalog entry: opener, closer and the flavor they denote."""

    begin: str
    end: str
    flavor: MathFlavor


DELIMITERS: tuple[Delimiter, ...] = (
    Delimiter("$$", "$$", MathFlavor.DISPLAY | MathFlavor.DOLLAR),
    Delimiter("$", "$", MathFlavor.INLINE | MathFlavor.DOLLAR),
    Delimiter("\\(", "\\)", MathFlavor.INLINE | MathFlavor.BRACKET),
    Delimiter("\\[", "\\]", MathFlavor.DISPLAY | MathFlavor.BRACKET),
)

_BY_FLAVOR: dict[MathFlavor, Delimiter] = {d.flavor: d for d in DELIMITERS}

# Characters that can start an opener
TRIGGER_CHARS: frozenset[str] = frozenset(d.begin[0] for d in DELIMITERS)


def classify(line: str) -> Delimiter | None:
    """Return the first catalog entry whose opener prefixes ``line``.

    Example:
        >>> classify("$$x$$").flavor
        <MathFlavor.DISPLAY|DOLLAR: 6>
        >>> classify("x $y$") is None
        True

    """
    for delim in DELIMITERS:
        if line.startswith(delim.begin):
            return delim
    return None


def closer_for(flavor: MathFlavor) -> str:
    """Closing delimiter for a flavor.

    Raises:
        ValueError: If the flavor is ambiguous.
    """
    return _BY_FLAVOR[validate_flavor(flavor)].end


def opener_for(flavor: MathFlavor) -> str:
    """Opening delimiter for a flavor."""
    return _BY_FLAVOR[validate_flavor(flavor)].begin


__all__ = [
    "DELIMITERS",
    "TRIGGER_CHARS",
    "Delimiter",
    "MathFlavor",
    "classify",
    "closer_for",
    "opener_for",
    "validate_flavor",
]
