"""The scanned product handed to the renderer."""

from __future__ import annotations

from dataclasses import dataclass

from pizarra.math.delimiters import MathFlavor, validate_flavor


@dataclass(frozen=True, slots=True)
class MathUnit:
    """TeX source of one math region and its flavor.

    ``source`` excludes the delimiters and is otherwise verbatim; block
    units keep their interior newlines.
    """

    source: str
    flavor: MathFlavor

    def __post_init__(self) -> None:
        validate_flavor(self.flavor)

    @property
    def is_inline(self) -> bool:
        return self.flavor.is_inline
