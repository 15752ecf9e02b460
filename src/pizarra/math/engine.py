"""TeX conversion engines.

The scanners never interpret TeX; they hand a ``MathUnit`` to a renderer
that picks ``text_style`` or ``display_style`` on an engine. Two engines
ship with Pizarra:

- ``MathMLEngine``: converts on the server with latex2mathml.
- ``MathJaxEngine``: emits escaped TeX wrapped in ``\\(...\\)`` / ``\\[...\\]``
  for MathJax or KaTeX to typeset in the browser.

Any object with the two methods satisfies ``MathEngine``. Engines must be
deterministic and must not mutate themselves while converting.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from html import escape as html_escape
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from latex2mathml.converter import convert as latex_to_mathml

from pizarra.errors import MathRenderError
from pizarra.utils.logger import get_logger

logger = get_logger(__name__)

# Nested macro expansion stops here
MAX_MACRO_DEPTH = 16

_MACRO_NAME = re.compile(r"^[A-Za-z]+$")


@runtime_checkable
class MathEngine(Protocol):
    """Converts TeX source into markup.

    Both methods raise ``MathRenderError`` when the source cannot be
    converted.
    """

    def text_style(self, source: str) -> str:
        """Markup for math set inline with running text."""
        ...

    def display_style(self, source: str) -> str:
        """Markup for math set on its own line."""
        ...


def normalize_macros(macros: Mapping[str, str] | None) -> MappingProxyType[str, str]:
    """Validate a macro table and freeze it.

    Keys may be given with or without the leading backslash. Only
    argument-less control words (letters only) are accepted.

    Raises:
        ValueError: If a key is not a valid control word name.
    """
    table: dict[str, str] = {}
    for key, value in (macros or {}).items():
        name = key[1:] if key.startswith("\\") else key
        if not _MACRO_NAME.match(name):
            raise ValueError(f"invalid macro name {key!r}: expected letters only")
        table[name] = value
    return MappingProxyType(table)


class MathMLEngine:
    """Server-side TeX to MathML conversion through latex2mathml.

    Args:
        macros: Argument-less macros expanded before conversion, e.g.
            ``{"R": r"\\mathbb{R}"}``. The table is copied and frozen.

    Example:
        >>> engine = MathMLEngine(macros={"R": r"\\mathbb{R}"})
        >>> engine.text_style(r"x \\in \\R").startswith("<math")
        True

    Thread Safety:
        Immutable after construction.

    """

    __slots__ = ("_macros", "_pattern")

    def __init__(self, macros: Mapping[str, str] | None = None) -> None:
        self._macros = normalize_macros(macros)
        if self._macros:
            names = sorted(self._macros, key=len, reverse=True)
            self._pattern: re.Pattern[str] | None = re.compile(
                r"\\(" + "|".join(map(re.escape, names)) + r")(?![A-Za-z])"
            )
        else:
            self._pattern = None

    @property
    def macros(self) -> Mapping[str, str]:
        return self._macros

    def expand_macros(self, source: str) -> str:
        """Substitute macros until none remain.

        Raises:
            MathRenderError: If expansion is still producing macros after
                ``MAX_MACRO_DEPTH`` rounds.
        """
        if self._pattern is None:
            return source
        pattern = self._pattern
        macros = self._macros
        for _ in range(MAX_MACRO_DEPTH):
            expanded = pattern.sub(lambda m: macros[m.group(1)], source)
            if expanded == source:
                return expanded
            source = expanded
        if pattern.search(source):
            raise MathRenderError(source, None, "macro expansion exceeded maximum depth")
        return source

    def text_style(self, source: str) -> str:
        return self._convert(source, "inline")

    def display_style(self, source: str) -> str:
        return self._convert(source, "block")

    def _convert(self, source: str, display: str) -> str:
        expanded = self.expand_macros(source)
        try:
            return latex_to_mathml(expanded, display=display)
        except Exception as e:
            raise MathRenderError(source, None, f"{type(e).__name__}: {e}") from e


class MathJaxEngine:
    """Client-side passthrough for MathJax or KaTeX.

    Never fails: the source is escaped and wrapped in the bracket
    delimiters both libraries scan for. Both styles emit a ``<span>`` so
    display math written in running text stays valid inside ``<p>``.
    """

    __slots__ = ()

    def text_style(self, source: str) -> str:
        return f'<span class="math notranslate nohighlight">\\({html_escape(source)}\\)</span>'

    def display_style(self, source: str) -> str:
        return (
            '<span class="math display notranslate nohighlight">'
            f"\\[{html_escape(source)}\\]</span>"
        )


__all__ = [
    "MAX_MACRO_DEPTH",
    "MathEngine",
    "MathJaxEngine",
    "MathMLEngine",
    "normalize_macros",
]
