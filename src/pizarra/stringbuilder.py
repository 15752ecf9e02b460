"""List-backed string accumulator used by the HTML renderer.

Fragments are appended to a list and joined once in ``build()``.

Thread Safety:
    Each render() call creates its own StringBuilder.

"""

from __future__ import annotations

from collections.abc import Iterable


class StringBuilder:
    """Collects output fragments.

    Usage:
            >>> sb = StringBuilder()
            >>> sb.append("<p>").append("$x$").append_line("</p>")
            >>> sb.build()
            '<p>$x$</p>\\n'

    """

    __slots__ = ("_parts",)

    def __init__(self) -> None:
        self._parts: list[str] = []

    def append(self, s: str) -> StringBuilder:
        """Append ``s``; empty strings are skipped."""
        if s:
            self._parts.append(s)
        return self

    def append_line(self, s: str = "") -> StringBuilder:
        """Append ``s`` followed by a newline."""
        if s:
            self._parts.append(s)
        self._parts.append("\n")
        return self

    def extend(self, strings: Iterable[str]) -> StringBuilder:
        self._parts.extend(s for s in strings if s)
        return self

    def ends_with_newline(self) -> bool:
        """True if the last fragment ends a line (or nothing was written)."""
        return not self._parts or self._parts[-1].endswith("\n")

    def build(self) -> str:
        return "".join(self._parts)

    def __len__(self) -> int:
        """Number of fragments, not characters."""
        return len(self._parts)

    def __bool__(self) -> bool:
        return bool(self._parts)
