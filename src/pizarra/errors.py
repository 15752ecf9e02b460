"""Exception classes for Pizarra.

Provides standardized exceptions for error handling throughout Pizarra.

Unterminated math regions and unrecognized delimiters are not errors:
they degrade to ordinary text and never raise.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pizarra.math.delimiters import MathFlavor


class PizarraError(Exception):
    """Base exception for all Pizarra errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(PizarraError):
    """Error during Markdown parsing.

    Raised when the parser encounters invalid or unexpected input.
    """

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        col_offset: int | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error with optional location.

        Args:
            message: Error description
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column offset where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.message = message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        parts = []
        if source_file:
            parts.append(source_file)
        if lineno is not None:
            parts.append(str(lineno))
            if col_offset is not None:
                parts.append(str(col_offset))
        prefix = ":".join(parts)

        super().__init__(f"{prefix} {message}" if prefix else message)


class ReaderPositionError(PizarraError):
    """A saved reader position could not be restored.

    This is an internal invariant violation: positions handed out by
    ``Reader.position()`` always restore. Scanners never catch it.
    """

    def __init__(self, line: int, offset: int, reason: str) -> None:
        self.line = line
        self.offset = offset
        super().__init__(f"cannot restore reader position (line={line}, offset={offset}): {reason}")


class RenderError(PizarraError):
    """Error during HTML rendering.

    Raised when the renderer encounters an invalid AST node, or when a math
    unit fails to render under ``MathErrorPolicy.RAISE``.
    """

    pass


class MathRenderError(RenderError):
    """The math engine could not convert one unit.

    Carries the offending TeX source and flavor so callers can report or
    fall back per unit.
    """

    def __init__(self, source: str, flavor: MathFlavor | None, message: str) -> None:
        """Initialize math render error.

        Args:
            source: TeX source of the unit that failed
            flavor: Flavor of the unit (None when raised outside a unit)
            message: Engine-provided description
        """
        self.source = source
        self.flavor = flavor
        self.message = message
        preview = source if len(source) <= 40 else source[:37] + "..."
        super().__init__(f"cannot render math {preview!r}: {message}")


class PluginError(PizarraError):
    """Error in plugin initialization or lookup."""

    def __init__(self, plugin_name: str, message: str) -> None:
        """Initialize plugin error.

        Args:
            plugin_name: Name of the failing plugin
            message: Description of the error
        """
        self.plugin_name = plugin_name
        super().__init__(f"Plugin '{plugin_name}': {message}")
