"""Source location tracking for error messages and debugging.

Provides SourceLocation dataclass for tracking positions in source text.

Thread Safety:
SourceLocation is frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Source location for error messages and debugging.

    All positions are 1-indexed (lineno and col_offset start at 1).
    ``offset`` is the absolute start offset in the parsed source.

    Attributes:
        lineno: Starting line number (1-indexed)
        col_offset: Starting column offset (1-indexed)
        offset: Absolute start offset in source buffer
        end_lineno: Ending line number (optional)
        source_file: Source file path (optional)

    Examples:
            >>> loc = SourceLocation(3, 1, source_file="notes/algebra.md")
            >>> str(loc)
            'notes/algebra.md:3:1'

    """

    lineno: int
    col_offset: int
    offset: int = 0
    end_lineno: int | None = None
    source_file: str | None = None

    def __str__(self) -> str:
        """Format location as ``file:line:col`` or ``line:col``."""
        if self.source_file:
            return f"{self.source_file}:{self.lineno}:{self.col_offset}"
        return f"{self.lineno}:{self.col_offset}"

    def span_to(self, end: SourceLocation) -> SourceLocation:
        """Create a location starting here and ending at ``end``'s line."""
        return SourceLocation(
            lineno=self.lineno,
            col_offset=self.col_offset,
            offset=self.offset,
            end_lineno=end.end_lineno or end.lineno,
            source_file=self.source_file,
        )

    @classmethod
    def unknown(cls) -> SourceLocation:
        """Placeholder for synthetic nodes."""
        return cls(lineno=0, col_offset=0)
