"""ContextVar-based parse configuration for Pizarra.

Provides thread-local configuration using Python's ContextVars (PEP 567).
Config is set once per Markdown instance and read by every parser in the
context, including the nested parsers that handle block quotes and list
items.

Thread Safety:
    ContextVars are thread-local. Each thread has independent storage,
    so no locks are needed.

Usage:
    # In Markdown class
    md = Markdown(plugins=["math"])
    html = md("Euler: $e^{i\\pi} + 1 = 0$")  # Sets config internally

    # Direct parser usage (advanced)
    from pizarra.config import parse_config_context, ParseConfig

    with parse_config_context(ParseConfig(math_lookahead_limit=50)):
        doc = Parser(source).parse()

"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pizarra.parsing.protocols import BlockSyntax, InlineSyntax, Prioritized


@dataclass(frozen=True, slots=True)
class ParseConfig:
    """Immutable parse configuration.

    Set once per Markdown instance, read by all parsers in the context.

    Note: source_file is per-call state, not configuration. It stays on the
    Parser instance.

    Attributes:
        block_syntaxes: Extra block syntaxes contributed by plugins
        inline_syntaxes: Extra inline syntaxes contributed by plugins
        math_lookahead_limit: Maximum lines the block-math opener may look ahead
            for its closer (None walks to the end of the document)
        text_transformer: Optional callback applied to each plain text run

    """

    block_syntaxes: tuple[Prioritized[BlockSyntax], ...] = ()
    inline_syntaxes: tuple[Prioritized[InlineSyntax], ...] = ()
    math_lookahead_limit: int | None = None
    text_transformer: Callable[[str], str] | None = None

    def __post_init__(self) -> None:
        limit = self.math_lookahead_limit
        if limit is not None and limit < 1:
            raise ValueError(f"math_lookahead_limit must be positive, got {limit}")

    @classmethod
    def from_dict(cls, config_dict: dict) -> ParseConfig:
        """Create ParseConfig from dictionary.

        Useful when settings come from a YAML or TOML file. Unknown keys are
        ignored; lists are converted to tuples.

        Example:
            >>> config = ParseConfig.from_dict({
            ...     "math_lookahead_limit": 20,
            ...     "unknown_key": "ignored",
            ... })
            >>> config.math_lookahead_limit
            20

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {
            k: tuple(v) if isinstance(v, list) else v
            for k, v in config_dict.items()
            if k in valid_fields
        }
        return cls(**filtered)


# Module-level default config (reused, never recreated)
_DEFAULT_CONFIG: ParseConfig = ParseConfig()

_parse_config: ContextVar[ParseConfig] = ContextVar(
    "parse_config",
    default=_DEFAULT_CONFIG,
)


def get_parse_config() -> ParseConfig:
    """Get current parse configuration (thread-local)."""
    return _parse_config.get()


def set_parse_config(config: ParseConfig) -> None:
    """Set parse configuration for current context.

    Only affects the current thread's context.

    """
    _parse_config.set(config)


def reset_parse_config() -> None:
    """Reset to the default configuration."""
    _parse_config.set(_DEFAULT_CONFIG)


@contextmanager
def parse_config_context(config: ParseConfig) -> Iterator[None]:
    """Context manager for temporary config changes.

    Restores the previous config even if an exception is raised.

    Example:
        >>> with parse_config_context(ParseConfig(math_lookahead_limit=5)):
        ...     doc = Parser("$$\\nx\\n$$").parse()
        >>> # Previous config restored here

    """
    token = _parse_config.set(config)
    try:
        yield
    finally:
        _parse_config.reset(token)


__all__ = [
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
]
