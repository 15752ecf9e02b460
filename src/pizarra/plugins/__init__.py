"""Plugin system for Pizarra.

Plugins extend Pizarra with additional syntax support:
- math: $inline$, $$display$$, \\(inline\\) and \\[display\\] math
- strikethrough: ~~deleted~~ syntax
- table: pipe tables with column alignment

Usage:
    >>> from pizarra import Markdown
    >>>
    >>> # Enable specific plugins
    >>> md = Markdown(plugins=["math", "strikethrough"])
    >>> html = md("Euler: $e^{i\\pi} + 1 = 0$")
    >>>
    >>> # Configured instances work too
    >>> from pizarra.plugins.math import MathPlugin
    >>> md = Markdown(plugins=[MathPlugin(macros={"R": r"\\mathbb{R}"})])
    >>>
    >>> # Enable all plugins
    >>> md = Markdown(plugins=["all"])

Plugin Architecture:
Plugins never patch parser classes. They contribute to three explicit
extension points:

1. Block syntaxes (math blocks, tables):
   - Prioritized ``BlockSyntax`` objects added to the block candidates
   - Tried at line start on their trigger characters

2. Inline syntaxes (inline math, strikethrough):
   - Prioritized ``InlineSyntax`` objects added to the inline candidates
   - Tried when a trigger character is encountered

3. Node renderers (math):
   - Per-node-type render hooks used by ``HtmlRenderer``

Thread Safety:
Plugins hold only immutable configuration. State is stored in AST nodes or
in the per-render context. Multiple threads can share plugin instances.

"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pizarra.errors import PluginError

if TYPE_CHECKING:
    from pizarra.parsing.protocols import BlockSyntax, InlineSyntax, Prioritized
    from pizarra.renderers.html import NodeRenderer

__all__ = [
    "BUILTIN_PLUGINS",
    "PizarraPlugin",
    "get_plugin",
    "register_plugin",
    "resolve_plugins",
]


@runtime_checkable
class PizarraPlugin(Protocol):
    """Protocol for Pizarra plugins.

    Plugins can hook into three extension points:
    - block_syntaxes: Block constructs recognized at line start
    - inline_syntaxes: Inline constructs recognized at trigger characters
    - node_renderers: HTML output for the node types the plugin produces

    Thread Safety:
        Plugins must not keep per-document state.

    """

    @property
    def name(self) -> str:
        """Plugin identifier."""
        ...

    def block_syntaxes(self) -> Iterable[Prioritized[BlockSyntax]]:
        """Block syntaxes with their priorities."""
        ...

    def inline_syntaxes(self) -> Iterable[Prioritized[InlineSyntax]]:
        """Inline syntaxes with their priorities."""
        ...

    def node_renderers(self) -> Mapping[type, NodeRenderer]:
        """Render hooks keyed by node type."""
        ...


# Registry of built-in plugins
BUILTIN_PLUGINS: dict[str, type[PizarraPlugin]] = {}


def register_plugin(
    name: str,
) -> Callable[[type[PizarraPlugin]], type[PizarraPlugin]]:
    """Decorator to register a plugin.

    Args:
        name: Plugin name for lookup

    Returns:
        Decorator function that registers and returns the class

    Usage:
        @register_plugin("math")
        class MathPlugin:
                ...

    """

    def decorator(cls: type[PizarraPlugin]) -> type[PizarraPlugin]:
        BUILTIN_PLUGINS[name] = cls
        return cls

    return decorator


def get_plugin(name: str) -> PizarraPlugin:
    """Get a default-configured plugin instance by name.

    Args:
        name: Plugin name (e.g., "math", "strikethrough")

    Returns:
        Plugin instance

    Raises:
        PluginError: If plugin name is not recognized

    """
    if name not in BUILTIN_PLUGINS:
        available = ", ".join(sorted(BUILTIN_PLUGINS.keys()))
        raise PluginError(name, f"Unknown plugin. Available: {available}")
    return BUILTIN_PLUGINS[name]()


def resolve_plugins(plugins: Iterable[str | PizarraPlugin] | None) -> tuple[PizarraPlugin, ...]:
    """Turn plugin names and instances into instances.

    ``"all"`` expands to every built-in plugin not given explicitly. A
    plugin given twice (by name or instance) is kept once; the first
    occurrence wins.

    Raises:
        PluginError: On an unknown name or an object that is not a plugin

    """
    if not plugins:
        return ()

    resolved: dict[str, PizarraPlugin] = {}
    expand_all = False
    for entry in plugins:
        if entry == "all":
            expand_all = True
            continue
        if isinstance(entry, str):
            plugin = get_plugin(entry)
        elif isinstance(entry, PizarraPlugin):
            plugin = entry
        else:
            raise PluginError(type(entry).__name__, "Object does not implement PizarraPlugin")
        resolved.setdefault(plugin.name, plugin)

    if expand_all:
        for name in BUILTIN_PLUGINS:
            if name not in resolved:
                resolved[name] = get_plugin(name)
    return tuple(resolved.values())


# Import built-in plugins to register them
# These imports trigger the @register_plugin decorators
from pizarra.plugins.math import MathPlugin  # noqa: E402
from pizarra.plugins.strikethrough import StrikethroughPlugin  # noqa: E402
from pizarra.plugins.table import TablePlugin  # noqa: E402

__all__ += [
    "MathPlugin",
    "StrikethroughPlugin",
    "TablePlugin",
]
