"""Table plugin for Pizarra (pipe tables).

Usage:
    >>> md = Markdown(plugins=["table"])
    >>> md("| A | B |\\n|---|---|\\n| 1 | 2 |")
    '<table>\\n<thead>\\n<tr>\\n<th>A</th>\\n<th>B</th>\\n</tr>\\n</thead>...'

Syntax:
| Header 1 | Header 2 |
|----------|----------|
| Cell 1   | Cell 2   |

Alignment:
| Left | Center | Right |
|:-----|:------:|------:|
| L    |   C    |     R |

Features:
- Column alignment via :--- :--: ---:
- Inline markdown and math in cells
- Pipes can be escaped with ``\\|``

Thread Safety:
This plugin is stateless and thread-safe.

"""

from __future__ import annotations

from pizarra.parsing.blocks.table import TableSyntax
from pizarra.parsing.protocols import Prioritized
from pizarra.plugins import register_plugin

BLOCK_PRIORITY = 400


@register_plugin("table")
class TablePlugin:
    """Plugin adding pipe table support.

    Tables are detected at the block level when a line starts with ``|``
    and is followed by a delimiter row (``|---|---|``). Rendering is built
    into ``HtmlRenderer``.

    """

    __slots__ = ()

    @property
    def name(self) -> str:
        return "table"

    def block_syntaxes(self) -> tuple[Prioritized[TableSyntax], ...]:
        return (Prioritized(TableSyntax(), BLOCK_PRIORITY),)

    def inline_syntaxes(self) -> tuple[()]:
        return ()

    def node_renderers(self) -> dict[type, object]:
        return {}


__all__ = ["TablePlugin"]
