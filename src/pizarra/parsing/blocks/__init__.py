"""Block parsing subsystem.

Built-in block syntaxes, tried in priority order at a line's first
non-indentation character:

| priority | syntax          | triggers      | interrupts paragraph |
|----------|-----------------|---------------|----------------------|
| 200      | thematic break  | - * _         | yes                  |
| 300      | list            | - * + 0-9     | yes (restricted)     |
| 500      | indented code   | space, tab    | no                   |
| 600      | ATX heading     | #             | yes                  |
| 700      | fenced code     | ` ~           | yes                  |
| 750      | HTML block      | <             | yes (kinds 1-6)      |
| 800      | block quote     | >             | yes                  |

Paragraphs and setext headings are handled by the driver. Plugins add
more (block math at 90 on ``$`` and ``\\``, tables at 400 on ``|``).

"""

from pizarra.parsing.blocks.core import (
    AtxHeadingSyntax,
    FencedCodeSyntax,
    FinishedBlock,
    IndentedCodeSyntax,
    ThematicBreakSyntax,
    is_thematic_break,
    setext_level,
)
from pizarra.parsing.blocks.html import HtmlBlockSyntax
from pizarra.parsing.blocks.list import ListMarker, ListSyntax, parse_marker
from pizarra.parsing.blocks.quote import BlockQuoteSyntax
from pizarra.parsing.protocols import BlockSyntax, Prioritized

DEFAULT_BLOCK_SYNTAXES: tuple[Prioritized[BlockSyntax], ...] = (
    Prioritized(ThematicBreakSyntax(), 200),
    Prioritized(ListSyntax(), 300),
    Prioritized(IndentedCodeSyntax(), 500),
    Prioritized(AtxHeadingSyntax(), 600),
    Prioritized(FencedCodeSyntax(), 700),
    Prioritized(HtmlBlockSyntax(), 750),
    Prioritized(BlockQuoteSyntax(), 800),
)

__all__ = [
    "DEFAULT_BLOCK_SYNTAXES",
    "AtxHeadingSyntax",
    "BlockQuoteSyntax",
    "FencedCodeSyntax",
    "FinishedBlock",
    "HtmlBlockSyntax",
    "IndentedCodeSyntax",
    "ListMarker",
    "ListSyntax",
    "ThematicBreakSyntax",
    "is_thematic_break",
    "parse_marker",
    "setext_level",
]
