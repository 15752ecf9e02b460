"""Parsing subsystem for Pizarra.

Two layers, each driven by an explicit, priority-ordered syntax list:

- ``blocks``: line-oriented syntaxes that open builders (headings, code,
  lists, block quotes, and plugin blocks such as display math)
- ``inline``: character-triggered syntaxes that produce tokens, followed
  by CommonMark delimiter matching for emphasis

Architecture:
The ``Parser`` in ``pizarra.parser`` walks lines with a ``Reader`` and
asks block syntaxes to open or continue blocks. Paragraph text is handed
to an ``InlineParser`` built from the same configuration.

Public API:
DEFAULT_BLOCK_SYNTAXES: Built-in block syntaxes with priorities
DEFAULT_INLINE_SYNTAXES: Built-in inline syntaxes with priorities
InlineParser: Tokenizer plus emphasis matching for inline text

"""

from pizarra.parsing.blocks import DEFAULT_BLOCK_SYNTAXES
from pizarra.parsing.inline import DEFAULT_INLINE_SYNTAXES, InlineParser
from pizarra.parsing.protocols import (
    BlockBuilder,
    BlockContext,
    BlockState,
    BlockSyntax,
    InlineContext,
    InlineSyntax,
    NestedBlocks,
    Prioritized,
)

__all__ = [
    "DEFAULT_BLOCK_SYNTAXES",
    "DEFAULT_INLINE_SYNTAXES",
    "BlockBuilder",
    "BlockContext",
    "BlockState",
    "BlockSyntax",
    "InlineContext",
    "InlineParser",
    "InlineSyntax",
    "NestedBlocks",
    "Prioritized",
]
