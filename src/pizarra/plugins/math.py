"""Math plugin for Pizarra.

Adds support for LaTeX-style math expressions.

Usage:
    >>> md = Markdown(plugins=["math"])
    >>> md("The value is $x^2$ today.")
    '<p>The value is <math ...>...</math> today.</p>\\n'
    >>> md(r"\\[" "\\nx + y\\n" r"\\]")
    '<math display="block" ...>...</math>\\n'

Syntax:
Inline math: $expression$, \\(expression\\), or $$expression$$ in running text
Block math: $$ or \\[ on its own line, closed on a later line by $$ or \\]

A block opener is only accepted once a later line holding its closer
exactly once has been found. Otherwise the line is ordinary text and
inline math gets its chance.

Escaping:
- ``\\$`` for literal dollar sign
- Inside code spans, $ is literal
- ``\\(`` and ``\\[`` are math openers, not CommonMark escapes. An opener
  without a closer is kept as written, backslash included. Write
  ``\\\\(`` for a backslash followed by a literal parenthesis.

Thread Safety:
The plugin holds only immutable configuration. Equation numbers are
counted in the per-render context.
Block scanners are created per block.

"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING

from pizarra.math.block import BlockMathScanner, ScannerState
from pizarra.math.delimiters import TRIGGER_CHARS, MathFlavor, classify
from pizarra.math.engine import MathEngine, MathMLEngine
from pizarra.math.inline import InlineMathScanner
from pizarra.math.render import MathErrorPolicy, MathRenderer
from pizarra.math.unit import MathUnit
from pizarra.nodes import Block, Math, MathBlock
from pizarra.parsing.inline.tokens import InlineToken, NodeToken, TextToken
from pizarra.parsing.protocols import BlockState, Prioritized
from pizarra.plugins import register_plugin

if TYPE_CHECKING:
    from pizarra.location import SourceLocation
    from pizarra.parsing.protocols import BlockBuilder, BlockContext, InlineContext
    from pizarra.reader import Reader
    from pizarra.renderers.html import NodeRenderer, RenderContext

BLOCK_PRIORITY = 90
INLINE_PRIORITY = 50

# Suppresses the number of one display equation
_NO_NUMBER = re.compile(r"\\(?:notag|nonumber)(?![A-Za-z])")


class MathBlockSyntax:
    """Block math on lines starting with ``$`` or ``\\``."""

    __slots__ = ()

    name = "math_block"
    triggers = TRIGGER_CHARS
    can_interrupt_paragraph = True

    def try_open(self, reader: Reader, ctx: BlockContext) -> tuple[BlockBuilder, BlockState] | None:
        scanner = BlockMathScanner(lookahead_limit=ctx.config.math_lookahead_limit)
        location = ctx.location(reader)
        if not scanner.open(reader):
            return None
        return _MathBlockBuilder(scanner, location), BlockState.CONTINUE


class _MathBlockBuilder:
    __slots__ = ("_scanner", "_location")

    def __init__(self, scanner: BlockMathScanner, location: SourceLocation) -> None:
        self._scanner = scanner
        self._location = location

    def proceed(self, reader: Reader) -> BlockState:
        if self._scanner.proceed(reader) is ScannerState.COMPLETE:
            return BlockState.CLOSE
        return BlockState.CONTINUE

    def close(self) -> Block:
        unit = self._scanner.close()
        return MathBlock(location=self._location, content=unit.source, flavor=unit.flavor)


class MathInlineSyntax:
    """Inline math at ``$`` or ``\\``."""

    __slots__ = ("_scanner",)

    triggers = TRIGGER_CHARS

    def __init__(self) -> None:
        self._scanner = InlineMathScanner()

    def try_match(self, reader: Reader, ctx: InlineContext) -> InlineToken | None:
        unit = self._scanner.scan(reader)
        if unit is None:
            return self._unclosed_opener(reader)
        return NodeToken(Math(location=ctx.location, content=unit.source, flavor=unit.flavor))

    @staticmethod
    def _unclosed_opener(reader: Reader) -> InlineToken | None:
        """Keep an unclosed ``\\(`` or ``\\[`` as literal text.

        A dollar opener is left to the tokenizer, so the second ``$`` of an
        unclosed ``$$`` can still open inline math.
        """
        peeked = reader.peek_line()
        if peeked is None:
            return None
        delim = classify(peeked[0])
        if delim is None or not delim.flavor & MathFlavor.BRACKET:
            return None
        reader.advance(len(delim.begin))
        return TextToken(delim.begin)


@register_plugin("math")
class MathPlugin:
    """Plugin adding math regions rendered through a ``MathEngine``.

    Args:
        engine: Conversion engine. Defaults to ``MathMLEngine(macros)``.
        macros: Macro table for the default engine; ignored when an
            engine is given.
        on_error: Policy applied when the engine rejects a region.
        numbered: Number display equations ``(1)``, ``(2)``, ... in
            document order. ``\\notag`` or ``\\nonumber`` in an equation
            leaves it unnumbered.

    Numbering state lives in the per-render ``RenderContext``, so each
    render starts again at 1.

    """

    __slots__ = ("_renderer", "_numbered")

    def __init__(
        self,
        engine: MathEngine | None = None,
        macros: Mapping[str, str] | None = None,
        on_error: MathErrorPolicy | str = MathErrorPolicy.SOURCE,
        *,
        numbered: bool = False,
    ) -> None:
        if engine is None:
            engine = MathMLEngine(macros)
        self._renderer = MathRenderer(engine, on_error)
        self._numbered = numbered

    @property
    def name(self) -> str:
        return "math"

    @property
    def renderer(self) -> MathRenderer:
        return self._renderer

    @property
    def numbered(self) -> bool:
        return self._numbered

    def block_syntaxes(self) -> tuple[Prioritized[MathBlockSyntax], ...]:
        return (Prioritized(MathBlockSyntax(), BLOCK_PRIORITY),)

    def inline_syntaxes(self) -> tuple[Prioritized[MathInlineSyntax], ...]:
        return (Prioritized(MathInlineSyntax(), INLINE_PRIORITY),)

    def node_renderers(self) -> dict[type, NodeRenderer]:
        return {Math: self._render_math, MathBlock: self._render_math_block}

    def _render_math(self, node: Math, ctx: RenderContext) -> str:
        unit = node.unit
        numbered = self._numbered and not unit.is_inline
        if numbered:
            stripped = _NO_NUMBER.sub("", unit.source)
            if stripped != unit.source:
                numbered = False
                unit = MathUnit(stripped, unit.flavor)

        result = self._renderer.render(unit)
        if result.error is not None:
            ctx.math_errors.append(result.error)
            return result.markup
        if not numbered:
            return result.markup

        ctx.equation_count += 1
        n = ctx.equation_count
        return (
            f'<span class="math-equation" id="eq-{n}">'
            f'{result.markup}<span class="math-eqno">({n})</span></span>'
        )

    def _render_math_block(self, node: MathBlock, ctx: RenderContext) -> str:
        markup = self._render_math(node, ctx)  # type: ignore[arg-type]
        return markup + "\n" if markup else ""


__all__ = ["MathBlockSyntax", "MathInlineSyntax", "MathPlugin"]
