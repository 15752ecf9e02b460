"""Math region scanning and rendering.

Leaves first:

- ``delimiters``: the ordered delimiter catalog and ``MathFlavor``
- ``inline``: ``InlineMathScanner``, same-line or one-line-lookahead units
- ``block``: ``BlockMathScanner``, confirm-before-commit block accumulation
- ``engine``: TeX conversion engines (latex2mathml, MathJax passthrough)
- ``render``: ``MathRenderer`` with per-unit error policy

The markdown integration lives in ``pizarra.plugins.math``.

"""

from pizarra.math.block import BlockMathScanner, ScannerState
from pizarra.math.delimiters import (
    DELIMITERS,
    Delimiter,
    MathFlavor,
    classify,
    closer_for,
    validate_flavor,
)
from pizarra.math.engine import MathEngine, MathJaxEngine, MathMLEngine
from pizarra.math.inline import InlineMathScanner
from pizarra.math.render import MathErrorPolicy, MathRenderer, MathRenderResult
from pizarra.math.unit import MathUnit

__all__ = [
    "DELIMITERS",
    "BlockMathScanner",
    "Delimiter",
    "InlineMathScanner",
    "MathEngine",
    "MathErrorPolicy",
    "MathFlavor",
    "MathJaxEngine",
    "MathMLEngine",
    "MathRenderResult",
    "MathRenderer",
    "MathUnit",
    "ScannerState",
    "classify",
    "closer_for",
    "validate_flavor",
]
