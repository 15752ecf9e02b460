"""Math unit renderer.

Chooses the engine's text or display conversion from the unit's flavor
and applies the error policy when the engine fails.

Error policies:
    SOURCE: emit the escaped TeX in ``<code class="math-error">``
    EMPTY: emit nothing
    RAISE: propagate a ``RenderError`` for the whole document

Every failure is logged at WARNING and returned on the result, whatever
the policy.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pizarra.errors import MathRenderError, RenderError
from pizarra.math.engine import MathEngine
from pizarra.math.unit import MathUnit
from pizarra.utils.logger import get_logger
from pizarra.utils.text import escape_html

logger = get_logger(__name__)


class MathErrorPolicy(Enum):
    SOURCE = "source"
    EMPTY = "empty"
    RAISE = "raise"


@dataclass(frozen=True, slots=True)
class MathRenderResult:
    """Markup for one unit, plus the engine error if it failed."""

    markup: str
    error: MathRenderError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MathRenderer:
    """Render ``MathUnit``s through an engine.

    Args:
        engine: Any ``MathEngine``.
        on_error: What to emit when the engine raises ``MathRenderError``.

    """

    __slots__ = ("engine", "on_error")

    def __init__(
        self,
        engine: MathEngine,
        on_error: MathErrorPolicy | str = MathErrorPolicy.SOURCE,
    ) -> None:
        self.engine = engine
        self.on_error = MathErrorPolicy(on_error)

    def render(self, unit: MathUnit) -> MathRenderResult:
        """Convert one unit. Same unit in, same result out."""
        convert = self.engine.text_style if unit.is_inline else self.engine.display_style
        try:
            return MathRenderResult(convert(unit.source))
        except MathRenderError as e:
            error = MathRenderError(unit.source, unit.flavor, e.message)
            error.__cause__ = e.__cause__ or e

        logger.warning("Math render failed (%s): %s", unit.flavor.name, error.message)

        if self.on_error is MathErrorPolicy.RAISE:
            raise RenderError(str(error)) from error
        if self.on_error is MathErrorPolicy.EMPTY:
            return MathRenderResult("", error)
        return MathRenderResult(
            f'<code class="math-error">{escape_html(unit.source)}</code>', error
        )


__all__ = ["MathErrorPolicy", "MathRenderResult", "MathRenderer"]
