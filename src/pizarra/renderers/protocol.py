"""ASTRenderer protocol for renderers of a parsed ``Document``.

Any renderer that implements ``render(node) -> str`` conforms to this protocol.
The built-in ``HtmlRenderer`` is the reference implementation.

Example:
    from pizarra.renderers.protocol import ASTRenderer

    def render_page(renderer: ASTRenderer, doc: Document) -> str:
        return renderer.render(doc)

"""

from typing import Protocol, runtime_checkable

from pizarra.nodes import Document


@runtime_checkable
class ASTRenderer(Protocol):
    """Protocol for AST renderers.

    Implementations must accept a Document and return a rendered string.
    Renderers used by ``Markdown`` also report math regions the engine
    rejected during their last render.

    """

    def render(self, node: Document) -> str:
        """Render a Document AST to a string."""
        ...

    def get_math_errors(self) -> list:
        """Math errors from the most recent render()."""
        ...
