"""Pizarra renderers.

Renderers convert typed AST nodes into output formats.

Available Renderers:
- HtmlRenderer: Renders AST to HTML using StringBuilder pattern

Thread Safety:
All renderers use StringBuilder local to each render() call.
Safe for concurrent use from multiple threads.

"""

from pizarra.renderers.html import HeadingInfo, HtmlRenderer, RenderContext
from pizarra.renderers.protocol import ASTRenderer

__all__ = ["ASTRenderer", "HeadingInfo", "HtmlRenderer", "RenderContext"]
