"""
Pizarra: Markdown with math for Python 3.12+

A CommonMark-style Markdown parser whose math plugin recognizes
``$...$``, ``$$...$$``, ``\\(...\\)`` and ``\\[...\\]`` regions and renders
them to MathML. Typed immutable AST, pluggable block and inline syntaxes.

Quick Start:
    >>> from pizarra import parse, render
    >>> doc = parse("# Hello, World!")
    >>> html = render(doc)
    >>> print(html)
    <h1 id="hello-world">Hello, World!</h1>

    >>> # Or use the high-level Markdown class
    >>> from pizarra import Markdown
    >>> md = Markdown(plugins=["math"])
    >>> html = md("The value is $x^2$ today.")

Math Engines:
    >>> from pizarra import Markdown, MathJaxEngine, MathPlugin
    >>>
    >>> # MathML via latex2mathml (default), with macros
    >>> md = Markdown(plugins=[MathPlugin(macros={"R": r"\\mathbb{R}"})])
    >>>
    >>> # Leave conversion to MathJax/KaTeX in the browser
    >>> md = Markdown(plugins=[MathPlugin(engine=MathJaxEngine())])
    >>>
    >>> # Number display equations, with pipe tables enabled
    >>> md = Markdown(plugins=[MathPlugin(numbered=True), "table"])

Installation:
    pip install pizarra
"""

from collections.abc import Callable, Iterable

from pizarra.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from pizarra.errors import (
    MathRenderError,
    ParseError,
    PizarraError,
    PluginError,
    ReaderPositionError,
    RenderError,
)
from pizarra.location import SourceLocation
from pizarra.math import (
    BlockMathScanner,
    InlineMathScanner,
    MathEngine,
    MathErrorPolicy,
    MathFlavor,
    MathJaxEngine,
    MathMLEngine,
    MathRenderer,
    MathUnit,
)
from pizarra.nodes import (
    Block,
    BlockQuote,
    CodeSpan,
    Document,
    Emphasis,
    FencedCode,
    Heading,
    HtmlBlock,
    HtmlInline,
    Image,
    IndentedCode,
    Inline,
    LineBreak,
    Link,
    List,
    ListItem,
    Math,
    MathBlock,
    Paragraph,
    SoftBreak,
    Strikethrough,
    Strong,
    Table,
    TableCell,
    TableRow,
    Text,
    ThematicBreak,
)
from pizarra.parser import Parser
from pizarra.plugins import (
    BUILTIN_PLUGINS,
    MathPlugin,
    PizarraPlugin,
    StrikethroughPlugin,
    TablePlugin,
    get_plugin,
    resolve_plugins,
)
from pizarra.reader import Reader, ReaderPosition, Segment
from pizarra.renderers.html import HtmlRenderer, NodeRenderer
from pizarra.renderers.protocol import ASTRenderer
from pizarra.text import extract_text

__version__ = "0.1.0"

type PluginSpec = str | PizarraPlugin


def _config_for(
    plugins: tuple[PizarraPlugin, ...],
    *,
    math_lookahead_limit: int | None = None,
    text_transformer: Callable[[str], str] | None = None,
) -> ParseConfig:
    return ParseConfig(
        block_syntaxes=tuple(s for p in plugins for s in p.block_syntaxes()),
        inline_syntaxes=tuple(s for p in plugins for s in p.inline_syntaxes()),
        math_lookahead_limit=math_lookahead_limit,
        text_transformer=text_transformer,
    )


def _node_renderers_for(plugins: tuple[PizarraPlugin, ...]) -> dict[type, NodeRenderer]:
    renderers: dict[type, NodeRenderer] = {}
    for plugin in plugins:
        renderers.update(plugin.node_renderers())
    return renderers


def _parse_document(source: str, source_file: str | None) -> Document:
    parser = Parser(source, source_file=source_file)
    blocks = parser.parse()
    # Wrap blocks in a Document
    loc = SourceLocation(
        lineno=1,
        col_offset=1,
        offset=0,
        end_lineno=max(source.count("\n"), 1),
        source_file=source_file,
    )
    return Document(location=loc, children=blocks)


def parse(
    source: str,
    *,
    plugins: Iterable[PluginSpec] | None = None,
    source_file: str | None = None,
) -> Document:
    """Parse Markdown source into a typed AST.

    Args:
        source: Markdown source text
        plugins: Plugin names or instances (e.g. ``["math"]``, ``["all"]``)
        source_file: Optional source file path for locations and errors

    Returns:
        Document AST root node

    Example:
        >>> doc = parse("The value is $x^2$ today.", plugins=["math"])
        >>> doc.children[0].children[1].content
        'x^2'
    """
    config = _config_for(resolve_plugins(plugins))
    with parse_config_context(config):
        return _parse_document(source, source_file)


def render(
    doc: Document,
    *,
    plugins: Iterable[PluginSpec] | None = None,
    source: str = "",
) -> str:
    """Render an AST Document to HTML.

    Without plugins, math renders as escaped TeX in ``span.math`` and
    ``div.math-block`` for client-side typesetting.

    Example:
        >>> doc = parse("# Hello")
        >>> print(render(doc))
        <h1 id="hello">Hello</h1>
    """
    renderer = HtmlRenderer(
        source=source, node_renderers=_node_renderers_for(resolve_plugins(plugins))
    )
    return renderer.render(doc)


class Markdown:
    """High-level Markdown processor combining parser and renderer.

    Usage:
        >>> md = Markdown(plugins=["math"])
        >>> html = md("# Hello **World**")
        '<h1 id="hello-world">Hello <strong>World</strong></h1>\\n'

        >>> # Access the AST
        >>> doc = md.parse("# Heading")
        >>> print(doc.children[0].level)
        1

        >>> # Inspect math the engine rejected
        >>> renderer = md.renderer()
        >>> html = renderer.render(md.parse(source))
        >>> for error in renderer.get_math_errors():
        ...     print(error.source, error.message)

    Thread Safety:
        Uses ContextVar for thread-local configuration. Safe to use multiple
        Markdown instances concurrently from different threads.

    """

    __slots__ = ("_config", "_plugins", "_node_renderers", "_slugify")

    def __init__(
        self,
        *,
        plugins: Iterable[PluginSpec] | None = None,
        math_lookahead_limit: int | None = None,
        text_transformer: Callable[[str], str] | None = None,
        slugify: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize Markdown processor.

        Args:
            plugins: Plugin names or instances to enable (e.g., ["math"]).
                Use ["all"] to enable all built-in plugins.
            math_lookahead_limit: Lines the block math opener may look ahead for
                its closer (None looks to the end of the document)
            text_transformer: Optional callback applied to each text run
            slugify: Optional custom slugify function for heading IDs
        """
        self._plugins = resolve_plugins(plugins)

        # Build immutable config once (thread-safe, reused across calls)
        self._config = _config_for(
            self._plugins,
            math_lookahead_limit=math_lookahead_limit,
            text_transformer=text_transformer,
        )
        self._node_renderers = _node_renderers_for(self._plugins)
        self._slugify = slugify

    @property
    def plugins(self) -> tuple[PizarraPlugin, ...]:
        return self._plugins

    @property
    def config(self) -> ParseConfig:
        return self._config

    def __call__(self, source: str) -> str:
        """Parse and render Markdown in one call."""
        return self.render(self.parse(source), source=source)

    def parse(self, source: str, *, source_file: str | None = None) -> Document:
        """Parse Markdown source into AST.

        Thread Safety:
            Sets config via ContextVar (thread-local). Safe for concurrent use.

        """
        with parse_config_context(self._config):
            return _parse_document(source, source_file)

    def parse_many(
        self,
        sources: Iterable[str],
        *,
        source_file: str | None = None,
    ) -> list[Document]:
        """Parse multiple Markdown sources into AST documents.

        Sets config once, parses all, restores once.

        Example:
            >>> md = Markdown()
            >>> docs = md.parse_many(["# Doc 1", "# Doc 2", "# Doc 3"])
        """
        with parse_config_context(self._config):
            return [_parse_document(source, source_file) for source in sources]

    def renderer(self, *, source: str = "") -> HtmlRenderer:
        """A fresh renderer wired to this instance's plugins."""
        return HtmlRenderer(
            source=source, node_renderers=self._node_renderers, slugify=self._slugify
        )

    def render(self, doc: Document, *, source: str = "") -> str:
        """Render AST to HTML.

        Raises:
            RenderError: When math fails under ``MathErrorPolicy.RAISE``
        """
        return self.renderer(source=source).render(doc)


__all__ = [  # noqa: RUF022 (grouped by category)
    # Version
    "__version__",
    # Core API
    "parse",
    "render",
    "extract_text",
    # Block nodes
    "Block",
    "BlockQuote",
    "Document",
    "FencedCode",
    "Heading",
    "HtmlBlock",
    "IndentedCode",
    "List",
    "ListItem",
    "MathBlock",
    "Paragraph",
    "Table",
    "TableCell",
    "TableRow",
    "ThematicBreak",
    # Inline nodes
    "Inline",
    "CodeSpan",
    "Emphasis",
    "HtmlInline",
    "Image",
    "LineBreak",
    "Link",
    "Math",
    "SoftBreak",
    "Strikethrough",
    "Strong",
    "Text",
    # Math
    "BlockMathScanner",
    "InlineMathScanner",
    "MathEngine",
    "MathErrorPolicy",
    "MathFlavor",
    "MathJaxEngine",
    "MathMLEngine",
    "MathRenderer",
    "MathUnit",
    # Plugins
    "BUILTIN_PLUGINS",
    "MathPlugin",
    "PizarraPlugin",
    "StrikethroughPlugin",
    "TablePlugin",
    "get_plugin",
    "resolve_plugins",
    # Parser components
    "Parser",
    "Reader",
    "ReaderPosition",
    "Segment",
    # Renderer
    "HtmlRenderer",
    "ASTRenderer",
    "NodeRenderer",
    # Errors
    "PizarraError",
    "ParseError",
    "RenderError",
    "MathRenderError",
    "PluginError",
    "ReaderPositionError",
    # Configuration (ContextVar-based)
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Location
    "SourceLocation",
    # High-level
    "Markdown",
]
