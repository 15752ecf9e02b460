"""HTML renderer using StringBuilder pattern.

Renders typed AST to HTML with O(n) performance using StringBuilder.

Thread Safety:
All per-render state is encapsulated in RenderContext, created fresh for each
render() call. Multiple threads can safely share a single HtmlRenderer instance
and call render() concurrently without synchronization.

Node Renderers:
Plugins supply render hooks keyed by node type. A hook receives the node and
the current RenderContext and returns finished markup, which replaces the
node's default rendering. Math has a client-side default so documents parsed
with the math plugin still render without it.

Single-Pass Heading Decoration:
Heading IDs are generated during the AST walk. TOC data is collected during
rendering.

Raw HTML:
HTML blocks and inline HTML pass through unchanged, as CommonMark
specifies.
"""

import html
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote as url_quote

from pizarra.errors import MathRenderError
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
    TableRow,
    Text,
    ThematicBreak,
)
from pizarra.stringbuilder import StringBuilder
from pizarra.text import extract_text
from pizarra.utils.logger import get_logger
from pizarra.utils.text import slugify as default_slugify

logger = get_logger(__name__)

type NodeRenderer = Callable[[Any, "RenderContext"], str]


def html_escape(s: str) -> str:
    """Escape HTML special characters.

    CommonMark-compliant: escapes <, >, &, " but NOT single quotes.
    Python's html.escape() escapes ' to &#x27; which CommonMark doesn't require.
    """
    return html.escape(s, quote=False).replace('"', "&quot;")


def _encode_url(url: str) -> str:
    """Decode entities, then percent-encode what is unsafe in an href."""
    decoded = html.unescape(url)
    return url_quote(decoded, safe="/:?#[]@!$&'()*+,;=-_.~%")


@dataclass(frozen=True, slots=True)
class HeadingInfo:
    """Heading metadata collected during rendering.

    Used to build a TOC without scanning the output.
    """

    level: int
    text: str
    slug: str


@dataclass(slots=True)
class RenderContext:
    """Per-render mutable state.

    Created fresh for each render, so HtmlRenderer instances can be shared
    across threads.

    Attributes:
        headings: Headings in document order
        seen_slugs: Slugs already assigned, for de-duplication
        math_errors: Math regions the engine rejected, in document order
        equation_count: Display equations numbered so far

    """

    headings: list[HeadingInfo] = field(default_factory=list)
    seen_slugs: set[str] = field(default_factory=set)
    math_errors: list[MathRenderError] = field(default_factory=list)
    equation_count: int = 0


class HtmlRenderer:
    """Render AST to HTML using StringBuilder pattern.

    Usage:
        >>> from pizarra import parse
        >>> doc = parse("# Hello **World**")
        >>> HtmlRenderer().render(doc)
        '<h1 id="hello-world">Hello <strong>World</strong></h1>\\n'

    Thread Safety:
        Multiple threads can safely share a single HtmlRenderer instance.
        Each render() call creates an independent RenderContext.
        ``get_headings()`` and ``get_math_errors()`` report the most recent
        render and are only meaningful in the thread that made it.
    """

    __slots__ = (
        "_source",
        "_node_renderers",
        "_slugify",
        "_last_context",
    )

    def __init__(
        self,
        source: str = "",
        *,
        node_renderers: Mapping[type, NodeRenderer] | None = None,
        slugify: Callable[[str], str] | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            source: Original source text (kept for renderers that quote it)
            node_renderers: Render hooks keyed by node type, usually
                collected from plugins
            slugify: Optional custom slugify function for heading IDs
        """
        self._source = source
        self._node_renderers: dict[type, NodeRenderer] = dict(node_renderers or {})
        self._slugify = slugify or default_slugify
        self._last_context: RenderContext | None = None

    def render(self, node: Document) -> str:
        """Render document AST to HTML string.

        Raises:
            RenderError: When a render hook raises it (math under
                ``MathErrorPolicy.RAISE``)
        """
        ctx = RenderContext()
        sb = StringBuilder()
        for child in node.children:
            self._render_block(child, sb, ctx)

        self._last_context = ctx
        if ctx.math_errors:
            logger.debug("Rendered document with %d math error(s)", len(ctx.math_errors))
        return sb.build()

    def get_headings(self) -> list[HeadingInfo]:
        """Heading info collected during the last render()."""
        if self._last_context is None:
            return []
        return self._last_context.headings.copy()

    def get_math_errors(self) -> list[MathRenderError]:
        """Math errors recorded during the last render()."""
        if self._last_context is None:
            return []
        return self._last_context.math_errors.copy()

    def _hook(self, node: Block | Inline, sb: StringBuilder, ctx: RenderContext) -> bool:
        hook = self._node_renderers.get(type(node))
        if hook is None:
            return False
        sb.append(hook(node, ctx))
        return True

    # =========================================================================
    # Block rendering
    # =========================================================================

    def _render_block(self, block: Block, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render a block node."""
        if self._node_renderers and self._hook(block, sb, ctx):
            return

        match block:
            case Heading():
                self._render_heading(block, sb, ctx)
            case Paragraph():
                self._render_paragraph(block, sb, ctx)
            case FencedCode():
                self._render_fenced_code(block, sb)
            case IndentedCode():
                self._render_indented_code(block, sb)
            case BlockQuote():
                self._render_blockquote(block, sb, ctx)
            case List():
                self._render_list(block, sb, ctx)
            case ThematicBreak():
                sb.append("<hr />\n")
            case HtmlBlock():
                # CommonMark: HTML blocks end with exactly one newline
                sb.append(block.html.rstrip("\n")).append("\n")
            case Table():
                self._render_table(block, sb, ctx)
            case MathBlock():
                self._render_math_block(block, sb)
            case Document():
                for child in block.children:
                    self._render_block(child, sb, ctx)
            case ListItem():
                # Should be rendered by list, but handle standalone
                self._render_list_item(block, sb, ctx, tight=True)

    def _render_heading(self, heading: Heading, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render heading with ID for anchoring."""
        text = extract_text(heading)
        slug = self._slugify(text) or "section"

        original_slug = slug
        counter = 1
        while slug in ctx.seen_slugs:
            slug = f"{original_slug}-{counter}"
            counter += 1
        ctx.seen_slugs.add(slug)

        ctx.headings.append(HeadingInfo(level=heading.level, text=text, slug=slug))

        sb.append(f'<h{heading.level} id="{html_escape(slug)}">')
        self._render_inlines(heading.children, sb, ctx)
        sb.append(f"</h{heading.level}>\n")

    def _render_paragraph(self, para: Paragraph, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append("<p>")
        self._render_inlines(para.children, sb, ctx)
        sb.append("</p>\n")

    def _render_fenced_code(self, code: FencedCode, sb: StringBuilder) -> None:
        # CommonMark: decode HTML entities in info string, then take first word as language
        info = html.unescape(code.info) if code.info else None
        lang = info.split()[0] if info else None
        lang_class = f' class="language-{html_escape(lang)}"' if lang else ""

        sb.append(f"<pre><code{lang_class}>")
        sb.append(html_escape(code.code))
        sb.append("</code></pre>\n")

    def _render_indented_code(self, code: IndentedCode, sb: StringBuilder) -> None:
        sb.append("<pre><code>")
        sb.append(html_escape(code.code))
        sb.append("</code></pre>\n")

    def _render_blockquote(self, quote: BlockQuote, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append("<blockquote>\n")
        for child in quote.children:
            self._render_block(child, sb, ctx)
        sb.append("</blockquote>\n")

    def _render_list(self, lst: List, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render ordered or unordered list."""
        if lst.ordered:
            start_attr = f' start="{lst.start}"' if lst.start != 1 else ""
            sb.append(f"<ol{start_attr}>\n")
        else:
            sb.append("<ul>\n")

        for item in lst.items:
            self._render_list_item(item, sb, ctx, lst.tight)

        sb.append("</ol>\n" if lst.ordered else "</ul>\n")

    def _render_list_item(
        self, item: ListItem, sb: StringBuilder, ctx: RenderContext, tight: bool
    ) -> None:
        """Render list item.

        CommonMark:
        - Tight lists: paragraphs render as bare text (no <p> tags)
        - Loose lists: all paragraphs wrapped in <p> tags
        """
        sb.append("<li>")

        if not item.children:
            pass
        elif tight and len(item.children) == 1 and isinstance(item.children[0], Paragraph):
            self._render_inlines(item.children[0].children, sb, ctx)
        elif tight:
            # Tight list, first block a paragraph: <li>text\n...rest</li>
            # Tight list, first block anything else: <li>\n<block>...</li>
            first = item.children[0]
            if isinstance(first, Paragraph):
                self._render_inlines(first.children, sb, ctx)
                sb.append("\n")
                for child in item.children[1:]:
                    self._render_block(child, sb, ctx)
            else:
                sb.append("\n")
                last = len(item.children) - 1
                for i, child in enumerate(item.children):
                    if isinstance(child, Paragraph):
                        self._render_inlines(child.children, sb, ctx)
                        if i < last:
                            sb.append("\n")
                    else:
                        self._render_block(child, sb, ctx)
        else:
            sb.append("\n")
            for child in item.children:
                self._render_block(child, sb, ctx)

        sb.append("</li>\n")

    def _render_table(self, table: Table, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append("<table>\n")
        sb.append("<thead>\n")
        for row in table.head:
            self._render_table_row(row, sb, ctx)
        sb.append("</thead>\n")

        if table.body:
            sb.append("<tbody>\n")
            for row in table.body:
                self._render_table_row(row, sb, ctx)
            sb.append("</tbody>\n")

        sb.append("</table>\n")

    def _render_table_row(self, row: TableRow, sb: StringBuilder, ctx: RenderContext) -> None:
        sb.append("<tr>\n")
        tag = "th" if row.is_header else "td"
        for cell in row.cells:
            style = f' style="text-align: {cell.align}"' if cell.align else ""
            sb.append(f"<{tag}{style}>")
            self._render_inlines(cell.children, sb, ctx)
            sb.append(f"</{tag}>\n")
        sb.append("</tr>\n")

    def _render_math_block(self, math: MathBlock, sb: StringBuilder) -> None:
        """Client-side fallback when no math engine is registered."""
        sb.append('<div class="math-block">\n')
        sb.append(html_escape(math.content.strip("\n")))
        sb.append("\n</div>\n")

    # =========================================================================
    # Inline rendering
    # =========================================================================

    def _render_inlines(
        self, inlines: tuple[Inline, ...], sb: StringBuilder, ctx: RenderContext
    ) -> None:
        """Render a sequence of inline nodes."""
        for inline in inlines:
            self._render_inline(inline, sb, ctx)

    def _render_inline(self, inline: Inline, sb: StringBuilder, ctx: RenderContext) -> None:
        """Render an inline node."""
        if self._node_renderers and self._hook(inline, sb, ctx):
            return

        match inline:
            case Text():
                sb.append(html_escape(inline.content))
            case Emphasis():
                sb.append("<em>")
                self._render_inlines(inline.children, sb, ctx)
                sb.append("</em>")
            case Strong():
                sb.append("<strong>")
                self._render_inlines(inline.children, sb, ctx)
                sb.append("</strong>")
            case Strikethrough():
                sb.append("<del>")
                self._render_inlines(inline.children, sb, ctx)
                sb.append("</del>")
            case Link():
                href = html_escape(_encode_url(inline.url))
                title = f' title="{html_escape(inline.title)}"' if inline.title else ""
                sb.append(f'<a href="{href}"{title}>')
                self._render_inlines(inline.children, sb, ctx)
                sb.append("</a>")
            case Image():
                src = html_escape(_encode_url(inline.url))
                alt = html_escape(inline.alt)
                title = f' title="{html_escape(inline.title)}"' if inline.title else ""
                sb.append(f'<img src="{src}" alt="{alt}"{title} />')
            case CodeSpan():
                sb.append("<code>")
                sb.append(html_escape(inline.code))
                sb.append("</code>")
            case LineBreak():
                sb.append("<br />\n")
            case SoftBreak():
                sb.append("\n")
            case HtmlInline():
                sb.append(inline.html)
            case Math():
                sb.append('<span class="math">')
                sb.append(html_escape(inline.content))
                sb.append("</span>")


__all__ = ["HeadingInfo", "HtmlRenderer", "NodeRenderer", "RenderContext", "html_escape"]
