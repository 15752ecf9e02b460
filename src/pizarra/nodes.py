"""Typed AST nodes for Pizarra.

All AST nodes are frozen dataclasses with slots, so they can be shared
across threads and matched with ``match`` statements.

Node Hierarchy:
Node (base)
├── Block (block-level elements)
│   ├── Document
│   ├── Heading
│   ├── Paragraph
│   ├── FencedCode
│   ├── IndentedCode
│   ├── BlockQuote
│   ├── List
│   ├── ListItem
│   ├── ThematicBreak
│   ├── HtmlBlock
│   ├── Table
│   └── MathBlock
└── Inline (inline elements)
    ├── Text
    ├── Emphasis
    ├── Strong
    ├── Strikethrough
    ├── Link
    ├── Image
    ├── CodeSpan
    ├── LineBreak
    ├── SoftBreak
    ├── HtmlInline
    └── Math

Math and MathBlock hold raw TeX. Their children are never rendered
separately: the whole node becomes one engine call.

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads.

"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from pizarra.location import SourceLocation
from pizarra.math.delimiters import MathFlavor
from pizarra.math.unit import MathUnit

# =============================================================================
# Base Node
# =============================================================================


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all AST nodes.

    All nodes track their source location for error messages and debugging.

    """

    location: SourceLocation


# =============================================================================
# Inline Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Text(Node):
    """Plain text content."""

    content: str


@dataclass(frozen=True, slots=True)
class Emphasis(Node):
    """Emphasized (italic) text.

    Markdown: *text* or _text_
    HTML: <em>text</em>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strong(Node):
    """Strong (bold) text.

    Markdown: **text** or __text__
    HTML: <strong>text</strong>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Strikethrough(Node):
    """Deleted text (strikethrough plugin).

    Markdown: ~~deleted~~
    HTML: <del>deleted</del>

    """

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Link(Node):
    """Hyperlink.

    Markdown: [text](url "title") or <https://example.com>
    HTML: <a href="url" title="title">text</a>

    """

    url: str
    title: str | None
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Image(Node):
    """Image.

    Markdown: ![alt](url "title")
    HTML: <img src="url" alt="alt" title="title" />

    """

    url: str
    alt: str
    title: str | None = None


@dataclass(frozen=True, slots=True)
class CodeSpan(Node):
    """Inline code. Dollar signs inside are literal."""

    code: str


@dataclass(frozen=True, slots=True)
class LineBreak(Node):
    """Hard line break (backslash or two trailing spaces)."""


@dataclass(frozen=True, slots=True)
class SoftBreak(Node):
    """Soft line break (single newline in paragraph)."""


@dataclass(frozen=True, slots=True)
class Math(Node):
    """Math region found inside running text.

    Markdown: $E = mc^2$ or \\(E = mc^2\\)
    HTML: engine output, or <span class="math">E = mc^2</span>

    ``$$x$$`` written inline carries a DISPLAY flavor and renders in
    display style.

    """

    content: str
    flavor: MathFlavor = MathFlavor.INLINE | MathFlavor.DOLLAR

    @property
    def unit(self) -> MathUnit:
        return MathUnit(self.content, self.flavor)


@dataclass(frozen=True, slots=True)
class HtmlInline(Node):
    """Inline raw HTML.

    Markdown: <span>text</span>
    HTML: passed through unchanged

    """

    html: str


# PEP 695 type alias for inline elements
type Inline = (
    Text
    | Emphasis
    | Strong
    | Strikethrough
    | Link
    | Image
    | CodeSpan
    | LineBreak
    | SoftBreak
    | Math
    | HtmlInline
)


# =============================================================================
# Block Nodes
# =============================================================================


@dataclass(frozen=True, slots=True)
class Heading(Node):
    """ATX or setext heading.

    Markdown: ## Heading
    HTML: <h2 id="heading">Heading</h2>

    """

    level: Literal[1, 2, 3, 4, 5, 6]
    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class Paragraph(Node):
    """Paragraph block."""

    children: tuple[Inline, ...]


@dataclass(frozen=True, slots=True)
class FencedCode(Node):
    """Fenced code block.

    ``code`` already has up to ``fence_indent`` leading spaces removed
    from each line, per CommonMark.

    """

    code: str
    info: str | None = None
    marker: Literal["`", "~"] = "`"
    fence_indent: int = 0

    @property
    def language(self) -> str | None:
        """First word of the info string."""
        if not self.info:
            return None
        return self.info.split()[0]


@dataclass(frozen=True, slots=True)
class IndentedCode(Node):
    """Indented code block (4+ spaces)."""

    code: str


@dataclass(frozen=True, slots=True)
class BlockQuote(Node):
    """Block quote.

    Markdown: > quoted text
    HTML: <blockquote>text</blockquote>

    """

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class ListItem(Node):
    """List item."""

    children: tuple[Block, ...]


@dataclass(frozen=True, slots=True)
class List(Node):
    """Ordered or unordered list.

    Markdown: - item or 1. item
    HTML: <ul>/<ol> with <li> children

    """

    items: tuple[ListItem, ...]
    ordered: bool = False
    start: int = 1  # Starting number for ordered lists
    tight: bool = True  # Tight vs loose list


@dataclass(frozen=True, slots=True)
class ThematicBreak(Node):
    """Thematic break (horizontal rule)."""


@dataclass(frozen=True, slots=True)
class HtmlBlock(Node):
    """Raw HTML block.

    Markdown: HTML that starts a block
    HTML: passed through unchanged

    """

    html: str


type Alignment = Literal["left", "center", "right"] | None


@dataclass(frozen=True, slots=True)
class TableCell(Node):
    """Table cell (th or td)."""

    children: tuple[Inline, ...]
    is_header: bool = False
    align: Alignment = None


@dataclass(frozen=True, slots=True)
class TableRow(Node):
    """Table row.

    Markdown: | cell1 | cell2 |
    HTML: <tr><td>cell1</td><td>cell2</td></tr>

    """

    cells: tuple[TableCell, ...]
    is_header: bool = False


@dataclass(frozen=True, slots=True)
class Table(Node):
    """Pipe table.

    Markdown:
        | A | B |
        |---|---|
        | 1 | 2 |

    Every row has exactly one cell per column of the header.

    """

    head: tuple[TableRow, ...]
    body: tuple[TableRow, ...]
    alignments: tuple[Alignment, ...]


@dataclass(frozen=True, slots=True)
class MathBlock(Node):
    """Math region occupying its own lines.

    Markdown:
        \\[
        x + y
        \\]

    ``content`` is the verbatim text between the delimiters, including
    the newline that follows the opener.

    """

    content: str
    flavor: MathFlavor = MathFlavor.DISPLAY | MathFlavor.DOLLAR

    @property
    def unit(self) -> MathUnit:
        return MathUnit(self.content, self.flavor)


@dataclass(frozen=True, slots=True)
class Document(Node):
    """Root document node."""

    children: tuple[Block, ...]


# PEP 695 type alias for block elements
type Block = (
    Document
    | Heading
    | Paragraph
    | FencedCode
    | IndentedCode
    | BlockQuote
    | List
    | ListItem
    | ThematicBreak
    | HtmlBlock
    | Table
    | MathBlock
)
