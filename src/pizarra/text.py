"""Extract plain text from Pizarra AST nodes.

Used for heading slugs and image alt text. Math contributes its raw TeX.

Example:
    >>> from pizarra import parse, extract_text
    >>> doc = parse("# Area $r^2$ of **circles**", plugins=["math"])
    >>> extract_text(doc.children[0])
    'Area r^2 of circles'
"""

from pizarra.nodes import (
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
    LineBreak,
    Link,
    List,
    ListItem,
    Math,
    MathBlock,
    Node,
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


def extract_text(node: Node) -> str:
    """Extract plain text from any AST node.

    Inline children are concatenated; block children are joined with a
    space. Line breaks contribute a space.

    """
    match node:
        case Text():
            return node.content
        case CodeSpan():
            return node.code
        case Math() | MathBlock():
            return node.content
        case Image():
            return node.alt
        case LineBreak() | SoftBreak():
            return " "
        case FencedCode() | IndentedCode():
            return node.code
        case Emphasis() | Strong() | Strikethrough() | Link() | Paragraph() | Heading():
            return "".join(extract_text(c) for c in node.children)
        case List():
            return " ".join(extract_text(item) for item in node.items)
        case BlockQuote() | ListItem() | Document():
            return " ".join(extract_text(c) for c in node.children)
        case Table():
            return " ".join(extract_text(row) for row in (*node.head, *node.body))
        case TableRow():
            return " ".join(extract_text(cell) for cell in node.cells)
        case TableCell():
            return "".join(extract_text(c) for c in node.children)
        case ThematicBreak() | HtmlBlock() | HtmlInline():
            return ""
        case _:
            return ""
