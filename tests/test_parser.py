"""Block parser tests.

Covers the CommonMark-style block constructs and how block and inline
math take part in block parsing.
"""

from __future__ import annotations

import pytest

from pizarra import Markdown, parse
from pizarra.config import ParseConfig, parse_config_context
from pizarra.errors import ParseError
from pizarra.math.delimiters import MathFlavor
from pizarra.nodes import (
    BlockQuote,
    FencedCode,
    Heading,
    IndentedCode,
    List,
    Math,
    MathBlock,
    Paragraph,
    SoftBreak,
    Text,
    ThematicBreak,
)
from pizarra.parser import Parser
from pizarra.parsing.protocols import Prioritized

INLINE_DOLLAR = MathFlavor.INLINE | MathFlavor.DOLLAR
DISPLAY_DOLLAR = MathFlavor.DISPLAY | MathFlavor.DOLLAR
DISPLAY_BRACKET = MathFlavor.DISPLAY | MathFlavor.BRACKET


def blocks(source: str, plugins=("math",)):
    return parse(source, plugins=list(plugins)).children


def math_nodes(node) -> list[Math]:
    """All inline Math nodes below ``node``, in document order."""
    found = []
    if isinstance(node, Math):
        return [node]
    for child in getattr(node, "children", ()) or getattr(node, "items", ()):
        found.extend(math_nodes(child))
    return found


class TestParagraphs:
    """Paragraph collection and line handling."""

    def test_empty_source(self) -> None:
        assert blocks("") == ()

    def test_whitespace_only(self) -> None:
        assert blocks("\n  \n\t\n") == ()

    def test_single_paragraph(self) -> None:
        (para,) = blocks("Hello world")
        assert isinstance(para, Paragraph)
        assert para.children == (Text(location=para.location, content="Hello world"),)

    def test_soft_break(self) -> None:
        (para,) = blocks("line one\nline two")
        assert [type(c) for c in para.children] == [Text, SoftBreak, Text]

    def test_blank_line_separates(self) -> None:
        result = blocks("one\n\ntwo")
        assert [type(b) for b in result] == [Paragraph, Paragraph]

    def test_crlf_normalized(self) -> None:
        """Windows line endings parse like Unix ones."""
        assert blocks("a\r\nb\r\n\r\nc") == blocks("a\nb\n\nc")

    def test_paragraph_location(self) -> None:
        result = parse("\n\n  text", source_file="notes.md").children
        loc = result[0].location
        assert (loc.lineno, loc.col_offset) == (3, 3)
        assert loc.source_file == "notes.md"

    def test_indented_continuation_is_lazy(self) -> None:
        (para,) = blocks("first\n        second")
        assert isinstance(para, Paragraph)
        assert para.children[-1].content == "second"


class TestHeadings:
    """ATX and setext headings."""

    @pytest.mark.parametrize("level", range(1, 7))
    def test_atx_levels(self, level: int) -> None:
        (heading,) = blocks("#" * level + " Title")
        assert isinstance(heading, Heading)
        assert heading.level == level

    def test_closing_hashes_removed(self) -> None:
        (heading,) = blocks("## Title ##")
        assert heading.children[0].content == "Title"

    def test_empty_heading(self) -> None:
        (heading,) = blocks("#")
        assert heading.children == ()

    def test_hash_without_space_is_text(self) -> None:
        (para,) = blocks("#hashtag")
        assert isinstance(para, Paragraph)

    def test_seven_hashes_is_text(self) -> None:
        assert isinstance(blocks("####### no")[0], Paragraph)

    def test_heading_interrupts_paragraph(self) -> None:
        result = blocks("text\n# Heading")
        assert [type(b) for b in result] == [Paragraph, Heading]

    def test_setext(self) -> None:
        h1, h2 = blocks("Title\n=====\n\nSub\n---")
        assert (h1.level, h2.level) == (1, 2)
        assert h1.children[0].content == "Title"

    def test_dashes_without_paragraph_are_thematic_break(self) -> None:
        assert isinstance(blocks("---")[0], ThematicBreak)

    def test_heading_with_math(self) -> None:
        (heading,) = blocks("# Area $r^2$")
        assert [m.content for m in math_nodes(heading)] == ["r^2"]


class TestCodeBlocks:
    """Fenced and indented code."""

    def test_fenced(self) -> None:
        (code,) = blocks("```python\nprint(1)\n```")
        assert isinstance(code, FencedCode)
        assert code.code == "print(1)\n"
        assert code.info == "python"
        assert code.language == "python"

    def test_tilde_fence(self) -> None:
        (code,) = blocks("~~~\n$x$\n~~~")
        assert code.marker == "~"
        assert code.code == "$x$\n"

    def test_math_is_literal_in_code(self) -> None:
        (code,) = blocks("```\n$$\nx\n$$\n```")
        assert isinstance(code, FencedCode)
        assert code.code == "$$\nx\n$$\n"

    def test_unclosed_fence_runs_to_end(self) -> None:
        (code,) = blocks("```\ncode")
        assert code.code == "code\n"

    def test_closing_fence_must_be_long_enough(self) -> None:
        (code,) = blocks("````\na\n```\n````")
        assert code.code == "a\n```\n"

    def test_fence_indent_removed_from_content(self) -> None:
        (code,) = blocks("  ```\n  a\n    b\n  ```")
        assert code.code == "a\n  b\n"

    def test_backtick_info_with_backtick_is_not_fence(self) -> None:
        assert isinstance(blocks("``` a`b\nx")[0], Paragraph)

    def test_indented(self) -> None:
        (code,) = blocks("    a\n\n    b\n")
        assert isinstance(code, IndentedCode)
        assert code.code == "a\n\nb\n"

    def test_indented_code_cannot_interrupt_paragraph(self) -> None:
        (para,) = blocks("text\n    more")
        assert isinstance(para, Paragraph)


class TestBlockQuotes:
    """Block quotes and their nested content."""

    def test_simple(self) -> None:
        (quote,) = blocks("> quote\n> more")
        assert isinstance(quote, BlockQuote)
        (para,) = quote.children
        assert [type(c) for c in para.children] == [Text, SoftBreak, Text]

    def test_lazy_continuation(self) -> None:
        (quote,) = blocks("> a\nb")
        assert isinstance(quote, BlockQuote)
        assert len(quote.children[0].children) == 3

    def test_blank_line_ends_quote(self) -> None:
        result = blocks("> a\n\nb")
        assert [type(b) for b in result] == [BlockQuote, Paragraph]

    def test_nested_blocks(self) -> None:
        (quote,) = blocks("> # T\n> para")
        assert [type(b) for b in quote.children] == [Heading, Paragraph]

    def test_nested_quote_line_numbers(self) -> None:
        _, quote = blocks("intro\n\n> a\n>\n> b")
        second = quote.children[1]
        assert second.location.lineno == 5

    def test_block_math_in_quote(self) -> None:
        (quote,) = blocks("> $$\n> x\n> $$")
        (math,) = quote.children
        assert isinstance(math, MathBlock)
        assert math.content == "\nx\n"


class TestLists:
    """Bullet and ordered lists."""

    def test_bullet(self) -> None:
        (lst,) = blocks("- a\n- b")
        assert isinstance(lst, List)
        assert not lst.ordered
        assert lst.tight
        assert len(lst.items) == 2

    def test_ordered_start(self) -> None:
        (lst,) = blocks("3. a\n4. b")
        assert lst.ordered
        assert lst.start == 3

    def test_loose(self) -> None:
        (lst,) = blocks("- a\n\n- b")
        assert not lst.tight

    def test_trailing_blank_does_not_loosen(self) -> None:
        lst, para = blocks("- a\n- b\n\nafter")
        assert lst.tight
        assert isinstance(para, Paragraph)

    def test_different_marker_starts_new_list(self) -> None:
        result = blocks("- a\n+ b")
        assert [type(b) for b in result] == [List, List]

    def test_nested_list(self) -> None:
        (lst,) = blocks("- a\n  - b")
        first = lst.items[0]
        assert [type(b) for b in first.children] == [Paragraph, List]

    def test_lazy_item_continuation(self) -> None:
        (lst,) = blocks("- a\nb")
        (para,) = lst.items[0].children
        assert [type(c) for c in para.children] == [Text, SoftBreak, Text]

    def test_ordered_list_must_start_at_one_to_interrupt(self) -> None:
        (para,) = blocks("text\n2. not a list")
        assert isinstance(para, Paragraph)

    def test_list_interrupts_paragraph(self) -> None:
        result = blocks("text\n- item")
        assert [type(b) for b in result] == [Paragraph, List]

    def test_thematic_break_is_not_list(self) -> None:
        assert isinstance(blocks("- - -")[0], ThematicBreak)

    def test_inline_math_in_item(self) -> None:
        (lst,) = blocks("- $x$\n- $y$")
        assert [m.content for m in math_nodes(lst)] == ["x", "y"]


class TestInlineMathInParagraphs:
    """Inline math found while parsing paragraph text."""

    def test_running_text(self) -> None:
        (para,) = blocks("The value is $x^2$ today.")
        text_before, math, text_after = para.children
        assert text_before.content == "The value is "
        assert (math.content, math.flavor) == ("x^2", INLINE_DOLLAR)
        assert text_after.content == " today."

    def test_double_dollar_on_one_line_is_inline_display(self) -> None:
        (para,) = blocks("$$x$$")
        assert isinstance(para, Paragraph)
        (math,) = para.children
        assert (math.content, math.flavor) == ("x", DISPLAY_DOLLAR)

    def test_paren_delimiters(self) -> None:
        (para,) = blocks("so \\(a+b\\) holds")
        assert [m.flavor for m in math_nodes(para)] == [MathFlavor.INLINE | MathFlavor.BRACKET]

    def test_unterminated_paren_is_text(self) -> None:
        (para,) = blocks("\\(unterminated")
        assert math_nodes(para) == []
        (text,) = para.children
        assert text.content == "\\(unterminated"

    def test_unterminated_bracket_is_text(self) -> None:
        (para,) = blocks("see \\[x + y")
        assert math_nodes(para) == []
        assert para.children[0].content == "see \\[x + y"

    def test_unterminated_opener_renders_backslash(self) -> None:
        assert Markdown(plugins=["math"])("\\(unterminated") == "<p>\\(unterminated</p>\n"

    def test_escaped_backslash_before_paren(self) -> None:
        (para,) = blocks("\\\\(x\\)")
        assert math_nodes(para) == []
        assert para.children[0].content == "\\(x)"

    def test_paren_is_an_escape_without_math(self) -> None:
        (para,) = blocks("\\(unterminated", plugins=())
        assert para.children[0].content == "(unterminated"

    def test_closer_on_next_line(self) -> None:
        (para,) = blocks("a $b\nc$ d")
        (math,) = math_nodes(para)
        assert math.content == "c"
        assert para.children[-1].content == " d"

    def test_closer_two_lines_down_is_not_math(self) -> None:
        (para,) = blocks("a $b\nc\nd$ e")
        assert math_nodes(para) == []

    def test_escaped_dollar(self) -> None:
        (para,) = blocks("costs \\$5 or \\$6")
        assert math_nodes(para) == []
        assert "".join(c.content for c in para.children) == "costs $5 or $6"

    def test_dollar_in_code_span(self) -> None:
        (para,) = blocks("`$x$`")
        assert math_nodes(para) == []

    def test_math_in_link_text(self) -> None:
        (para,) = blocks("[see $x$](#x)")
        assert [m.content for m in math_nodes(para)] == ["x"]

    def test_without_plugin_dollars_are_text(self) -> None:
        (para,) = blocks("The value is $x^2$ today.", plugins=())
        assert math_nodes(para) == []


class TestBlockMath:
    """Block math recognized at line start."""

    def test_bracket_block(self) -> None:
        (math,) = blocks("\\[\nx + y\n\\]")
        assert isinstance(math, MathBlock)
        assert math.content == "\nx + y\n"
        assert math.flavor == DISPLAY_BRACKET

    def test_dollar_block(self) -> None:
        (math,) = blocks("$$\n\\int_0^1 f\n$$")
        assert math.flavor == DISPLAY_DOLLAR
        assert math.content == "\n\\int_0^1 f\n"

    def test_interrupts_paragraph(self) -> None:
        para, math = blocks("Some text\n$$\nx\n$$")
        assert isinstance(para, Paragraph)
        assert isinstance(math, MathBlock)

    def test_text_after_closer(self) -> None:
        math, para = blocks("$$\nx\n$$ tail")
        assert isinstance(math, MathBlock)
        assert para.children[0].content == "tail"

    def test_blank_lines_kept_in_content(self) -> None:
        (math,) = blocks("$$\na\n\nb\n$$")
        assert math.content == "\na\n\nb\n"

    def test_location(self) -> None:
        math = blocks("intro\n\n$$\nx\n$$")[1]
        assert math.location.lineno == 3

    def test_same_line_closer_never_opens_block(self) -> None:
        result = blocks("$$ a $$\nb\n$$")
        assert not any(isinstance(b, MathBlock) for b in result)

    def test_missing_closer_falls_back_to_text(self) -> None:
        (para,) = blocks("$$\nnever closed")
        assert isinstance(para, Paragraph)
        assert para.children[0].content == "$$"

    def test_lookahead_limit(self) -> None:
        source = "$$\na\nb\n$$"
        limited = Markdown(plugins=["math"], math_lookahead_limit=1).parse(source)
        assert not any(isinstance(b, MathBlock) for b in limited.children)
        assert math_nodes(limited.children[0]) == []

        unlimited = Markdown(plugins=["math"]).parse(source)
        assert isinstance(unlimited.children[0], MathBlock)


class TestParserDirect:
    """Using Parser under an explicit configuration."""

    def test_default_config_has_no_math(self) -> None:
        (para,) = Parser("$x$").parse()
        assert math_nodes(para) == []

    def test_config_context(self) -> None:
        from pizarra.plugins.math import MathPlugin

        plugin = MathPlugin()
        config = ParseConfig(
            block_syntaxes=tuple(plugin.block_syntaxes()),
            inline_syntaxes=tuple(plugin.inline_syntaxes()),
        )
        with parse_config_context(config):
            (math,) = Parser("\\[\nx\n\\]").parse()
        assert isinstance(math, MathBlock)

    def test_first_lineno(self) -> None:
        (para,) = Parser("text", first_lineno=10).parse()
        assert para.location.lineno == 10

    def test_inline_syntax_must_consume(self) -> None:
        """A syntax returning a token without consuming input is a bug."""
        from pizarra.parsing.inline.tokens import TextToken

        class Stuck:
            triggers = frozenset("@")

            def try_match(self, reader, ctx):
                return TextToken("@")

        config = ParseConfig(inline_syntaxes=(Prioritized(Stuck(), 10),))
        with parse_config_context(config), pytest.raises(ParseError):
            Parser("a @ b").parse()
