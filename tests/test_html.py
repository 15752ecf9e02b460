"""Raw HTML tests: HTML blocks and inline HTML pass through unchanged."""

from __future__ import annotations

import pytest

from pizarra import Markdown, parse
from pizarra.nodes import HtmlBlock, HtmlInline, Link, Math, Paragraph
from pizarra.parsing.html import classify_html_block, match_inline_html


def html(source: str, plugins=()) -> str:
    return Markdown(plugins=list(plugins))(source)


class TestClassifyHtmlBlock:
    @pytest.mark.parametrize(
        ("line", "kind"),
        [
            ("<pre>\n", 1),
            ("<SCRIPT type='x'>", 1),
            ("<!-- note", 2),
            ("<?php", 3),
            ("<!DOCTYPE html>", 4),
            ("<![CDATA[", 5),
            ("<div class='x'>", 6),
            ("</section>", 6),
            ("<custom-tag data-x=\"1\">", 7),
            ("</span>", 7),
        ],
    )
    def test_kinds(self, line: str, kind: int) -> None:
        start = classify_html_block(line)
        assert start is not None
        assert start.kind == kind

    @pytest.mark.parametrize(
        "line",
        ["<https://example.com>", "<span>text", "< div>", "<3", "text <div>", "</pre>"],
    )
    def test_not_a_block(self, line: str) -> None:
        assert classify_html_block(line) is None


class TestMatchInlineHtml:
    @pytest.mark.parametrize(
        "text",
        [
            "<b>",
            "</b>",
            "<img src='a.png' />",
            '<a href="x"\ntitle=y>',
            "<!-- c -->",
            "<?x?>",
            "<!X y>",
            "<![CDATA[a>b]]>",
        ],
    )
    def test_whole_match(self, text: str) -> None:
        assert match_inline_html(text, 0) == len(text)

    @pytest.mark.parametrize(
        "text",
        ["<", "< b>", "<3>", "<a href=>", "<a b='x'c>", "<http://x.org>"],
    )
    def test_rejected(self, text: str) -> None:
        assert match_inline_html(text, 0) is None


class TestHtmlBlocks:
    """Block-level raw HTML."""

    def test_div_kept_verbatim(self) -> None:
        assert html("<div>\n*hi*\n</div>") == "<div>\n*hi*\n</div>\n"

    def test_blank_line_ends_block(self) -> None:
        assert html("<div>\nx\n\n*em*") == "<div>\nx\n<p><em>em</em></p>\n"

    def test_comment_runs_to_end_marker(self) -> None:
        assert html("<!--\nnote\n\n-->\ntext") == "<!--\nnote\n\n-->\n<p>text</p>\n"

    def test_pre_keeps_blank_lines(self) -> None:
        assert html("<pre>\na\n\nb\n</pre>") == "<pre>\na\n\nb\n</pre>\n"

    def test_single_line_block(self) -> None:
        (block,) = parse("<div>x</div>").children
        assert isinstance(block, HtmlBlock)
        assert block.html == "<div>x</div>\n"

    def test_indentation_kept(self) -> None:
        assert html("  <div>\nx") == "  <div>\nx\n"

    def test_custom_element(self) -> None:
        assert html("<custom-element>\nx") == "<custom-element>\nx\n"

    def test_interrupts_paragraph(self) -> None:
        assert html("text\n<div>\nx") == "<p>text</p>\n<div>\nx\n"

    def test_complete_tag_does_not_interrupt_paragraph(self) -> None:
        assert html("text\n<span>\nmore") == "<p>text\n<span>\nmore</p>\n"

    def test_line_number(self) -> None:
        _, block = parse("intro\n\n<div>\n</div>").children
        assert block.location.lineno == 3


class TestInlineHtml:
    """Raw HTML inside paragraphs."""

    def test_tags_pass_through(self) -> None:
        assert html("a <b>bold</b> c") == "<p>a <b>bold</b> c</p>\n"

    def test_nodes(self) -> None:
        (para,) = parse("x <br/> y").children
        assert isinstance(para, Paragraph)
        assert [type(c).__name__ for c in para.children] == ["Text", "HtmlInline", "Text"]
        assert para.children[1] == HtmlInline(location=para.location, html="<br/>")

    def test_comment(self) -> None:
        assert html("a <!-- hidden --> b") == "<p>a <!-- hidden --> b</p>\n"

    def test_lone_angle_brackets_escaped(self) -> None:
        assert html("a < b and <3") == "<p>a &lt; b and &lt;3</p>\n"

    def test_autolink_wins(self) -> None:
        (para,) = parse("<https://example.com>").children
        assert isinstance(para.children[0], Link)

    def test_inside_code_span_is_code(self) -> None:
        assert html("`<b>`") == "<p><code>&lt;b&gt;</code></p>\n"

    def test_math_source_not_html(self) -> None:
        (para,) = parse("so $<b>$", plugins=["math"]).children
        (_, math) = para.children
        assert isinstance(math, Math)
        assert math.content == "<b>"

    def test_html_around_math(self) -> None:
        md = Markdown(plugins=["math"])
        result = md("<em>$x$</em>")
        assert result.startswith("<p><em><math")
        assert result.endswith("</math></em></p>\n")
