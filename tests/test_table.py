"""Pipe table tests."""

from __future__ import annotations

import pytest

from pizarra import Markdown, extract_text, parse
from pizarra.nodes import Math, Paragraph, Strong, Table
from pizarra.parsing.blocks.table import parse_delimiter_row, split_row


def blocks(source: str, plugins=("table",)):
    return parse(source, plugins=list(plugins)).children


def html(source: str, plugins=("table",)) -> str:
    return Markdown(plugins=list(plugins))(source)


class TestSplitRow:
    def test_outer_pipes_dropped(self) -> None:
        assert split_row("| a | b |\n") == [" a ", " b "]

    def test_without_outer_pipes(self) -> None:
        assert split_row("a | b") == ["a ", " b"]

    def test_escaped_pipe_stays_in_cell(self) -> None:
        assert split_row("| a \\| b | c |") == [" a | b ", " c "]

    def test_no_pipe(self) -> None:
        assert split_row("plain text") is None


class TestDelimiterRow:
    def test_alignments(self) -> None:
        assert parse_delimiter_row("|:---|:-:|--:|---|") == ("left", "center", "right", None)

    @pytest.mark.parametrize(
        "line",
        ["| a |", "|:|", "| -x- |", "plain", "|---||"],
        ids=["text", "colon-only", "letters", "no-pipe", "empty-cell"],
    )
    def test_rejected(self, line: str) -> None:
        assert parse_delimiter_row(line) is None


class TestTableParsing:
    """Tables in the block structure."""

    def test_basic(self) -> None:
        (table,) = blocks("| A | B |\n|---|---|\n| 1 | 2 |")
        assert isinstance(table, Table)
        assert len(table.head) == 1
        assert len(table.body) == 1
        assert [extract_text(c) for c in table.body[0].cells] == ["1", "2"]

    def test_short_and_long_rows_fit_header(self) -> None:
        (table,) = blocks("| a | b |\n|---|---|\n| 1 |\n| 1 | 2 | 3 |")
        assert [len(row.cells) for row in table.body] == [2, 2]
        assert table.body[0].cells[1].children == ()

    def test_column_count_mismatch_is_paragraph(self) -> None:
        result = blocks("| a | b |\n|---|")
        assert [type(b) for b in result] == [Paragraph]

    def test_header_only(self) -> None:
        (table,) = blocks("| a |\n|---|")
        assert table.body == ()

    def test_blank_line_ends_table(self) -> None:
        result = blocks("| a |\n|---|\n| 1 |\n\ntext")
        assert [type(b) for b in result] == [Table, Paragraph]

    def test_line_without_pipe_ends_table(self) -> None:
        table, para = blocks("| a |\n|---|\n| 1 |\nplain")
        assert len(table.body) == 1
        assert extract_text(para) == "plain"

    def test_interrupts_paragraph(self) -> None:
        result = blocks("intro\n| a |\n|---|")
        assert [type(b) for b in result] == [Paragraph, Table]

    def test_inline_markup_in_cells(self) -> None:
        (table,) = blocks("| **b** |\n|---|")
        (cell,) = table.head[0].cells
        assert isinstance(cell.children[0], Strong)
        assert cell.is_header

    def test_math_with_escaped_pipes(self) -> None:
        (table,) = blocks("| norm |\n|---|\n| $\\|x\\|$ |", plugins=("table", "math"))
        (math,) = table.body[0].cells[0].children
        assert isinstance(math, Math)
        assert math.content == "|x|"

    def test_row_line_numbers(self) -> None:
        (table,) = blocks("| a |\n|---|\n| 1 |\n| 2 |")
        assert [row.location.lineno for row in table.body] == [3, 4]


class TestTableRendering:
    def test_basic(self) -> None:
        assert html("| A | B |\n|---|---|\n| 1 | 2 |") == (
            "<table>\n<thead>\n<tr>\n<th>A</th>\n<th>B</th>\n</tr>\n</thead>\n"
            "<tbody>\n<tr>\n<td>1</td>\n<td>2</td>\n</tr>\n</tbody>\n</table>\n"
        )

    def test_alignment_styles(self) -> None:
        result = html("| L | C |\n|:--|:-:|\n| 1 | 2 |")
        assert '<th style="text-align: left">L</th>' in result
        assert '<td style="text-align: center">2</td>' in result

    def test_no_tbody_without_rows(self) -> None:
        assert html("| a |\n|---|") == (
            "<table>\n<thead>\n<tr>\n<th>a</th>\n</tr>\n</thead>\n</table>\n"
        )

    def test_cell_text_escaped(self) -> None:
        assert "<td>a &amp; b</td>" in html("| x |\n|---|\n| a &amp; b |")

    def test_extract_text(self) -> None:
        doc = parse("| A | B |\n|---|---|\n| 1 | 2 |", plugins=["table"])
        assert extract_text(doc) == "A B 1 2"
