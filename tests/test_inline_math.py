"""Tests for InlineMathScanner."""

import pytest

from pizarra.math.delimiters import MathFlavor
from pizarra.math.inline import InlineMathScanner
from pizarra.math.unit import MathUnit
from pizarra.reader import Reader

INLINE_DOLLAR = MathFlavor.INLINE | MathFlavor.DOLLAR
DISPLAY_DOLLAR = MathFlavor.DISPLAY | MathFlavor.DOLLAR


@pytest.fixture
def scanner() -> InlineMathScanner:
    return InlineMathScanner()


class TestSameLine:
    """Closer on the opener's line."""

    def test_single_dollar(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$x^2$ today")
        assert scanner.scan(reader) == MathUnit("x^2", INLINE_DOLLAR)
        assert reader.offset == 5

    def test_double_dollar_is_display(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$$x$$")
        assert scanner.scan(reader) == MathUnit("x", DISPLAY_DOLLAR)
        assert reader.offset == 5

    def test_paren(self, scanner: InlineMathScanner) -> None:
        reader = Reader("\\(a + b\\) and more")
        unit = scanner.scan(reader)
        assert unit == MathUnit("a + b", MathFlavor.INLINE | MathFlavor.BRACKET)
        assert reader.peek_line()[0] == " and more"

    def test_bracket(self, scanner: InlineMathScanner) -> None:
        reader = Reader("\\[a\\]")
        assert scanner.scan(reader) == MathUnit("a", MathFlavor.DISPLAY | MathFlavor.BRACKET)

    def test_first_closer_ends_unit(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$a$ and $b$")
        assert scanner.scan(reader).source == "a"
        assert reader.offset == 3

    def test_scan_from_mid_line(self, scanner: InlineMathScanner) -> None:
        reader = Reader("value $y$!")
        reader.advance(6)
        assert scanner.scan(reader).source == "y"
        assert reader.peek_char() == "!"

    def test_source_is_verbatim(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$ \\alpha  <b> $")
        assert scanner.scan(reader).source == " \\alpha  <b> "


class TestLookahead:
    """Closer on the next line."""

    def test_closer_on_next_line(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$ab\ncd$ ef")
        unit = scanner.scan(reader)
        assert unit == MathUnit("cd", INLINE_DOLLAR)
        assert reader.offset == 7
        assert reader.line_index == 1

    def test_first_line_remainder_is_dropped(self, scanner: InlineMathScanner) -> None:
        reader = Reader("\\(left\nright\\)")
        assert scanner.scan(reader).source == "right"

    def test_only_one_line_is_inspected(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$a\nb\nc$")
        before = reader.position()
        assert scanner.scan(reader) is None
        assert reader.position() == before

    def test_unterminated_at_end(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$ab\n")
        assert scanner.scan(reader) is None
        assert reader.offset == 0


class TestRejection:
    """No unit, no movement."""

    @pytest.mark.parametrize(
        "source",
        ["\\(unterminated", "plain text", "x $y$", "\\*", "", "$$"],
    )
    def test_no_match_leaves_cursor(self, scanner: InlineMathScanner, source: str) -> None:
        reader = Reader(source)
        before = reader.position()
        assert scanner.scan(reader) is None
        assert reader.position() == before

    def test_at_end_of_input(self, scanner: InlineMathScanner) -> None:
        reader = Reader("$x$")
        reader.advance(3)
        assert scanner.scan(reader) is None
