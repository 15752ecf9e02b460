"""Property-based tests for scanners, parser and renderer.

Uses Hypothesis to check behavior that must hold for every input, not
only for hand-picked examples.
"""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from pizarra import Markdown
from pizarra.math.block import BlockMathScanner, ScannerState
from pizarra.math.delimiters import DELIMITERS, classify
from pizarra.math.engine import MathJaxEngine
from pizarra.math.inline import InlineMathScanner
from pizarra.plugins.math import MathPlugin
from pizarra.reader import Reader

# Text biased toward the characters the math syntax cares about
MATH_ALPHABET = st.sampled_from(list("$\\()[]x+ \n*_`>#-1."))
math_text = st.text(MATH_ALPHABET, max_size=60)
delimiter = st.sampled_from(DELIMITERS)
body = st.text(st.characters(blacklist_characters="$\\\n\r"), max_size=20)

MD = Markdown(plugins=[MathPlugin(engine=MathJaxEngine()), "strikethrough"])


class TestScannerProperties:
    """Scanner behavior for arbitrary input."""

    @given(math_text)
    def test_failed_inline_scan_has_no_side_effect(self, source: str) -> None:
        reader = Reader(source)
        before = reader.position()
        if InlineMathScanner().scan(reader) is None:
            assert reader.position() == before

    @given(math_text)
    def test_successful_inline_scan_moves_forward(self, source: str) -> None:
        reader = Reader(source)
        unit = InlineMathScanner().scan(reader)
        if unit is not None:
            first_two_lines = "".join(source.splitlines(keepends=True)[:2])
            assert 0 < reader.offset <= len(first_two_lines)
            assert unit.source in source

    @given(math_text)
    def test_rejected_block_open_has_no_side_effect(self, source: str) -> None:
        reader = Reader(source)
        before = reader.position()
        scanner = BlockMathScanner()
        if not scanner.open(reader):
            assert reader.position() == before
            assert scanner.state is ScannerState.CLOSED

    @given(delimiter, body)
    def test_same_line_closer(self, delim, content: str) -> None:
        """An opener whose closer is on the same line yields that unit."""
        source = f"{delim.begin}{content}{delim.end} tail"
        # "$" followed by content starting a second "$" would be "$$"
        if classify(source) is not delim:
            return
        unit = InlineMathScanner().scan(Reader(source))
        assert unit is not None
        assert unit.source == content
        assert unit.flavor == delim.flavor

    @given(delimiter, body)
    def test_same_line_closer_never_opens_block(self, delim, content: str) -> None:
        source = f"{delim.begin}{content}{delim.end}\nmore\n{delim.end}\n"
        assert BlockMathScanner().open(Reader(source)) is False

    @given(math_text)
    def test_classify_prefers_longest_dollar_run(self, source: str) -> None:
        delim = classify(source)
        if source.startswith("$$"):
            assert delim is DELIMITERS[0]
        elif delim is not None:
            assert source.startswith(delim.begin)


class TestParserProperties:
    """End-to-end behavior for arbitrary input."""

    @settings(max_examples=200)
    @given(math_text)
    def test_parse_never_raises(self, source: str) -> None:
        MD.parse(source)

    @given(st.text(max_size=80))
    def test_parse_arbitrary_unicode(self, source: str) -> None:
        MD.parse(source)

    @given(math_text)
    def test_render_is_idempotent(self, source: str) -> None:
        doc = MD.parse(source)
        renderer = MD.renderer()
        assert renderer.render(doc) == renderer.render(doc)

    @given(math_text)
    def test_parse_is_deterministic(self, source: str) -> None:
        assert MD.parse(source) == MD.parse(source)
