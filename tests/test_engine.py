"""Tests for the TeX conversion engines."""

import pytest

from pizarra.errors import MathRenderError
from pizarra.math.engine import (
    MathEngine,
    MathJaxEngine,
    MathMLEngine,
    normalize_macros,
)


class TestMathMLEngine:
    """Tests for the latex2mathml engine."""

    def test_text_style(self) -> None:
        markup = MathMLEngine().text_style("x^2")
        assert markup.startswith("<math")
        assert "<msup>" in markup
        assert 'display="block"' not in markup

    def test_display_style(self) -> None:
        markup = MathMLEngine().display_style("x + y")
        assert markup.startswith("<math")
        assert 'display="block"' in markup

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MathMLEngine(), MathEngine)
        assert isinstance(MathJaxEngine(), MathEngine)

    def test_macro_expansion_before_conversion(self) -> None:
        with_macro = MathMLEngine(macros={"R": r"\mathbb{R}"}).text_style(r"x \in \R")
        spelled_out = MathMLEngine().text_style(r"x \in \mathbb{R}")
        assert with_macro == spelled_out


class TestMacros:
    """Tests for macro tables and expansion."""

    def test_leading_backslash_is_optional(self) -> None:
        assert dict(normalize_macros({"\\R": "a", "N": "b"})) == {"R": "a", "N": "b"}

    def test_invalid_name(self) -> None:
        with pytest.raises(ValueError, match="invalid macro name"):
            normalize_macros({"R2": "x"})

    def test_table_is_frozen(self) -> None:
        engine = MathMLEngine(macros={"R": "r"})
        with pytest.raises(TypeError):
            engine.macros["N"] = "n"  # type: ignore[index]

    def test_expand(self) -> None:
        engine = MathMLEngine(macros={"R": r"\mathbb{R}"})
        assert engine.expand_macros(r"\R^n") == r"\mathbb{R}^n"

    def test_longer_name_not_split(self) -> None:
        engine = MathMLEngine(macros={"R": "r"})
        assert engine.expand_macros(r"\Rightarrow \R") == r"\Rightarrow r"

    def test_nested(self) -> None:
        engine = MathMLEngine(macros={"RR": r"\R", "R": r"\mathbb{R}"})
        assert engine.expand_macros(r"\RR") == r"\mathbb{R}"

    def test_self_reference_is_stable(self) -> None:
        engine = MathMLEngine(macros={"a": r"\a"})
        assert engine.expand_macros(r"\a") == r"\a"

    def test_runaway_expansion(self) -> None:
        engine = MathMLEngine(macros={"a": r"\a\a"})
        with pytest.raises(MathRenderError, match="maximum depth"):
            engine.expand_macros(r"\a")

    def test_no_macros_is_identity(self) -> None:
        assert MathMLEngine().expand_macros(r"\alpha") == r"\alpha"


class TestMathJaxEngine:
    """Tests for the client-side passthrough."""

    def test_text_style(self) -> None:
        assert MathJaxEngine().text_style("a<b") == (
            '<span class="math notranslate nohighlight">\\(a&lt;b\\)</span>'
        )

    def test_display_style(self) -> None:
        assert MathJaxEngine().display_style("x") == (
            '<span class="math display notranslate nohighlight">\\[x\\]</span>'
        )
