"""Tests for the LaTeX AST parse helpers used by the export tests."""

from __future__ import annotations

from tests.helpers.latex_parse import (
    find_macros,
    get_body_text,
    get_mandatory_args,
    get_opt_arg,
    parse_latex,
)


class TestParseLatex:
    """parse_latex with export macros."""

    def test_highlight_parsed_with_arguments(self) -> None:
        """\\highLight takes an optional colour and a body."""
        (macro,) = find_macros(parse_latex(r"\highLight[x-bg]{text}"), "highLight")
        assert get_opt_arg(macro) == "x-bg"
        assert get_body_text(macro) == "text"

    def test_style_command_needs_registration(self) -> None:
        """Generated style commands take their argument once registered."""
        latex = r"\ExtraEmphasisA{red}"
        (plain,) = find_macros(parse_latex(latex), "ExtraEmphasisA")
        assert get_body_text(plain) == ""
        (known,) = find_macros(
            parse_latex(latex, style_commands=["ExtraEmphasisA"]), "ExtraEmphasisA"
        )
        assert get_body_text(known) == "red"

    def test_nested_commands(self) -> None:
        """Commands nested in arguments are found."""
        nodes = parse_latex(r"\underLine{\textcolor{c-fg}{\textbf{x}}}")
        assert len(find_macros(nodes, "textbf")) == 1
        (colour,) = find_macros(nodes, "textcolor")
        assert get_mandatory_args(colour) == ["c-fg", "x"]

    def test_no_optional_argument(self) -> None:
        """Missing optional arguments read as None."""
        (macro,) = find_macros(parse_latex(r"\underLine{x}"), "underLine")
        assert get_opt_arg(macro) is None
