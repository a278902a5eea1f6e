"""Tests for LaTeX style command generation.

Macro structure is checked by parsing the generated LaTeX with pylatexenc
rather than by comparing strings where nesting matters.
"""

from __future__ import annotations

import pytest

from extraemphasis.export.preamble import (
    build_style_preamble,
    colour_definition,
    generate_style_definitions,
    latex_colour_name,
    latex_command_name,
    style_command_body,
)
from extraemphasis.styles import StyleDescriptor
from tests.helpers.latex_parse import (
    find_macros,
    get_mandatory_args,
    get_opt_arg,
    parse_latex,
)


class TestNames:
    """Command and colour names."""

    @pytest.mark.parametrize(
        ("style", "command"),
        [
            ("extra-emphasis-01", "ExtraEmphasisA"),
            ("extra-emphasis-16", "ExtraEmphasisP"),
            ("bold", "ExtraEmphasisBold"),
            ("my_face-2", "ExtraEmphasisMyFaceB"),
        ],
    )
    def test_command_name(self, style: str, command: str) -> None:
        """Command names contain letters only."""
        assert latex_command_name(style) == command
        assert command.isalpha()

    def test_colour_name(self) -> None:
        """Colour names are derived from the style name and role."""
        assert latex_colour_name("extra-emphasis-01", "fg") == "extra-emphasis-01-fg"
        assert latex_colour_name("a b", "bg") == "a-b-bg"

    def test_colour_definition(self) -> None:
        """Hex colours use HTML model, named ones colorlet."""
        assert colour_definition("c", "#00f") == r"\definecolor{c}{HTML}{0000FF}"
        assert colour_definition("c", "blue") == r"\colorlet{c}{blue}"


class TestCommandBody:
    """Macro bodies for resolved styles."""

    def test_plain(self) -> None:
        """A plain style passes the content through."""
        assert style_command_body(StyleDescriptor(name="x")) == "#1"

    def test_highlight_outermost(self) -> None:
        """Background highlighting wraps every other command."""
        style = StyleDescriptor(
            name="x",
            foreground="red",
            background="yellow",
            weight="bold",
            underline=True,
        )
        nodes = parse_latex(str(style_command_body(style)))
        assert nodes[0].macroname == "highLight"
        assert get_opt_arg(nodes[0]) == "x-bg"
        assert len(find_macros(nodes, "underLine")) == 1
        assert len(find_macros(nodes, "textbf")) == 1
        (colour,) = find_macros(nodes, "textcolor")
        assert get_mandatory_args(colour)[0] == "x-fg"

    def test_size(self) -> None:
        """Relative size uses textscale."""
        body = style_command_body(StyleDescriptor(name="x", size=1.5))
        assert body == r"\textscale{1.5}{#1}"


class TestDefinitions:
    """Preamble assembly."""

    def test_definitions_per_style(self) -> None:
        """Each style defines its colours before its command."""
        styles = [
            StyleDescriptor(name="extra-emphasis-01", foreground="#FF0000"),
            StyleDescriptor(name="extra-emphasis-02", background="yellow"),
        ]
        lines = generate_style_definitions(styles).splitlines()
        assert lines == [
            r"\definecolor{extra-emphasis-01-fg}{HTML}{FF0000}",
            r"\newcommand{\ExtraEmphasisA}[1]{\textcolor{extra-emphasis-01-fg}{#1}}",
            r"\colorlet{extra-emphasis-02-bg}{yellow}",
            r"\newcommand{\ExtraEmphasisB}[1]{\highLight[extra-emphasis-02-bg]{#1}}",
        ]

    def test_packages_only_when_needed(self) -> None:
        """relsize and lua-ul are loaded only for styles that need them."""
        plain = build_style_preamble([StyleDescriptor(name="x", foreground="red")])
        assert r"\usepackage{xcolor}" in plain
        assert "lua-ul" not in plain
        assert "relsize" not in plain

        fancy = build_style_preamble(
            [StyleDescriptor(name="x", size=1.2, strike_through=True)]
        )
        assert r"\usepackage{relsize}" in fancy
        assert r"\usepackage{lua-ul}" in fancy

    def test_parses(self) -> None:
        """The full preamble parses into the expected commands."""
        preamble = build_style_preamble(
            [StyleDescriptor(name="extra-emphasis-01", foreground="#FF0000")]
        )
        nodes = parse_latex(preamble)
        assert len(find_macros(nodes, "definecolor")) == 1
        (command,) = find_macros(nodes, "newcommand")
        assert len(find_macros([command], "textcolor")) == 1
