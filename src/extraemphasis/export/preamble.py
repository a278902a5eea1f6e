"""LaTeX preamble assembly for emphasis styles.

Each exported style becomes one ``\\newcommand`` taking the span content
as its single argument, plus the colour definitions it refers to:

    \\definecolor{extra-emphasis-01-fg}{HTML}{FF0000}
    \\newcommand{\\ExtraEmphasisA}[1]{\\textcolor{extra-emphasis-01-fg}{#1}}

Backgrounds, underlines and strike-through use lua-ul (LuaLaTeX), size
uses relsize.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from extraemphasis.export.backends import hex_colour
from extraemphasis.export.latex_render import NoEscape, latex_cmd

if TYPE_CHECKING:
    from collections.abc import Iterable

    from extraemphasis.styles import StyleDescriptor

__all__ = [
    "build_style_preamble",
    "colour_definition",
    "generate_style_definitions",
    "latex_colour_name",
    "latex_command_name",
    "style_command_body",
]

_STYLE_PREFIX = "extra-emphasis"


def _alpha_index(number: int) -> str:
    """Bijective base-26 letters: 1 -> A, 26 -> Z, 27 -> AA."""
    if number <= 0:
        return "Zero"
    letters = ""
    while number:
        number, rem = divmod(number - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def latex_command_name(style_name: str) -> str:
    """Letters-only macro name for a style.

    ``extra-emphasis-01`` -> ``ExtraEmphasisA``, ``bold`` ->
    ``ExtraEmphasisBold``.
    """
    suffix = style_name.removeprefix(_STYLE_PREFIX)
    parts: list[str] = []
    for word in re.split(r"[^A-Za-z0-9]+", suffix):
        if not word:
            continue
        word = re.sub(r"\d+", lambda m: _alpha_index(int(m.group())), word)
        parts.append(word[0].upper() + word[1:])
    return "ExtraEmphasis" + "".join(parts)


def latex_colour_name(style_name: str, role: str) -> str:
    """xcolor name for a style's ``fg`` or ``bg`` colour."""
    safe_name = re.sub(r"[^A-Za-z0-9-]", "-", style_name)
    return f"{safe_name}-{role}"


def colour_definition(name: str, colour: str) -> str:
    """``\\definecolor`` for hex colours, ``\\colorlet`` for named ones."""
    hex_code = hex_colour(colour)
    if hex_code is not None:
        return f"\\definecolor{{{name}}}{{HTML}}{{{hex_code}}}"
    return f"\\colorlet{{{name}}}{{{colour}}}"


def style_command_body(style: StyleDescriptor) -> NoEscape:
    """Macro body applying a resolved style to ``#1``."""
    body = NoEscape("#1")
    if style.weight == "bold":
        body = latex_cmd("textbf", body)
    if style.slant == "italic":
        body = latex_cmd("textit", body)
    if style.size and style.size != 1:
        body = latex_cmd("textscale", NoEscape(f"{style.size:g}"), body)
    if style.foreground:
        colour = NoEscape(latex_colour_name(style.name, "fg"))
        body = latex_cmd("textcolor", colour, body)
    if style.underline:
        body = latex_cmd("underLine", body)
    if style.strike_through:
        body = latex_cmd("strikeThrough", body)
    if style.background:
        body = latex_cmd(
            "highLight", body, optional=latex_colour_name(style.name, "bg")
        )
    return body


def generate_style_definitions(styles: Iterable[StyleDescriptor]) -> str:
    """Colour definitions and ``\\newcommand`` lines for resolved styles."""
    definitions: list[str] = []
    for style in styles:
        if style.foreground:
            definitions.append(
                colour_definition(latex_colour_name(style.name, "fg"), style.foreground)
            )
        if style.background:
            definitions.append(
                colour_definition(latex_colour_name(style.name, "bg"), style.background)
            )
        command = latex_command_name(style.name)
        definitions.append(
            f"\\newcommand{{\\{command}}}[1]{{{style_command_body(style)}}}"
        )
    return "\n".join(definitions)


def build_style_preamble(styles: Iterable[StyleDescriptor]) -> str:
    """Package imports plus definitions for *styles*."""
    styles = list(styles)
    packages = [r"\usepackage{xcolor}"]
    if any(s.size and s.size != 1 for s in styles):
        packages.append(r"\usepackage{relsize}")
    if any(s.background or s.underline or s.strike_through for s in styles):
        packages.append(r"\usepackage{luacolor}")
        packages.append(r"\usepackage{lua-ul}")
    return "\n".join([*packages, generate_style_definitions(styles)])
