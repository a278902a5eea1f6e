"""Escaping and command building for generated LaTeX.

Everything the LaTeX backend emits goes through two helpers:
``escape_latex`` for literal text (content and marker tokens alike) and
``latex_cmd`` for ``\\name[opt]{arg}...`` commands.  Strings already known
to be LaTeX are wrapped in ``NoEscape`` so they are never escaped twice.
"""

from __future__ import annotations

__all__ = ["LATEX_SPECIALS", "NoEscape", "escape_latex", "latex_cmd"]

LATEX_SPECIALS: dict[str, str] = {
    "\\": r"\textbackslash{}",
    "#": r"\#",
    "$": r"\$",
    "%": r"\%",
    "&": r"\&",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}

# str.translate maps each character once, so replacements are never rescanned.
_ESCAPE_TABLE = str.maketrans(LATEX_SPECIALS)


class NoEscape(str):
    """Text that is already valid LaTeX."""


def escape_latex(text: str) -> NoEscape:
    """Escape the ten LaTeX special characters; ``NoEscape`` passes through."""
    if isinstance(text, NoEscape):
        return text
    return NoEscape(text.translate(_ESCAPE_TABLE))


def latex_cmd(
    name: str, *args: str | NoEscape, optional: str | None = None
) -> NoEscape:
    r"""``\name[optional]{arg}...`` with plain-string arguments escaped.

    The optional argument is emitted as given.
    """
    head = f"\\{name}" if optional is None else f"\\{name}[{optional}]"
    return NoEscape(head + "".join(f"{{{escape_latex(arg)}}}" for arg in args))
