"""LaTeX export backend.

Every serialized style registers a ``\\newcommand`` (see
``extraemphasis.export.preamble``); the style token is the macro name and
wrapping is ``\\Name{content}``.  ``preamble()`` emits the definitions for
all styles registered so far.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from extraemphasis.export.backends import split_paragraphs
from extraemphasis.export.latex_render import NoEscape, escape_latex, latex_cmd
from extraemphasis.export.preamble import build_style_preamble, latex_command_name

if TYPE_CHECKING:
    from extraemphasis.styles import StyleDescriptor

logger = logging.getLogger(__name__)

__all__ = ["LatexBackend"]


class LatexBackend:
    """``\\newcommand``-based styling for LaTeX output."""

    name = "latex"
    paragraph_separator = "\n\n"

    def __init__(self) -> None:
        self._styles: dict[str, StyleDescriptor] = {}

    def escape(self, text: str) -> str:
        return str(escape_latex(text))

    def serialize(self, style: StyleDescriptor) -> str:
        command = latex_command_name(style.name)
        registered = self._styles.get(command)
        if registered is not None and registered != style:
            logger.warning(
                "LaTeX command \\%s redefined by style %r", command, style.name
            )
        self._styles[command] = style
        return command

    def wrap(self, token: str, content: str) -> str:
        return str(latex_cmd(token, NoEscape(content)))

    def preamble(self) -> str:
        """Packages, colours and commands for the registered styles."""
        return build_style_preamble(self._styles.values())

    def render_text(self, text: str) -> str:
        return self.paragraph_separator.join(
            self.escape(p) for p in split_paragraphs(text)
        )
