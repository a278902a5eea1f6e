"""HTML export backend.

Content escaping follows the exporter's plain-text rule: only ``&``, ``<``
and ``>`` become entities.  Styles are emitted either as inline CSS on the
wrapping ``<span>`` or, with ``inline_styles=False``, as a class whose
rules are collected in ``stylesheet()``.
"""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING

from extraemphasis.export.backends import split_paragraphs

if TYPE_CHECKING:
    from extraemphasis.styles import StyleDescriptor

logger = logging.getLogger(__name__)

__all__ = ["HtmlBackend", "style_to_css"]


def style_to_css(style: StyleDescriptor) -> str:
    """CSS declarations for a resolved style, ``;``-separated."""
    declarations: list[str] = []
    if style.foreground:
        declarations.append(f"color: {style.foreground}")
    if style.background:
        declarations.append(f"background-color: {style.background}")
    if style.weight:
        declarations.append(f"font-weight: {style.weight}")
    if style.slant:
        declarations.append(f"font-style: {style.slant}")
    if style.size:
        declarations.append(f"font-size: {round(style.size * 100)}%")
    decorations = [
        name
        for name, flag in (
            ("underline", style.underline),
            ("line-through", style.strike_through),
        )
        if flag
    ]
    if decorations:
        declarations.append(f"text-decoration: {' '.join(decorations)}")
    return "; ".join(declarations)


class HtmlBackend:
    """Inline ``<span>`` styling for HTML output."""

    name = "html"
    paragraph_separator = "\n"

    def __init__(self, inline_styles: bool = True) -> None:
        self.inline_styles = inline_styles
        self._rules: dict[str, str] = {}

    def escape(self, text: str) -> str:
        return html.escape(text, quote=False)

    def serialize(self, style: StyleDescriptor) -> str:
        css = style_to_css(style)
        if self.inline_styles:
            return css
        if style.name not in self._rules:
            logger.debug("Registering HTML class %r", style.name)
        self._rules[style.name] = css
        return style.name

    def wrap(self, token: str, content: str) -> str:
        attribute = "style" if self.inline_styles else "class"
        return f'<span {attribute}="{html.escape(token)}">{content}</span>'

    def stylesheet(self) -> str:
        """CSS rules for the classes registered by ``serialize``."""
        return "\n".join(
            f".{name} {{ {css}; }}" if css else f".{name} {{ }}"
            for name, css in self._rules.items()
        )

    def render_text(self, text: str) -> str:
        return self.paragraph_separator.join(
            f"<p>\n{self.escape(paragraph)}\n</p>"
            for paragraph in split_paragraphs(text)
        )
