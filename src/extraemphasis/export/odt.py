"""OpenDocument Text export backend.

Styles become named automatic text styles (``OrgExtraEmphasis01``) built
with lxml and collected until ``automatic_styles()`` is called; the style
token is the style name and wrapping is a ``<text:span>``.
"""

from __future__ import annotations

import html
import logging
import re
from copy import deepcopy
from typing import TYPE_CHECKING

from lxml import etree

from extraemphasis.export.backends import (
    UnsupportedMarkerError,
    hex_colour,
    split_paragraphs,
)

if TYPE_CHECKING:
    from extraemphasis.styles import StyleDescriptor

logger = logging.getLogger(__name__)

__all__ = ["ODF_NAMESPACES", "OdtBackend", "odt_style_name"]

ODF_NAMESPACES = {
    "office": "urn:oasis:names:tc:opendocument:xmlns:office:1.0",
    "style": "urn:oasis:names:tc:opendocument:xmlns:style:1.0",
    "text": "urn:oasis:names:tc:opendocument:xmlns:text:1.0",
    "fo": "urn:oasis:names:tc:opendocument:xmlns:xsl-fo-compatible:1.0",
}

# Characters XML 1.0 cannot carry at all.
_XML_INVALID_RE = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


def _qname(prefix: str, local: str) -> str:
    return f"{{{ODF_NAMESPACES[prefix]}}}{local}"


def odt_style_name(style_name: str) -> str:
    """``extra-emphasis-01`` -> ``OrgExtraEmphasis01``."""
    words = re.split(r"[^A-Za-z0-9]+", style_name)
    return "Org" + "".join(w[0].upper() + w[1:] for w in words if w)


def _text_properties(style: StyleDescriptor) -> dict[str, str]:
    properties: dict[str, str] = {}
    for attr, prop in (("foreground", "color"), ("background", "background-color")):
        colour = getattr(style, attr)
        if not colour:
            continue
        hex_code = hex_colour(colour)
        if hex_code is None:
            logger.debug(
                "ODT needs hex colours, dropping %s=%r of %r", attr, colour, style.name
            )
            continue
        properties[_qname("fo", prop)] = f"#{hex_code}"
    if style.weight:
        properties[_qname("fo", "font-weight")] = style.weight
    if style.slant:
        properties[_qname("fo", "font-style")] = style.slant
    if style.size:
        properties[_qname("fo", "font-size")] = f"{round(style.size * 100)}%"
    if style.underline:
        properties[_qname("style", "text-underline-style")] = "solid"
        properties[_qname("style", "text-underline-width")] = "auto"
        properties[_qname("style", "text-underline-color")] = "font-color"
    if style.strike_through:
        properties[_qname("style", "text-line-through-style")] = "solid"
    return properties


class OdtBackend:
    """Named automatic text styles for OpenDocument output."""

    name = "odt"
    paragraph_separator = "\n"

    def __init__(self) -> None:
        self._styles: dict[str, etree._Element] = {}

    def escape(self, text: str) -> str:
        if _XML_INVALID_RE.search(text):
            msg = f"{text!r} contains characters XML cannot represent"
            raise UnsupportedMarkerError(msg)
        return html.escape(text, quote=False)

    def serialize(self, style: StyleDescriptor) -> str:
        name = odt_style_name(style.name)
        element = etree.Element(
            _qname("style", "style"),
            {_qname("style", "name"): name, _qname("style", "family"): "text"},
            nsmap=ODF_NAMESPACES,
        )
        etree.SubElement(
            element, _qname("style", "text-properties"), _text_properties(style)
        )
        if name not in self._styles:
            logger.debug("Registering ODT text style %r", name)
        self._styles[name] = element
        return name

    def wrap(self, token: str, content: str) -> str:
        return f'<text:span text:style-name="{token}">{content}</text:span>'

    def automatic_styles(self) -> str:
        """``<office:automatic-styles>`` holding the registered styles."""
        container = etree.Element(
            _qname("office", "automatic-styles"), nsmap=ODF_NAMESPACES
        )
        for element in self._styles.values():
            container.append(deepcopy(element))
        return etree.tostring(container, encoding="unicode", pretty_print=True)

    def render_text(self, text: str) -> str:
        paragraphs = split_paragraphs(_XML_INVALID_RE.sub("", text))
        return self.paragraph_separator.join(
            f'<text:p text:style-name="Text_20_body">{self.escape(p)}</text:p>'
            for p in paragraphs
        )
