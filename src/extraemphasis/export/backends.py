"""Export backend interface.

A backend is one export output format.  The transcoder needs three things
from it: the escaped form of a marker token (``escape``), an opaque style
token for a style descriptor (``serialize``) and a way to wrap rendered
content with that token (``wrap``).  ``render_text`` turns plain text into
backend text for the stand-alone export pipeline.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from extraemphasis.styles import StyleDescriptor

__all__ = [
    "Backend",
    "UnknownBackendError",
    "UnsupportedMarkerError",
    "hex_colour",
    "split_paragraphs",
]

_HEX_COLOUR_RE = re.compile(r"#?([0-9A-Fa-f]{6}|[0-9A-Fa-f]{3})")


class UnsupportedMarkerError(ValueError):
    """The backend cannot represent a marker token literally."""


class UnknownBackendError(KeyError):
    """No backend is registered under the requested name."""


class Backend(Protocol):
    """Protocol for export backends."""

    name: str
    paragraph_separator: str

    def escape(self, text: str) -> str:
        """Escape literal *text* exactly as the backend escapes content.

        Raises:
            UnsupportedMarkerError: *text* cannot be represented.
        """
        ...

    def serialize(self, style: StyleDescriptor) -> str:
        """Return the style token for a resolved *style*.

        May register a named style in the backend's style sheet as a side
        effect; must return the same token for the same style.
        """
        ...

    def wrap(self, token: str, content: str) -> str:
        """Wrap already-rendered *content* with the style *token*."""
        ...

    def render_text(self, text: str) -> str:
        """Render plain *text* as backend text."""
        ...


def hex_colour(colour: str) -> str | None:
    """Return ``RRGGBB`` (upper case) for a hex colour, None otherwise.

    >>> hex_colour("#f0a")
    'FF00AA'
    """
    match = _HEX_COLOUR_RE.fullmatch(colour.strip())
    if match is None:
        return None
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return digits.upper()


def split_paragraphs(text: str) -> list[str]:
    """Split plain text on blank lines, dropping empty paragraphs."""
    paragraphs = re.split(r"\n(?:[ \t]*\n)+", text.strip("\n"))
    return [p for p in paragraphs if p.strip()]
