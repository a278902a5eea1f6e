"""Host-language emphasis parameters.

The host markup language decides which characters may surround an
emphasis span and which characters may not sit at the inner edge of its
content.  Those parameters are held in an ``EmphasisSyntax`` value and fed
to the grammar builder together with the active marker set.

Character classes are stored as regular-expression class *bodies* (the
text that goes between ``[`` and ``]``), already escaped for ``re``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from extraemphasis.styles import StyleDescriptor

__all__ = [
    "NATIVE_MARKERS",
    "NATIVE_VERBATIM",
    "ORG_SYNTAX",
    "EmphasisSyntax",
]


@dataclass(frozen=True, slots=True)
class EmphasisSyntax:
    """Emphasis parameters of the host language.

    Attributes:
        pre: Class of characters allowed right before an opening marker.
        post: Class of characters allowed right after a closing marker.
        border: Class of characters forbidden at the inner edges of content.
        body: Regexp for a single content character (newlines excluded).
        max_newlines: How many newlines the content of one span may cross.

    ``None`` for any of the classes means the host language has not been
    initialized; no grammar can be built from such a value.
    """

    pre: str | None
    post: str | None
    border: str | None
    body: str = "."
    max_newlines: int = 0

    @property
    def ready(self) -> bool:
        return None not in (self.pre, self.post, self.border)

    def with_newlines(self, count: int) -> EmphasisSyntax:
        return replace(self, max_newlines=max(count, 0))


ORG_SYNTAX = EmphasisSyntax(
    pre=r"\s\-('\"{",
    post=r"\s\-.,:!?;'\")}\\\[",
    border=r"\s",
)

# The host's own emphasis markers.  Extra markers are combined with these
# into one alphabet when the extended matcher is in use.
NATIVE_MARKERS: dict[str, StyleDescriptor] = {
    "*": StyleDescriptor(name="bold", weight="bold"),
    "/": StyleDescriptor(name="italic", slant="italic"),
    "_": StyleDescriptor(name="underline", underline=True),
    "=": StyleDescriptor(name="verbatim", foreground="#8B2252"),
    "~": StyleDescriptor(name="code", foreground="#228B22"),
    "+": StyleDescriptor(name="strike-through", strike_through=True),
}

NATIVE_VERBATIM = frozenset({"=", "~"})
