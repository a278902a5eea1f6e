"""Terminal display of emphasis through rich.

``RichTextSink`` is a ``StyleSink`` that records styles on a rich ``Text``
and drops suppressed delimiter ranges when rendered.  ``highlight_text``
drives a matcher over a whole text in bounded chunks, the way an editor
re-highlights a buffer incrementally.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rich.color import ColorParseError
from rich.style import Style
from rich.text import Text

if TYPE_CHECKING:
    from extraemphasis.matcher import GrammarMatcher
    from extraemphasis.styles import StyleDescriptor

logger = logging.getLogger(__name__)

__all__ = ["RichTextSink", "highlight_text", "to_rich_style"]


def to_rich_style(style: StyleDescriptor) -> Style:
    """Translate a resolved style; unparseable colours are dropped."""
    flags = {
        "bold": True if style.weight == "bold" else None,
        "italic": True if style.slant == "italic" else None,
        "underline": style.underline,
        "strike": style.strike_through,
    }
    try:
        return Style(color=style.foreground, bgcolor=style.background, **flags)
    except ColorParseError:
        logger.debug("Terminal cannot show colours of style %r", style.name)
        return Style(**flags)


class RichTextSink:
    """Collects styling for one text."""

    def __init__(self, text: str) -> None:
        self.text = Text(text)
        self.hidden: list[tuple[int, int]] = []

    def apply_style(self, start: int, end: int, style: StyleDescriptor) -> None:
        self.text.stylize(to_rich_style(style), start, end)

    def suppress(self, start: int, end: int) -> None:
        self.hidden.append((start, end))

    def render(self) -> Text:
        """The styled text without suppressed ranges."""
        if not self.hidden:
            return self.text
        # Overlapping ranges (a closer followed by another closer) merge.
        merged: list[list[int]] = []
        for start, end in sorted(self.hidden):
            if merged and start <= merged[-1][1]:
                merged[-1][1] = max(merged[-1][1], end)
            else:
                merged.append([start, end])
        offsets = [pos for span in merged for pos in span]
        pieces = self.text.divide(offsets)
        bounds = [0, *offsets, len(self.text)]
        hidden = {(start, end) for start, end in merged}
        kept = [
            piece
            for piece, start, end in zip(pieces, bounds, bounds[1:], strict=False)
            if (start, end) not in hidden
        ]
        return Text("").join(kept)


def highlight_text(
    text: str,
    matcher: GrammarMatcher,
    chunk: int = 4096,
) -> Text:
    """Style all emphasis in *text*, scanning at most *chunk* chars per call."""
    sink = RichTextSink(text)
    closers: list[tuple[int, int]] = []
    pos = 0
    while pos < len(text):
        limit = min(pos + chunk, len(text))
        resume = limit
        for match in matcher.iter_matches(text, pos, limit, sink, closers):
            resume = max(resume, match.resume_at)
        pos = resume
    return sink.render()
