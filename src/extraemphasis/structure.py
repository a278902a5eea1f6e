"""Structural-context queries used by the live matcher's acceptance check.

A marker candidate that matches the emphasis grammar can still be a false
positive: its characters may be part of a table rule or a heading prefix,
or its content may run across a paragraph or a table cell.  The host
answers those questions through ``StructureContext``; ``OrgStructure`` is
the implementation for Org-like plain text.
"""

from __future__ import annotations

import re
from typing import Protocol

__all__ = ["OrgStructure", "StructureContext"]


class StructureContext(Protocol):
    """Protocol for host-language structure predicates.

    Positions are offsets into the full text being matched.
    """

    def is_table_separator_line(self, text: str, pos: int) -> bool:
        """True when the line holding *pos* is a table rule (``|---+---|``)."""
        ...

    def in_heading_prefix(self, text: str, pos: int) -> bool:
        """True when *pos* lies in the star prefix of a heading line."""
        ...

    def in_table_row(self, text: str, pos: int) -> bool:
        """True when the line holding *pos* is a table row."""
        ...

    def crosses_paragraph(self, content: str) -> bool:
        """True when *content* spans a paragraph boundary."""
        ...

    def in_link(self, text: str, pos: int) -> bool:
        """True when *pos* lies inside a link."""
        ...


_HLINE_RE = re.compile(r"[ \t]*(?:\|[-+]+\|?|\+[-+]+\+)[ \t]*$")
_TABLE_ROW_RE = re.compile(r"[ \t]*\|")
_HEADING_RE = re.compile(r"\*+[ \t]")
_LINK_RE = re.compile(r"\[\[[^\]\n]+\](?:\[[^\]\n]+\])?\]")

# Blank line, or a new line that opens a heading, table, keyword or list item.
_PARAGRAPH_SEPARATE_RE = re.compile(
    r"\n[ \t]*\n"
    r"|\n\*+[ \t]"
    r"|\n[ \t]*(?:\||#\+|[-+][ \t]|\d+[.)][ \t])"
)


def _line_bounds(text: str, pos: int) -> tuple[int, int]:
    start = text.rfind("\n", 0, pos) + 1
    end = text.find("\n", pos)
    return start, len(text) if end == -1 else end


class OrgStructure:
    """Structure predicates for Org-like text."""

    def is_table_separator_line(self, text: str, pos: int) -> bool:
        start, end = _line_bounds(text, pos)
        return _HLINE_RE.match(text, start, end) is not None

    def in_heading_prefix(self, text: str, pos: int) -> bool:
        start, end = _line_bounds(text, pos)
        heading = _HEADING_RE.match(text, start, end)
        # The star run ends one character before the match end (the blank).
        return heading is not None and pos < heading.end() - 1

    def in_table_row(self, text: str, pos: int) -> bool:
        start, end = _line_bounds(text, pos)
        return _TABLE_ROW_RE.match(text, start, end) is not None

    def crosses_paragraph(self, content: str) -> bool:
        return _PARAGRAPH_SEPARATE_RE.search(content) is not None

    def in_link(self, text: str, pos: int) -> bool:
        start, end = _line_bounds(text, pos)
        return any(
            link.start() <= pos < link.end()
            for link in _LINK_RE.finditer(text, start, end)
        )
