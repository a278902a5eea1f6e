"""Live emphasis matcher.

Finds the next valid marker-delimited span at or after a cursor position,
one span per call.  The caller supplies a search limit and re-invokes the
matcher to continue, which bounds the work done per call on large texts.

Each call walks a small state machine::

    SCANNING -> CANDIDATE -> ACCEPTED | REJECTED -> SCANNING | DONE

SCANNING uses the grammar's cheap prefilter to find a possible opening
marker before the limit.  CANDIDATE runs the full grammar anchored there
(the verbatim variant for verbatim markers).  A candidate is REJECTED when
the host structure says it is a false positive (table rule, heading
prefix) or its content crosses a paragraph or a table cell; scanning then
resumes one character past the candidate start.  An ACCEPTED candidate is
styled through the sink and returned.

Which markers are recognised is chosen at construction: ``BaseMatcher``
knows only the host language's native markers, ``ExtendedMatcher`` adds the
configured extra markers to the same alphabet.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

from extraemphasis.grammar import CompiledGrammar, compile_grammar
from extraemphasis.structure import OrgStructure, StructureContext
from extraemphasis.syntax import NATIVE_MARKERS, NATIVE_VERBATIM

if TYPE_CHECKING:
    import re
    from collections.abc import Iterator, Mapping

    from extraemphasis.engine import CompiledConfig
    from extraemphasis.styles import StyleDescriptor

logger = logging.getLogger(__name__)

__all__ = [
    "BaseMatcher",
    "EmphasisMatch",
    "ExtendedMatcher",
    "GrammarMatcher",
    "MatchState",
    "StyleSink",
    "make_matcher",
]

# Characters that also draw table rules.
_RULE_CHARS = frozenset("+-|")


class MatchState(Enum):
    """States of one ``find_next`` call."""

    SCANNING = "scanning"
    CANDIDATE = "candidate"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DONE = "done"


class StyleSink(Protocol):
    """Receiver of styling decisions (the host's renderer)."""

    def apply_style(self, start: int, end: int, style: StyleDescriptor) -> None:
        """Style ``text[start:end]``."""
        ...

    def suppress(self, start: int, end: int) -> None:
        """Hide ``text[start:end]`` from display, keeping it in the text."""
        ...


@dataclass(frozen=True, slots=True)
class EmphasisMatch:
    """An accepted emphasis span.

    Attributes:
        marker: The delimiter token.
        start: Offset of the opening delimiter.
        end: Offset just past the closing delimiter.
        content_start: Offset of the first content character.
        content_end: Offset just past the last content character.
        content: The text between the delimiters.
        style: Resolved style for the marker.
        verbatim: Whether the content is to be taken literally.
        hidden: Delimiter ranges suppressed from display.
    """

    marker: str
    start: int
    end: int
    content_start: int
    content_end: int
    content: str
    style: StyleDescriptor
    verbatim: bool = False
    hidden: tuple[tuple[int, int], ...] = ()

    @property
    def styled_range(self) -> tuple[int, int]:
        """Range the style applies to: content only when delimiters are hidden."""
        if self.hidden:
            return self.content_start, self.content_end
        return self.start, self.end

    @property
    def resume_at(self) -> int:
        """Where the next scan starts.

        Inside the content for ordinary markers, so spans of other markers
        nested in it are found; past the span for verbatim markers.
        """
        return self.end if self.verbatim else self.content_start


class GrammarMatcher:
    """Matcher over one compiled grammar and one marker -> style table."""

    def __init__(
        self,
        grammar: CompiledGrammar | None,
        styles: Mapping[str, StyleDescriptor],
        structure: StructureContext | None = None,
        hide_delimiters: bool = False,
    ) -> None:
        self.grammar = grammar
        self.styles = MappingProxyType(dict(styles))
        self.structure: StructureContext = structure or OrgStructure()
        self.hide_delimiters = hide_delimiters

    @property
    def markers(self) -> tuple[str, ...]:
        return self.grammar.markers if self.grammar is not None else ()

    def find_next(
        self,
        text: str,
        pos: int = 0,
        limit: int | None = None,
        sink: StyleSink | None = None,
    ) -> EmphasisMatch | None:
        """Find and style the next accepted span starting in ``[pos, limit)``.

        The span itself may extend past *limit*.  Returns None when no span
        starts before *limit* (or no grammar is available).
        """
        grammar = self.grammar
        if grammar is None:
            return None
        limit = len(text) if limit is None else min(limit, len(text))
        # An opening marker starting just before the limit may end past it.
        window = min(len(text), limit + max(map(len, grammar.markers)) - 1)

        while pos < limit:
            # SCANNING
            hit = grammar.prefilter.search(text, pos, window)
            if hit is None or hit.start("marker") >= limit:
                break
            start = hit.start("marker")

            # CANDIDATE
            pattern = grammar.pattern_for(hit.group("marker"))
            candidate = pattern.match(text, start) if pattern is not None else None
            reason = (
                "no full match"
                if candidate is None
                else self._reject_reason(text, candidate)
            )
            if candidate is not None and reason is None:
                match = self._accept(text, candidate)
                logger.debug(
                    "%s %r span at %d-%d",
                    MatchState.ACCEPTED.value,
                    match.marker,
                    match.start,
                    match.end,
                )
                if sink is not None:
                    self._apply(match, sink)
                return match

            # REJECTED
            logger.debug(
                "%s %r candidate at %d: %s",
                MatchState.REJECTED.value,
                hit.group("marker"),
                start,
                reason,
            )
            pos = start + 1

        logger.debug("%s scanning before %d", MatchState.DONE.value, limit)
        return None

    def iter_matches(
        self,
        text: str,
        start: int = 0,
        limit: int | None = None,
        sink: StyleSink | None = None,
        closers: list[tuple[int, int]] | None = None,
    ) -> Iterator[EmphasisMatch]:
        """Yield accepted spans by re-invoking ``find_next`` until done.

        The closing delimiter of an accepted span never opens another one.
        Pass the same *closers* list to successive calls that scan one text
        in chunks so this holds across chunk boundaries.
        """
        if closers is None:
            closers = []
        pos = start
        while (match := self.find_next(text, pos, limit)) is not None:
            if any(lo <= match.start < hi for lo, hi in closers):
                logger.debug(
                    "%s %r candidate at %d: closing delimiter",
                    MatchState.REJECTED.value,
                    match.marker,
                    match.start,
                )
                pos = match.start + 1
                continue
            if sink is not None:
                self._apply(match, sink)
            closers.append((match.content_end, match.end))
            yield match
            pos = match.resume_at

    def _reject_reason(self, text: str, candidate: re.Match[str]) -> str | None:
        structure = self.structure
        start = candidate.start("span")
        marker = candidate.group("marker")
        content = candidate.group("content")

        if set(marker) <= _RULE_CHARS and structure.is_table_separator_line(
            text, start
        ):
            return "table rule"
        if structure.in_heading_prefix(text, start):
            return "heading prefix"
        if structure.in_heading_prefix(text, candidate.end("content")):
            return "heading prefix closes span"
        if structure.crosses_paragraph(content):
            return "crosses paragraph"
        if "|" in content and structure.in_table_row(text, start):
            return "crosses table cell"
        return None

    def _accept(self, text: str, candidate: re.Match[str]) -> EmphasisMatch:
        marker = candidate.group("marker")
        start, end = candidate.span("span")
        content_start, content_end = candidate.span("content")

        hidden: tuple[tuple[int, int], ...] = ()
        if self.hide_delimiters and not self.structure.in_link(text, start):
            hidden = ((start, content_start), (content_end, end))

        verbatim = self.grammar is not None and marker in self.grammar.verbatim_markers
        return EmphasisMatch(
            marker=marker,
            start=start,
            end=end,
            content_start=content_start,
            content_end=content_end,
            content=candidate.group("content"),
            style=self.styles[marker],
            verbatim=verbatim,
            hidden=hidden,
        )

    @staticmethod
    def _apply(match: EmphasisMatch, sink: StyleSink) -> None:
        sink.apply_style(*match.styled_range, match.style)
        for start, end in match.hidden:
            sink.suppress(start, end)


class BaseMatcher(GrammarMatcher):
    """Matcher for the host language's native markers only."""

    @classmethod
    def from_config(cls, config: CompiledConfig) -> BaseMatcher:
        grammar = compile_grammar(NATIVE_MARKERS, config.syntax, NATIVE_VERBATIM)
        return cls(
            grammar,
            NATIVE_MARKERS,
            structure=config.structure,
            hide_delimiters=config.hide_delimiters,
        )


class ExtendedMatcher(GrammarMatcher):
    """Matcher for native markers plus the configured extra markers.

    With the feature disabled the extra marker set is empty and this
    behaves exactly like ``BaseMatcher``.
    """

    @classmethod
    def from_config(cls, config: CompiledConfig) -> ExtendedMatcher:
        styles: dict[str, StyleDescriptor] = dict(NATIVE_MARKERS)
        for marker in config.markers:
            styles[marker] = config.style_for(marker)
        return cls(
            config.grammar,
            styles,
            structure=config.structure,
            hide_delimiters=config.hide_delimiters,
        )


def make_matcher(config: CompiledConfig, extended: bool = True) -> GrammarMatcher:
    """Build the extended (default) or base matcher for *config*."""
    if extended:
        return ExtendedMatcher.from_config(config)
    return BaseMatcher.from_config(config)
