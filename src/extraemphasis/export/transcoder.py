"""Post-render emphasis transcoding.

By the time a document reaches a backend, extra emphasis markers have been
passed through the backend's own content escaping like any other text.
The transcoder looks for *escaped* marker pairs in the rendered fragment
and replaces each pair and its content with the backend's styled span.

Pipeline per (document, backend):
1. ``SearchTable.build`` (once per configuration): for every marker and
   backend, escape the marker and compile a Lark lexer that splits text
   into escaped markers and everything else.
2. ``transcode``: one pass per marker, in configuration order.  Each pass
   pairs an opener with the next closer (newlines included), so content is
   wrapped once and never rescanned by the same pass.  Spans of other
   markers nested inside are handled by their own passes.

A marker the backend cannot escape is left out of the table; its literal
tokens stay in the output.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import partial
from types import MappingProxyType
from typing import TYPE_CHECKING

from lark import Lark

from extraemphasis.export.backends import (
    UnknownBackendError,
    UnsupportedMarkerError,
    split_paragraphs,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from extraemphasis.engine import CompiledConfig
    from extraemphasis.export.backends import Backend
    from extraemphasis.styles import StyleTable

logger = logging.getLogger(__name__)

__all__ = ["MarkerAutomaton", "SearchTable", "export_text", "transcode"]


def _lark_regexp(text: str) -> str:
    """Regexp matching *text* literally, escaped for a Lark ``/.../`` literal."""
    return re.escape(text).replace("/", r"\/")


class MarkerAutomaton:
    """Precompiled search for one escaped marker in one backend's output.

    Attributes:
        marker: The raw marker token.
        backend: Backend name.
        escaped: The marker as it appears in rendered output.
        token: The backend style token for the marker's style.
    """

    __slots__ = ("_lexer", "backend", "escaped", "marker", "token")

    def __init__(self, marker: str, backend: str, escaped: str, token: str) -> None:
        self.marker = marker
        self.backend = backend
        self.escaped = escaped
        self.token = token
        # TEXT never starts at a marker, so MARKER wins there.
        literal = _lark_regexp(escaped)
        grammar = f"MARKER: /{literal}/\nTEXT: /(?:(?!{literal}).)+/s"
        self._lexer = Lark(grammar, parser=None, lexer="basic")

    def __repr__(self) -> str:
        return f"MarkerAutomaton({self.marker!r}, {self.backend!r}, {self.escaped!r})"

    def tokens(self, fragment: str) -> Iterator[tuple[str, str]]:
        """Yield ``(type, value)`` pairs, type being MARKER or TEXT."""
        for token in self._lexer.lex(fragment):
            yield token.type, token.value

    def splice(self, fragment: str, wrap: Callable[[str], str]) -> str:
        """Replace every marker pair in *fragment* with ``wrap(content)``.

        An opener pairs with the next closer.  Two adjacent markers do not
        form a span: the first is kept literally and the second opens.  An
        unclosed opener is kept literally.
        """
        if self.escaped not in fragment:
            return fragment

        out: list[str] = []
        content: list[str] = []
        opener: str | None = None
        for kind, value in self.tokens(fragment):
            if kind == "TEXT":
                (content if opener is not None else out).append(value)
            elif opener is None:
                opener = value
            elif not content:
                out.append(opener)
            else:
                out.append(wrap("".join(content)))
                content.clear()
                opener = None

        if opener is not None:
            out.append(opener)
            out.extend(content)
        return "".join(out)


@dataclass(frozen=True, slots=True)
class SearchTable:
    """Export automata keyed by ``(marker, backend name)``."""

    automata: Mapping[tuple[str, str], MarkerAutomaton] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __len__(self) -> int:
        return len(self.automata)

    def get(self, marker: str, backend: str) -> MarkerAutomaton | None:
        return self.automata.get((marker, backend))

    @classmethod
    def build(cls, table: StyleTable, backends: Mapping[str, Backend]) -> SearchTable:
        """Escape every active marker for every backend and compile it.

        Markers a backend cannot escape are skipped for that backend.
        """
        automata: dict[tuple[str, str], MarkerAutomaton] = {}
        for name, backend in backends.items():
            for marker in table.markers:
                try:
                    escaped = backend.escape(marker)
                except UnsupportedMarkerError as exc:
                    logger.debug("Skipping marker %r for %s: %s", marker, name, exc)
                    continue
                if not escaped:
                    logger.debug(
                        "Skipping marker %r for %s: empty escape", marker, name
                    )
                    continue
                style = table.style_for(marker)
                assert style is not None  # markers come from the table itself
                token = backend.serialize(table.resolve(style))
                automata[(marker, name)] = MarkerAutomaton(marker, name, escaped, token)
        return cls(MappingProxyType(automata))


def transcode(fragment: str, backend: str, config: CompiledConfig) -> str:
    """Replace escaped marker pairs in rendered *fragment* with styled spans.

    Returns *fragment* unchanged when the feature is disabled, the backend
    is not configured or no escaped markers occur in it.
    """
    if not fragment or not config.enabled:
        return fragment
    target = config.backends.get(backend)
    if target is None:
        logger.debug("Backend %r is not configured, nothing to transcode", backend)
        return fragment

    for marker in config.markers:
        automaton = config.search_table.get(marker, backend)
        if automaton is None:
            continue
        fragment = automaton.splice(fragment, partial(target.wrap, automaton.token))
    return fragment


def export_text(text: str, backend: str, config: CompiledConfig) -> str:
    """Render plain *text* through *backend* and transcode the result.

    Each paragraph is rendered and transcoded on its own, so a marker pair
    never spans a paragraph boundary.
    """
    target = config.backends.get(backend)
    if target is None:
        msg = f"backend {backend!r} is not configured"
        raise UnknownBackendError(msg)
    rendered = (target.render_text(p) for p in split_paragraphs(text))
    return target.paragraph_separator.join(
        transcode(fragment, backend, config) for fragment in rendered if fragment
    )
