"""Emphasis grammar builder.

Derives one delimiter-matching pattern from the active marker tokens and
the host language's emphasis parameters.  The pattern reads::

    (pre-context char | start of line)
    (?P<span> MARKER (?P<content> ... ) MARKER )
    (post-context char | end of line)

Content must not start or end with a border character, may cross up to
``max_newlines`` newlines and is matched lazily, so the shortest valid span
wins.  Verbatim markers get a second, structurally identical pattern.

No pattern is built while the host parameters are missing; callers treat
``None`` as "feature disabled".
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from extraemphasis.syntax import EmphasisSyntax

logger = logging.getLogger(__name__)

__all__ = [
    "CompiledGrammar",
    "build_emphasis_regexp",
    "build_prefilter_regexp",
    "compile_grammar",
    "marker_alternation",
]


def marker_alternation(markers: Iterable[str]) -> str:
    """Regexp alternation over *markers*, longest tokens first.

    Longer tokens must come first so that ``!!`` is not read as two ``!``.
    Ties are broken alphabetically to keep the pattern deterministic.
    """
    ordered = sorted(set(markers), key=lambda m: (-len(m), m))
    return "|".join(re.escape(m) for m in ordered)


def build_emphasis_regexp(
    markers: Iterable[str],
    syntax: EmphasisSyntax,
) -> str | None:
    """Build the full span regexp, or None when it cannot be built.

    Groups: ``span`` (delimiters and content), ``marker`` (the opening
    token) and ``content``.  The pattern must be compiled with
    ``re.MULTILINE`` so that ``^`` and ``$`` work per line.
    """
    alternation = marker_alternation(markers)
    if not alternation or not syntax.ready:
        return None

    border = syntax.border
    body = f"{syntax.body}*?"
    if syntax.max_newlines > 0:
        body += f"(?:\\n{syntax.body}*?){{0,{syntax.max_newlines}}}"

    return (
        f"(?:(?<=[{syntax.pre}])|^)"
        f"(?P<span>(?P<marker>{alternation})"
        f"(?P<content>[^{border}]|[^{border}]{body}[^{border}])"
        f"(?P=marker))"
        f"(?=[{syntax.post}]|$)"
    )


def build_prefilter_regexp(
    markers: Iterable[str],
    syntax: EmphasisSyntax,
) -> str | None:
    """Cheap regexp finding places where a span could start."""
    alternation = marker_alternation(markers)
    if not alternation or not syntax.ready:
        return None
    return f"(?:(?<=[{syntax.pre}])|^)(?P<marker>{alternation})"


@dataclass(frozen=True, slots=True)
class CompiledGrammar:
    """Compiled patterns for one marker set and one host syntax.

    Attributes:
        markers: All markers the grammar recognises.
        verbatim_markers: The subset matched by ``verbatim``.
        prefilter: Finds possible span starts for any marker.
        emphasis: Full pattern for ordinary markers (None if there are none).
        verbatim: Full pattern for verbatim markers (None if there are none).
    """

    markers: tuple[str, ...]
    verbatim_markers: frozenset[str]
    prefilter: re.Pattern[str]
    emphasis: re.Pattern[str] | None
    verbatim: re.Pattern[str] | None

    def pattern_for(self, marker: str) -> re.Pattern[str] | None:
        if marker in self.verbatim_markers:
            return self.verbatim
        return self.emphasis


def _compile(regexp: str | None) -> re.Pattern[str] | None:
    return re.compile(regexp, re.MULTILINE) if regexp is not None else None


@lru_cache(maxsize=32)
def _compile_grammar(
    markers: tuple[str, ...],
    syntax: EmphasisSyntax,
    verbatim: frozenset[str],
) -> CompiledGrammar | None:
    prefilter = _compile(build_prefilter_regexp(markers, syntax))
    if prefilter is None:
        logger.debug("No emphasis grammar: no active markers")
        return None

    ordinary = [m for m in markers if m not in verbatim]
    literal = [m for m in markers if m in verbatim]
    grammar = CompiledGrammar(
        markers=markers,
        verbatim_markers=frozenset(literal),
        prefilter=prefilter,
        emphasis=_compile(build_emphasis_regexp(ordinary, syntax)),
        verbatim=_compile(build_emphasis_regexp(literal, syntax)),
    )
    logger.debug(
        "Compiled emphasis grammar for %d marker(s) (%d verbatim)",
        len(markers),
        len(literal),
    )
    return grammar


def compile_grammar(
    markers: Iterable[str],
    syntax: EmphasisSyntax,
    verbatim: Iterable[str] = (),
) -> CompiledGrammar | None:
    """Compile (or fetch from cache) the grammar for *markers*.

    Returns None when there are no markers or *syntax* is not ready.
    """
    marker_tuple = tuple(dict.fromkeys(markers))
    if not syntax.ready:
        logger.debug("No emphasis grammar: host syntax not initialized")
        return None
    return _compile_grammar(
        marker_tuple,
        syntax,
        frozenset(verbatim) & frozenset(marker_tuple),
    )
