"""Tests for the live emphasis matcher.

Covers acceptance, structural rejection, marker strategies, nesting and
delimiter hiding.  Styling decisions are observed through a recording sink.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from extraemphasis.grammar import compile_grammar
from extraemphasis.matcher import (
    BaseMatcher,
    ExtendedMatcher,
    GrammarMatcher,
    make_matcher,
)
from extraemphasis.styles import StyleRegistry, alphabet_configuration
from extraemphasis.syntax import ORG_SYNTAX, EmphasisSyntax

if TYPE_CHECKING:
    from collections.abc import Callable

    from extraemphasis.engine import CompiledConfig
    from tests.conftest import RecordingSink


def _registry(**kwargs) -> StyleRegistry:
    registry = StyleRegistry()
    registry.set_configuration(alphabet_configuration(), **kwargs)
    return registry


class TestAcceptance:
    """Spans the extended matcher accepts."""

    def test_extra_marker_span(
        self, config: CompiledConfig, sink: RecordingSink
    ) -> None:
        """An extra marker span is returned and styled as a whole."""
        text = "say !!red!! now"
        match = make_matcher(config).find_next(text, 0, None, sink)
        assert match is not None
        assert (match.marker, match.start, match.end) == ("!!", 4, 11)
        assert match.content == "red"
        assert (match.content_start, match.content_end) == (6, 9)
        assert match.style.foreground == "#FF0000"
        assert sink.styled == [(4, 11, match.style)]
        assert sink.suppressed == []

    def test_style_is_resolved(self, config: CompiledConfig) -> None:
        """The style carries inherited attributes, not the raw slot."""
        match = make_matcher(config).find_next("!@blue!@")
        assert match is not None
        assert match.style.name == "extra-emphasis-02"
        assert match.style.inherit is None

    def test_native_marker_in_extended_alphabet(self, config: CompiledConfig) -> None:
        """Native markers are found alongside extra ones."""
        matches = list(make_matcher(config).iter_matches("*bold* and !!red!!"))
        assert [m.marker for m in matches] == ["*", "!!"]
        assert matches[0].style.weight == "bold"

    def test_strike_through_outside_table(self, config: CompiledConfig) -> None:
        """A '+' span in running text is not a table rule."""
        match = make_matcher(config).find_next("a +gone+ b")
        assert match is not None
        assert match.marker == "+"
        assert match.style.strike_through

    def test_no_match(self, config: CompiledConfig) -> None:
        """Text without spans yields nothing."""
        assert make_matcher(config).find_next("nothing here!!") is None


class TestRejection:
    """Candidates the structure check turns down."""

    def test_table_cell(self, config: CompiledConfig, sink: RecordingSink) -> None:
        """Content crossing a table cell boundary is rejected."""
        assert make_matcher(config).find_next("| !!a | b!! |", sink=sink) is None
        assert sink.styled == []

    def test_heading_prefix(self, config: CompiledConfig) -> None:
        """Stars of a heading prefix never start a span."""
        assert make_matcher(config).find_next("*** foo*") is None

    def test_heading_prefix_closing(
        self,
        registry: StyleRegistry,
        make_config: Callable[..., CompiledConfig],
    ) -> None:
        """A span may not close inside the next line's heading prefix."""
        config = make_config(registry, syntax=ORG_SYNTAX.with_newlines(1))
        assert make_matcher(config).find_next("a *b\n** c") is None

    def test_table_rule(self, config: CompiledConfig) -> None:
        """'+' markers on a table rule are part of the rule."""
        assert make_matcher(config).find_next("|--+--+--|") is None

    def test_crosses_paragraph(
        self,
        registry: StyleRegistry,
        make_config: Callable[..., CompiledConfig],
    ) -> None:
        """A blank line ends any span even within the newline budget."""
        config = make_config(registry, syntax=ORG_SYNTAX.with_newlines(2))
        matcher = make_matcher(config)
        assert matcher.find_next("!!a\n\nb!!") is None
        match = matcher.find_next("!!a\nb!!")
        assert match is not None
        assert match.content == "a\nb"

    def test_scanning_continues_after_rejection(self, config: CompiledConfig) -> None:
        """A rejected candidate does not hide a later valid span."""
        text = "| !!a | b!! |\n\nthen !!ok!!"
        match = make_matcher(config).find_next(text)
        assert match is not None
        assert match.content == "ok"


class TestStrategies:
    """Base and extended marker sets."""

    def test_base_ignores_extra_markers(self, config: CompiledConfig) -> None:
        """The base matcher only knows native markers."""
        matcher = make_matcher(config, extended=False)
        assert isinstance(matcher, BaseMatcher)
        assert [m.marker for m in matcher.iter_matches("!!a!! *b*")] == ["*"]

    def test_extended_is_default(self, config: CompiledConfig) -> None:
        """make_matcher builds the extended matcher unless told otherwise."""
        matcher = make_matcher(config)
        assert isinstance(matcher, ExtendedMatcher)
        assert "!!" in matcher.markers
        assert "*" in matcher.markers

    def test_disabled_behaves_like_base(
        self, make_config: Callable[..., CompiledConfig]
    ) -> None:
        """With the feature off, no extra spans but native ones still work."""
        config = make_config(_registry(enabled=False))
        matcher = make_matcher(config)
        assert [m.marker for m in matcher.iter_matches("!!a!! *b*")] == ["*"]
        assert set(matcher.markers) == set(
            make_matcher(config, extended=False).markers
        )

    def test_no_grammar(self) -> None:
        """Without a grammar the matcher finds nothing."""
        assert GrammarMatcher(None, {}).find_next("!!a!!") is None


class TestResumption:
    """Re-invocation, nesting and the search limit."""

    def test_nested_other_marker(self, config: CompiledConfig) -> None:
        """A span of another marker inside content is found next."""
        text = "!!red @@six@@ text!!"
        matches = list(make_matcher(config).iter_matches(text))
        assert [(m.marker, m.start) for m in matches] == [("!!", 0), ("@@", 6)]

    def test_verbatim_content_not_rescanned(
        self, make_config: Callable[..., CompiledConfig]
    ) -> None:
        """Scanning resumes after a verbatim span."""
        config = make_config(_registry(verbatim=["!!"]))
        matches = list(make_matcher(config).iter_matches("!!red @@six@@ text!!"))
        assert [m.marker for m in matches] == ["!!"]
        assert matches[0].verbatim
        assert matches[0].resume_at == matches[0].end

    def test_ordinary_resume_inside_content(self, config: CompiledConfig) -> None:
        """Ordinary spans resume at their content start."""
        match = make_matcher(config).find_next("!!a!!")
        assert match is not None
        assert match.resume_at == 2

    def test_limit_bounds_start(self, config: CompiledConfig) -> None:
        """Only spans starting before the limit are found."""
        text = "0123456789 !!red!!"
        matcher = make_matcher(config)
        assert matcher.find_next(text, 0, 10) is None
        match = matcher.find_next(text, 0, 12)
        assert match is not None
        assert match.end == len(text)

    def test_start_position(self, config: CompiledConfig) -> None:
        """Scanning starts at the given position."""
        text = "!!a!! !!b!!"
        match = make_matcher(config).find_next(text, 1)
        assert match is not None
        assert match.content == "b"

    def test_closer_does_not_reopen(self, config: CompiledConfig) -> None:
        """A closing delimiter is not reused as the next opener."""
        permissive = EmphasisSyntax(pre=r"\s\w!", post=r"\s\w!", border=r"\s")
        matcher = GrammarMatcher(
            compile_grammar(["!!"], permissive), {"!!": config.style_for("!!")}
        )
        matches = list(matcher.iter_matches("!!a!!b!!c!!"))
        assert [(m.start, m.content) for m in matches] == [(0, "a"), (6, "c")]


class TestHiddenDelimiters:
    """Delimiter suppression."""

    def test_content_styled_delimiters_suppressed(
        self,
        registry: StyleRegistry,
        make_config: Callable[..., CompiledConfig],
        sink: RecordingSink,
    ) -> None:
        """Only the content is styled; both delimiters are suppressed."""
        config = make_config(registry, hide_delimiters=True)
        match = make_matcher(config).find_next("x !!red!! y", sink=sink)
        assert match is not None
        assert match.styled_range == (4, 7)
        assert [(start, end) for start, end, _ in sink.styled] == [(4, 7)]
        assert sink.suppressed == [(2, 4), (7, 9)]

    def test_not_hidden_inside_link(
        self,
        registry: StyleRegistry,
        make_config: Callable[..., CompiledConfig],
        sink: RecordingSink,
    ) -> None:
        """Delimiters inside a bracket link stay visible."""
        config = make_config(registry, hide_delimiters=True)
        text = "[[https://x.org][see !!red!! here]]"
        match = make_matcher(config).find_next(text, sink=sink)
        assert match is not None
        assert match.hidden == ()
        assert sink.suppressed == []
        assert sink.styled[0][:2] == (match.start, match.end)
