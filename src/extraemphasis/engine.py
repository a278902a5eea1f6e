"""Compiled emphasis configuration.

``CompiledConfig`` bundles everything the live matcher and the export
transcoder need: the style table, the host syntax, the compiled grammar
and the per-backend search table.  It is immutable and rebuilt whenever
the configuration changes, then passed explicitly to its consumers.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from extraemphasis.export.transcoder import SearchTable
from extraemphasis.grammar import compile_grammar
from extraemphasis.structure import OrgStructure
from extraemphasis.styles import StyleRegistry, alphabet_configuration
from extraemphasis.syntax import NATIVE_MARKERS, NATIVE_VERBATIM, ORG_SYNTAX

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from extraemphasis.config import EmphasisConfig
    from extraemphasis.export.backends import Backend
    from extraemphasis.grammar import CompiledGrammar
    from extraemphasis.structure import StructureContext
    from extraemphasis.styles import StyleDescriptor, StyleTable
    from extraemphasis.syntax import EmphasisSyntax

logger = logging.getLogger(__name__)

__all__ = ["CompiledConfig", "compile_config", "registry_from_settings"]


@dataclass(frozen=True, slots=True)
class CompiledConfig:
    """Immutable, derived view of one emphasis configuration.

    Attributes:
        table: Marker -> style table (empty marker set when disabled).
        syntax: Host-language emphasis parameters.
        grammar: Grammar over native and extra markers, or None when the
            host syntax is not initialized.
        search_table: Per-(marker, backend) export automata.
        backends: Export backends by name.
        structure: Structure predicates for the live matcher.
        hide_delimiters: Style only the content and suppress delimiters.
    """

    table: StyleTable
    syntax: EmphasisSyntax
    grammar: CompiledGrammar | None
    search_table: SearchTable
    backends: Mapping[str, Backend] = field(
        default_factory=lambda: MappingProxyType({})
    )
    structure: StructureContext = field(default_factory=OrgStructure)
    hide_delimiters: bool = False

    @property
    def enabled(self) -> bool:
        return self.table.enabled

    @property
    def markers(self) -> tuple[str, ...]:
        """Active extra markers in configuration order."""
        return self.table.markers

    def style_for(self, marker: str) -> StyleDescriptor:
        """Resolved style for an active marker."""
        style = self.table.style_for(marker)
        if style is None:
            msg = f"{marker!r} is not an active marker"
            raise KeyError(msg)
        return self.table.resolve(style)

    @classmethod
    def from_settings(cls, settings: EmphasisConfig | None = None) -> CompiledConfig:
        """Build from application settings (``get_settings()`` by default)."""
        from extraemphasis.config import get_settings
        from extraemphasis.export.registry import get_backend

        if settings is None:
            settings = get_settings().emphasis
        backends = {
            name: get_backend(name, inline_styles=settings.html_inline_styles)
            for name in settings.backends
        }
        return compile_config(
            registry_from_settings(settings),
            syntax=ORG_SYNTAX.with_newlines(settings.max_newlines),
            backends=backends,
            hide_delimiters=settings.hide_delimiters,
        )


def registry_from_settings(settings: EmphasisConfig) -> StyleRegistry:
    """Populate a ``StyleRegistry`` from the emphasis settings."""
    registry = StyleRegistry()
    for name, face in settings.faces.items():
        registry.define(face.to_descriptor(name))
    pairs: Iterable[tuple[str, str]]
    if settings.markers is None:
        pairs = alphabet_configuration(settings.alphabet)
    else:
        pairs = settings.markers.items()
    registry.set_configuration(
        pairs,
        enabled=settings.enabled,
        verbatim=settings.verbatim_markers,
    )
    return registry


def compile_config(
    registry: StyleRegistry | StyleTable,
    syntax: EmphasisSyntax = ORG_SYNTAX,
    backends: Mapping[str, Backend] | None = None,
    structure: StructureContext | None = None,
    hide_delimiters: bool = False,
) -> CompiledConfig:
    """Build the grammar and search table for a configuration.

    Args:
        registry: The registry (its snapshot is taken) or a style table.
        syntax: Host-language emphasis parameters.
        backends: Export backends by name.  Building the search table calls
            each backend's ``serialize`` once per marker.
        structure: Structure predicates (Org-like text by default).
        hide_delimiters: Style only the content and suppress delimiters.
    """
    table = registry.snapshot() if isinstance(registry, StyleRegistry) else registry
    backends = MappingProxyType(dict(backends or {}))

    grammar = compile_grammar(
        [*NATIVE_MARKERS, *table.markers],
        syntax,
        NATIVE_VERBATIM | table.verbatim,
    )
    search_table = SearchTable.build(table, backends)
    logger.debug(
        "Compiled emphasis configuration: %d extra marker(s), %d backend(s), "
        "%d export automata",
        len(table.markers),
        len(backends),
        len(search_table),
    )
    return CompiledConfig(
        table=table,
        syntax=syntax,
        grammar=grammar,
        search_table=search_table,
        backends=backends,
        structure=structure or OrgStructure(),
        hide_delimiters=hide_delimiters,
    )
