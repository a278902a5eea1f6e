"""Shared pytest fixtures for extra-emphasis tests."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import pytest

from extraemphasis.config import get_settings
from extraemphasis.engine import compile_config
from extraemphasis.export import HtmlBackend, LatexBackend, OdtBackend
from extraemphasis.styles import StyleRegistry, alphabet_configuration

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

    from extraemphasis.engine import CompiledConfig
    from extraemphasis.styles import StyleDescriptor


# =============================================================================
# Settings isolation
# =============================================================================


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Drop EMPHASIS__/APP__ env vars and the cached Settings around each test."""
    for key in list(os.environ):
        if key.startswith(("EMPHASIS__", "APP__")):
            monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# =============================================================================
# Style sink recording every styling decision
# =============================================================================


@dataclass
class RecordingSink:
    """StyleSink that keeps ``(start, end, style)`` and suppressed ranges."""

    styled: list[tuple[int, int, StyleDescriptor]] = field(default_factory=list)
    suppressed: list[tuple[int, int]] = field(default_factory=list)

    def apply_style(self, start: int, end: int, style: StyleDescriptor) -> None:
        self.styled.append((start, end, style))

    def suppress(self, start: int, end: int) -> None:
        self.suppressed.append((start, end))


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


# =============================================================================
# Registry and compiled configuration
# =============================================================================


@pytest.fixture
def registry() -> StyleRegistry:
    """Registry with the sixteen alphabet markers over ``!@%&``."""
    registry = StyleRegistry()
    registry.set_configuration(alphabet_configuration())
    return registry


@pytest.fixture
def make_config() -> Callable[..., CompiledConfig]:
    """Factory compiling a configuration with fresh html/latex/odt backends."""

    def _make(registry: StyleRegistry, **kwargs) -> CompiledConfig:
        kwargs.setdefault(
            "backends",
            {"html": HtmlBackend(), "latex": LatexBackend(), "odt": OdtBackend()},
        )
        return compile_config(registry, **kwargs)

    return _make


@pytest.fixture
def config(
    registry: StyleRegistry, make_config: Callable[..., CompiledConfig]
) -> CompiledConfig:
    return make_config(registry)
