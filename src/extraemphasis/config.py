"""Centralised configuration using pydantic-settings.

All environment variables are read through the Settings class.
Consumers call ``get_settings()`` to obtain a cached, validated instance.
Tests construct ``Settings(_env_file=None, ...)`` directly for isolation.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from extraemphasis.styles import BASE_FACE, DEFAULT_ALPHABET, StyleDescriptor

logger = logging.getLogger(__name__)

# src/extraemphasis/config.py  ->  parent x3  ->  project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


# ---------------------------------------------------------------------------
# Sub-models (one per configuration domain)
# ---------------------------------------------------------------------------
class FaceConfig(BaseModel):
    """User overrides for one named style descriptor."""

    foreground: str | None = None
    background: str | None = None
    weight: str | None = None
    slant: str | None = None
    size: float | None = None
    underline: bool | None = None
    strike_through: bool | None = None
    inherit: str | None = BASE_FACE.name

    @field_validator("weight")
    @classmethod
    def _known_weight(cls, value: str | None) -> str | None:
        if value is not None and value not in ("bold", "normal"):
            msg = f"weight must be 'bold' or 'normal', got {value!r}"
            raise ValueError(msg)
        return value

    @field_validator("slant")
    @classmethod
    def _known_slant(cls, value: str | None) -> str | None:
        if value is not None and value not in ("italic", "normal"):
            msg = f"slant must be 'italic' or 'normal', got {value!r}"
            raise ValueError(msg)
        return value

    def to_descriptor(self, name: str) -> StyleDescriptor:
        return StyleDescriptor(name=name, **self.model_dump())


class EmphasisConfig(BaseModel):
    """Extra emphasis markers, display and export options.

    ``markers`` maps marker tokens to style names.  Left unset, every
    two-symbol marker over ``alphabet`` is active, paired with the
    ``extra-emphasis-01`` .. ``extra-emphasis-16`` styles in order.
    """

    enabled: bool = True
    hide_delimiters: bool = False
    max_newlines: int = Field(default=0, ge=0)
    alphabet: str = DEFAULT_ALPHABET
    markers: dict[str, str] | None = None
    verbatim_markers: list[str] = []
    faces: dict[str, FaceConfig] = {}
    backends: list[str] = ["html", "latex", "odt"]
    html_inline_styles: bool = True


class AppConfig(BaseModel):
    """Application runtime configuration."""

    log_dir: Path = Path("logs")


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------
class Settings(BaseSettings):
    """Settings with automatic .env loading and type validation.

    Environment variables use double-underscore delimiter for nesting:
    ``EMPHASIS__ENABLED``, ``EMPHASIS__MAX_NEWLINES``, ``APP__LOG_DIR``.
    Complex values are JSON, e.g.
    ``EMPHASIS__MARKERS='{"!!": "extra-emphasis-01"}'``.
    """

    model_config = SettingsConfigDict(
        env_file=_PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    emphasis: EmphasisConfig = EmphasisConfig()
    app: AppConfig = AppConfig()


# ---------------------------------------------------------------------------
# Singleton access
# ---------------------------------------------------------------------------
@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Call ``get_settings.cache_clear()`` in tests to reset.
    """
    settings = Settings()

    env_file = settings.model_config.get("env_file")
    if env_file is not None and Path(str(env_file)).is_file():
        logger.info("Settings loaded .env from: %s", env_file)
    else:
        logger.info("Settings: no .env file found, using env vars and defaults")

    return settings
