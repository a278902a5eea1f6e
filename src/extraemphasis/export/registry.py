"""Backend lookup by name."""

from __future__ import annotations

from typing import TYPE_CHECKING

from extraemphasis.export.backends import UnknownBackendError
from extraemphasis.export.html import HtmlBackend
from extraemphasis.export.latex import LatexBackend
from extraemphasis.export.odt import OdtBackend

if TYPE_CHECKING:
    from extraemphasis.export.backends import Backend

__all__ = ["available_backends", "get_backend"]


def available_backends() -> list[str]:
    """Names accepted by ``get_backend``."""
    return ["html", "latex", "odt"]


def get_backend(name: str, *, inline_styles: bool = True) -> Backend:
    """Create a fresh backend instance.

    Args:
        name: ``"html"``, ``"latex"`` or ``"odt"``.
        inline_styles: HTML only; False emits class-based styles.

    Raises:
        UnknownBackendError: *name* is not a known backend.
    """
    if name == "html":
        return HtmlBackend(inline_styles=inline_styles)
    if name == "latex":
        return LatexBackend()
    if name == "odt":
        return OdtBackend()
    msg = f"unknown export backend {name!r} (known: {', '.join(available_backends())})"
    raise UnknownBackendError(msg)
