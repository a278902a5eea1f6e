"""Emphasis export: backends and the post-render transcoder.

Rendered backend output still contains the (escaped) extra emphasis
markers; ``transcode`` replaces marker pairs with backend-styled spans.
"""

from extraemphasis.export.backends import (
    Backend,
    UnknownBackendError,
    UnsupportedMarkerError,
)
from extraemphasis.export.html import HtmlBackend
from extraemphasis.export.latex import LatexBackend
from extraemphasis.export.odt import OdtBackend
from extraemphasis.export.registry import available_backends, get_backend
from extraemphasis.export.transcoder import (
    MarkerAutomaton,
    SearchTable,
    export_text,
    transcode,
)

__all__ = [
    "Backend",
    "HtmlBackend",
    "LatexBackend",
    "MarkerAutomaton",
    "OdtBackend",
    "SearchTable",
    "UnknownBackendError",
    "UnsupportedMarkerError",
    "available_backends",
    "export_text",
    "get_backend",
    "transcode",
]
