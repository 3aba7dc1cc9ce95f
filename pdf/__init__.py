"""
pdf — warstwa dokumentu renderowanego (PyMuPDF).

Moduły:
  locator    — tekst stron z geometrią znaków, wyszukiwanie
  mapper     — jednostki → strona + prostokąty
  highlights — nakładki klasyfikacji (plan + rysowanie)
  resolver   — PDF sparowany z plikiem .docx
"""

from .highlights import (
    COLORS,
    OWNER_TAG,
    HighlightSpec,
    HighlightSurface,
    PdfHighlightSurface,
    RenderPlan,
    plan_highlights,
    render_highlights,
)
from .locator import PageText, RenderedDocument, TextHit
from .mapper import MappingReport, map_all
from .resolver import require_rendered_document, resolve_rendered_document

__all__ = [
    "COLORS",
    "OWNER_TAG",
    "HighlightSpec",
    "HighlightSurface",
    "PdfHighlightSurface",
    "RenderPlan",
    "plan_highlights",
    "render_highlights",
    "PageText",
    "RenderedDocument",
    "TextHit",
    "MappingReport",
    "map_all",
    "require_rendered_document",
    "resolve_rendered_document",
]
