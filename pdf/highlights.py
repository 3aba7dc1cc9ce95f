"""
pdf/highlights.py — rysowanie klasyfikacji zdań jako podświetleń na stronach PDF.

Cykl renderowania (zawsze pełny, nigdy przyrostowy):
  1. surface.clear()  — usuń wszystkie nakładki silnika (oraz nieoznaczone
                        podświetlenia pozostałe po starszych przebiegach)
  2. plan_highlights() — wylicz nakładki z bieżącego stanu zdań
  3. surface.draw()   — narysuj każdą nakładkę

Dzięki temu wielokrotne renderowanie nie kumuluje duplikatów.

Kolory (stała tabela):
  ADMITTED → zielony, DENIED → czerwony, NOT_KNOWN → żółty,
  UNCLASSIFIED → przezroczysty (rysowany, ale niewidoczny)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Protocol

import fitz  # PyMuPDF

from data_model import Classification, EntityId, Rectangle, Sentence
from pleadings.errors import Diagnostic, DiagnosticCode
from pleadings.heading_patterns import DEFAULT_CLASSIFIER, HeadingClassifier

logger = logging.getLogger(__name__)

# Znacznik autora nakładek rysowanych przez silnik (pole /T adnotacji PDF)
OWNER_TAG = "epleadings"

# Krótszych tekstów (resztek segmentacji) nie rysujemy
MIN_HIGHLIGHT_TEXT = 5


@dataclass(frozen=True, slots=True)
class HighlightColor:
    rgb: tuple[float, float, float]
    opacity: float


COLORS: dict[Classification, HighlightColor] = {
    Classification.ADMITTED:     HighlightColor(rgb=(0.20, 0.78, 0.35), opacity=0.35),
    Classification.DENIED:       HighlightColor(rgb=(1.00, 0.23, 0.19), opacity=0.35),
    Classification.NOT_KNOWN:    HighlightColor(rgb=(1.00, 0.80, 0.00), opacity=0.35),
    Classification.UNCLASSIFIED: HighlightColor(rgb=(0.56, 0.56, 0.58), opacity=0.0),
}


def color_for(state: Classification) -> HighlightColor:
    return COLORS[state]


@dataclass(frozen=True, slots=True)
class HighlightSpec:
    """Jedna nakładka: strona (1-based), prostokąt, stan i zdanie źródłowe."""
    page: int
    rect: Rectangle
    classification: Classification
    sentence_id: EntityId
    text: str

    @property
    def color(self) -> HighlightColor:
        return COLORS[self.classification]


@dataclass(slots=True)
class RenderPlan:
    """
    Plan renderowania dokumentu.

    - highlights:          nakładki do narysowania
    - skipped_invalid:     INVALID_GEOMETRY — prostokąty zdegenerowane
    - skipped_unmapped:    zdania bez strony/geometrii
    - skipped_heading_like: zdania wyglądające jak nagłówek lub za krótkie
    - removed:             nakładki usunięte w kroku clear (wypełnia render_highlights)
    - diagnostics:         INVALID_GEOMETRY per pominięty prostokąt
    """
    highlights: list[HighlightSpec] = field(default_factory=list)
    skipped_invalid: int = 0
    skipped_unmapped: int = 0
    skipped_heading_like: int = 0
    removed: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def count(self, state: Classification) -> int:
        return sum(1 for h in self.highlights if h.classification is state)

    def by_page(self) -> dict[int, list[HighlightSpec]]:
        pages: dict[int, list[HighlightSpec]] = {}
        for h in self.highlights:
            pages.setdefault(h.page, []).append(h)
        return pages


class HighlightSurface(Protocol):
    """Powierzchnia renderująca (widok PDF). render_highlights() to jedyna ścieżka zapisu."""

    def clear(self) -> int: ...

    def draw(self, spec: HighlightSpec) -> None: ...


# ---------------------------------------------------------------------------
# Planowanie
# ---------------------------------------------------------------------------

def plan_highlights(
    sentences: Iterable[Sentence],
    classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
) -> RenderPlan:
    """Czysta funkcja: stan zdań → nakładki (bez dotykania powierzchni)."""
    plan = RenderPlan()

    for sentence in sorted(sentences, key=lambda s: s.order_index):
        text = sentence.text.strip()
        if len(text) < MIN_HIGHLIGHT_TEXT or classifier.is_heading_like(text):
            plan.skipped_heading_like += 1
            continue

        rects = sentence.draw_rects()
        if sentence.mapped_page is None or not rects:
            plan.skipped_unmapped += 1
            continue

        for rect in rects:
            if not rect.is_drawable():
                logger.debug("Pomijam zdegenerowany prostokąt %s dla %r", rect, text[:40])
                plan.skipped_invalid += 1
                plan.diagnostics.append(Diagnostic(
                    code=DiagnosticCode.INVALID_GEOMETRY,
                    message=f"Prostokąt {rect.as_tuple()} na stronie {sentence.mapped_page} nie nadaje się do rysowania",
                    subject=text,
                ))
                continue
            plan.highlights.append(HighlightSpec(
                page=sentence.mapped_page,
                rect=rect,
                classification=sentence.classification,
                sentence_id=sentence.id,
                text=text,
            ))

    return plan


def render_highlights(
    surface: HighlightSurface,
    sentences: Iterable[Sentence],
    classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
) -> RenderPlan:
    """Usuwa wszystkie nakładki silnika i rysuje bieżący stan od zera."""
    removed = surface.clear()
    plan = plan_highlights(sentences, classifier)
    for spec in plan.highlights:
        surface.draw(spec)
    plan.removed = removed

    if plan.skipped_invalid:
        logger.warning("Pominięto %d zdegenerowanych prostokątów", plan.skipped_invalid)
    logger.info(
        "Renderowanie: usunięto %d, narysowano %d nakładek",
        removed, len(plan.highlights),
    )
    return plan


# ---------------------------------------------------------------------------
# Powierzchnia PyMuPDF
# ---------------------------------------------------------------------------

class PdfHighlightSurface:
    """Rysuje nakładki jako adnotacje Highlight w otwartym dokumencie fitz."""

    def __init__(self, doc: fitz.Document) -> None:
        self.doc = doc

    def clear(self) -> int:
        removed = 0
        for page in self.doc:
            stale: list[int] = []
            for annot in page.annots():
                title = (annot.info or {}).get("title", "")
                if title == OWNER_TAG:
                    stale.append(annot.xref)
                elif not title and annot.type[0] == fitz.PDF_ANNOT_HIGHLIGHT:
                    stale.append(annot.xref)
            # usuwanie poza iteracją page.annots()
            for xref in stale:
                page.delete_annot(page.load_annot(xref))
                removed += 1
        return removed

    def draw(self, spec: HighlightSpec) -> None:
        if not 1 <= spec.page <= self.doc.page_count:
            logger.warning("Strona %d poza dokumentem (%d stron), pomijam", spec.page, self.doc.page_count)
            return
        page = self.doc[spec.page - 1]
        color = spec.color
        annot = page.add_highlight_annot(fitz.Rect(*spec.rect.corners()))
        annot.set_colors(stroke=color.rgb)
        annot.set_opacity(color.opacity)
        annot.set_info(title=OWNER_TAG, content=spec.text, subject=str(spec.classification))
        annot.update()

    def highlight_count(self) -> int:
        """Liczba nakładek silnika w dokumencie."""
        total = 0
        for page in self.doc:
            for annot in page.annots():
                if (annot.info or {}).get("title") == OWNER_TAG:
                    total += 1
        return total
