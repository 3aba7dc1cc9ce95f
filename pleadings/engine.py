"""
pleadings/engine.py — fasada silnika: import, mapowanie, klasyfikacja, renderowanie.

Architektura (żądanie → odpowiedź, jeden wątek):
  import_document(path, case_id)
    → extract_paragraphs()      (PackageError przerywa przed jakimkolwiek zapisem)
    → segment()                 (nagłówki + zdania, pełna wymiana)
    → map_all()                 (PDF wczytany przed zapisem; brak lub nieczytelny PDF to tylko diagnostyka)
    → store.replace_units()
  classify(sentence_id, state) → RenderPlan do narysowania przez widok
  render(document_id, surface) → clear + draw
  find_pair(heading_id)        → nawigacja Statement N ↔ Answer N (bez zapisu)

Magazyn jest przekazywany jawnie (CaseStore); silnik nie trzyma stanu poza nim.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import fitz  # PyMuPDF

from data_model import (
    CaseId,
    Classification,
    EntityId,
    Heading,
    Sentence,
    SourceDocument,
)
from docx_parser import extract_paragraphs
from pdf.highlights import (
    HighlightSurface,
    PdfHighlightSurface,
    RenderPlan,
    plan_highlights,
    render_highlights,
)
from pdf.locator import RenderedDocument
from pdf.mapper import MappingReport, map_all
from pdf.resolver import require_rendered_document, resolve_rendered_document
from store.base import CaseStore

from .errors import (
    Diagnostic,
    DiagnosticCode,
    InvalidClassification,
    RenderedDocumentMissing,
    UnknownEntity,
)
from .heading_patterns import DEFAULT_CLASSIFIER, HeadingClassifier
from .lookup import find_nearest_sentence
from .pair_matcher import find_pair, pair_all
from .segmenter import segment
from .text_cleaner import normalize_for_search

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ImportResult:
    """
    Wynik importu jednego dokumentu.

    - mapping:      raport mapowania; None, gdy nie odnaleziono PDF
    - carried_over: zdania, którym przywrócono klasyfikację (keep_classifications)
    - diagnostics:  CLASSIFICATION_MISMATCH z segmentacji + RENDERED_MISSING
    """
    document: SourceDocument
    headings: list[Heading]
    sentences: list[Sentence]
    rejected: int = 0
    rendered_path: Path | None = None
    mapping: MappingReport | None = None
    carried_over: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)


class PleadingsEngine:
    def __init__(
        self,
        store: CaseStore,
        classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
    ) -> None:
        self.store = store
        self.classifier = classifier

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------

    def import_document(
        self,
        path: str | Path,
        case_id: CaseId,
        rendered_path: str | Path | None = None,
        keep_classifications: bool = False,
    ) -> ImportResult:
        """
        Importuje (lub importuje ponownie) dokument .docx sprawy.

        Ponowny import tego samego pliku w tej samej sprawie nie tworzy nowego
        dokumentu ani duplikatów: nagłówki i zdania są wymieniane w całości,
        a klasyfikacje wracają do UNCLASSIFIED, chyba że keep_classifications=True
        (wtedy przenoszone są po znormalizowanym tekście zdania).

        Nieczytelny PDF (pusty, ucięty, nie-PDF) traktowany jest jak brak PDF:
        diagnostyka RENDERED_MISSING, jednostki bez geometrii.

        Raises:
            PackageError: nieczytelny pakiet .docx; magazyn pozostaje nietknięty.
        """
        path = Path(path)
        paragraphs = extract_paragraphs(path)

        # PDF wczytany przed pierwszym zapisem do magazynu
        pdf_path = Path(rendered_path) if rendered_path is not None else resolve_rendered_document(path)
        rendered, missing = _load_rendered(pdf_path, path)

        try:
            document = self.store.add_document(case_id, path.name, str(path))
            seg = segment(paragraphs, document.id, classifier=self.classifier)
            result = ImportResult(
                document=document,
                headings=seg.headings,
                sentences=seg.sentences,
                rejected=seg.rejected,
                diagnostics=list(seg.diagnostics),
            )

            if keep_classifications:
                result.carried_over = _carry_classifications(
                    self.store.sentences(document.id), seg.sentences,
                )

            if rendered is None:
                result.diagnostics.append(missing)
            else:
                result.rendered_path = pdf_path
                result.mapping = map_all([*seg.headings, *seg.sentences], rendered)
        finally:
            if rendered is not None:
                rendered.close()

        self.store.replace_units(document.id, seg.headings, seg.sentences)
        logger.info(
            "Import %s (%s): %d nagłówków, %d zdań",
            path.name, case_id, len(seg.headings), len(seg.sentences),
        )
        return result

    # ------------------------------------------------------------------
    # Mapowanie
    # ------------------------------------------------------------------

    def map_document(
        self,
        document_id: EntityId,
        rendered_path: str | Path | None = None,
        clear_misses: bool = False,
    ) -> MappingReport | None:
        """Mapuje ponownie jednostki zapisanego dokumentu; None, gdy brak PDF."""
        document = self._document(document_id)
        pdf_path = self._rendered_path(document, rendered_path)
        rendered, _ = _load_rendered(pdf_path, Path(document.path))
        if rendered is None:
            return None

        headings = self.store.headings(document_id)
        sentences = self.store.sentences(document_id)
        with rendered:
            report = map_all([*headings, *sentences], rendered, clear_misses=clear_misses)
        self.store.save_mappings(document_id, headings, sentences)
        return report

    # ------------------------------------------------------------------
    # Klasyfikacja i renderowanie
    # ------------------------------------------------------------------

    def classify(self, sentence_id: EntityId, state: Classification | str) -> RenderPlan:
        """
        Ustawia stan zdania i zwraca plan nakładek całego dokumentu do narysowania.

        Raises:
            InvalidClassification: UNCLASSIFIED (wraca tylko przez ponowny import)
                                   albo nieznana nazwa stanu.
            UnknownEntity:         nieznane zdanie.
        """
        if isinstance(state, str) and not isinstance(state, Classification):
            try:
                state = Classification.parse(state)
            except ValueError as e:
                raise InvalidClassification(f"Nieznany stan: {state!r}") from e
        if state is Classification.UNCLASSIFIED:
            raise InvalidClassification(
                "Stanu 'unclassified' nie można ustawić ręcznie; przywraca go tylko ponowny import"
            )
        sentence = self.store.set_classification(sentence_id, state)
        logger.debug("Zdanie %s → %s", sentence_id, state)
        return plan_highlights(self.store.sentences(sentence.document_id), self.classifier)

    def plan(self, document_id: EntityId) -> RenderPlan:
        return plan_highlights(self.store.sentences(document_id), self.classifier)

    def render(self, document_id: EntityId, surface: HighlightSurface) -> RenderPlan:
        return render_highlights(surface, self.store.sentences(document_id), self.classifier)

    def export_annotated(
        self,
        document_id: EntityId,
        output_path: str | Path,
        rendered_path: str | Path | None = None,
    ) -> RenderPlan:
        """
        Zapisuje kopię PDF z bieżącymi nakładkami.

        Raises:
            RenderedDocumentMissing: brak PDF albo PDF nieczytelny.
        """
        document = self._document(document_id)
        pdf_path = (
            Path(rendered_path) if rendered_path is not None
            else require_rendered_document(document.path)
        )
        try:
            doc = fitz.open(str(pdf_path))
        except (RuntimeError, OSError) as e:
            raise RenderedDocumentMissing(f"{Path(pdf_path).name}: nie można otworzyć PDF ({e})") from e
        try:
            plan = self.render(document_id, PdfHighlightSurface(doc))
            doc.save(str(output_path), garbage=3, deflate=True)
        finally:
            doc.close()
        logger.info("Zapisano %s (%d nakładek)", output_path, len(plan.highlights))
        return plan

    # ------------------------------------------------------------------
    # Nawigacja (bez zapisu)
    # ------------------------------------------------------------------

    def outline(self, document_id: EntityId) -> list[Heading]:
        return self.store.headings(document_id)

    def find_pair(self, heading_id: EntityId) -> Heading | None:
        heading = self.store.get_heading(heading_id)
        if heading is None:
            raise UnknownEntity(f"Nieznany nagłówek: {heading_id}")
        return find_pair(heading, self.store.headings(heading.document_id), self.classifier)

    def pairs(self, document_id: EntityId) -> list[tuple[Heading | None, Heading | None]]:
        return pair_all(self.store.headings(document_id), self.classifier)

    def sentences_under(self, heading_id: EntityId) -> list[Sentence]:
        heading = self.store.get_heading(heading_id)
        if heading is None:
            raise UnknownEntity(f"Nieznany nagłówek: {heading_id}")
        return [
            s for s in self.store.sentences(heading.document_id)
            if s.parent_heading_id == heading_id
        ]

    def nearest_sentence(
        self,
        document_id: EntityId,
        page: int,
        point: tuple[float, float],
    ) -> Sentence | None:
        return find_nearest_sentence(self.store.sentences(document_id), page, point)

    # ------------------------------------------------------------------
    # Pomocnicze
    # ------------------------------------------------------------------

    def _document(self, document_id: EntityId) -> SourceDocument:
        document = self.store.get_document(document_id)
        if document is None:
            raise UnknownEntity(f"Nieznany dokument: {document_id}")
        return document

    def _rendered_path(
        self,
        document: SourceDocument,
        rendered_path: str | Path | None,
    ) -> Path | None:
        if rendered_path is not None:
            return Path(rendered_path)
        return resolve_rendered_document(document.path)


def _carry_classifications(previous: list[Sentence], current: list[Sentence]) -> int:
    """Przenosi stany z poprzedniego importu po tekście (małe litery, zwinięte spacje)."""
    states: dict[str, Classification] = {}
    for s in previous:
        if s.classification is not Classification.UNCLASSIFIED:
            states.setdefault(normalize_for_search(s.text), s.classification)

    carried = 0
    for s in current:
        state = states.get(normalize_for_search(s.text))
        if state is not None:
            s.classification = state
            carried += 1
    return carried


def _load_rendered(
    pdf_path: Path | None,
    source: Path,
) -> tuple[RenderedDocument | None, Diagnostic | None]:
    """
    Otwiera PDF i buduje indeks stron.

    Brak pliku albo plik nieczytelny → (None, RENDERED_MISSING); ostrzeżenie w logu.
    """
    if pdf_path is None:
        message = f"Nie znaleziono PDF dla {source.name}; jednostki bez geometrii"
    else:
        rendered = None
        try:
            rendered = RenderedDocument.open(pdf_path)
            rendered.pages()
            return rendered, None
        except RenderedDocumentMissing as e:
            if rendered is not None:
                rendered.close()
            message = f"{e}; jednostki {source.name} bez geometrii"

    logger.warning(message)
    return None, Diagnostic(
        code=DiagnosticCode.RENDERED_MISSING,
        message=message,
        subject=str(pdf_path or source),
    )
