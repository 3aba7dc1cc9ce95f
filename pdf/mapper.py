"""
pdf/mapper.py — mapowanie nagłówków i zdań na stronę + prostokąty w PDF.

Dla każdej jednostki:
  tekst (Heading.label / Sentence.text) → RenderedDocument.locate()
  → nagłówek: mapped_page + mapped_rect (obwiednia trafienia)
  → zdanie:   mapped_page + mapped_rects (prostokąt per linia) + mapped_rect (pierwszy)

Pojedynczy brak trafienia nigdy nie przerywa mapowania — trafia do raportu.
Domyślnie poprzednie mapowanie jednostki bez trafienia zostaje nietknięte;
clear_misses=True je czyści.

Niejednoznaczność: wygrywa pierwsza strona w kolejności stron; kilka trafień
na tej stronie → ostrzeżenie AMBIGUOUS_MATCH, użyte pierwsze wystąpienie.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from data_model import Heading, Rectangle, Sentence
from pleadings.errors import Diagnostic, DiagnosticCode

from .locator import RenderedDocument

logger = logging.getLogger(__name__)

type MappableUnit = Heading | Sentence


@dataclass(slots=True)
class MappingReport:
    """
    Wynik mapowania.

    - mapped:      liczba jednostek z ustaloną stroną i geometrią
    - misses:      MAPPING_MISS — tekst nie występuje na żadnej stronie
    - ambiguous:   AMBIGUOUS_MATCH — kilka trafień na zwycięskiej stronie
    """
    mapped: int = 0
    misses: list[Diagnostic] = field(default_factory=list)
    ambiguous: list[Diagnostic] = field(default_factory=list)

    @property
    def missed(self) -> int:
        return len(self.misses)

    @property
    def total(self) -> int:
        return self.mapped + self.missed


def map_all(
    units: Iterable[MappableUnit],
    rendered: RenderedDocument,
    clear_misses: bool = False,
) -> MappingReport:
    """Ustawia mapped_page/mapped_rect(s) jednostek w miejscu i zwraca raport."""
    report = MappingReport()

    for unit in units:
        text = _search_text(unit)
        hit = rendered.locate(text) if text.strip() else None

        if hit is None:
            logger.warning("Nie znaleziono w PDF: %r", _short(text))
            report.misses.append(Diagnostic(
                code=DiagnosticCode.MAPPING_MISS,
                message="Tekst nie występuje na żadnej stronie",
                subject=text,
            ))
            if clear_misses:
                _clear(unit)
            continue

        if hit.occurrences > 1:
            logger.warning(
                "%d trafień na stronie %d dla %r — użyto pierwszego",
                hit.occurrences, hit.page, _short(text),
            )
            report.ambiguous.append(Diagnostic(
                code=DiagnosticCode.AMBIGUOUS_MATCH,
                message=f"{hit.occurrences} trafień na stronie {hit.page}; użyto pierwszego",
                subject=text,
            ))

        _apply(unit, hit.page, hit.rects)
        report.mapped += 1
        logger.debug("%r → strona %d (%d prostokątów)", _short(text), hit.page, len(hit.rects))

    logger.info("Mapowanie: %d zmapowanych, %d bez trafienia", report.mapped, report.missed)
    return report


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _search_text(unit: MappableUnit) -> str:
    return unit.label if isinstance(unit, Heading) else unit.text


def _apply(unit: MappableUnit, page: int, rects: list[Rectangle]) -> None:
    unit.mapped_page = page
    if isinstance(unit, Heading):
        unit.mapped_rect = Rectangle.union_of(rects)
    else:
        unit.mapped_rects = list(rects)
        unit.mapped_rect = rects[0]


def _clear(unit: MappableUnit) -> None:
    unit.mapped_page = None
    unit.mapped_rect = None
    if isinstance(unit, Sentence):
        unit.mapped_rects = []


def _short(text: str, limit: int = 60) -> str:
    return text if len(text) <= limit else text[:limit] + "…"
