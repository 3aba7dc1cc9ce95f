"""
data_model/documents.py — dokument źródłowy (.docx) oraz jego jednostki.

SourceDocument posiada nagłówki (Heading) i zdania (Sentence).
Relacja zdanie → nagłówek to wyłącznie identyfikator (parent_heading_id);
właścicielem jest dokument, a magazyn trzyma jednostki per dokument (arena).

order_index jest wspólnym licznikiem kolejności czytania dla nagłówków i zdań
jednego dokumentu: wartości są unikalne, ciągłe (0..N-1) i rosną zgodnie
z kolejnością w dokumencie, niezależnie od numerów stron PDF.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone

from .common import CaseId, Classification, EntityId, HeadingType
from .geometry import Rectangle


def new_id() -> EntityId:
    return str(uuid.uuid4())


def is_entity_id(value: str) -> bool:
    """Czy tekst ma postać UUID (kolumny UUID w PostgreSQL odrzucają inne wartości)."""
    try:
        uuid.UUID(value)
    except (ValueError, TypeError, AttributeError):
        return False
    return True


@dataclass(slots=True)
class SourceDocument:
    id: EntityId
    case_id: CaseId
    filename: str          # nazwa wyświetlana, np. "pleadings.docx"
    path: str              # ścieżka do kopii w folderze sprawy
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(slots=True)
class Heading:
    """
    Sklasyfikowana linia-znacznik struktury pisma.

    - label:   krótka forma kanoniczna, np. "Cond. 5" (bez dalszej narracji)
    - role:    STATEMENT albo ANSWER (MISC nigdy nie trafia do Heading)
    - ordinal: liczba z etykiety, klucz parowania Statement N ↔ Answer N
    """
    id: EntityId
    document_id: EntityId
    label: str
    order_index: int
    role: HeadingType
    ordinal: int
    mapped_page: int | None = None       # 1-based
    mapped_rect: Rectangle | None = None

    @property
    def is_mapped(self) -> bool:
        return self.mapped_page is not None and self.mapped_rect is not None


@dataclass(slots=True)
class Sentence:
    """
    Jednostka tekstu, którą użytkownik może oznaczyć.

    mapped_rects może mieć 0, 1 lub wiele prostokątów (zdanie łamane na kilka
    linii PDF). mapped_rect to pierwszy z nich — pole dla wywołujących, którzy
    oczekują jednego prostokąta.
    """
    id: EntityId
    document_id: EntityId
    text: str
    order_index: int
    parent_heading_id: EntityId | None = None
    mapped_page: int | None = None       # 1-based
    mapped_rects: list[Rectangle] = field(default_factory=list)
    mapped_rect: Rectangle | None = None
    classification: Classification = Classification.UNCLASSIFIED

    @property
    def is_mapped(self) -> bool:
        return self.mapped_page is not None and (bool(self.mapped_rects) or self.mapped_rect is not None)

    def draw_rects(self) -> list[Rectangle]:
        """Prostokąty do rysowania: lista wieloliniowa lub pojedynczy prostokąt."""
        if self.mapped_rects:
            return list(self.mapped_rects)
        return [self.mapped_rect] if self.mapped_rect is not None else []


# Kolekcje jednostek w kolejności dokumentu.
type HeadingList = list[Heading]
type SentenceList = list[Sentence]
