"""
store/base.py — kontrakt magazynu dokumentów sprawy.

Magazyn jest jawnie tworzony i wstrzykiwany do silnika (brak globalnej instancji).
Model arena: nagłówki i zdania trzymane per dokument, klucz = id;
zdanie wskazuje nagłówek wyłącznie przez parent_heading_id.

Dyscyplina zapisu "odczytaj, potem zastąp":
  replace_units()  — pełna wymiana nagłówków i zdań dokumentu (bez scalania)
  save_mappings()  — pełne nadpisanie pól mapowania podanych jednostek
"""

from __future__ import annotations

from typing import Iterable, Protocol

from data_model import (
    CaseId,
    Classification,
    EntityId,
    Heading,
    Sentence,
    SourceDocument,
)


class CaseStore(Protocol):
    def add_document(self, case_id: CaseId, filename: str, path: str) -> SourceDocument:
        """Zwraca istniejący dokument (case_id, filename) albo tworzy nowy; aktualizuje path."""
        ...

    def get_document(self, document_id: EntityId) -> SourceDocument | None: ...

    def find_document(self, case_id: CaseId, filename: str) -> SourceDocument | None: ...

    def list_documents(self, case_id: CaseId | None = None) -> list[SourceDocument]: ...

    def delete_document(self, document_id: EntityId) -> None: ...

    def replace_units(
        self,
        document_id: EntityId,
        headings: Iterable[Heading],
        sentences: Iterable[Sentence],
    ) -> None: ...

    def headings(self, document_id: EntityId) -> list[Heading]: ...

    def sentences(self, document_id: EntityId) -> list[Sentence]: ...

    def get_heading(self, heading_id: EntityId) -> Heading | None: ...

    def get_sentence(self, sentence_id: EntityId) -> Sentence | None: ...

    def save_mappings(
        self,
        document_id: EntityId,
        headings: Iterable[Heading],
        sentences: Iterable[Sentence],
    ) -> None: ...

    def set_classification(self, sentence_id: EntityId, state: Classification) -> Sentence: ...


def check_units(
    document_id: EntityId,
    headings: list[Heading],
    sentences: list[Sentence],
) -> None:
    """
    Waliduje partię jednostek przed zapisem.

    - wszystkie jednostki należą do document_id
    - parent_heading_id wskazuje nagłówek z tej samej partii
    - order_index unikalny w obrębie nagłówków i zdań dokumentu
    """
    heading_ids = {h.id for h in headings}
    seen_order: set[int] = set()

    for unit in [*headings, *sentences]:
        if unit.document_id != document_id:
            raise ValueError(f"Jednostka {unit.id} należy do dokumentu {unit.document_id}, nie {document_id}")
        if unit.order_index in seen_order:
            raise ValueError(f"Powtórzony order_index {unit.order_index} w dokumencie {document_id}")
        seen_order.add(unit.order_index)

    for s in sentences:
        if s.parent_heading_id is not None and s.parent_heading_id not in heading_ids:
            raise ValueError(f"Zdanie {s.id} wskazuje nagłówek spoza dokumentu: {s.parent_heading_id}")
