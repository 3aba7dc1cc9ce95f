"""
store/memory.py — magazyn w pamięci (arena per dokument).

Podstawa JsonStore; używany też bezpośrednio w testach.
"""

from __future__ import annotations

from typing import Iterable

from data_model import (
    CaseId,
    Classification,
    EntityId,
    Heading,
    Sentence,
    SourceDocument,
    new_id,
)
from pleadings.errors import UnknownEntity

from .base import check_units


class MemoryStore:
    def __init__(self) -> None:
        self._documents: dict[EntityId, SourceDocument] = {}
        self._headings: dict[EntityId, dict[EntityId, Heading]] = {}
        self._sentences: dict[EntityId, dict[EntityId, Sentence]] = {}
        # indeksy odwrotne: id jednostki → id dokumentu
        self._heading_owner: dict[EntityId, EntityId] = {}
        self._sentence_owner: dict[EntityId, EntityId] = {}

    # ------------------------------------------------------------------
    # Dokumenty
    # ------------------------------------------------------------------

    def add_document(self, case_id: CaseId, filename: str, path: str) -> SourceDocument:
        existing = self.find_document(case_id, filename)
        if existing is not None:
            existing.path = path
            self._changed()
            return existing
        doc = SourceDocument(id=new_id(), case_id=case_id, filename=filename, path=path)
        self._documents[doc.id] = doc
        self._headings[doc.id] = {}
        self._sentences[doc.id] = {}
        self._changed()
        return doc

    def get_document(self, document_id: EntityId) -> SourceDocument | None:
        return self._documents.get(document_id)

    def find_document(self, case_id: CaseId, filename: str) -> SourceDocument | None:
        for doc in self._documents.values():
            if doc.case_id == case_id and doc.filename == filename:
                return doc
        return None

    def list_documents(self, case_id: CaseId | None = None) -> list[SourceDocument]:
        docs = [d for d in self._documents.values() if case_id is None or d.case_id == case_id]
        return sorted(docs, key=lambda d: (d.case_id, d.filename))

    def delete_document(self, document_id: EntityId) -> None:
        self._require_document(document_id)
        self._drop_units(document_id)
        del self._documents[document_id]
        del self._headings[document_id]
        del self._sentences[document_id]
        self._changed()

    # ------------------------------------------------------------------
    # Jednostki
    # ------------------------------------------------------------------

    def replace_units(
        self,
        document_id: EntityId,
        headings: Iterable[Heading],
        sentences: Iterable[Sentence],
    ) -> None:
        self._require_document(document_id)
        headings = list(headings)
        sentences = list(sentences)
        check_units(document_id, headings, sentences)

        self._drop_units(document_id)
        self._headings[document_id] = {h.id: h for h in headings}
        self._sentences[document_id] = {s.id: s for s in sentences}
        for h in headings:
            self._heading_owner[h.id] = document_id
        for s in sentences:
            self._sentence_owner[s.id] = document_id
        self._changed()

    def headings(self, document_id: EntityId) -> list[Heading]:
        self._require_document(document_id)
        return sorted(self._headings[document_id].values(), key=lambda h: h.order_index)

    def sentences(self, document_id: EntityId) -> list[Sentence]:
        self._require_document(document_id)
        return sorted(self._sentences[document_id].values(), key=lambda s: s.order_index)

    def get_heading(self, heading_id: EntityId) -> Heading | None:
        owner = self._heading_owner.get(heading_id)
        return self._headings[owner].get(heading_id) if owner else None

    def get_sentence(self, sentence_id: EntityId) -> Sentence | None:
        owner = self._sentence_owner.get(sentence_id)
        return self._sentences[owner].get(sentence_id) if owner else None

    def save_mappings(
        self,
        document_id: EntityId,
        headings: Iterable[Heading],
        sentences: Iterable[Sentence],
    ) -> None:
        self._require_document(document_id)
        stored_h = self._headings[document_id]
        stored_s = self._sentences[document_id]
        for h in headings:
            target = stored_h.get(h.id)
            if target is None:
                raise UnknownEntity(f"Nagłówek {h.id} nie należy do dokumentu {document_id}")
            target.mapped_page = h.mapped_page
            target.mapped_rect = h.mapped_rect
        for s in sentences:
            target = stored_s.get(s.id)
            if target is None:
                raise UnknownEntity(f"Zdanie {s.id} nie należy do dokumentu {document_id}")
            target.mapped_page = s.mapped_page
            target.mapped_rects = list(s.mapped_rects)
            target.mapped_rect = s.mapped_rect
        self._changed()

    def set_classification(self, sentence_id: EntityId, state: Classification) -> Sentence:
        sentence = self.get_sentence(sentence_id)
        if sentence is None:
            raise UnknownEntity(f"Nieznane zdanie: {sentence_id}")
        sentence.classification = state
        self._changed()
        return sentence

    # ------------------------------------------------------------------
    # Pomocnicze
    # ------------------------------------------------------------------

    def _require_document(self, document_id: EntityId) -> SourceDocument:
        doc = self._documents.get(document_id)
        if doc is None:
            raise UnknownEntity(f"Nieznany dokument: {document_id}")
        return doc

    def _drop_units(self, document_id: EntityId) -> None:
        for heading_id in self._headings.get(document_id, {}):
            self._heading_owner.pop(heading_id, None)
        for sentence_id in self._sentences.get(document_id, {}):
            self._sentence_owner.pop(sentence_id, None)
        self._headings[document_id] = {}
        self._sentences[document_id] = {}

    def _changed(self) -> None:
        """Punkt zaczepienia dla magazynów trwałych (JsonStore)."""
