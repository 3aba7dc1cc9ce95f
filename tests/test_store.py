"""Tests for store.memory and store.json_store — arena dokumentów sprawy."""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from conftest import PLEADING_PARAGRAPHS

from data_model import Classification, Rectangle
from pleadings.errors import UnknownEntity
from pleadings.segmenter import segment
from store import JsonStore, MemoryStore, PostgresStore


def _populate(store, case_id: str = "smith_v_jones", filename: str = "pleadings.docx"):
    doc = store.add_document(case_id, filename, f"/cases/{case_id}/{filename}")
    result = segment(PLEADING_PARAGRAPHS, doc.id)
    store.replace_units(doc.id, result.headings, result.sentences)
    return doc, result


# ── MemoryStore ──────────────────────────────────────────────────────


class TestMemoryStore:
    def test_add_document_is_get_or_create(self) -> None:
        store = MemoryStore()
        first = store.add_document("case-1", "pleadings.docx", "/a/pleadings.docx")
        second = store.add_document("case-1", "pleadings.docx", "/b/pleadings.docx")
        assert first.id == second.id
        assert second.path == "/b/pleadings.docx"
        assert len(store.list_documents()) == 1

    def test_same_filename_in_other_case_is_separate(self) -> None:
        store = MemoryStore()
        a = store.add_document("case-1", "pleadings.docx", "/a")
        b = store.add_document("case-2", "pleadings.docx", "/b")
        assert a.id != b.id
        assert [d.id for d in store.list_documents("case-2")] == [b.id]

    def test_units_sorted_by_order_index(self) -> None:
        store = MemoryStore()
        doc, _ = _populate(store)
        sentences = store.sentences(doc.id)
        assert [s.order_index for s in sentences] == sorted(s.order_index for s in sentences)
        assert [h.label for h in store.headings(doc.id)] == ["Cond. 1", "Ans. 1", "Cond. 2", "Ans. 2"]

    def test_replace_units_drops_previous(self) -> None:
        store = MemoryStore()
        doc, old = _populate(store)
        new = segment(PLEADING_PARAGRAPHS, doc.id)
        store.replace_units(doc.id, new.headings, new.sentences)

        for unit in old.sentences:
            assert store.get_sentence(unit.id) is None
        for unit in old.headings:
            assert store.get_heading(unit.id) is None
        assert {s.id for s in store.sentences(doc.id)} == {s.id for s in new.sentences}

    def test_replace_units_validates_batch(self) -> None:
        store = MemoryStore()
        doc = store.add_document("case-1", "pleadings.docx", "/a")
        result = segment(PLEADING_PARAGRAPHS, "other-document")
        with pytest.raises(ValueError):
            store.replace_units(doc.id, result.headings, result.sentences)

    def test_duplicate_order_index_rejected(self) -> None:
        store = MemoryStore()
        doc = store.add_document("case-1", "pleadings.docx", "/a")
        result = segment(PLEADING_PARAGRAPHS, doc.id)
        result.sentences[1].order_index = result.sentences[0].order_index
        with pytest.raises(ValueError, match="order_index"):
            store.replace_units(doc.id, result.headings, result.sentences)

    def test_parent_outside_batch_rejected(self) -> None:
        store = MemoryStore()
        doc = store.add_document("case-1", "pleadings.docx", "/a")
        result = segment(PLEADING_PARAGRAPHS, doc.id)
        with pytest.raises(ValueError):
            store.replace_units(doc.id, [], result.sentences)

    def test_set_classification(self) -> None:
        store = MemoryStore()
        doc, result = _populate(store)
        target = result.sentences[2]
        updated = store.set_classification(target.id, Classification.DENIED)
        assert updated.classification is Classification.DENIED
        assert store.get_sentence(target.id).classification is Classification.DENIED

    def test_unknown_sentence(self) -> None:
        store = MemoryStore()
        with pytest.raises(UnknownEntity):
            store.set_classification("missing", Classification.ADMITTED)
        with pytest.raises(KeyError):
            store.set_classification("missing", Classification.ADMITTED)

    def test_unknown_document(self) -> None:
        store = MemoryStore()
        with pytest.raises(UnknownEntity):
            store.sentences("missing")

    def test_save_mappings_rejects_foreign_units(self) -> None:
        store = MemoryStore()
        doc_a, result_a = _populate(store, filename="a.docx")
        doc_b, _ = _populate(store, filename="b.docx")
        with pytest.raises(UnknownEntity):
            store.save_mappings(doc_b.id, [], result_a.sentences[:1])

    def test_delete_document(self) -> None:
        store = MemoryStore()
        doc, result = _populate(store)
        store.delete_document(doc.id)
        assert store.get_document(doc.id) is None
        assert store.get_sentence(result.sentences[0].id) is None


# ── JsonStore ────────────────────────────────────────────────────────


class TestJsonStore:
    def test_directory_path_gets_default_file(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path)
        assert store.path == tmp_path / "store.json"

    def test_roundtrip_through_file(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path / "data")
        doc, result = _populate(store)
        sentence = result.sentences[0]
        sentence.mapped_page = 1
        sentence.mapped_rects = [Rectangle(72, 72, 120, 14), Rectangle(72, 90, 40, 14)]
        sentence.mapped_rect = sentence.mapped_rects[0]
        store.save_mappings(doc.id, [], [sentence])
        store.set_classification(sentence.id, Classification.NOT_KNOWN)

        reloaded = JsonStore(tmp_path / "data")
        again = reloaded.get_sentence(sentence.id)
        assert again.classification is Classification.NOT_KNOWN
        assert again.mapped_page == 1
        assert again.mapped_rects == sentence.mapped_rects
        assert again.parent_heading_id == sentence.parent_heading_id
        assert [h.label for h in reloaded.headings(doc.id)] == ["Cond. 1", "Ans. 1", "Cond. 2", "Ans. 2"]
        assert reloaded.get_document(doc.id).created_at == doc.created_at

    def test_file_format(self, tmp_path: Path) -> None:
        store = JsonStore(tmp_path)
        _populate(store)
        data = json.loads((tmp_path / "store.json").read_text(encoding="utf-8"))
        assert data["version"] == 1
        assert len(data["documents"]) == 1
        assert len(data["documents"][0]["sentences"]) == 6

    def test_no_temp_file_left(self, tmp_path: Path) -> None:
        _populate(JsonStore(tmp_path))
        assert sorted(p.name for p in tmp_path.iterdir()) == ["store.json"]


# ── PostgresStore: identyfikatory ────────────────────────────────────


class _UnusedConnection:
    """Połączenie, którego nie wolno użyć: id spoza UUID nie trafia do bazy."""

    def cursor(self):
        raise AssertionError("zapytanie do bazy dla identyfikatora spoza UUID")

    def __enter__(self):
        raise AssertionError("transakcja dla identyfikatora spoza UUID")

    def __exit__(self, *exc):
        return False


class TestPostgresStoreIds:
    def test_lookups_of_non_uuid_ids_return_none(self) -> None:
        store = PostgresStore(_UnusedConnection())
        assert store.get_document("pleadings.docx") is None
        assert store.get_heading("foo") is None
        assert store.get_sentence("foo") is None

    def test_writes_with_non_uuid_ids_raise_unknown_entity(self) -> None:
        store = PostgresStore(_UnusedConnection())
        with pytest.raises(UnknownEntity):
            store.set_classification("foo", Classification.DENIED)
        with pytest.raises(UnknownEntity):
            store.delete_document("foo")
        with pytest.raises(UnknownEntity):
            store.headings("foo")
