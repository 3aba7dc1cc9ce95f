"""
store/postgres.py — magazyn w PostgreSQL (psycopg2).

Schemat: db/schema.sql (epl apply-schema).
Każda operacja zapisu to jedna transakcja (`with conn, conn.cursor()`):
replace_units() usuwa i wstawia jednostki dokumentu atomowo.
Identyfikator, który nie jest UUID, to nieznana encja (bez zapytania do bazy).

Publiczne API: jak CaseStore (store/base.py).
"""

from __future__ import annotations

import json
from typing import Any, Iterable

import psycopg2.extras

from data_model import (
    CaseId,
    Classification,
    EntityId,
    Heading,
    HeadingType,
    Rectangle,
    Sentence,
    SourceDocument,
    is_entity_id,
    new_id,
)
from pleadings.errors import UnknownEntity

from .base import check_units
from .json_store import rect_from_list, rect_to_list

_DOCUMENT_COLUMNS = "id::text, case_id, filename, path, created_at"

_HEADING_COLUMNS = (
    "id::text, document_id::text, label, order_index, role::text, ordinal, "
    "mapped_page, mapped_rect"
)

_SENTENCE_COLUMNS = (
    "id::text, document_id::text, text, order_index, parent_heading_id::text, "
    "mapped_page, mapped_rects, mapped_rect, classification::text"
)

_INSERT_HEADINGS_SQL = """
    INSERT INTO heading
        (id, document_id, label, order_index, role, ordinal, mapped_page, mapped_rect)
    VALUES %s
"""

_INSERT_SENTENCES_SQL = """
    INSERT INTO sentence
        (id, document_id, text, order_index, parent_heading_id,
         mapped_page, mapped_rects, mapped_rect, classification)
    VALUES %s
"""


class PostgresStore:
    def __init__(self, conn) -> None:
        self.conn = conn

    # ------------------------------------------------------------------
    # Dokumenty
    # ------------------------------------------------------------------

    def add_document(self, case_id: CaseId, filename: str, path: str) -> SourceDocument:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                f"""
                INSERT INTO source_document (id, case_id, filename, path)
                VALUES (%s, %s, %s, %s)
                ON CONFLICT (case_id, filename) DO UPDATE SET path = EXCLUDED.path
                RETURNING {_DOCUMENT_COLUMNS}
                """,
                (new_id(), case_id, filename, path),
            )
            return _document(cur.fetchone())

    def get_document(self, document_id: EntityId) -> SourceDocument | None:
        if not is_entity_id(document_id):
            return None
        return self._fetch_document("id = %s", (document_id,))

    def find_document(self, case_id: CaseId, filename: str) -> SourceDocument | None:
        return self._fetch_document("case_id = %s AND filename = %s", (case_id, filename))

    def list_documents(self, case_id: CaseId | None = None) -> list[SourceDocument]:
        sql = f"SELECT {_DOCUMENT_COLUMNS} FROM source_document"
        params: list[Any] = []
        if case_id is not None:
            sql += " WHERE case_id = %s"
            params.append(case_id)
        sql += " ORDER BY case_id, filename"
        with self.conn, self.conn.cursor() as cur:
            cur.execute(sql, params)
            return [_document(r) for r in cur.fetchall()]

    def delete_document(self, document_id: EntityId) -> None:
        if not is_entity_id(document_id):
            raise UnknownEntity(f"Nieznany dokument: {document_id}")
        with self.conn, self.conn.cursor() as cur:
            cur.execute("DELETE FROM source_document WHERE id = %s", (document_id,))
            if cur.rowcount == 0:
                raise UnknownEntity(f"Nieznany dokument: {document_id}")

    # ------------------------------------------------------------------
    # Jednostki
    # ------------------------------------------------------------------

    def replace_units(
        self,
        document_id: EntityId,
        headings: Iterable[Heading],
        sentences: Iterable[Sentence],
    ) -> None:
        headings = list(headings)
        sentences = list(sentences)
        check_units(document_id, headings, sentences)
        self._require_document(document_id)

        heading_rows = [
            (h.id, document_id, h.label, h.order_index, str(h.role), h.ordinal,
             h.mapped_page, _jsonb(rect_to_list(h.mapped_rect)))
            for h in headings
        ]
        sentence_rows = [
            (s.id, document_id, s.text, s.order_index, s.parent_heading_id,
             s.mapped_page, _jsonb([rect_to_list(r) for r in s.mapped_rects]),
             _jsonb(rect_to_list(s.mapped_rect)), str(s.classification))
            for s in sentences
        ]

        with self.conn, self.conn.cursor() as cur:
            cur.execute("DELETE FROM sentence WHERE document_id = %s", (document_id,))
            cur.execute("DELETE FROM heading WHERE document_id = %s", (document_id,))
            if heading_rows:
                psycopg2.extras.execute_values(cur, _INSERT_HEADINGS_SQL, heading_rows)
            if sentence_rows:
                psycopg2.extras.execute_values(cur, _INSERT_SENTENCES_SQL, sentence_rows)

    def headings(self, document_id: EntityId) -> list[Heading]:
        self._require_document(document_id)
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                f"SELECT {_HEADING_COLUMNS} FROM heading WHERE document_id = %s ORDER BY order_index",
                (document_id,),
            )
            return [_heading(r) for r in cur.fetchall()]

    def sentences(self, document_id: EntityId) -> list[Sentence]:
        self._require_document(document_id)
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                f"SELECT {_SENTENCE_COLUMNS} FROM sentence WHERE document_id = %s ORDER BY order_index",
                (document_id,),
            )
            return [_sentence(r) for r in cur.fetchall()]

    def get_heading(self, heading_id: EntityId) -> Heading | None:
        if not is_entity_id(heading_id):
            return None
        with self.conn, self.conn.cursor() as cur:
            cur.execute(f"SELECT {_HEADING_COLUMNS} FROM heading WHERE id = %s", (heading_id,))
            row = cur.fetchone()
        return _heading(row) if row else None

    def get_sentence(self, sentence_id: EntityId) -> Sentence | None:
        if not is_entity_id(sentence_id):
            return None
        with self.conn, self.conn.cursor() as cur:
            cur.execute(f"SELECT {_SENTENCE_COLUMNS} FROM sentence WHERE id = %s", (sentence_id,))
            row = cur.fetchone()
        return _sentence(row) if row else None

    def save_mappings(
        self,
        document_id: EntityId,
        headings: Iterable[Heading],
        sentences: Iterable[Sentence],
    ) -> None:
        with self.conn, self.conn.cursor() as cur:
            for h in headings:
                cur.execute(
                    """
                    UPDATE heading SET mapped_page = %s, mapped_rect = %s
                    WHERE id = %s AND document_id = %s
                    """,
                    (h.mapped_page, _jsonb(rect_to_list(h.mapped_rect)), h.id, document_id),
                )
                if cur.rowcount == 0:
                    raise UnknownEntity(f"Nagłówek {h.id} nie należy do dokumentu {document_id}")
            for s in sentences:
                cur.execute(
                    """
                    UPDATE sentence SET mapped_page = %s, mapped_rects = %s, mapped_rect = %s
                    WHERE id = %s AND document_id = %s
                    """,
                    (
                        s.mapped_page,
                        _jsonb([rect_to_list(r) for r in s.mapped_rects]),
                        _jsonb(rect_to_list(s.mapped_rect)),
                        s.id,
                        document_id,
                    ),
                )
                if cur.rowcount == 0:
                    raise UnknownEntity(f"Zdanie {s.id} nie należy do dokumentu {document_id}")

    def set_classification(self, sentence_id: EntityId, state: Classification) -> Sentence:
        if not is_entity_id(sentence_id):
            raise UnknownEntity(f"Nieznane zdanie: {sentence_id}")
        with self.conn, self.conn.cursor() as cur:
            cur.execute(
                f"""
                UPDATE sentence SET classification = %s
                WHERE id = %s
                RETURNING {_SENTENCE_COLUMNS}
                """,
                (str(state), sentence_id),
            )
            row = cur.fetchone()
        if row is None:
            raise UnknownEntity(f"Nieznane zdanie: {sentence_id}")
        return _sentence(row)

    # ------------------------------------------------------------------
    # Pomocnicze
    # ------------------------------------------------------------------

    def _fetch_document(self, where: str, params: tuple) -> SourceDocument | None:
        with self.conn, self.conn.cursor() as cur:
            cur.execute(f"SELECT {_DOCUMENT_COLUMNS} FROM source_document WHERE {where}", params)
            row = cur.fetchone()
        return _document(row) if row else None

    def _require_document(self, document_id: EntityId) -> SourceDocument:
        doc = self.get_document(document_id)
        if doc is None:
            raise UnknownEntity(f"Nieznany dokument: {document_id}")
        return doc


# ---------------------------------------------------------------------------
# Wiersze → modele
# ---------------------------------------------------------------------------

def _jsonb(value: Any) -> str | None:
    return json.dumps(value) if value is not None else None


def _json_value(raw: Any) -> Any:
    # psycopg2 dekoduje JSONB do obiektów Pythona; tekst zostawiamy na wszelki wypadek
    return json.loads(raw) if isinstance(raw, str) else raw


def _document(row: tuple) -> SourceDocument:
    return SourceDocument(id=row[0], case_id=row[1], filename=row[2], path=row[3], created_at=row[4])


def _heading(row: tuple) -> Heading:
    return Heading(
        id=row[0],
        document_id=row[1],
        label=row[2],
        order_index=row[3],
        role=HeadingType(row[4]),
        ordinal=row[5],
        mapped_page=row[6],
        mapped_rect=rect_from_list(_json_value(row[7])),
    )


def _sentence(row: tuple) -> Sentence:
    return Sentence(
        id=row[0],
        document_id=row[1],
        text=row[2],
        order_index=row[3],
        parent_heading_id=row[4],
        mapped_page=row[5],
        mapped_rects=[Rectangle(*r) for r in _json_value(row[6]) or []],
        mapped_rect=rect_from_list(_json_value(row[7])),
        classification=Classification(row[8]),
    )
