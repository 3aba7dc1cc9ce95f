"""
store/json_store.py — magazyn w pliku JSON (jeden plik na katalog danych).

Zapis po każdej zmianie: cały stan serializowany do pliku tymczasowego
i atomowo podmieniany (os.replace), więc przerwany zapis nie psuje pliku.

Format:
  {
    "version": 1,
    "documents": [
      {"id", "case_id", "filename", "path", "created_at",
       "headings":  [{id, label, order_index, role, ordinal, mapped_page, mapped_rect}],
       "sentences": [{id, text, order_index, parent_heading_id, mapped_page,
                      mapped_rects, mapped_rect, classification}]}
    ]
  }
"""

from __future__ import annotations

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

from data_model import (
    Classification,
    Heading,
    HeadingType,
    Rectangle,
    Sentence,
    SourceDocument,
)

from .memory import MemoryStore

FORMAT_VERSION = 1
DEFAULT_FILENAME = "store.json"


class JsonStore(MemoryStore):
    def __init__(self, path: str | Path) -> None:
        super().__init__()
        path = Path(path)
        self.path = path / DEFAULT_FILENAME if path.is_dir() or not path.suffix else path
        self._loading = False
        if self.path.exists():
            self._load()

    # ------------------------------------------------------------------
    # Odczyt / zapis
    # ------------------------------------------------------------------

    def _load(self) -> None:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        self._loading = True
        try:
            for raw in data.get("documents", []):
                doc = SourceDocument(
                    id=raw["id"],
                    case_id=raw["case_id"],
                    filename=raw["filename"],
                    path=raw["path"],
                    created_at=datetime.fromisoformat(raw["created_at"]),
                )
                self._documents[doc.id] = doc
                self._headings[doc.id] = {}
                self._sentences[doc.id] = {}
                self.replace_units(
                    doc.id,
                    [_heading_from_dict(doc.id, h) for h in raw.get("headings", [])],
                    [_sentence_from_dict(doc.id, s) for s in raw.get("sentences", [])],
                )
        finally:
            self._loading = False

    def _changed(self) -> None:
        if self._loading:
            return
        data = {
            "version": FORMAT_VERSION,
            "documents": [
                {
                    "id":         doc.id,
                    "case_id":    doc.case_id,
                    "filename":   doc.filename,
                    "path":       doc.path,
                    "created_at": doc.created_at.isoformat(),
                    "headings":   [_heading_to_dict(h) for h in self.headings(doc.id)],
                    "sentences":  [_sentence_to_dict(s) for s in self.sentences(doc.id)],
                }
                for doc in self.list_documents()
            ],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)


# ---------------------------------------------------------------------------
# Serializacja
# ---------------------------------------------------------------------------

def rect_to_list(rect: Rectangle | None) -> list[float] | None:
    return list(rect.as_tuple()) if rect is not None else None


def rect_from_list(raw: list[float] | None) -> Rectangle | None:
    return Rectangle(*raw) if raw else None


def _heading_to_dict(h: Heading) -> dict[str, Any]:
    return {
        "id":          h.id,
        "label":       h.label,
        "order_index": h.order_index,
        "role":        str(h.role),
        "ordinal":     h.ordinal,
        "mapped_page": h.mapped_page,
        "mapped_rect": rect_to_list(h.mapped_rect),
    }


def _heading_from_dict(document_id: str, raw: dict[str, Any]) -> Heading:
    return Heading(
        id=raw["id"],
        document_id=document_id,
        label=raw["label"],
        order_index=raw["order_index"],
        role=HeadingType(raw["role"]),
        ordinal=raw["ordinal"],
        mapped_page=raw.get("mapped_page"),
        mapped_rect=rect_from_list(raw.get("mapped_rect")),
    )


def _sentence_to_dict(s: Sentence) -> dict[str, Any]:
    return {
        "id":                s.id,
        "text":              s.text,
        "order_index":       s.order_index,
        "parent_heading_id": s.parent_heading_id,
        "mapped_page":       s.mapped_page,
        "mapped_rects":      [rect_to_list(r) for r in s.mapped_rects],
        "mapped_rect":       rect_to_list(s.mapped_rect),
        "classification":    str(s.classification),
    }


def _sentence_from_dict(document_id: str, raw: dict[str, Any]) -> Sentence:
    return Sentence(
        id=raw["id"],
        document_id=document_id,
        text=raw["text"],
        order_index=raw["order_index"],
        parent_heading_id=raw.get("parent_heading_id"),
        mapped_page=raw.get("mapped_page"),
        mapped_rects=[Rectangle(*r) for r in raw.get("mapped_rects") or []],
        mapped_rect=rect_from_list(raw.get("mapped_rect")),
        classification=Classification(raw.get("classification", Classification.UNCLASSIFIED)),
    )
