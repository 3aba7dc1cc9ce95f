"""
pdf/locator.py — wyszukiwanie tekstu na stronach PDF z geometrią znaków.

Architektura:
  fitz.Page → get_text("rawdict") → bloki → linie → spany → znaki (c, bbox)
  → PageText: znormalizowany tekst strony + mapa indeks → (bbox, linia)
  → find() → zakres znaków → rects_for() → prostokąty per linia

Tekst strony normalizowany jest tak samo jak tekst jednostek (.docx):
białe znaki zwijane do jednej spacji, małe litery. Granica linii/bloku
to jedna spacja — dzięki temu zdanie złamane w PDF na kilka linii jest
odnajdywane jako ciągły tekst.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

from data_model import Rectangle
from pleadings.errors import RenderedDocumentMissing
from pleadings.text_cleaner import fold_case, normalize_for_search

logger = logging.getLogger(__name__)

# Bez TEXT_PRESERVE_LIGATURES: "ﬁ" rozwijane do "f"+"i", jak w tekście .docx.
_TEXT_FLAGS = fitz.TEXT_PRESERVE_WHITESPACE | fitz.TEXT_MEDIABOX_CLIP

# (numer bloku, numer linii): klucz grupowania prostokątów
type _LineKey = tuple[int, int]


@dataclass(frozen=True, slots=True)
class _CharRef:
    bbox: tuple[float, float, float, float]
    line: _LineKey


@dataclass(slots=True)
class TextHit:
    """Trafienie na stronie: numer strony (1-based), prostokąty per linia, liczba trafień."""
    page: int
    rects: list[Rectangle]
    occurrences: int = 1


@dataclass(slots=True)
class PageText:
    """Znormalizowany tekst jednej strony z mapą znak → geometria."""
    page: int                                   # 1-based
    text: str = ""
    refs: list[_CharRef | None] = field(default_factory=list)   # None = spacja syntetyczna

    @classmethod
    def from_page(cls, page: fitz.Page) -> PageText:
        raw = page.get_text("rawdict", flags=_TEXT_FLAGS)
        out: list[str] = []
        refs: list[_CharRef | None] = []
        pending_space = False

        for block_no, block in enumerate(raw.get("blocks", [])):
            if block.get("type") != 0:
                continue
            for line_no, line in enumerate(block.get("lines", [])):
                # granica linii/bloku zachowuje się jak biały znak
                pending_space = True
                for span in line.get("spans", []):
                    for char in span.get("chars", []):
                        c = char.get("c", "")
                        if not c or c.isspace():
                            pending_space = True
                            continue
                        if pending_space and out:
                            out.append(" ")
                            refs.append(None)
                        pending_space = False
                        ref = _CharRef(bbox=tuple(char["bbox"]), line=(block_no, line_no))
                        # casefold() może wydłużyć znak (np. "ß"); każdy wynikowy znak dostaje ref
                        for lc in fold_case(c):
                            out.append(lc)
                            refs.append(ref)

        return cls(page=page.number + 1, text="".join(out), refs=refs)

    def find_all(self, needle: str) -> list[int]:
        """Pozycje startowe wszystkich (nienakładających się) wystąpień znormalizowanej igły."""
        if not needle:
            return []
        starts: list[int] = []
        pos = self.text.find(needle)
        while pos != -1:
            starts.append(pos)
            pos = self.text.find(needle, pos + len(needle))
        return starts

    def rects_for(self, start: int, end: int) -> list[Rectangle]:
        """Prostokąty pokrywające zakres [start, end): jeden na każdą linię PDF."""
        rects: list[Rectangle] = []
        current_line: _LineKey | None = None
        boxes: list[tuple[float, float, float, float]] = []

        def flush() -> None:
            if boxes:
                rects.append(Rectangle.from_corners(
                    min(b[0] for b in boxes),
                    min(b[1] for b in boxes),
                    max(b[2] for b in boxes),
                    max(b[3] for b in boxes),
                ))

        for ref in self.refs[start:end]:
            if ref is None:
                continue
            if ref.line != current_line:
                flush()
                boxes = []
                current_line = ref.line
            boxes.append(ref.bbox)
        flush()
        return rects


class RenderedDocument:
    """
    Otwarty dokument PDF z leniwie budowanym indeksem tekstu stron.

    Użycie:
        with RenderedDocument.open(path) as rendered:
            hit = rendered.locate("Cond. 3")
    """

    def __init__(self, doc: fitz.Document, path: str | Path | None = None) -> None:
        self.doc = doc
        self.path = Path(path) if path is not None else None
        self._pages: list[PageText] | None = None

    @classmethod
    def open(cls, path: str | Path) -> RenderedDocument:
        """
        Raises:
            RenderedDocumentMissing: plik nie istnieje, jest pusty albo nie jest PDF.
        """
        try:
            doc = fitz.open(str(path))
        except (RuntimeError, OSError) as e:
            # fitz.FileDataError i EmptyFileError dziedziczą po RuntimeError
            raise RenderedDocumentMissing(f"{Path(path).name}: nie można otworzyć PDF ({e})") from e
        return cls(doc, path)

    def close(self) -> None:
        self.doc.close()

    def __enter__(self) -> RenderedDocument:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    def pages(self) -> list[PageText]:
        """Indeks tekstu wszystkich stron; uszkodzona treść strony to RenderedDocumentMissing."""
        if self._pages is None:
            try:
                self._pages = [PageText.from_page(page) for page in self.doc]
            except RuntimeError as e:
                name = self.path.name if self.path else "PDF"
                raise RenderedDocumentMissing(f"{name}: nie można odczytać tekstu stron ({e})") from e
        return self._pages

    def iter_pages(self) -> Iterator[PageText]:
        return iter(self.pages())

    def locate(self, text: str) -> TextHit | None:
        """
        Pierwsza strona (w kolejności stron) zawierająca tekst; pierwsze wystąpienie na niej.

        Brak trafienia → None. Kilka trafień na tej samej stronie jest zgłaszanych
        w TextHit.occurrences (wywołujący loguje ostrzeżenie).
        """
        needle = normalize_for_search(text)
        if not needle:
            return None
        for page in self.iter_pages():
            starts = page.find_all(needle)
            if not starts:
                continue
            start = starts[0]
            rects = page.rects_for(start, start + len(needle))
            if not rects:
                continue
            return TextHit(page=page.page, rects=rects, occurrences=len(starts))
        return None
