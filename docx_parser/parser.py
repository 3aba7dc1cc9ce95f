"""
docx_parser/parser.py — ekstrakcja akapitów tekstu z pakietu .docx.

Architektura:
  path → zipfile → word/document.xml → BeautifulSoup (lxml-xml)
  → walk() po zagnieżdżonych tagach → bufor per <w:p> → normalize_whitespace()
  → lista akapitów

Reguły zbierania tekstu:
  - <w:p>       otwiera nowy bufor; koniec tagu emituje akapit (jeśli niepusty)
  - <w:t>       dosłowny tekst (atrybuty stylu przebiegu są ignorowane)
  - <w:tab>     "\t"
  - <w:br>/<w:cr> "\n"
  - <w:pPr>/<w:rPr> właściwości (np. definicje tabulatorów) — pomijane
  - akapit zagnieżdżony (np. w polu tekstowym) ma własny bufor

Każde wywołanie jest bezstanowe; ten sam plik daje identyczną listę akapitów.

Kluczowe funkcje publiczne:
  extract_paragraphs(path) -> list[str]
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from pleadings.errors import PackageError
from pleadings.text_cleaner import normalize_whitespace

logger = logging.getLogger(__name__)

# Główna część treści w pakiecie WordprocessingML
DOCUMENT_PART = "word/document.xml"

# Nazwy lokalne tagów (prefiks "w:" obsługuje parser XML)
_PARAGRAPH = "p"
_TEXT = "t"
_TAB = "tab"
_BREAKS = {"br", "cr"}
# Tagi właściwości nie zawierają treści; <w:tabs><w:tab/> to definicje tabulatorów
_PROPERTY_TAGS = {"pPr", "rPr", "sectPr", "tblPr", "trPr", "tcPr"}


# ---------------------------------------------------------------------------
# Publiczne API
# ---------------------------------------------------------------------------

def extract_paragraphs(path: str | Path) -> list[str]:
    """
    Zwraca znormalizowane, niepuste akapity dokumentu w kolejności.

    Raises:
        PackageError: plik nie jest archiwum zip, brak word/document.xml,
                      albo część nie zawiera <w:body>.
    """
    xml = _read_document_part(Path(path))
    soup = BeautifulSoup(xml, "lxml-xml")
    body: Tag | None = soup.find("body") or soup.find("document")
    if body is None:
        raise PackageError(f"{path}: {DOCUMENT_PART} nie zawiera <w:body>")

    paragraphs = _extract_paragraph_texts(body)
    logger.info("%s: %d akapitów", Path(path).name, len(paragraphs))
    return paragraphs


# ---------------------------------------------------------------------------
# Wewnętrzna implementacja
# ---------------------------------------------------------------------------

def _read_document_part(path: Path) -> bytes:
    try:
        with zipfile.ZipFile(path) as archive:
            try:
                return archive.read(DOCUMENT_PART)
            except KeyError as e:
                raise PackageError(f"{path.name}: brak {DOCUMENT_PART}") from e
    except zipfile.BadZipFile as e:
        raise PackageError(f"{path.name}: to nie jest poprawny pakiet DOCX") from e
    except OSError as e:
        raise PackageError(f"{path}: nie można otworzyć pliku ({e})") from e


def _extract_paragraph_texts(body: Tag) -> list[str]:
    """
    Przechodzi drzewo tagów i zwraca spłaszczoną listę akapitów.

    Stos buforów: wejście w <w:p> odkłada nowy bufor, wyjście zdejmuje go
    i emituje akapit. Tekst trafia zawsze do bufora na szczycie stosu.
    """
    paragraphs: list[str] = []
    stack: list[list[str]] = []

    def emit(buffer: list[str]) -> None:
        text = normalize_whitespace("".join(buffer))
        if text:
            paragraphs.append(text)

    def walk(el: Tag) -> None:
        name = el.name
        if name in _PROPERTY_TAGS:
            return
        if name == _PARAGRAPH:
            stack.append([])
            for child in el.children:
                if isinstance(child, Tag):
                    walk(child)
            emit(stack.pop())
            return
        if name == _TEXT:
            if stack:
                stack[-1].append(el.get_text())
            return
        if name == _TAB:
            if stack:
                stack[-1].append("\t")
            return
        if name in _BREAKS:
            if stack:
                stack[-1].append("\n")
            return
        # kontener (body, tbl, tr, tc, r, hyperlink, sdt, …): rekurujemy
        for child in el.children:
            if isinstance(child, Tag):
                walk(child)

    walk(body)
    return paragraphs
