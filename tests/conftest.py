"""Wspólne fixtures: prawdziwe pakiety .docx (zipfile) i PDF (PyMuPDF)."""
from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Callable
from xml.sax.saxutils import escape

import fitz
import pytest

from store import MemoryStore

W_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"

_CONTENT_TYPES = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">'
    '<Default Extension="xml" ContentType="application/xml"/>'
    '<Override PartName="/word/document.xml" '
    'ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>'
    "</Types>"
)


def _runs(text: str) -> str:
    """Tekst akapitu → przebiegi w:r; '\\t' → <w:tab/>, '\\n' → <w:br/>."""
    parts: list[str] = []
    chunk: list[str] = []

    def flush() -> None:
        if chunk:
            parts.append(f'<w:r><w:t xml:space="preserve">{escape("".join(chunk))}</w:t></w:r>')
            chunk.clear()

    for ch in text:
        if ch == "\t":
            flush()
            parts.append("<w:r><w:tab/></w:r>")
        elif ch == "\n":
            flush()
            parts.append("<w:r><w:br/></w:r>")
        else:
            chunk.append(ch)
    flush()
    return "".join(parts)


def document_xml(paragraphs: list[str]) -> str:
    body = "".join(f"<w:p>{_runs(p)}</w:p>" for p in paragraphs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        f'<w:document xmlns:w="{W_NS}"><w:body>{body}<w:sectPr/></w:body></w:document>'
    )


def write_docx(path: Path, paragraphs: list[str] | None = None, xml: str | None = None) -> Path:
    with zipfile.ZipFile(path, "w") as archive:
        archive.writestr("[Content_Types].xml", _CONTENT_TYPES)
        archive.writestr("word/document.xml", xml if xml is not None else document_xml(paragraphs or []))
    return path


def write_pdf(path: Path, pages: list[list[str]]) -> Path:
    """Każda strona to lista linii tekstu (Helvetica 11 pt, co 18 pt od y=72)."""
    doc = fitz.open()
    for lines in pages:
        page = doc.new_page(width=595, height=842)
        for i, line in enumerate(lines):
            page.insert_text((72, 72 + i * 18), line, fontsize=11)
    doc.save(str(path))
    doc.close()
    return path


PLEADING_PARAGRAPHS = [
    "Cond. 1 The parties",
    "The pursuer is a joiner. The defender is a builder.",
    "Ans. 1 Admitted",
    "Admitted that the pursuer works with timber. Quoad ultra denied.",
    "Cond. 2 The contract",
    "The sum of five hundred pounds is due. 3.",
    "Ans. 2",
    "Denied that any payment is outstanding.",
]

# Ten sam tekst po "wydruku": strona 1 = Cond. 1 + Ans. 1, strona 2 = Cond. 2 + Ans. 2
PLEADING_PAGES = [PLEADING_PARAGRAPHS[:4], PLEADING_PARAGRAPHS[4:]]


@pytest.fixture
def docx_factory(tmp_path: Path) -> Callable[..., Path]:
    def make(name: str = "pleadings.docx", paragraphs: list[str] | None = None, xml: str | None = None) -> Path:
        return write_docx(tmp_path / name, paragraphs, xml)
    return make


@pytest.fixture
def pdf_factory(tmp_path: Path) -> Callable[..., Path]:
    def make(name: str = "pleadings.pdf", pages: list[list[str]] | None = None) -> Path:
        return write_pdf(tmp_path / name, pages or [[]])
    return make


@pytest.fixture
def case_folder(tmp_path: Path) -> Path:
    """Folder sprawy: pleadings.docx + pleadings.pdf z tą samą treścią."""
    write_docx(tmp_path / "pleadings.docx", PLEADING_PARAGRAPHS)
    write_pdf(tmp_path / "pleadings.pdf", PLEADING_PAGES)
    return tmp_path


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()
