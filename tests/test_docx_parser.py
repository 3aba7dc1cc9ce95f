"""Tests for docx_parser.parser — akapity z word/document.xml."""
from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from conftest import W_NS, PLEADING_PARAGRAPHS
from docx_parser import extract_paragraphs
from pleadings.errors import EngineError, PackageError


def _wrap(body: str) -> str:
    return f'<w:document xmlns:w="{W_NS}"><w:body>{body}</w:body></w:document>'


# ── extraction ───────────────────────────────────────────────────────


class TestExtractParagraphs:
    def test_paragraphs_in_order(self, docx_factory) -> None:
        path = docx_factory(paragraphs=PLEADING_PARAGRAPHS)
        assert extract_paragraphs(path) == PLEADING_PARAGRAPHS

    def test_deterministic(self, docx_factory) -> None:
        path = docx_factory(paragraphs=PLEADING_PARAGRAPHS)
        assert extract_paragraphs(path) == extract_paragraphs(path)

    def test_runs_are_joined_without_styling(self, docx_factory) -> None:
        xml = _wrap(
            "<w:p>"
            "<w:r><w:rPr><w:b/></w:rPr><w:t>Cond.</w:t></w:r>"
            '<w:r><w:t xml:space="preserve"> 3 </w:t></w:r>'
            "<w:r><w:rPr><w:i/></w:rPr><w:t>The pursuer</w:t></w:r>"
            "</w:p>"
        )
        assert extract_paragraphs(docx_factory(xml=xml)) == ["Cond. 3 The pursuer"]

    def test_tabs_and_breaks_collapse_to_space(self, docx_factory) -> None:
        path = docx_factory(paragraphs=["Cond. 3\tThe pursuer\navers"])
        assert extract_paragraphs(path) == ["Cond. 3 The pursuer avers"]

    def test_unicode_spaces_collapse(self, docx_factory) -> None:
        path = docx_factory(paragraphs=["Ans.\u00a03\u2003Denied.\u2009 Quoad"])
        assert extract_paragraphs(path) == ["Ans. 3 Denied. Quoad"]

    def test_empty_paragraphs_skipped(self, docx_factory) -> None:
        path = docx_factory(paragraphs=["First paragraph.", "", "   ", "Second paragraph."])
        assert extract_paragraphs(path) == ["First paragraph.", "Second paragraph."]

    def test_tab_stop_definitions_ignored(self, docx_factory) -> None:
        xml = _wrap(
            '<w:p><w:pPr><w:tabs><w:tab w:val="left" w:pos="720"/></w:tabs></w:pPr>'
            "<w:r><w:t>Statement 1</w:t></w:r></w:p>"
        )
        assert extract_paragraphs(docx_factory(xml=xml)) == ["Statement 1"]

    def test_table_cells_are_paragraphs(self, docx_factory) -> None:
        xml = _wrap(
            "<w:tbl><w:tr>"
            "<w:tc><w:p><w:r><w:t>Left cell text</w:t></w:r></w:p></w:tc>"
            "<w:tc><w:p><w:r><w:t>Right cell text</w:t></w:r></w:p></w:tc>"
            "</w:tr></w:tbl>"
        )
        assert extract_paragraphs(docx_factory(xml=xml)) == ["Left cell text", "Right cell text"]

    def test_empty_body(self, docx_factory) -> None:
        assert extract_paragraphs(docx_factory(xml=_wrap(""))) == []


# ── PackageError ─────────────────────────────────────────────────────


class TestPackageErrors:
    def test_not_a_zip(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.docx"
        path.write_text("this is not an archive", encoding="utf-8")
        with pytest.raises(PackageError):
            extract_paragraphs(path)

    def test_missing_document_part(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.docx"
        with zipfile.ZipFile(path, "w") as archive:
            archive.writestr("word/styles.xml", "<styles/>")
        with pytest.raises(PackageError, match="word/document.xml"):
            extract_paragraphs(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PackageError):
            extract_paragraphs(tmp_path / "nope.docx")

    def test_no_body(self, docx_factory) -> None:
        with pytest.raises(PackageError):
            extract_paragraphs(docx_factory(xml="<settings/>"))

    def test_is_engine_error(self) -> None:
        assert issubclass(PackageError, EngineError)
