"""Tests for pdf.locator and pdf.mapper — strona + prostokąty jednostek."""
from __future__ import annotations

from conftest import PLEADING_PAGES, PLEADING_PARAGRAPHS

from data_model import Heading, HeadingType, Rectangle, Sentence
import pytest

from pdf.locator import PageText, RenderedDocument
from pdf.mapper import map_all
from pleadings.errors import DiagnosticCode, RenderedDocumentMissing
from pleadings.segmenter import segment
from pleadings.text_cleaner import normalize_for_search


def _sentence(text: str, order: int = 0) -> Sentence:
    return Sentence(id=f"s-{order}", document_id="doc-1", text=text, order_index=order)


# ── RenderedDocument.locate ──────────────────────────────────────────


class TestLocate:
    def test_first_page_wins(self, pdf_factory) -> None:
        path = pdf_factory(pages=[["Nothing relevant here."], ["The pursuer is a joiner."], ["The pursuer is a joiner."]])
        with RenderedDocument.open(path) as rendered:
            hit = rendered.locate("The pursuer is a joiner.")
        assert hit is not None
        assert hit.page == 2
        assert hit.occurrences == 1

    def test_case_and_whitespace_insensitive(self, pdf_factory) -> None:
        path = pdf_factory(pages=[["The Pursuer is a JOINER."]])
        with RenderedDocument.open(path) as rendered:
            assert rendered.locate("the  pursuer\nis a joiner.") is not None

    def test_miss(self, pdf_factory) -> None:
        path = pdf_factory(pages=[["The pursuer is a joiner."]])
        with RenderedDocument.open(path) as rendered:
            assert rendered.locate("The defender is a builder.") is None
            assert rendered.locate("   ") is None

    def test_multiple_hits_on_page(self, pdf_factory) -> None:
        path = pdf_factory(pages=[["Denied.", "Something else.", "Denied."]])
        with RenderedDocument.open(path) as rendered:
            hit = rendered.locate("Denied.")
        assert hit.occurrences == 2
        assert len(hit.rects) == 1

    def test_sentence_across_lines_gives_rect_per_line(self, pdf_factory) -> None:
        path = pdf_factory(pages=[["The pursuer delivered the timber", "on the first of May."]])
        with RenderedDocument.open(path) as rendered:
            hit = rendered.locate("The pursuer delivered the timber on the first of May.")
        assert hit is not None
        assert len(hit.rects) == 2
        first, second = hit.rects
        assert first.y < second.y
        assert all(r.is_drawable() for r in hit.rects)

    def test_page_count(self, pdf_factory) -> None:
        with RenderedDocument.open(pdf_factory(pages=PLEADING_PAGES)) as rendered:
            assert rendered.page_count == 2

    def test_empty_file_is_missing_document(self, tmp_path) -> None:
        empty = tmp_path / "pleadings.pdf"
        empty.write_bytes(b"")
        with pytest.raises(RenderedDocumentMissing):
            RenderedDocument.open(empty)


class _RawPage:
    """Strona z jedną linią tekstu w formacie get_text("rawdict")."""

    number = 0

    def __init__(self, text: str) -> None:
        self.text = text

    def get_text(self, kind: str, flags: int = 0) -> dict:
        chars = [
            {"c": c, "bbox": (72 + 6 * i, 72, 78 + 6 * i, 84)}
            for i, c in enumerate(self.text)
        ]
        return {"blocks": [{"type": 0, "lines": [{"spans": [{"chars": chars}]}]}]}


class TestPageTextCaseFolding:
    def test_final_sigma_matches_search_text(self) -> None:
        page = PageText.from_page(_RawPage("ΠΛΗΡΩΣΕ ΤΟΝ ΛΟΓΑΡΙΑΣΜΟΣ ΤΟΥ"))
        assert page.find_all(normalize_for_search("ΤΟΝ ΛΟΓΑΡΙΑΣΜΟΣ")) == [8]

    def test_sharp_s_expands_consistently(self) -> None:
        page = PageText.from_page(_RawPage("Die Straße ist lang"))
        start = page.find_all(normalize_for_search("DIE STRASSE"))[0]
        rects = page.rects_for(start, start + len("die strasse"))
        assert start == 0
        assert len(rects) == 1


# ── map_all ──────────────────────────────────────────────────────────


class TestMapAll:
    def test_full_document(self, pdf_factory) -> None:
        result = segment(PLEADING_PARAGRAPHS, "doc-1")
        with RenderedDocument.open(pdf_factory(pages=PLEADING_PAGES)) as rendered:
            report = map_all([*result.headings, *result.sentences], rendered)

        assert report.mapped == 10
        assert report.missed == 0
        assert report.ambiguous == []
        pages = {h.label: h.mapped_page for h in result.headings}
        assert pages == {"Cond. 1": 1, "Ans. 1": 1, "Cond. 2": 2, "Ans. 2": 2}

    def test_heading_gets_single_rect(self, pdf_factory) -> None:
        heading = Heading(
            id="h-0", document_id="doc-1", label="Cond. 2", order_index=0,
            role=HeadingType.STATEMENT, ordinal=2,
        )
        with RenderedDocument.open(pdf_factory(pages=PLEADING_PAGES)) as rendered:
            map_all([heading], rendered)
        assert heading.mapped_page == 2
        assert isinstance(heading.mapped_rect, Rectangle)
        assert heading.is_mapped

    def test_sentence_rects_and_legacy_rect(self, pdf_factory) -> None:
        sentence = _sentence("The pursuer delivered the timber on the first of May.")
        path = pdf_factory(pages=[["The pursuer delivered the timber", "on the first of May."]])
        with RenderedDocument.open(path) as rendered:
            map_all([sentence], rendered)
        assert sentence.mapped_page == 1
        assert len(sentence.mapped_rects) == 2
        assert sentence.mapped_rect == sentence.mapped_rects[0]

    def test_miss_is_reported_not_raised(self, pdf_factory) -> None:
        sentence = _sentence("This text was never printed.")
        with RenderedDocument.open(pdf_factory(pages=PLEADING_PAGES)) as rendered:
            report = map_all([sentence], rendered)
        assert report.mapped == 0
        assert report.missed == 1
        assert report.misses[0].code is DiagnosticCode.MAPPING_MISS
        assert sentence.mapped_page is None

    def test_miss_keeps_prior_mapping_by_default(self, pdf_factory) -> None:
        sentence = _sentence("This text was never printed.")
        sentence.mapped_page = 4
        sentence.mapped_rects = [Rectangle(10, 10, 50, 12)]
        with RenderedDocument.open(pdf_factory(pages=PLEADING_PAGES)) as rendered:
            map_all([sentence], rendered)
        assert sentence.mapped_page == 4
        assert sentence.mapped_rects == [Rectangle(10, 10, 50, 12)]

    def test_clear_misses(self, pdf_factory) -> None:
        sentence = _sentence("This text was never printed.")
        sentence.mapped_page = 4
        sentence.mapped_rects = [Rectangle(10, 10, 50, 12)]
        sentence.mapped_rect = Rectangle(10, 10, 50, 12)
        with RenderedDocument.open(pdf_factory(pages=PLEADING_PAGES)) as rendered:
            map_all([sentence], rendered, clear_misses=True)
        assert sentence.mapped_page is None
        assert sentence.mapped_rects == []
        assert sentence.mapped_rect is None

    def test_ambiguous_is_reported(self, pdf_factory) -> None:
        sentence = _sentence("Denied.")
        with RenderedDocument.open(pdf_factory(pages=[["Denied.", "Denied."]])) as rendered:
            report = map_all([sentence], rendered)
        assert report.mapped == 1
        assert len(report.ambiguous) == 1
        assert report.ambiguous[0].code is DiagnosticCode.AMBIGUOUS_MATCH

    def test_deterministic(self, pdf_factory) -> None:
        path = pdf_factory(pages=PLEADING_PAGES)
        first = _sentence("Quoad ultra denied.")
        second = _sentence("Quoad ultra denied.")
        with RenderedDocument.open(path) as rendered:
            map_all([first], rendered)
        with RenderedDocument.open(path) as rendered:
            map_all([second], rendered)
        assert (first.mapped_page, first.mapped_rects) == (second.mapped_page, second.mapped_rects)
