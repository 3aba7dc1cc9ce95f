"""docx_parser — odczyt akapitów z pakietów WordprocessingML (.docx)."""

from .parser import DOCUMENT_PART, extract_paragraphs

__all__ = ["DOCUMENT_PART", "extract_paragraphs"]
