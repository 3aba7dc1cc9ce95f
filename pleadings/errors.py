"""
pleadings/errors.py — wyjątki i kody diagnostyczne silnika.

Wyjątki (przerywają operację):
  PackageError            — archiwum .docx nieczytelne lub bez word/document.xml
  RenderedDocumentMissing — brak albo nieczytelny PDF (ścisłe helpery i eksport; import degraduje)
  UnknownEntity           — nieznany identyfikator dokumentu/zdania/nagłówka
  InvalidClassification   — stan niedostępny dla użytkownika (UNCLASSIFIED)

Diagnostyka (nie przerywa; trafia do raportów i logu):
  DiagnosticCode + Diagnostic
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class EngineError(Exception):
    """Bazowy wyjątek silnika."""


class PackageError(EngineError):
    """Nie da się odczytać pakietu .docx — cała ekstrakcja dokumentu jest przerywana."""


class RenderedDocumentMissing(EngineError):
    """Brak dokumentu PDF sparowanego z dokumentem źródłowym."""


class InvalidClassification(EngineError, ValueError):
    """Stan zdania, którego użytkownik nie może ustawić (UNCLASSIFIED) albo nieznany."""


class UnknownEntity(EngineError, KeyError):
    """Nieznany identyfikator w magazynie."""

    def __str__(self) -> str:  # KeyError dodaje cudzysłowy wokół komunikatu
        return str(self.args[0]) if self.args else ""


class DiagnosticCode(StrEnum):
    """Stałe kody sytuacji niefatalnych."""
    CLASSIFICATION_MISMATCH = "W_CLASSIFICATION_MISMATCH"
    MAPPING_MISS            = "W_MAPPING_MISS"
    AMBIGUOUS_MATCH         = "W_AMBIGUOUS_MATCH"
    INVALID_GEOMETRY        = "W_INVALID_GEOMETRY"
    RENDERED_MISSING        = "W_RENDERED_DOCUMENT_MISSING"


@dataclass(slots=True)
class Diagnostic:
    """
    Pojedyncze ostrzeżenie.

    - code:    klasa sytuacji (DiagnosticCode)
    - message: czytelny opis
    - subject: tekst/etykieta jednostki, której dotyczy (opcjonalnie)
    """
    code: DiagnosticCode
    message: str
    subject: str | None = None
