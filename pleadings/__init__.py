"""
pleadings — rozpoznawanie struktury pism procesowych (Condescendence / Answer).

Moduły:
  text_cleaner     — normalizacja białych znaków, podział na zdania
  heading_patterns — klasyfikator nagłówków (strategia HeadingClassifier)
  segmenter        — akapity → nagłówki + zdania
  pair_matcher     — parowanie Statement N ↔ Answer N
  lookup           — zdanie najbliższe punktowi strony
  errors           — wyjątki i kody diagnostyczne
  engine           — PleadingsEngine (import: from pleadings.engine import PleadingsEngine)
"""

from .errors import (
    Diagnostic,
    DiagnosticCode,
    EngineError,
    InvalidClassification,
    PackageError,
    RenderedDocumentMissing,
    UnknownEntity,
)
from .heading_patterns import (
    DEFAULT_CLASSIFIER,
    HeadingClassifier,
    HeadingMatch,
    RegexHeadingClassifier,
    classify,
    extract_label,
)
from .lookup import find_nearest_sentence
from .pair_matcher import find_pair, pair_all
from .segmenter import Segmentation, extract_outline, segment

__all__ = [
    # errors
    "Diagnostic",
    "DiagnosticCode",
    "EngineError",
    "InvalidClassification",
    "PackageError",
    "RenderedDocumentMissing",
    "UnknownEntity",
    # heading_patterns
    "DEFAULT_CLASSIFIER",
    "HeadingClassifier",
    "HeadingMatch",
    "RegexHeadingClassifier",
    "classify",
    "extract_label",
    # segmenter
    "Segmentation",
    "extract_outline",
    "segment",
    # pair_matcher / lookup
    "find_pair",
    "pair_all",
    "find_nearest_sentence",
]
