"""
pleadings/heading_patterns.py — rozpoznawanie nagłówków pism procesowych.

Każdy HeadingPattern zawiera:
  - regex: skompilowany wzorzec (dopasowanie na początku linii)
  - role:  STATEMENT albo ANSWER

Wzorce są testowane w kolejności; pierwszy pasujący wygrywa.
Dopasowanie to "znacznik + biały znak + liczba porządkowa", bez względu na
wielkość liter. Po kropce biały znak jest opcjonalny ("Cond.5").

To heurystyka na wolnym tekście: znane źródło fałszywych trafień
(np. zdanie zaczynające się od "Statement 4 of the defender…").
Dlatego klasyfikator jest wymienną strategią (HeadingClassifier).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

from data_model import HeadingType

from .text_cleaner import normalize_whitespace


@dataclass(frozen=True, slots=True)
class HeadingPattern:
    regex: re.Pattern[str]
    role: HeadingType


@dataclass(frozen=True, slots=True)
class HeadingMatch:
    """Wynik dopasowania: rola, kanoniczna etykieta ("Cond. 5") i liczba porządkowa."""
    role: HeadingType
    label: str
    ordinal: int


def _p(markers: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(?P<marker>{markers})(?:(?<=\.)\s*|\s+)(?P<ordinal>\d+)",
        re.IGNORECASE | re.UNICODE,
    )


PATTERNS: list[HeadingPattern] = [
    # -------------------------------------------------------------------------
    # Statement / Condescendence: twierdzenia strony powodowej
    # -------------------------------------------------------------------------
    HeadingPattern(
        regex=_p(r"Condescendence|Cond\.?|Statement|Stat\."),
        role=HeadingType.STATEMENT,
    ),

    # -------------------------------------------------------------------------
    # Answer: odpowiedź strony pozwanej
    # -------------------------------------------------------------------------
    HeadingPattern(
        regex=_p(r"Answer|Ans\.?"),
        role=HeadingType.ANSWER,
    ),
]

# Linia złożona wyłącznie ze słowa-znacznika i ewentualnie cyfr/dwukropka/myślnika,
# np. "Answer", "Statement 2:", "Cond -". Nigdy nie jest zdaniem.
_BARE_HEADING_RE = re.compile(
    r"^(?:condescendence|cond\.?|statement|stat\.|answer|ans\.?|admit)[\s\d:\-]*$",
    re.IGNORECASE,
)


# ---------------------------------------------------------------------------
# Strategia klasyfikacji
# ---------------------------------------------------------------------------

class HeadingClassifier(Protocol):
    def match(self, line: str) -> HeadingMatch | None: ...

    def classify(self, line: str) -> HeadingType: ...

    def extract_label(self, line: str) -> str | None: ...

    def is_heading_like(self, text: str) -> bool: ...


class RegexHeadingClassifier:
    """Jedyna implementacja strategii: wzorce regex z PATTERNS."""

    def __init__(self, patterns: list[HeadingPattern] | None = None) -> None:
        self.patterns = patterns if patterns is not None else PATTERNS

    def match(self, line: str) -> HeadingMatch | None:
        stripped = line.strip()
        if not stripped:
            return None
        for pat in self.patterns:
            m = pat.regex.match(stripped)
            if m:
                return HeadingMatch(
                    role=pat.role,
                    label=normalize_whitespace(m.group(0)),
                    ordinal=int(m.group("ordinal")),
                )
        return None

    def classify(self, line: str) -> HeadingType:
        m = self.match(line)
        return m.role if m else HeadingType.MISC

    def extract_label(self, line: str) -> str | None:
        """Tylko prefiks + liczba ("Cond. 5"); dalsza narracja w tej samej linii jest odrzucana."""
        m = self.match(line)
        return m.label if m else None

    def is_heading_like(self, text: str) -> bool:
        """Nagłówek albo goły znacznik — tekst, który nie powinien być traktowany jak zdanie."""
        stripped = text.strip()
        return bool(_BARE_HEADING_RE.match(stripped)) or self.match(stripped) is not None


DEFAULT_CLASSIFIER = RegexHeadingClassifier()


# ---------------------------------------------------------------------------
# Skróty modułowe (domyślna strategia)
# ---------------------------------------------------------------------------

def classify(line: str) -> HeadingType:
    return DEFAULT_CLASSIFIER.classify(line)


def extract_label(line: str) -> str | None:
    return DEFAULT_CLASSIFIER.extract_label(line)


def is_bare_heading_line(line: str) -> bool:
    return bool(_BARE_HEADING_RE.match(line.strip()))


def label_key(label: str) -> str:
    """Klucz porównania etykiet: "COND.  5" i "cond. 5" są tą samą etykietą."""
    return normalize_whitespace(label).casefold()
