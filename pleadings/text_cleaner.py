"""
pleadings/text_cleaner.py — normalizacja tekstu i minimalny podział na zdania.

Ta sama normalizacja białych znaków jest stosowana do akapitów .docx
i do tekstu stron PDF — inaczej miękkie łamanie linii w PDF dawałoby
fałszywe rozbieżności przy wyszukiwaniu.

Podział na zdania jest heurystyką interpunkcyjną, nie detektorem NLP:
cięcie następuje tylko wtedy, gdy po '.', '!' lub '?' stoi spacja.
"""

from __future__ import annotations

import re
import string
import unicodedata

# ---------------------------------------------------------------------------
# Stałe
# ---------------------------------------------------------------------------

# Spacja, tab, nowe linie, NBSP, spacje typograficzne (en/em/thin/hair),
# wąska NBSP, średnia spacja matematyczna, spacja ideograficzna.
_WHITESPACE_RE = re.compile(r"[ \t\n\r\f\v\u00a0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000]+")

_LINE_BREAK_RE = re.compile(r"[\r\n\u2028\u2029]+")

_TERMINALS = frozenset(".!?")

# Minimalna długość kandydata na zdanie (po trim).
MIN_SENTENCE_LENGTH = 6

# Fragmenty <= tej długości (bez interpunkcji) zawierające cyfrę to artefakty
# numeracji, np. "3.", "(2)", "4a".
_NUMBERING_ARTIFACT_MAX = 3


# ---------------------------------------------------------------------------
# Publiczne API
# ---------------------------------------------------------------------------

def normalize_whitespace(text: str) -> str:
    """Zwija wszystkie warianty białych znaków do pojedynczej spacji ASCII i przycina."""
    return _WHITESPACE_RE.sub(" ", text).strip()


def fold_case(text: str) -> str:
    """
    Wielkość liter do porównań: casefold(), bez reguł kontekstowych
    ("Σ" zawsze → "σ"). Wynik znak po znaku (strony PDF) i dla całego
    tekstu (jednostki) jest identyczny.
    """
    return text.casefold()


def normalize_for_search(text: str) -> str:
    """Forma porównawcza: znormalizowane białe znaki + fold_case()."""
    return fold_case(normalize_whitespace(text))


def split_lines(paragraph: str) -> list[str]:
    """Dzieli akapit na niepuste linie (akapity mogą zawierać osadzone łamania)."""
    lines = (line.strip() for line in _LINE_BREAK_RE.split(paragraph))
    return [line for line in lines if line]


def split_sentences(line: str) -> list[str]:
    """
    Tnie linię po znaku kończącym zdanie, jeśli bezpośrednio po nim jest spacja.

    "Admitted. Quoad ultra denied." → ["Admitted.", "Quoad ultra denied."]
    Końcowy fragment (bez kropki) też jest zwracany, jeśli niepusty.
    """
    results: list[str] = []
    buffer: list[str] = []
    prev_terminal = False

    for ch in line:
        buffer.append(ch)
        if ch in _TERMINALS:
            prev_terminal = True
        elif prev_terminal and ch == " ":
            piece = "".join(buffer).strip()
            if piece:
                results.append(piece)
            buffer = []
            prev_terminal = False
        else:
            prev_terminal = False

    tail = "".join(buffer).strip()
    if tail:
        results.append(tail)
    return results


def is_valid_sentence(text: str) -> bool:
    """
    Odrzuca śmieci po podziale:
      - krótsze niż MIN_SENTENCE_LENGTH znaków (po trim),
      - bez żadnej litery,
      - bez interpunkcji mają <= 3 znaki i zawierają cyfrę (artefakty numeracji).
    """
    text = text.strip()
    if len(text) < MIN_SENTENCE_LENGTH:
        return False
    core = strip_punctuation(text)
    if not any(ch.isalpha() for ch in core):
        return False
    if len(core) <= _NUMBERING_ARTIFACT_MAX and any(ch.isdigit() for ch in core):
        return False
    return True


def strip_punctuation(text: str) -> str:
    """Usuwa znaki interpunkcyjne (ASCII i Unicode kategorii P*) z obu końców."""
    start, end = 0, len(text)
    while start < end and _is_punct(text[start]):
        start += 1
    while end > start and _is_punct(text[end - 1]):
        end -= 1
    return text[start:end]


# ---------------------------------------------------------------------------
# Pomocnicze
# ---------------------------------------------------------------------------

def _is_punct(ch: str) -> bool:
    return ch in string.punctuation or unicodedata.category(ch).startswith("P")
