"""
pleadings/pair_matcher.py — parowanie nagłówków Statement N ↔ Answer N.

Wywoływane na żądanie przez nawigację (widok dwupanelowy); nic nie zapisuje.
Dla poprawnych danych parowanie jest symetryczne:
  find_pair(A) == B  ⇔  find_pair(B) == A
"""

from __future__ import annotations

import logging
from typing import Iterable

from data_model import Heading, HeadingType

from .heading_patterns import DEFAULT_CLASSIFIER, HeadingClassifier

logger = logging.getLogger(__name__)


def find_pair(
    heading: Heading,
    headings: Iterable[Heading],
    classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
) -> Heading | None:
    """
    Zwraca pierwszy nagłówek przeciwnej roli z tą samą liczbą porządkową.

    Rola i liczba są odczytywane z etykiety (nie z pól role/ordinal), bo etykieta
    jest stabilnym kluczem łączenia. Porównywana jest liczba, nie podciąg —
    "Cond. 1" nie paruje się z "Ans. 10".
    """
    own = classifier.match(heading.label)
    if own is None:
        logger.warning("Brak liczby porządkowej w etykiecie %r", heading.label)
        return None

    wanted = own.role.opposite
    for candidate in headings:
        if candidate.id == heading.id:
            continue
        other = classifier.match(candidate.label)
        if other and other.role is wanted and other.ordinal == own.ordinal:
            logger.debug("Para: %s ↔ %s", heading.label, candidate.label)
            return candidate

    logger.debug("Brak pary dla %s", heading.label)
    return None


def pair_all(
    headings: Iterable[Heading],
    classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
) -> list[tuple[Heading | None, Heading | None]]:
    """
    Lista par (statement, answer) w kolejności pierwszego wystąpienia liczby
    porządkowej. Brakująca strona pary to None.
    """
    headings = list(headings)
    pairs: list[tuple[Heading | None, Heading | None]] = []
    seen: set[str] = set()

    for heading in sorted(headings, key=lambda h: h.order_index):
        if heading.id in seen:
            continue
        partner = find_pair(heading, headings, classifier)
        seen.add(heading.id)
        if partner is not None:
            if partner.id in seen:
                # partner już sparowany z wcześniejszym nagłówkiem tej samej liczby
                partner = None
            else:
                seen.add(partner.id)
        if heading.role is HeadingType.STATEMENT:
            pairs.append((heading, partner))
        else:
            pairs.append((partner, heading))

    return pairs
