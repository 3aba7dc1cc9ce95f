"""
Wspólne typy pierwotne modelu pism procesowych (pleadings).

HeadingType    — wynik klasyfikacji linii: statement / answer / misc
Classification — stan przypisany zdaniu przez użytkownika
"""

from __future__ import annotations

from enum import StrEnum

# ---------------------------------------------------------------------------
# Aliasy typów
# ---------------------------------------------------------------------------

# UUID w postaci tekstowej, np. "3f2b…"; identyfikuje rekord w magazynie.
type EntityId = str

# Identyfikator sprawy (folderu sprawy), np. "smith_v_jones".
type CaseId = str


# ---------------------------------------------------------------------------
# Klasyfikacja nagłówków
# ---------------------------------------------------------------------------

class HeadingType(StrEnum):
    """
    Rola linii w strukturze pisma.

    - STATEMENT: "Cond. N", "Condescendence N", "Statement N", "Stat. N"
    - ANSWER:    "Ans. N", "Answer N"
    - MISC:      każda inna linia (nigdy nie staje się nagłówkiem)
    """
    STATEMENT = "statement"
    ANSWER    = "answer"
    MISC      = "misc"

    @property
    def opposite(self) -> HeadingType:
        if self is HeadingType.STATEMENT:
            return HeadingType.ANSWER
        if self is HeadingType.ANSWER:
            return HeadingType.STATEMENT
        return HeadingType.MISC


# ---------------------------------------------------------------------------
# Klasyfikacja zdań
# ---------------------------------------------------------------------------

class Classification(StrEnum):
    """
    Stan zdania ustawiany wyłącznie jawną akcją użytkownika.

    UNCLASSIFIED jest stanem początkowym; wraca do niego tylko ponowny import
    dokumentu (pełna wymiana zdań), nigdy akcja użytkownika.
    """
    UNCLASSIFIED = "unclassified"
    ADMITTED     = "admitted"
    DENIED       = "denied"
    NOT_KNOWN    = "not_known"

    @classmethod
    def parse(cls, raw: str) -> Classification:
        """Przyjmuje też formy z CLI/UI: "not-known", "Not Known", "NOT_KNOWN"."""
        key = raw.strip().lower().replace("-", "_").replace(" ", "_")
        return cls(key)
