"""
data_model — struktury danych silnika korelacji pism procesowych.

Użycie:
  from data_model import Heading, Sentence, Rectangle, Classification, ...

Moduły:
  common    — HeadingType, Classification, EntityId, CaseId
  geometry  — Rectangle
  documents — SourceDocument, Heading, Sentence, HeadingList, SentenceList
"""

from .common import (
    CaseId,
    Classification,
    EntityId,
    HeadingType,
)
from .geometry import Rectangle
from .documents import (
    Heading,
    HeadingList,
    Sentence,
    SentenceList,
    SourceDocument,
    is_entity_id,
    new_id,
)

__all__ = [
    # common
    "CaseId",
    "Classification",
    "EntityId",
    "HeadingType",
    # geometry
    "Rectangle",
    # documents
    "Heading",
    "HeadingList",
    "Sentence",
    "SentenceList",
    "SourceDocument",
    "is_entity_id",
    "new_id",
]
