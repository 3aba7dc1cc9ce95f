"""
data_model/geometry.py — prostokąty w przestrzeni współrzędnych strony PDF.

Rectangle trzyma (x, y, width, height) tak, jak zwraca je warstwa renderująca
(PyMuPDF: początek układu w lewym górnym rogu strony, oś y w dół).
Nie przeliczamy układu współrzędnych; wartości są przenoszone 1:1.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True, slots=True)
class Rectangle:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_corners(cls, x0: float, y0: float, x1: float, y1: float) -> Rectangle:
        return cls(x=x0, y=y0, width=x1 - x0, height=y1 - y0)

    @classmethod
    def union_of(cls, rects: Iterable[Rectangle]) -> Rectangle | None:
        """Najmniejszy prostokąt obejmujący wszystkie podane (None dla pustej listy)."""
        rects = list(rects)
        if not rects:
            return None
        x0 = min(r.x for r in rects)
        y0 = min(r.y for r in rects)
        x1 = max(r.x1 for r in rects)
        y1 = max(r.y1 for r in rects)
        return cls.from_corners(x0, y0, x1, y1)

    @property
    def x1(self) -> float:
        return self.x + self.width

    @property
    def y1(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    def is_drawable(self) -> bool:
        """False dla zdegenerowanych prostokątów (rozmiar <= 0 lub ujemny początek)."""
        return self.width > 0 and self.height > 0 and self.x >= 0 and self.y >= 0

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.width, self.height)

    def corners(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.x1, self.y1)
