"""pleadings/lookup.py — wybór zdania najbliższego klikniętemu punktowi strony."""

from __future__ import annotations

import math
from typing import Iterable

from data_model import Sentence


def find_nearest_sentence(
    sentences: Iterable[Sentence],
    page: int,
    point: tuple[float, float],
) -> Sentence | None:
    """
    Zdanie ze strony `page` (1-based), którego prostokąt jest najbliżej punktu.

    Prostokąt zawierający punkt ma odległość 0; w pozostałych przypadkach liczy
    się odległość euklidesowa do środka prostokąta. Przy remisie wygrywa
    wcześniejsze zdanie (order_index).
    """
    px, py = point
    best: Sentence | None = None
    best_dist = math.inf

    for sentence in sorted(sentences, key=lambda s: s.order_index):
        if sentence.mapped_page != page:
            continue
        for rect in sentence.draw_rects():
            if rect.x <= px <= rect.x1 and rect.y <= py <= rect.y1:
                dist = 0.0
            else:
                cx, cy = rect.center
                dist = math.hypot(px - cx, py - cy)
            if dist < best_dist:
                best, best_dist = sentence, dist

    return best
