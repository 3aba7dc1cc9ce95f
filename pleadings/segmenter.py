"""
pleadings/segmenter.py — podział akapitów .docx na nagłówki i zdania.

Architektura:
  paragraphs → extract_outline()              (przebieg 1: etykiety nagłówków)
             → linie → klasyfikacja linii     (przebieg 2)
               ├─ nagłówek: rozwiązanie etykiety względem konspektu → current_heading
               └─ misc:     split_sentences() → is_valid_sentence() → Sentence

order_index to jeden licznik dla nagłówków i zdań: kolejność czytania w dokumencie.

Segmentacja nie scala niczego z poprzednim stanem: wynik zastępuje w całości
nagłówki i zdania dokumentu (robi to magazyn w replace_units()).
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from data_model import EntityId, Heading, Sentence, new_id

from .errors import Diagnostic, DiagnosticCode
from .heading_patterns import (
    DEFAULT_CLASSIFIER,
    HeadingClassifier,
    is_bare_heading_line,
    label_key,
)
from .text_cleaner import is_valid_sentence, split_lines, split_sentences

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Segmentation:
    """
    Wynik segmentacji jednego dokumentu.

    - headings:   nagłówki w kolejności dokumentu
    - sentences:  zdania w kolejności dokumentu
    - rejected:   liczba odrzuconych fragmentów (za krótkie, bez liter, numeracja)
    - diagnostics: ostrzeżenia CLASSIFICATION_MISMATCH
    """
    headings: list[Heading] = field(default_factory=list)
    sentences: list[Sentence] = field(default_factory=list)
    rejected: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def __iter__(self) -> Iterator[list]:
        # headings, sentences = segment(...)
        yield self.headings
        yield self.sentences


def extract_outline(
    paragraphs: Iterable[str],
    classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
) -> list[str]:
    """Etykiety nagłówków otwierających akapity, w kolejności dokumentu (z powtórzeniami)."""
    labels: list[str] = []
    for para in paragraphs:
        label = classifier.extract_label(para)
        if label:
            labels.append(label)
    return labels


def segment(
    paragraphs: Iterable[str],
    document_id: EntityId,
    outline: Iterable[str] | None = None,
    classifier: HeadingClassifier = DEFAULT_CLASSIFIER,
) -> Segmentation:
    """
    Zamienia akapity na nagłówki i zdania dokumentu.

    Args:
        paragraphs:  akapity z extract_paragraphs()
        document_id: dokument-właściciel wszystkich tworzonych jednostek
        outline:     znane etykiety nagłówków dokumentu; domyślnie extract_outline()
        classifier:  strategia klasyfikacji linii

    Linia-nagłówek, której etykiety nie ma w konspekcie, czyści kontekst
    (kolejne zdania nie mają nagłówka) — nie zgadujemy.
    """
    paragraphs = list(paragraphs)
    if outline is None:
        outline = extract_outline(paragraphs, classifier)

    # Kolejka wystąpień per etykieta: powtórzona etykieta trafia do kolejnego wystąpienia.
    pending: dict[str, deque[str]] = defaultdict(deque)
    for label in outline:
        pending[label_key(label)].append(label)

    result = Segmentation()
    order = 0
    current: Heading | None = None

    for para in paragraphs:
        for line in split_lines(para):
            heading_match = classifier.match(line)

            if heading_match is None and not is_bare_heading_line(line):
                # Zwykła linia treści → zdania
                for raw in split_sentences(line):
                    clean = raw.strip()
                    if not is_valid_sentence(clean):
                        logger.debug("Pomijam trywialny fragment: %r", clean)
                        result.rejected += 1
                        continue
                    result.sentences.append(Sentence(
                        id=new_id(),
                        document_id=document_id,
                        text=clean,
                        order_index=order,
                        parent_heading_id=current.id if current else None,
                    ))
                    order += 1
                continue

            # Nagłówek albo goły znacznik: nigdy nie tworzy zdań.
            if heading_match is None:
                logger.debug("Goły znacznik bez etykiety, czyszczę kontekst: %r", line)
                current = None
                continue

            queue = pending.get(label_key(heading_match.label))
            if not queue:
                msg = f"Etykieta '{heading_match.label}' nie występuje w konspekcie dokumentu"
                logger.warning("%s — linia poza nagłówkiem: %r", msg, line)
                result.diagnostics.append(Diagnostic(
                    code=DiagnosticCode.CLASSIFICATION_MISMATCH,
                    message=msg,
                    subject=line,
                ))
                current = None
                continue

            queue.popleft()
            current = Heading(
                id=new_id(),
                document_id=document_id,
                label=heading_match.label,
                order_index=order,
                role=heading_match.role,
                ordinal=heading_match.ordinal,
            )
            result.headings.append(current)
            order += 1

    logger.info(
        "Segmentacja: %d nagłówków, %d zdań, %d odrzuconych fragmentów, %d niezgodności",
        len(result.headings), len(result.sentences), result.rejected, len(result.diagnostics),
    )
    return result
