"""
pdf/resolver.py — odnajdywanie PDF sparowanego z dokumentem .docx.

Reguła:
  1. plik o tej samej nazwie bazowej z rozszerzeniem .pdf w tym samym folderze
  2. w przeciwnym razie pierwszy plik .pdf w folderze (kolejność alfabetyczna)
  3. brak → None (stan niefatalny; UI pokazuje "nie znaleziono")
"""

from __future__ import annotations

from pathlib import Path

from pleadings.errors import RenderedDocumentMissing

RENDERED_SUFFIX = ".pdf"


def resolve_rendered_document(source_path: str | Path, suffix: str = RENDERED_SUFFIX) -> Path | None:
    source = Path(source_path)
    folder = source.parent
    if not folder.is_dir():
        return None

    candidates = sorted(
        p for p in folder.iterdir()
        if p.is_file() and p.suffix.lower() == suffix and not p.name.startswith(".")
    )
    for candidate in candidates:
        if candidate.stem == source.stem:
            return candidate
    return candidates[0] if candidates else None


def require_rendered_document(source_path: str | Path, suffix: str = RENDERED_SUFFIX) -> Path:
    """Jak resolve_rendered_document(), ale brak PDF to wyjątek."""
    found = resolve_rendered_document(source_path, suffix)
    if found is None:
        raise RenderedDocumentMissing(f"Brak pliku {suffix} dla {Path(source_path).name}")
    return found
