"""
Konfiguracja CLI: zmienne środowiskowe (+ opcjonalny plik .env) i wybór magazynu.

Zmienne:
  EPL_STORE      json | db            (domyślnie json)
  EPL_DATA_DIR   katalog magazynu JSON (domyślnie ./.epl)
  EPL_LOG_LEVEL  poziom logowania      (domyślnie WARNING)
  PG*            połączenie z PostgreSQL (epl/_db.py)

Flagi wiersza poleceń (--store, --data-dir, -v) mają pierwszeństwo.
"""

from __future__ import annotations

import argparse
import os
import pathlib
from dataclasses import dataclass, replace

import psycopg2
from dotenv import load_dotenv

from data_model import SourceDocument, is_entity_id
from pleadings.errors import UnknownEntity
from store import CaseStore, JsonStore, PostgresStore

ROOT = pathlib.Path(__file__).resolve().parent.parent

STORE_CHOICES = ("json", "db")


@dataclass(frozen=True)
class Settings:
    store: str = "json"
    data_dir: pathlib.Path = pathlib.Path(".epl")
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        load_dotenv(ROOT / ".env")
        store = os.getenv("EPL_STORE", "json").strip().lower()
        if store not in STORE_CHOICES:
            raise ValueError(f"EPL_STORE musi być jednym z {STORE_CHOICES}, otrzymano {store!r}")
        return cls(
            store=store,
            data_dir=pathlib.Path(os.getenv("EPL_DATA_DIR", ".epl")),
            log_level=os.getenv("EPL_LOG_LEVEL", "WARNING").upper(),
        )

    def with_args(self, args: argparse.Namespace) -> Settings:
        """Nakłada flagi globalne CLI na ustawienia ze środowiska."""
        overrides: dict = {}
        if getattr(args, "store", None):
            overrides["store"] = args.store
        if getattr(args, "data_dir", None):
            overrides["data_dir"] = pathlib.Path(args.data_dir)
        verbose = getattr(args, "verbose", 0) or 0
        if verbose == 1:
            overrides["log_level"] = "INFO"
        elif verbose >= 2:
            overrides["log_level"] = "DEBUG"
        return replace(self, **overrides)


def open_store(settings: Settings) -> CaseStore:
    if settings.store == "db":
        from epl._db import get_connection
        return PostgresStore(get_connection())
    return JsonStore(settings.data_dir)


def find_document(store: CaseStore, ref: str, case_id: str | None = None) -> SourceDocument:
    """
    Rozwiązuje odwołanie do dokumentu: id, albo nazwa pliku (opcjonalnie w sprawie).

    Raises:
        UnknownEntity: brak dokumentu albo nazwa niejednoznaczna bez --case.
    """
    if case_id is not None:
        doc = store.find_document(case_id, ref)
        if doc is not None:
            return doc
    else:
        matches = [d for d in store.list_documents() if d.filename == ref]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            cases = ", ".join(d.case_id for d in matches)
            raise UnknownEntity(f"Plik {ref} występuje w kilku sprawach ({cases}); podaj --case")

    # dopiero potem id (Postgres odrzuca tekst, który nie jest UUID)
    doc = store.get_document(ref) if is_entity_id(ref) else None
    if doc is None:
        raise UnknownEntity(f"Nieznany dokument: {ref}")
    return doc


def store_from_args(args: argparse.Namespace, console) -> CaseStore:
    """open_store() dla komend: błąd połączenia/odczytu → czerwony komunikat i kod 1."""
    try:
        return open_store(args.settings)
    except psycopg2.Error as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)
    except (OSError, ValueError) as e:
        console.print(f"[red]Nie można odczytać magazynu {args.settings.data_dir}:[/red] {e}")
        raise SystemExit(1)
