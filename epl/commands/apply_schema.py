"""Komenda: epl apply-schema — tworzy tabele magazynu PostgreSQL z db/schema.sql."""

from __future__ import annotations

import argparse
import pathlib

import psycopg2
from rich.console import Console

from epl._db import get_connection

console = Console()

ROOT        = pathlib.Path(__file__).resolve().parent.parent.parent
SCHEMA_PATH = ROOT / "db" / "schema.sql"


def split_statements(sql: str) -> list[str]:
    """
    Tnie skrypt SQL na instrukcje zakończone średnikiem na końcu linii.

    Średniki wewnątrz bloków DO $$ … $$ nie kończą instrukcji.
    """
    stmts: list[str] = []
    buf: list[str] = []
    in_dollar = False

    for line in sql.splitlines(keepends=True):
        if not buf and line.lstrip().startswith("--"):
            continue
        buf.append(line)
        if line.count("$$") % 2 == 1:
            in_dollar = not in_dollar
        if not in_dollar and line.rstrip().endswith(";"):
            stmts.append("".join(buf).strip())
            buf = []

    tail = "".join(buf).strip()
    if tail:
        stmts.append(tail)
    return stmts


def run(args: argparse.Namespace) -> None:
    if not SCHEMA_PATH.exists():
        console.print(f"[red]Brak pliku schematu:[/red] {SCHEMA_PATH}")
        raise SystemExit(1)

    if args.settings.store != "db":
        console.print("[dim]Uwaga: bieżący magazyn to JSON; schemat dotyczy tylko --store db.[/dim]")

    stmts = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))

    try:
        conn = get_connection()
    except psycopg2.Error as e:
        console.print(f"[red]Błąd połączenia z bazą:[/red] {e}")
        raise SystemExit(1)

    # CREATE TYPE w bloku DO musi być zatwierdzony przed CREATE TABLE, który go używa
    conn.autocommit = True
    try:
        with conn.cursor() as cur:
            for stmt in stmts:
                cur.execute(stmt)
    except psycopg2.Error as e:
        console.print(f"[red]Błąd wykonania schematu:[/red] {e}")
        raise SystemExit(1)
    finally:
        conn.close()

    console.print(f"[green]Schemat zastosowany:[/green] {SCHEMA_PATH} ({len(stmts)} instrukcji)")
    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "apply-schema",
        help="Aplikuje db/schema.sql do bazy danych (idempotentne).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Tworzy typy i tabele magazynu (source_document, heading, sentence)
w bazie wskazanej przez PGHOST / PGPORT / PGDATABASE / PGUSER / PGPASSWORD.

Bezpieczne do wielokrotnego uruchomienia (IF NOT EXISTS / duplicate_object).

Przykład:
  epl apply-schema
        """,
    )
    p.set_defaults(func=run)
