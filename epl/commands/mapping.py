"""Komenda: epl map — ponowne mapowanie jednostek dokumentu na strony PDF."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from epl._config import find_document, store_from_args
from pleadings.engine import PleadingsEngine
from pleadings.errors import EngineError

console = Console()


def run(args: argparse.Namespace) -> None:
    if args.pdf and not Path(args.pdf).exists():
        console.print(f"[red]Plik PDF nie istnieje:[/red] {args.pdf}")
        raise SystemExit(1)

    store = store_from_args(args, console)
    engine = PleadingsEngine(store)

    try:
        doc = find_document(store, args.document, args.case)
        report = engine.map_document(doc.id, rendered_path=args.pdf, clear_misses=args.clear_misses)
    except EngineError as e:
        console.print(f"[red]Błąd mapowania:[/red] {e}")
        raise SystemExit(1)

    if report is None:
        console.print(
            f"[yellow]Nie znaleziono PDF dla {doc.filename}[/yellow] — jednostki pozostają bez geometrii."
        )
        return

    console.print(
        f"[green]Zmapowano[/green] {report.mapped}/{report.total} jednostek "
        f"([bold]{doc.filename}[/bold])"
    )
    if report.missed:
        console.print(f"  [yellow]bez trafienia: {report.missed}[/yellow]")
    if report.ambiguous:
        console.print(f"  [yellow]niejednoznaczne: {len(report.ambiguous)}[/yellow]")

    if args.show_misses:
        for diag in [*report.misses, *report.ambiguous]:
            console.print(f"  [yellow]{diag.code}[/yellow] {diag.message}: [dim]{diag.subject}[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "map",
        help="Ponownie mapuje jednostki dokumentu na strony PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wyszukuje każdy nagłówek i zdanie w tekście stron PDF i zapisuje stronę
oraz prostokąty. Wygrywa pierwsza strona zawierająca tekst.

Jednostki bez trafienia zachowują poprzednie mapowanie,
chyba że podano --clear-misses.

Przykłady:
  epl map pleadings.docx
  epl map pleadings.docx --pdf sprawa/closed_record.pdf --show-misses
  epl map pleadings.docx --clear-misses
        """,
    )
    p.add_argument("document", metavar="DOKUMENT", help="Nazwa pliku albo id dokumentu.")
    p.add_argument("--case", "-c", metavar="SPRAWA", default=None, help="Sprawa dokumentu.")
    p.add_argument("--pdf", metavar="PLIK.pdf", default=None, help="Jawna ścieżka do PDF.")
    p.add_argument(
        "--clear-misses",
        action="store_true",
        help="Wyczyść mapowanie jednostek, których nie znaleziono.",
    )
    p.add_argument(
        "--show-misses",
        action="store_true",
        help="Wypisz jednostki bez trafienia i niejednoznaczne.",
    )
    p.set_defaults(func=run)
