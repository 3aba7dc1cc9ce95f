"""Komenda: epl reset — usuwanie dokumentów (z nagłówkami i zdaniami) z magazynu."""

from __future__ import annotations

import argparse

from rich.console import Console

from epl._config import find_document, store_from_args
from pleadings.errors import EngineError

console = Console()


def run(args: argparse.Namespace) -> None:
    if args.document is None and args.case is None and not args.all:
        console.print("[red]Podaj dokument, --case SPRAWA albo --all.[/red]")
        raise SystemExit(1)

    store = store_from_args(args, console)

    try:
        if args.document is not None:
            docs = [find_document(store, args.document, args.case)]
        else:
            docs = store.list_documents(args.case)

        for doc in docs:
            n_h = len(store.headings(doc.id))
            n_s = len(store.sentences(doc.id))
            store.delete_document(doc.id)
            console.print(
                f"[green]Usunięto [bold]{doc.filename}[/bold][/green] "
                f"(sprawa=[cyan]{doc.case_id}[/cyan]; {n_h} nagłówków, {n_s} zdań)"
            )
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if not docs:
        console.print("[yellow]Brak dokumentów do usunięcia.[/yellow]")
    console.print("[dim]Gotowe.[/dim]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "reset",
        help="Usuwa dokument(y) z magazynu (bez potwierdzenia).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa dokumenty wraz z nagłówkami, zdaniami i klasyfikacjami.
Działa natychmiast, bez pytania o potwierdzenie. Pliki .docx/.pdf
w folderze sprawy nie są ruszane.

Przykłady:
  epl reset pleadings.docx --case smith_v_jones
  epl reset --case smith_v_jones
  epl reset --all
        """,
    )
    p.add_argument("document", metavar="DOKUMENT", nargs="?", default=None, help="Nazwa pliku albo id dokumentu.")
    p.add_argument("--case", "-c", metavar="SPRAWA", default=None, help="Ogranicz do sprawy.")
    p.add_argument("--all", action="store_true", help="Usuń wszystkie dokumenty.")
    p.set_defaults(func=run)
