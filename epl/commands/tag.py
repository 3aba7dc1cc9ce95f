"""Komenda: epl tag — ustawienie klasyfikacji zdania."""

from __future__ import annotations

import argparse

from rich.console import Console

from data_model import Classification
from epl._config import find_document, store_from_args
from epl.commands.render import show_plan
from pleadings.engine import PleadingsEngine
from pleadings.errors import EngineError

console = Console()

# UNCLASSIFIED nie jest akcją użytkownika; wraca tylko przez ponowny import
_USER_STATES = ["admitted", "denied", "not-known"]


def run(args: argparse.Namespace) -> None:
    state = Classification.parse(args.state)

    if args.sentence_id is None and (args.document is None or args.page is None or args.at is None):
        console.print("[red]Podaj ID zdania albo --doc, --page i --at X Y.[/red]")
        raise SystemExit(1)

    store = store_from_args(args, console)
    engine = PleadingsEngine(store)

    try:
        sentence_id = args.sentence_id
        if sentence_id is None:
            doc = find_document(store, args.document, args.case)
            nearest = engine.nearest_sentence(doc.id, args.page, (args.at[0], args.at[1]))
            if nearest is None:
                console.print(f"[yellow]Brak zmapowanych zdań na stronie {args.page}.[/yellow]")
                raise SystemExit(1)
            console.print(f"Najbliższe zdanie: [dim]{nearest.text}[/dim]")
            sentence_id = nearest.id

        plan = engine.classify(sentence_id, state)
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    console.print(f"[green]Zdanie {sentence_id} →[/green] [bold]{state}[/bold]")
    show_plan(console, plan)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "tag",
        help="Ustawia klasyfikację zdania (admitted / denied / not-known).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Ustawia stan zdania i wypisuje plan nakładek dokumentu po zmianie.
Zdanie wskazuje się przez id (epl outline --sentences) albo punktem na
stronie PDF: wybierane jest zdanie, którego prostokąt leży najbliżej.

Przykłady:
  epl tag denied 3f2b9c1e-…
  epl tag admitted --doc pleadings.docx --page 2 --at 120 340
        """,
    )
    p.add_argument("state", metavar="STAN", choices=_USER_STATES, help="admitted | denied | not-known")
    p.add_argument("sentence_id", metavar="ID_ZDANIA", nargs="?", default=None, help="Id zdania.")
    p.add_argument("--doc", dest="document", metavar="DOKUMENT", default=None, help="Dokument (z --page/--at).")
    p.add_argument("--case", "-c", metavar="SPRAWA", default=None, help="Sprawa dokumentu.")
    p.add_argument("--page", type=int, metavar="N", default=None, help="Strona PDF (od 1).")
    p.add_argument("--at", type=float, nargs=2, metavar=("X", "Y"), default=None, help="Punkt na stronie.")
    p.set_defaults(func=run)
