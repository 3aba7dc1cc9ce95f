"""Komenda: epl pair — pary nagłówków Statement N ↔ Answer N."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from data_model import Heading
from epl._config import find_document, store_from_args
from pleadings.engine import PleadingsEngine
from pleadings.errors import EngineError

console = Console()


def _cell(heading: Heading | None) -> Text:
    if heading is None:
        return Text("—", style="dim")
    page = f"  s. {heading.mapped_page}" if heading.mapped_page is not None else ""
    return Text(heading.label + page)


def run(args: argparse.Namespace) -> None:
    store = store_from_args(args, console)
    engine = PleadingsEngine(store)

    try:
        if args.heading:
            partner = engine.find_pair(args.heading)
            if partner is None:
                console.print("[yellow]Brak pary dla tego nagłówka.[/yellow]")
                return
            console.print(f"{partner.label}  [dim]{partner.id}[/dim]  strona {partner.mapped_page or '—'}")
            return

        if args.document is None:
            console.print("[red]Podaj dokument albo --heading ID.[/red]")
            raise SystemExit(1)
        doc = find_document(store, args.document, args.case)
        pairs = engine.pairs(doc.id)
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    if not pairs:
        console.print("[yellow]Dokument nie ma nagłówków.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", row_styles=["", "dim"], expand=False)
    table.add_column("STATEMENT", style="bold cyan", no_wrap=True)
    table.add_column("ANSWER",    style="bold",      no_wrap=True)
    for statement, answer in pairs:
        table.add_row(_cell(statement), _cell(answer))

    complete = sum(1 for s, a in pairs if s is not None and a is not None)
    console.print()
    console.print(table)
    console.print(f"  [dim]{complete} pełnych par z {len(pairs)}[/dim]\n")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "pair",
        help="Paruje nagłówki Statement N ↔ Answer N.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Zestawia nagłówki twierdzeń (Cond. / Statement) z odpowiedziami (Ans. / Answer)
o tej samej liczbie porządkowej. Nic nie zapisuje.

Przykłady:
  epl pair pleadings.docx
  epl pair --heading 3f2b9c1e-…
        """,
    )
    p.add_argument("document", metavar="DOKUMENT", nargs="?", default=None, help="Nazwa pliku albo id dokumentu.")
    p.add_argument("--case", "-c", metavar="SPRAWA", default=None, help="Sprawa dokumentu.")
    p.add_argument("--heading", metavar="ID", default=None, help="Pokaż parę jednego nagłówka.")
    p.set_defaults(func=run)
