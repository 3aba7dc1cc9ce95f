"""Komenda: epl outline — konspekt dokumentu (nagłówki i zdania)."""

from __future__ import annotations

import argparse

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from data_model import Classification, Heading, Sentence
from epl._config import find_document, store_from_args
from pleadings.errors import EngineError

console = Console()

STATE_STYLE: dict[Classification, str] = {
    Classification.UNCLASSIFIED: "dim",
    Classification.ADMITTED:     "green",
    Classification.DENIED:       "red",
    Classification.NOT_KNOWN:    "yellow",
}


def _page(page: int | None) -> Text | str:
    return str(page) if page is not None else Text("—", style="dim")


def show_outline(
    out: Console,
    headings: list[Heading],
    sentences: list[Sentence],
    with_sentences: bool = False,
    state: Classification | None = None,
) -> None:
    """Tabela jednostek w kolejności czytania (order_index)."""
    rows: list[Heading | Sentence] = list(headings)
    if with_sentences:
        rows += [s for s in sentences if state is None or s.classification is state]
    rows.sort(key=lambda u: u.order_index)

    if not rows:
        out.print("[yellow]Brak jednostek.[/yellow]")
        return

    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"] if not with_sentences else None,
        expand=False,
    )
    table.add_column("ORD",    justify="right", no_wrap=True, style="dim")
    table.add_column("TYP",    no_wrap=True)
    table.add_column("TEKST",  no_wrap=False, max_width=70)
    table.add_column("STRONA", justify="center", no_wrap=True)
    table.add_column("STAN",   no_wrap=True)
    table.add_column("ID",     no_wrap=True, style="dim")

    for unit in rows:
        if isinstance(unit, Heading):
            table.add_row(
                str(unit.order_index),
                Text(str(unit.role), style="bold cyan"),
                Text(unit.label, style="bold"),
                _page(unit.mapped_page),
                "",
                unit.id,
            )
        else:
            table.add_row(
                str(unit.order_index),
                "",
                "  " + unit.text,
                _page(unit.mapped_page),
                Text(str(unit.classification), style=STATE_STYLE[unit.classification]),
                unit.id,
            )

    n_sent = sum(1 for u in rows if isinstance(u, Sentence))
    out.print()
    out.print(table)
    out.print(f"  [dim]{len(headings)} nagłówków, {n_sent} zdań[/dim]\n")


def _list_documents(store, case_id: str | None) -> None:
    docs = store.list_documents(case_id)
    if not docs:
        console.print("[yellow]Brak dokumentów w magazynie.[/yellow]")
        return

    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", expand=False)
    table.add_column("SPRAWA",  style="cyan", no_wrap=True)
    table.add_column("PLIK",    style="bold", no_wrap=True)
    table.add_column("NAGŁ.",   justify="right")
    table.add_column("ZDANIA",  justify="right")
    table.add_column("ID",      style="dim", no_wrap=True)
    for doc in docs:
        table.add_row(
            doc.case_id,
            doc.filename,
            str(len(store.headings(doc.id))),
            str(len(store.sentences(doc.id))),
            doc.id,
        )
    console.print()
    console.print(table)


def run(args: argparse.Namespace) -> None:
    store = store_from_args(args, console)

    if args.document is None:
        _list_documents(store, args.case)
        return

    state = Classification.parse(args.state) if args.state else None
    try:
        doc = find_document(store, args.document, args.case)
        headings = store.headings(doc.id)
        sentences = store.sentences(doc.id)
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    console.print(f"[bold]{doc.filename}[/bold] (sprawa=[cyan]{doc.case_id}[/cyan])")
    show_outline(
        console, headings, sentences,
        with_sentences=args.sentences or state is not None,
        state=state,
    )


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "outline",
        help="Wyświetla nagłówki i zdania dokumentu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Bez argumentu: lista dokumentów w magazynie.
Z dokumentem (nazwa pliku albo id): nagłówki w kolejności czytania,
z --sentences także zdania z ich stanem i stroną PDF.

Przykłady:
  epl outline
  epl outline pleadings.docx
  epl outline pleadings.docx --case smith_v_jones --sentences
  epl outline pleadings.docx --state denied
        """,
    )
    p.add_argument(
        "document",
        nargs="?",
        metavar="DOKUMENT",
        default=None,
        help="Nazwa pliku albo id dokumentu.",
    )
    p.add_argument(
        "--case", "-c",
        metavar="SPRAWA",
        default=None,
        help="Ogranicz do sprawy.",
    )
    p.add_argument(
        "--sentences", "-s",
        action="store_true",
        help="Pokaż także zdania.",
    )
    p.add_argument(
        "--state",
        choices=[c.value for c in Classification] + ["not-known"],
        default=None,
        help="Pokaż tylko zdania w danym stanie.",
    )
    p.set_defaults(func=run)
