"""Komenda: epl render — kopia PDF z nakładkami klasyfikacji."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from data_model import Classification
from epl._config import find_document, store_from_args
from pdf.highlights import RenderPlan
from pdf.resolver import resolve_rendered_document
from pleadings.engine import PleadingsEngine
from pleadings.errors import EngineError

console = Console()

STATE_STYLE: dict[Classification, str] = {
    Classification.ADMITTED:     "green",
    Classification.DENIED:       "red",
    Classification.NOT_KNOWN:    "yellow",
    Classification.UNCLASSIFIED: "dim",
}


def show_plan(out: Console, plan: RenderPlan) -> None:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold white", expand=False)
    table.add_column("STAN",     no_wrap=True)
    table.add_column("NAKŁADKI", justify="right")
    for state, style in STATE_STYLE.items():
        table.add_row(f"[{style}]{state}[/{style}]", str(plan.count(state)))
    out.print(table)

    skipped = []
    if plan.skipped_invalid:
        skipped.append(f"zdegenerowane prostokąty: {plan.skipped_invalid}")
    if plan.skipped_unmapped:
        skipped.append(f"niezmapowane zdania: {plan.skipped_unmapped}")
    if plan.skipped_heading_like:
        skipped.append(f"krótkie/nagłówkowe: {plan.skipped_heading_like}")
    if skipped:
        out.print("  [dim]pominięto — " + ", ".join(skipped) + "[/dim]")


def _default_output(pdf_path: Path) -> Path:
    return pdf_path.with_name(f"{pdf_path.stem}.annotated.pdf")


def run(args: argparse.Namespace) -> None:
    store = store_from_args(args, console)
    engine = PleadingsEngine(store)

    try:
        doc = find_document(store, args.document, args.case)
    except EngineError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(1)

    pdf_path = Path(args.pdf) if args.pdf else resolve_rendered_document(doc.path)
    if pdf_path is None or not pdf_path.exists():
        console.print(f"[red]Nie znaleziono PDF dla[/red] {doc.filename}")
        raise SystemExit(1)

    out_path = Path(args.out) if args.out else _default_output(pdf_path)
    if out_path.resolve() == pdf_path.resolve():
        console.print("[red]Plik wyjściowy nie może nadpisać źródłowego PDF.[/red]")
        raise SystemExit(1)

    try:
        plan = engine.export_annotated(doc.id, out_path, rendered_path=pdf_path)
    except EngineError as e:
        console.print(f"[red]Błąd renderowania:[/red] {e}")
        raise SystemExit(1)

    console.print(f"[green]Zapisano:[/green] {out_path}  (usunięto {plan.removed} starych nakładek)")
    show_plan(console, plan)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "render",
        help="Zapisuje kopię PDF z nakładkami klasyfikacji.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Usuwa wszystkie nakładki silnika z PDF i rysuje je od nowa według
bieżącego stanu zdań (zielony = admitted, czerwony = denied,
żółty = not-known). Wynik trafia do osobnego pliku.

Przykłady:
  epl render pleadings.docx
  epl render pleadings.docx --out sprawa/oznaczone.pdf
        """,
    )
    p.add_argument("document", metavar="DOKUMENT", help="Nazwa pliku albo id dokumentu.")
    p.add_argument("--case", "-c", metavar="SPRAWA", default=None, help="Sprawa dokumentu.")
    p.add_argument("--pdf", metavar="PLIK.pdf", default=None, help="Jawna ścieżka do PDF.")
    p.add_argument(
        "--out", "-o",
        metavar="PLIK.pdf",
        default=None,
        help="Plik wyjściowy (domyślnie: <nazwa>.annotated.pdf obok PDF).",
    )
    p.set_defaults(func=run)
