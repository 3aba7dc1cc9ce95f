"""Komenda: epl import — import pliku .docx sprawy i mapowanie na PDF."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from epl._config import store_from_args
from epl.commands.outline import show_outline
from pleadings.engine import ImportResult, PleadingsEngine
from pleadings.errors import EngineError

console = Console()


def _print_summary(result: ImportResult) -> None:
    doc = result.document
    console.print(
        f"[green]Zaimportowano[/green] [bold]{doc.filename}[/bold] "
        f"(sprawa=[cyan]{doc.case_id}[/cyan], id=[dim]{doc.id}[/dim])"
    )
    console.print(
        f"  nagłówki: [bold]{len(result.headings)}[/bold]   "
        f"zdania: [bold]{len(result.sentences)}[/bold]   "
        f"odrzucone fragmenty: {result.rejected}"
    )
    if result.carried_over:
        console.print(f"  przeniesione klasyfikacje: {result.carried_over}")

    if result.mapping is not None:
        m = result.mapping
        console.print(
            f"  PDF: {result.rendered_path}  →  zmapowane {m.mapped}/{m.total}, "
            f"bez trafienia {m.missed}, niejednoznaczne {len(m.ambiguous)}"
        )

    for diag in result.diagnostics:
        subject = f" [dim]({diag.subject})[/dim]" if diag.subject else ""
        console.print(f"  [yellow]{diag.code}[/yellow] {diag.message}{subject}")


def run(args: argparse.Namespace) -> None:
    docx_path = Path(args.docx_file)
    if not docx_path.exists():
        console.print(f"[red]Plik nie istnieje:[/red] {docx_path}")
        raise SystemExit(1)
    if docx_path.suffix.lower() != ".docx":
        console.print(f"[red]Oczekiwano pliku .docx, otrzymano:[/red] {docx_path.suffix}")
        raise SystemExit(1)
    if args.pdf and not Path(args.pdf).exists():
        console.print(f"[red]Plik PDF nie istnieje:[/red] {args.pdf}")
        raise SystemExit(1)

    store = store_from_args(args, console)
    engine = PleadingsEngine(store)

    console.print(f"Import [bold]{docx_path}[/bold] (sprawa=[cyan]{args.case}[/cyan]) …")
    try:
        result = engine.import_document(
            docx_path,
            args.case,
            rendered_path=args.pdf,
            keep_classifications=args.keep_tags,
        )
    except EngineError as e:
        console.print(f"[red]Błąd importu:[/red] {e}")
        raise SystemExit(1)

    _print_summary(result)
    if args.show:
        show_outline(console, result.headings, result.sentences, with_sentences=True)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "import",
        help="Importuje plik .docx sprawy (i mapuje na sparowany PDF).",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wyodrębnia nagłówki (Cond. N / Ans. N) i zdania z pliku .docx, mapuje je na
strony sparowanego PDF i zapisuje w magazynie.

Ponowny import tego samego pliku w tej samej sprawie zastępuje nagłówki
i zdania w całości (bez duplikatów); klasyfikacje są resetowane,
chyba że podano --keep-tags.

PDF: --pdf albo plik o tej samej nazwie w folderze .docx, albo pierwszy
plik .pdf w tym folderze. Brak PDF nie przerywa importu.

Przykłady:
  epl import sprawa/pleadings.docx --case smith_v_jones
  epl import sprawa/pleadings.docx --case smith_v_jones --pdf sprawa/closed_record.pdf --show
  epl import sprawa/pleadings.docx --case smith_v_jones --keep-tags
        """,
    )
    p.add_argument(
        "docx_file",
        metavar="PLIK.docx",
        help="Ścieżka do pliku .docx (kopia w folderze sprawy).",
    )
    p.add_argument(
        "--case", "-c",
        required=True,
        metavar="SPRAWA",
        help="Identyfikator sprawy.",
    )
    p.add_argument(
        "--pdf",
        metavar="PLIK.pdf",
        default=None,
        help="Jawna ścieżka do PDF (domyślnie: wyszukiwanie w folderze .docx).",
    )
    p.add_argument(
        "--keep-tags",
        action="store_true",
        help="Zachowaj klasyfikacje zdań o niezmienionym tekście.",
    )
    p.add_argument(
        "--show",
        action="store_true",
        help="Wyświetl konspekt po imporcie.",
    )
    p.set_defaults(func=run)
