"""
epl — narzędzie CLI silnika pism procesowych.

Użycie:
  epl [--store json|db] [--data-dir KATALOG] [-v] <komenda> [opcje]

Komendy:
  import        Importuje plik .docx sprawy (i mapuje na sparowany PDF).
  outline       Wyświetla nagłówki i zdania dokumentu.
  map           Ponownie mapuje jednostki dokumentu na strony PDF.
  tag           Ustawia klasyfikację zdania (admitted / denied / not-known).
  render        Zapisuje kopię PDF z nakładkami klasyfikacji.
  pair          Paruje nagłówki Statement N ↔ Answer N.
  apply-schema  Aplikuje db/schema.sql do bazy danych (idempotentne).
  reset         Usuwa dokument(y) z magazynu.
"""

from __future__ import annotations

import argparse
import logging
import sys

# Windows: terminal może używać cp1252, wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from rich.console import Console
from rich.logging import RichHandler

from epl._config import STORE_CHOICES, Settings
from epl.commands import apply_schema as cmd_apply_schema
from epl.commands import import_doc as cmd_import
from epl.commands import mapping as cmd_map
from epl.commands import outline as cmd_outline
from epl.commands import pair as cmd_pair
from epl.commands import render as cmd_render
from epl.commands import reset as cmd_reset
from epl.commands import tag as cmd_tag


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="epl",
        description="ePleadings — korelacja pism procesowych .docx z PDF.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version="epl 0.1.0"
    )
    parser.add_argument(
        "--store",
        choices=STORE_CHOICES,
        default=None,
        help="Magazyn danych (domyślnie EPL_STORE albo json).",
    )
    parser.add_argument(
        "--data-dir",
        metavar="KATALOG",
        default=None,
        help="Katalog magazynu JSON (domyślnie EPL_DATA_DIR albo ./.epl).",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Więcej logów (-v: INFO, -vv: DEBUG).",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_import.add_parser(subparsers)
    cmd_outline.add_parser(subparsers)
    cmd_map.add_parser(subparsers)
    cmd_tag.add_parser(subparsers)
    cmd_render.add_parser(subparsers)
    cmd_pair.add_parser(subparsers)
    cmd_apply_schema.add_parser(subparsers)
    cmd_reset.add_parser(subparsers)

    return parser


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    try:
        args.settings = Settings.from_env().with_args(args)
    except ValueError as e:
        Console(stderr=True).print(f"[red]Błąd konfiguracji:[/red] {e}")
        raise SystemExit(1)
    setup_logging(args.settings.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
