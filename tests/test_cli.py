"""Tests for epl CLI — konfiguracja, parser i przebieg import → tag → render."""
from __future__ import annotations

import sys
from pathlib import Path

import fitz
import pytest

from epl import cli
from epl._config import Settings, find_document
from epl.commands.apply_schema import SCHEMA_PATH, split_statements
from pleadings.errors import UnknownEntity
from store import JsonStore, MemoryStore

CASE = "smith_v_jones"


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("EPL_STORE", "EPL_DATA_DIR", "EPL_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)


def _run(monkeypatch: pytest.MonkeyPatch, *argv: str) -> None:
    monkeypatch.setattr(sys, "argv", ["epl", *argv])
    cli.main()


# ── Settings ─────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings.from_env()
        assert settings.store == "json"
        assert settings.data_dir == Path(".epl")
        assert settings.log_level == "WARNING"

    def test_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("EPL_STORE", "DB")
        monkeypatch.setenv("EPL_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("EPL_LOG_LEVEL", "debug")
        settings = Settings.from_env()
        assert (settings.store, settings.data_dir, settings.log_level) == ("db", tmp_path, "DEBUG")

    def test_invalid_store(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EPL_STORE", "sqlite")
        with pytest.raises(ValueError):
            Settings.from_env()

    def test_flags_override_env(self, tmp_path: Path) -> None:
        args = cli.build_parser().parse_args(["--data-dir", str(tmp_path), "-vv", "outline"])
        settings = Settings().with_args(args)
        assert settings.data_dir == tmp_path
        assert settings.log_level == "DEBUG"


# ── parser ───────────────────────────────────────────────────────────


class TestParser:
    @pytest.mark.parametrize(
        "argv",
        [
            ["import", "a.docx", "--case", CASE],
            ["outline"],
            ["map", "a.docx", "--clear-misses"],
            ["tag", "denied", "some-id"],
            ["render", "a.docx", "--out", "x.pdf"],
            ["pair", "a.docx"],
            ["apply-schema"],
            ["reset", "--all"],
        ],
    )
    def test_all_commands_registered(self, argv: list[str]) -> None:
        args = cli.build_parser().parse_args(argv)
        assert callable(args.func)

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args([])

    def test_unclassified_is_not_a_user_action(self) -> None:
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["tag", "unclassified", "some-id"])


# ── find_document ────────────────────────────────────────────────────


class TestFindDocument:
    def test_by_filename_and_id(self) -> None:
        store = MemoryStore()
        doc = store.add_document(CASE, "pleadings.docx", "/x/pleadings.docx")
        assert find_document(store, "pleadings.docx").id == doc.id
        assert find_document(store, doc.id).id == doc.id

    def test_ambiguous_filename_needs_case(self) -> None:
        store = MemoryStore()
        store.add_document("case-1", "pleadings.docx", "/a")
        other = store.add_document("case-2", "pleadings.docx", "/b")
        with pytest.raises(UnknownEntity):
            find_document(store, "pleadings.docx")
        assert find_document(store, "pleadings.docx", "case-2").id == other.id

    def test_unknown(self) -> None:
        with pytest.raises(UnknownEntity):
            find_document(MemoryStore(), "nothing.docx")


# ── apply-schema ─────────────────────────────────────────────────────


class TestSchema:
    def test_do_blocks_kept_whole(self) -> None:
        stmts = split_statements(SCHEMA_PATH.read_text(encoding="utf-8"))
        assert any(s.startswith("DO $$") and s.endswith("END $$;") for s in stmts)
        assert all(not s.startswith("--") for s in stmts)
        assert sum(1 for s in stmts if s.startswith("CREATE TABLE IF NOT EXISTS")) == 3


# ── end to end ───────────────────────────────────────────────────────


class TestEndToEnd:
    def test_import_tag_render(self, monkeypatch: pytest.MonkeyPatch, case_folder: Path, tmp_path: Path) -> None:
        data_dir = tmp_path / "data"
        _run(monkeypatch, "--data-dir", str(data_dir), "import", str(case_folder / "pleadings.docx"), "--case", CASE)

        store = JsonStore(data_dir)
        doc = store.list_documents(CASE)[0]
        target = next(s for s in store.sentences(doc.id) if s.text == "Quoad ultra denied.")

        _run(monkeypatch, "--data-dir", str(data_dir), "tag", "denied", target.id)
        out = tmp_path / "annotated.pdf"
        _run(monkeypatch, "--data-dir", str(data_dir), "render", "pleadings.docx", "--out", str(out))

        assert JsonStore(data_dir).get_sentence(target.id).classification.value == "denied"
        pdf = fitz.open(str(out))
        subjects = [a.info["subject"] for page in pdf for a in page.annots()]
        pdf.close()
        assert subjects.count("denied") == 1

    def test_missing_docx_exits(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--data-dir", str(tmp_path), "import", str(tmp_path / "none.docx"), "--case", CASE)
        assert exc.value.code == 1

    def test_broken_docx_exits(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        broken = tmp_path / "broken.docx"
        broken.write_text("not a zip", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--data-dir", str(tmp_path / "data"), "import", str(broken), "--case", CASE)
        assert exc.value.code == 1

    def test_empty_pdf_imports_without_geometry(
        self, monkeypatch: pytest.MonkeyPatch, case_folder: Path, tmp_path: Path,
    ) -> None:
        (case_folder / "pleadings.pdf").write_bytes(b"")
        data_dir = tmp_path / "data"
        _run(monkeypatch, "--data-dir", str(data_dir), "import", str(case_folder / "pleadings.docx"), "--case", CASE)

        store = JsonStore(data_dir)
        doc = store.list_documents(CASE)[0]
        assert len(store.sentences(doc.id)) == 6

        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "--data-dir", str(data_dir), "render", "pleadings.docx")
        assert exc.value.code == 1
