"""Unit tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path

import pytest

import sheetdesk.cli as cli
from helpers import xlsx_bytes
from sheetdesk.data.storage import FileStorage
from sheetdesk.data.store import RecordStore


@pytest.fixture
def storage_dir(monkeypatch, tmp_path: Path) -> Path:
    folder = tmp_path / "storage"
    monkeypatch.setattr(cli, "STORAGE_FOLDER", folder)
    return folder


@pytest.fixture
def imported(storage_dir: Path, tmp_path: Path) -> Path:
    source = tmp_path / "members.xlsx"
    source.write_bytes(xlsx_bytes([
        ["MEMBER", "NAME", "ADDRESS"],
        [7, "Ana", "Oak 1"],
        [3, "Bob", "Elm 9"],
        [7, "Cara", "Pine 4"],
    ]))
    assert cli.main(["import", str(source)]) == 0
    return storage_dir


def _stored_rows(folder: Path) -> list[dict]:
    return RecordStore(FileStorage(folder)).load().require("members.xlsx").rows


def test_main_without_command_prints_help(capsys) -> None:
    """No sub-command should print usage and succeed."""
    assert cli.main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_import_and_list(imported: Path, capsys) -> None:
    """Imported files should be listed with their sizes."""
    assert cli.main(["list"]) == 0

    out = capsys.readouterr().out
    assert "members.xlsx: 3 columns, 3 rows" in out
    assert "Success!" in out
    assert (imported / "excelFiles.json").exists()


def test_show_filters_rows(imported: Path, capsys) -> None:
    """show should print only rows matching the search."""
    capsys.readouterr()

    assert cli.main(["show", "members.xlsx", "--search", "elm"]) == 0

    out = capsys.readouterr().out
    assert "Bob" in out
    assert "Ana" not in out
    assert "Page 1 of 1" in out


def test_delete_member_with_and_without_confirmation(imported: Path, monkeypatch, capsys) -> None:
    """Declining at the prompt keeps rows; --yes deletes them."""
    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert cli.main(["delete-member", "members.xlsx", "7"]) == 0
    assert len(_stored_rows(imported)) == 3

    assert cli.main(["delete-member", "members.xlsx", "7", "--yes"]) == 0
    assert "Removed 2 row(s)" in capsys.readouterr().out
    assert [r["NAME"] for r in _stored_rows(imported)] == ["Bob"]


def test_edit_assigns_fields(imported: Path) -> None:
    """FIELD=VALUE pairs should update the addressed row."""
    assert cli.main(["edit", "members.xlsx", "1", "NAME=Bobby", "MEMBER=4", "--yes"]) == 0

    assert _stored_rows(imported)[1] == {"MEMBER": 4, "NAME": "Bobby", "ADDRESS": "Elm 9"}


def test_export_writes_output(imported: Path, tmp_path: Path) -> None:
    """export should write the workbook to the requested path."""
    out = tmp_path / "out" / "copy.xlsx"

    assert cli.main(["export", "members.xlsx", "--output", str(out)]) == 0
    assert out.read_bytes()[:2] == b"PK"


def test_errors_return_exit_code_one(imported: Path, capsys) -> None:
    """Pipeline errors should be reported and exit with 1."""
    assert cli.main(["show", "missing.xlsx"]) == 1
    assert cli.main(["delete-member", "members.xlsx", "abc", "--yes"]) == 1
    assert cli.main(["import", str(imported / "nope.csv")]) == 1

    out = capsys.readouterr().out
    assert "File not found" in out
