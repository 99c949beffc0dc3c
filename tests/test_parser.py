"""Unit tests for spreadsheet parsing and ingestion."""

from __future__ import annotations

import datetime as dt

import pytest

from helpers import xlsx_bytes
from sheetdesk.data.parser import ingest, parse_table
from sheetdesk.errors import ParseError


def test_parse_xlsx_uses_first_row_as_headers() -> None:
    """Header row should be taken verbatim and rows keyed by it."""
    content = xlsx_bytes([
        ["MEMBER", "NAME", "ADDRESS"],
        [7, "Ana", "Oak 1"],
        [3, "Bob", "Elm 9"],
    ])

    dataset = parse_table(content, "members.xlsx")

    assert dataset.name == "members.xlsx"
    assert dataset.headers == ["MEMBER", "NAME", "ADDRESS"]
    assert dataset.rows == [
        {"MEMBER": 7, "NAME": "Ana", "ADDRESS": "Oak 1"},
        {"MEMBER": 3, "NAME": "Bob", "ADDRESS": "Elm 9"},
    ]


def test_parse_xlsx_normalizes_dob_columns() -> None:
    """Date serials and date cells under DOB headers should become DD-MM-YYYY."""
    content = xlsx_bytes([
        ["NAME", "DOB", "SPOUSE DOB", "JOINED"],
        ["Ana", 25569, dt.datetime(1985, 6, 9), 25570],
    ])

    record = parse_table(content, "dates.xlsx").rows[0]

    assert record["DOB"] == "01-01-1970"
    assert record["SPOUSE DOB"] == "09-06-1985"
    assert record["JOINED"] == 25570


def test_parse_xlsx_fills_short_rows_and_skips_blank_rows() -> None:
    """Missing cells should be empty strings and fully blank rows dropped."""
    content = xlsx_bytes([
        ["MEMBER", "NAME", "EMAIL"],
        [7, "Ana"],
        [None, None, None],
        [8, None, "c@example.com"],
    ])

    dataset = parse_table(content, "short.xlsx")

    assert dataset.rows == [
        {"MEMBER": 7, "NAME": "Ana", "EMAIL": ""},
        {"MEMBER": 8, "NAME": "", "EMAIL": "c@example.com"},
    ]


def test_parse_xlsx_header_only_gives_empty_dataset() -> None:
    """A header row with no data should parse to zero rows."""
    dataset = parse_table(xlsx_bytes([["MEMBER", "NAME"]]), "empty.xlsx")

    assert dataset.headers == ["MEMBER", "NAME"]
    assert dataset.rows == []


def test_parse_csv_coerces_numeric_text() -> None:
    """CSV cells that look numeric should be stored as numbers."""
    content = "\ufeffMEMBER,NAME,DOB,BALANCE\n7,Ana,25569,12.50\n008,Bob,01-02-1990,x\n".encode("utf-8")

    dataset = parse_table(content, "members.csv")

    assert dataset.headers == ["MEMBER", "NAME", "DOB", "BALANCE"]
    assert dataset.rows[0] == {"MEMBER": 7, "NAME": "Ana", "DOB": "01-01-1970", "BALANCE": 12.5}
    assert dataset.rows[1] == {"MEMBER": 8, "NAME": "Bob", "DOB": "01-02-1990", "BALANCE": "x"}


def test_parse_accepts_extension_in_any_case() -> None:
    """Extension matching should ignore case."""
    dataset = parse_table(xlsx_bytes([["A"], [1]]), "UPPER.XLSX")

    assert dataset.rows == [{"A": 1}]


@pytest.mark.parametrize("filename", ["notes.txt", "archive.zip", "noextension"])
def test_parse_rejects_unsupported_extensions(filename: str) -> None:
    """Files outside xlsx/xls/csv should raise ParseError."""
    with pytest.raises(ParseError):
        parse_table(b"whatever", filename)


def test_parse_raises_for_corrupt_workbook() -> None:
    """Bytes that are not a workbook should raise ParseError."""
    with pytest.raises(ParseError):
        parse_table(b"this is not a zip archive", "broken.xlsx")


def test_parse_raises_for_empty_csv() -> None:
    """An empty file has no header row."""
    with pytest.raises(ParseError):
        parse_table(b"", "empty.csv")


def test_ingest_reports_replacement(store) -> None:
    """Second ingest of the same name should replace the first entirely."""
    first, replaced_first = ingest(store, xlsx_bytes([["A"], [1], [2]]), "same.xlsx")
    second, replaced_second = ingest(store, xlsx_bytes([["B"], [9]]), "same.xlsx")

    assert (replaced_first, replaced_second) == (False, True)
    assert len(first.rows) == 2
    assert store.names() == ["same.xlsx"]
    assert second.headers == ["B"]
    assert store.require("same.xlsx").rows == [{"B": 9}]


def test_parse_csv_ignores_cells_past_the_header_row() -> None:
    """Data rows wider than the header keep only the header's columns."""
    dataset = parse_table(b"MEMBER,NAME\n7,Ana\n8,Bob,extra,more\n", "wide.csv")

    assert dataset.headers == ["MEMBER", "NAME"]
    assert dataset.rows == [{"MEMBER": 7, "NAME": "Ana"}, {"MEMBER": 8, "NAME": "Bob"}]


def test_parse_xlsx_ignores_cells_past_the_header_row() -> None:
    """Wide workbook rows should not add blank headers or blank records."""
    content = xlsx_bytes([
        ["MEMBER", "NAME"],
        [7, "Ana", "stray"],
        [None, None, "only stray"],
    ])

    dataset = parse_table(content, "wide.xlsx")

    assert dataset.headers == ["MEMBER", "NAME"]
    assert dataset.rows == [{"MEMBER": 7, "NAME": "Ana"}]


def test_parse_xls_name_with_workbook_content() -> None:
    """.xls names holding xlsx bytes should be read by content, not name."""
    content = xlsx_bytes([["MEMBER", "NAME"], [7, "Ana"]])

    dataset = parse_table(content, "legacy.XLS")

    assert dataset.rows == [{"MEMBER": 7, "NAME": "Ana"}]


def test_parse_xls_rejects_non_workbook_bytes() -> None:
    """Bytes that are neither xlsx nor legacy xls should raise ParseError."""
    with pytest.raises(ParseError):
        parse_table(b"not a legacy workbook either", "legacy.xls")
