"""Unit tests for dataset export."""

from __future__ import annotations

import io

from openpyxl import load_workbook

from sheetdesk.data.exporter import export_dataset, export_media_type, table_matrix
from sheetdesk.data.parser import parse_table
from sheetdesk.data.schemas import Dataset


def test_xlsx_export_reimports_to_same_dataset(members) -> None:
    """Exported workbook should parse back to identical headers and rows."""
    content = export_dataset(members)

    reparsed = parse_table(content, members.name)

    assert reparsed.headers == members.headers
    assert reparsed.rows == members.rows


def test_xlsx_export_writes_single_sheet1(members) -> None:
    """Workbook should hold one sheet named Sheet1 with headers first."""
    wb = load_workbook(io.BytesIO(export_dataset(members)))

    assert wb.sheetnames == ["Sheet1"]
    ws = wb["Sheet1"]
    assert [c.value for c in ws[1]] == members.headers
    assert [c.value for c in ws[2]] == [7, "Ana", "Oak 1", "02-03-1980"]
    assert ws.max_row == 5


def test_csv_export_text_and_round_trip(members) -> None:
    """CSV names export as comma separated text that parses back."""
    dataset = Dataset(name="members.csv", headers=members.headers, rows=members.rows)

    content = export_dataset(dataset)

    lines = content.decode("utf-8").splitlines()
    assert lines[0] == "MEMBER,NAME,ADDRESS,DOB"
    assert lines[3] == "7,Cara,Pine 4,"
    assert parse_table(content, "members.csv").rows == members.rows


def test_export_follows_header_order() -> None:
    """Cells should be laid out by header order, not record key order."""
    dataset = Dataset(name="t.xlsx", headers=["B", "A"], rows=[{"A": 1, "B": 2}, {"B": 3}])

    assert table_matrix(dataset) == [[2, 1], [3, ""]]


def test_export_of_header_only_dataset() -> None:
    """A dataset without rows exports just its header row."""
    dataset = Dataset(name="empty.xlsx", headers=["MEMBER", "NAME"], rows=[])

    reparsed = parse_table(export_dataset(dataset), "empty.xlsx")

    assert reparsed.headers == ["MEMBER", "NAME"]
    assert reparsed.rows == []


def test_export_media_type_by_extension() -> None:
    """CSV names get text/csv, everything else the xlsx media type."""
    assert export_media_type("a.CSV") == "text/csv"
    assert export_media_type("a.xls").endswith("spreadsheetml.sheet")
    assert export_media_type("a.xlsx").endswith("spreadsheetml.sheet")


def test_xls_export_reimports_to_same_dataset() -> None:
    """An exported .xls dataset should parse back unchanged."""
    dataset = Dataset(name="members.xls", headers=["MEMBER", "NAME"], rows=[{"MEMBER": 7, "NAME": "Ana"}])

    reparsed = parse_table(export_dataset(dataset), dataset.name)

    assert reparsed.headers == dataset.headers
    assert reparsed.rows == dataset.rows


def test_xlsx_export_keeps_text_starting_with_equals() -> None:
    """Text that looks like a formula should come back as the same text."""
    dataset = Dataset(
        name="notes.xlsx",
        headers=["MEMBER", "=NOTE"],
        rows=[{"MEMBER": 7, "=NOTE": "=see row 2"}, {"MEMBER": 8, "=NOTE": "=SUM(A1:A2)"}],
    )

    content = export_dataset(dataset)

    reparsed = parse_table(content, dataset.name)
    assert reparsed.headers == dataset.headers
    assert reparsed.rows == dataset.rows
    cell = load_workbook(io.BytesIO(content))["Sheet1"]["B2"]
    assert cell.data_type == "s"
