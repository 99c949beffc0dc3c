"""
Cell and column helpers used by ExcelWriter.
"""
from __future__ import annotations

from typing import Any

from openpyxl.cell.cell import Cell
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from sheetdesk.excel.styles import (
    CELL_BORDER, CELL_FONT, HEADER_ALIGN, HEADER_BORDER, HEADER_FILL,
    HEADER_FONT, NUMBER_ALIGN, STRIPE_FILL, TEXT_ALIGN,
)


def write_value(cell: Cell, value: Any) -> None:
    """Store *value* as data: ``""`` leaves the cell empty, ``=`` text stays text."""
    cell.value = None if value == "" else value
    if isinstance(value, str) and value.startswith("="):
        cell.data_type = "s"


def format_header_row(ws: Worksheet, row_num: int, num_cols: int) -> None:
    """Paint the header band across the first *num_cols* cells of a row."""
    for col in range(1, num_cols + 1):
        cell = ws.cell(row=row_num, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = HEADER_ALIGN
        cell.border = HEADER_BORDER


def format_data_cell(ws: Worksheet, row_num: int, col_num: int, value: Any) -> None:
    """Store *value* and style it; even rows are striped."""
    cell = ws.cell(row=row_num, column=col_num)
    write_value(cell, value)
    cell.font = CELL_FONT
    cell.border = CELL_BORDER
    numeric = isinstance(value, (int, float)) and not isinstance(value, bool)
    cell.alignment = NUMBER_ALIGN if numeric else TEXT_ALIGN
    if row_num % 2 == 0:
        cell.fill = STRIPE_FILL


def auto_column_width(ws: Worksheet, min_width: int = 8, max_width: int = 60) -> None:
    """Size each column to its longest rendered value, within bounds."""
    for column in ws.iter_cols():
        longest = max((len(str(c.value)) for c in column if c.value is not None), default=0)
        letter = get_column_letter(column[0].column)
        ws.column_dimensions[letter].width = min(max(longest + 2, min_width), max_width)
