"""
ExcelWriter: builds the styled workbook a dataset is exported to.
"""
from __future__ import annotations

import io
from typing import Any, Sequence

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet

from sheetdesk.excel.formatters import (
    auto_column_width,
    format_data_cell,
    format_header_row,
    write_value,
)


class ExcelWriter:
    """One workbook, one or more header-plus-rows tables."""

    def __init__(self) -> None:
        self.wb = Workbook()
        self._fresh = True

    def add_sheet(self, title: str) -> Worksheet:
        """New worksheet named *title*; the workbook's blank default sheet is reused once."""
        if not self._fresh:
            return self.wb.create_sheet(title=title)
        self._fresh = False
        ws = self.wb.active
        ws.title = title
        return ws

    def write_table(
        self,
        ws: Worksheet,
        headers: Sequence[str],
        rows: Sequence[Sequence[Any]],
        start_row: int = 1,
        freeze: bool = True,
    ) -> int:
        """Header row at *start_row*, then the data rows cell for cell.

        Returns the first row number below the table.
        """
        for col_num, header in enumerate(headers, 1):
            write_value(ws.cell(row=start_row, column=col_num), header)
        format_header_row(ws, start_row, len(headers))

        next_row = start_row + 1
        for values in rows:
            for col_num, value in enumerate(values, 1):
                format_data_cell(ws, next_row, col_num, value)
            next_row += 1

        auto_column_width(ws)
        if freeze:
            ws.freeze_panes = f"A{start_row + 1}"
        return next_row

    def to_bytes(self) -> bytes:
        """Serialize the workbook as xlsx bytes."""
        buffer = io.BytesIO()
        self.wb.save(buffer)
        return buffer.getvalue()
