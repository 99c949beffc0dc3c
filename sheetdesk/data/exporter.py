"""
Export a stored dataset back to spreadsheet bytes.

The output is always the full dataset as stored: headers first, then one
row per record in stored order, cells taken in header order.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pandas as pd

from sheetdesk.config import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE
from sheetdesk.data.schemas import Dataset
from sheetdesk.excel.writer import ExcelWriter

logger = logging.getLogger(__name__)


def table_matrix(dataset: Dataset) -> list[list[Any]]:
    """Rows of cell values in ``headers`` order (missing cells are ``""``)."""
    return [[row.get(h, "") for h in dataset.headers] for row in dataset.rows]


def export_media_type(name: str) -> str:
    if Path(name).suffix.lower() == ".csv":
        return CSV_MEDIA_TYPE
    return XLSX_MEDIA_TYPE


def export_dataset(dataset: Dataset) -> bytes:
    """Serialize *dataset* to file bytes matching its name's extension.

    ``.csv`` names get CSV text; everything else gets an xlsx workbook with
    one ``Sheet1`` sheet.
    """
    matrix = table_matrix(dataset)
    if Path(dataset.name).suffix.lower() == ".csv":
        frame = pd.DataFrame([list(dataset.headers)] + matrix, dtype=object)
        content = frame.to_csv(index=False, header=False, lineterminator="\n").encode("utf-8")
    else:
        ew = ExcelWriter()
        ws = ew.add_sheet("Sheet1")
        ew.write_table(ws, dataset.headers, matrix)
        content = ew.to_bytes()
    logger.info("Exported %s: %d rows, %d bytes", dataset.name, len(matrix), len(content))
    return content
