"""
Spreadsheet ingestion: decode uploaded bytes into a Dataset.

The first row of the first sheet is the header row, taken verbatim. Every
later row becomes one record keyed by those headers.
"""
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any

import pandas as pd

from sheetdesk.config import ACCEPTED_EXTENSIONS
from sheetdesk.data.normalize import (
    coerce_text,
    display_text,
    is_date_header,
    normalize_date,
    to_native,
)
from sheetdesk.data.schemas import Dataset, Record
from sheetdesk.data.store import RecordStore
from sheetdesk.errors import ParseError

logger = logging.getLogger(__name__)

# xlsx workbooks are zip archives; legacy .xls files are not
ZIP_SIGNATURE = b"PK\x03\x04"


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

_CSV_OPTIONS = dict(header=None, dtype=object, keep_default_na=False, encoding="utf-8-sig", engine="python")


def _read_csv(content: bytes) -> pd.DataFrame:
    """Rows longer than the first one are cut to its width."""
    width = pd.read_csv(io.BytesIO(content), nrows=1, **_CSV_OPTIONS).shape[1]
    return pd.read_csv(io.BytesIO(content), on_bad_lines=lambda fields: fields[:width], **_CSV_OPTIONS)


def _excel_engine(content: bytes, suffix: str) -> str:
    """openpyxl for zip workbooks (whatever the name says), xlrd for legacy .xls."""
    if suffix == ".xlsx" or content.startswith(ZIP_SIGNATURE):
        return "openpyxl"
    return "xlrd"


def _read_frame(content: bytes, filename: str) -> pd.DataFrame:
    """Decode the first sheet into a header-less DataFrame of raw cells."""
    suffix = Path(filename).suffix.lower()
    if suffix not in ACCEPTED_EXTENSIONS:
        raise ParseError(
            f"Unsupported file type '{suffix or filename}'. "
            f"Accepted: {', '.join(ACCEPTED_EXTENSIONS)}"
        )

    buffer = io.BytesIO(content)
    try:
        if suffix == ".csv":
            return _read_csv(content)
        engine = _excel_engine(content, suffix)
        return pd.read_excel(buffer, sheet_name=0, header=None, dtype=object, engine=engine)
    except Exception as exc:
        raise ParseError(f"Failed to read '{filename}': {exc}") from exc


def _is_blank(value: Any) -> bool:
    return to_native(value) == ""


def _cell(raw: Any, header: str, delimited: bool) -> Any:
    if _is_blank(raw):
        return ""
    if delimited:
        raw = coerce_text(raw)
    if is_date_header(header):
        raw = normalize_date(raw)
    return to_native(raw)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_table(content: bytes, filename: str) -> Dataset:
    """Parse spreadsheet bytes into a Dataset named after *filename*.

    Raises ParseError for unreadable files or files without a header row.
    """
    frame = _read_frame(content, filename)
    matrix = list(frame.itertuples(index=False, name=None))
    if not matrix or all(_is_blank(c) for c in matrix[0]):
        raise ParseError(f"'{filename}' has no header row")

    headers = [display_text(to_native(h)) for h in matrix[0]]
    # cells past the last header (wider data rows) have no column
    while headers[-1] == "":
        headers.pop()
    delimited = Path(filename).suffix.lower() == ".csv"

    rows: list[Record] = []
    for raw_row in matrix[1:]:
        if all(_is_blank(c) for c in raw_row[:len(headers)]):
            continue
        record: Record = {}
        for i, header in enumerate(headers):
            raw = raw_row[i] if i < len(raw_row) else ""
            record[header] = _cell(raw, header, delimited)
        rows.append(record)

    logger.info("Parsed %s: %d columns, %d rows", filename, len(headers), len(rows))
    return Dataset(name=filename, headers=headers, rows=rows)


def ingest(store: RecordStore, content: bytes, filename: str) -> tuple[Dataset, bool]:
    """Parse an upload and upsert it. Returns (dataset, replaced_existing)."""
    dataset = parse_table(content, filename)
    replaced = store.upsert(dataset)
    return store.require(dataset.name), replaced
