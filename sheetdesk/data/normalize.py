"""
Cell normalisation: spreadsheet date serials, numeric coercion, display text.
"""
from __future__ import annotations

import datetime as dt
import math
import re
from typing import Any

import numpy as np
import pandas as pd

from sheetdesk.config import DATE_MARKER, EXCEL_EPOCH


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_NUMERIC_TEXT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def as_number(value: Any) -> float | None:
    """Numeric reading of a cell, or None when it is not a number.

    Numeric strings count (``"42"``); empty strings, booleans and NaN do not.
    """
    if value is None or isinstance(value, (bool, np.bool_)):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
        return None if math.isnan(number) else number
    if isinstance(value, str):
        text = value.strip()
        if not _NUMERIC_TEXT_RE.match(text):
            return None
        return float(text)
    return None


def coerce_text(value: Any) -> Any:
    """Turn numeric-looking text into int/float, leave anything else as is."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    if not _NUMERIC_TEXT_RE.match(text):
        return value
    if "." in text or "e" in text.lower():
        return to_native(float(text))
    return int(text)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

def is_date_header(header: Any) -> bool:
    return DATE_MARKER in str(header)


def _format_day(moment: dt.date) -> str:
    return f"{moment.day:02d}-{moment.month:02d}-{moment.year}"


def normalize_date(value: Any) -> Any:
    """Convert a spreadsheet date serial to ``DD-MM-YYYY``.

    Serial 25569 is 1970-01-01 UTC. Date/datetime cells are formatted the
    same way. Anything non-numeric is returned unchanged.
    """
    if isinstance(value, (dt.datetime, dt.date)):
        return _format_day(value)
    serial = as_number(value)
    if serial is None:
        return value
    try:
        moment = EXCEL_EPOCH + dt.timedelta(days=serial)
    except OverflowError:
        return value
    return _format_day(moment)


# ---------------------------------------------------------------------------
# Native scalars
# ---------------------------------------------------------------------------

def to_native(value: Any) -> Any:
    """Convert a decoded cell to a JSON-safe Python scalar.

    NaN/None become ``""``, numpy scalars become Python ones, integral
    floats become ints and timestamps become ISO text.
    """
    if value is None:
        return ""
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return ""
        return int(value) if value.is_integer() else value
    if isinstance(value, (str, int, bool)):
        return value
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return ""
    if isinstance(value, dt.datetime):
        if value.time() == dt.time(0, 0):
            return value.date().isoformat()
        return value.isoformat(sep=" ")
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def display_text(value: Any) -> str:
    """String form of a cell as the table shows it (``7.0`` shows as ``7``)."""
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)
