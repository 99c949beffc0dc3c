"""Unit tests for cell normalisation."""

from __future__ import annotations

import datetime as dt

import numpy as np
import pandas as pd
import pytest

from sheetdesk.data.normalize import (
    as_number,
    coerce_text,
    display_text,
    is_date_header,
    normalize_date,
    to_native,
)


@pytest.mark.parametrize(
    ("serial", "expected"),
    [
        (25569, "01-01-1970"),
        (25570, "02-01-1970"),
        (25569.75, "01-01-1970"),
        ("25569", "01-01-1970"),
        (32874, "01-01-1990"),
    ],
)
def test_normalize_date_converts_serials(serial, expected) -> None:
    """Numeric serials should become DD-MM-YYYY strings."""
    assert normalize_date(serial) == expected


def test_normalize_date_leaves_non_numeric_values() -> None:
    """Text, blanks and booleans should pass through unchanged."""
    assert normalize_date("unknown") == "unknown"
    assert normalize_date("") == ""
    assert normalize_date(True) is True


def test_normalize_date_formats_date_objects() -> None:
    """Decoded date cells should use the same DD-MM-YYYY layout."""
    assert normalize_date(dt.date(1990, 5, 4)) == "04-05-1990"
    assert normalize_date(dt.datetime(2001, 12, 31, 8, 30)) == "31-12-2001"


def test_normalize_date_keeps_out_of_range_serials() -> None:
    """Serials beyond the representable range should be returned as is."""
    assert normalize_date(1e12) == 1e12


def test_is_date_header_matches_substring() -> None:
    """Any header containing DOB should be treated as a date column."""
    assert is_date_header("DOB")
    assert is_date_header("SPOUSE DOB")
    assert not is_date_header("dob")
    assert not is_date_header("NAME")


def test_as_number_reads_numeric_text_only() -> None:
    """Numeric strings count as numbers, other text and booleans do not."""
    assert as_number(" 42 ") == 42.0
    assert as_number("-1.5e2") == -150.0
    assert as_number(np.int64(3)) == 3.0
    assert as_number("12a") is None
    assert as_number("") is None
    assert as_number(False) is None
    assert as_number(float("nan")) is None


def test_coerce_text_turns_numeric_text_into_numbers() -> None:
    """Numeric text should become int or float, other values stay."""
    assert coerce_text("007") == 7
    assert coerce_text("1.50") == 1.5
    assert coerce_text("2.0") == 2
    assert coerce_text("abc") == "abc"
    assert coerce_text(5) == 5


def test_to_native_produces_json_safe_scalars() -> None:
    """numpy, NaN and timestamp values should become plain Python values."""
    assert to_native(np.int64(5)) == 5
    assert isinstance(to_native(np.int64(5)), int)
    assert to_native(3.0) == 3
    assert to_native(float("nan")) == ""
    assert to_native(None) == ""
    assert to_native(pd.NaT) == ""
    assert to_native(dt.datetime(2020, 1, 2)) == "2020-01-02"
    assert to_native(dt.datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02 03:04:05"
    assert to_native(pd.Timestamp("2020-01-02")) == "2020-01-02"


def test_display_text_matches_table_rendering() -> None:
    """Integral floats drop their fraction and booleans render lower case."""
    assert display_text(7.0) == "7"
    assert display_text(1.5) == "1.5"
    assert display_text(True) == "true"
    assert display_text(None) == ""
