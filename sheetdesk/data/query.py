"""
Query engine: free-text filter, numeric-or-text sort, pagination.

All functions here are pure. Page-number clamping belongs to the caller:
compute ``total_pages`` from the filtered count, clamp, then ask for the
page. ``QueryEngine`` only adds memoisation on top of ``run_query``.
"""
from __future__ import annotations

import functools
import math
import unicodedata
from typing import Any, Optional, Sequence

from sheetdesk.data.normalize import as_number, display_text
from sheetdesk.data.schemas import Dataset, Page, PageRow, QuerySpec, Record, SortDirection


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

def row_matches(record: Record, needle: str) -> bool:
    """True when any field's lower-cased text contains *needle* (lower-cased)."""
    needle = needle.lower()
    return any(needle in display_text(v).lower() for v in record.values())


def filter_rows(rows: Sequence[Record], text: str) -> list[PageRow]:
    """Keep matching rows, tagged with their index in *rows*."""
    if not text:
        return [PageRow(i, r) for i, r in enumerate(rows)]
    return [PageRow(i, r) for i, r in enumerate(rows) if row_matches(r, text)]


def count_matches(rows: Sequence[Record], text: str) -> int:
    if not text:
        return len(rows)
    return sum(1 for r in rows if row_matches(r, text))


# ---------------------------------------------------------------------------
# Sort
# ---------------------------------------------------------------------------

def collation_key(text: str) -> tuple[str, str, str]:
    """Locale-style ordering key: accents and case only break ties.

    Lower case sorts before upper case on a tie, independent of the process
    locale.
    """
    base = "".join(
        c for c in unicodedata.normalize("NFKD", text) if not unicodedata.combining(c)
    ).casefold()
    return base, text.casefold(), text.swapcase()


def compare_values(a: Any, b: Any) -> int:
    """Numeric comparison when both sides are numbers, text collation otherwise."""
    x, y = as_number(a), as_number(b)
    if x is not None and y is not None:
        return (x > y) - (x < y)
    ka = collation_key(display_text(a))
    kb = collation_key(display_text(b))
    return (ka > kb) - (ka < kb)


def sort_rows(rows: Sequence[PageRow], key: Optional[str], direction: SortDirection) -> list[PageRow]:
    """Stable sort on ``record[key]``; no key or NONE keeps the input order."""
    if not key or direction == SortDirection.NONE:
        return list(rows)
    cmp = functools.cmp_to_key(lambda p, q: compare_values(p.record.get(key), q.record.get(key)))
    return sorted(rows, key=cmp, reverse=direction == SortDirection.DESC)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def total_pages(row_count: int, page_size: int) -> int:
    if page_size <= 0:
        return 0
    return math.ceil(row_count / page_size)


def clamp_page(page_number: int, pages: int) -> int:
    """Pull a page number back inside ``1..pages`` (left alone when pages is 0)."""
    if pages > 0 and page_number > pages:
        return pages
    return max(page_number, 1)


def run_query(rows: Sequence[Record], spec: QuerySpec) -> Page:
    """Filter, sort and slice *rows*. Never mutates them; returned records are copies."""
    matched = filter_rows(rows, spec.filter_text)
    if spec.is_sorted:
        matched = sort_rows(matched, spec.sort_key, spec.sort_direction)

    if spec.page_size <= 0 or spec.page_number < 1:
        window: list[PageRow] = []
    else:
        start = (spec.page_number - 1) * spec.page_size
        window = matched[start:start + spec.page_size]

    return Page(
        rows=tuple(PageRow(p.index, dict(p.record)) for p in window),
        total_rows=len(matched),
        total_pages=total_pages(len(matched), spec.page_size),
        page_number=spec.page_number,
        page_size=spec.page_size,
    )


# ---------------------------------------------------------------------------
# Memoised engine
# ---------------------------------------------------------------------------

class QueryEngine:
    """Caches the last page; recomputes only when dataset version or query change."""

    def __init__(self) -> None:
        self._key: Optional[tuple] = None
        self._page: Optional[Page] = None
        self.computations = 0

    def page(self, dataset: Optional[Dataset], spec: QuerySpec) -> Page:
        if dataset is None:
            key = (None, None, spec)
            rows: Sequence[Record] = ()
        else:
            key = (dataset.name, dataset.revision, spec)
            rows = dataset.rows
        if key != self._key or self._page is None:
            self._page = run_query(rows, spec)
            self._key = key
            self.computations += 1
        return self._page

    def invalidate(self) -> None:
        self._key = None
        self._page = None
