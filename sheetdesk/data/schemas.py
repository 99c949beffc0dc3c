"""
Dataset, query and page schemas shared by the pipeline.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional

from sheetdesk.config import DEFAULT_PAGE_SIZE
from sheetdesk.errors import ValidationWarning

Record = dict[str, Any]

_revisions = itertools.count(1)


# ---------------------------------------------------------------------------
# Datasets
# ---------------------------------------------------------------------------

@dataclass
class Dataset:
    """A named table: ordered headers plus one record per data row.

    Instances are versions: the store builds a new Dataset for every change
    instead of editing one in place, and each instance draws a fresh
    ``revision`` so cached query results can tell versions apart. The
    revision is not persisted and plays no part in equality.
    """
    name: str
    headers: list[str] = field(default_factory=list)
    rows: list[Record] = field(default_factory=list)
    revision: int = field(default_factory=lambda: next(_revisions), compare=False, repr=False)

    def complete(self, record: Record) -> Record:
        """Return a copy of *record* holding exactly this dataset's headers."""
        return {h: record.get(h, "") for h in self.headers}

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the stored ``{fileName, headers, data}`` layout."""
        return {
            "fileName": self.name,
            "headers": list(self.headers),
            "data": [dict(r) for r in self.rows],
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Dataset":
        headers = ["" if h is None else str(h) for h in payload.get("headers") or []]
        ds = cls(name=str(payload["fileName"]), headers=headers)
        ds.rows = [ds.complete(r) for r in payload.get("data") or []]
        return ds


@dataclass(frozen=True)
class DatasetSummary:
    name: str
    columns: int
    rows: int


# ---------------------------------------------------------------------------
# Query specification
# ---------------------------------------------------------------------------

class SortDirection(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
    NONE = "NONE"


@dataclass(frozen=True)
class QuerySpec:
    """Free-text filter, optional sort and page window over a dataset."""
    filter_text: str = ""
    sort_key: Optional[str] = None
    sort_direction: SortDirection = SortDirection.NONE
    page_size: int = DEFAULT_PAGE_SIZE
    page_number: int = 1

    @property
    def is_sorted(self) -> bool:
        return bool(self.sort_key) and self.sort_direction != SortDirection.NONE

    @property
    def sort_token(self) -> str:
        """The ``<header>-<ASC|DESC>`` form, or ``""`` when unsorted."""
        if not self.is_sorted:
            return ""
        return f"{self.sort_key}-{self.sort_direction.value}"

    def with_sort_token(self, token: str | None) -> "QuerySpec":
        """Apply a ``MEMBER-ASC`` style token; an empty token clears sorting.

        The header part may itself contain dashes, only the last one splits.
        """
        if not token:
            return replace(self, sort_key=None, sort_direction=SortDirection.NONE)
        key, sep, direction = token.rpartition("-")
        try:
            parsed = SortDirection(direction.upper())
        except ValueError:
            parsed = None
        if not sep or not key or parsed is None:
            raise ValidationWarning(f"Invalid sort token: {token!r} (expected <column>-ASC or <column>-DESC)")
        return replace(self, sort_key=key, sort_direction=parsed)


# ---------------------------------------------------------------------------
# Query results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PageRow:
    """A visible row and its position in the dataset's full row list."""
    index: int
    record: Record


@dataclass(frozen=True)
class Page:
    rows: tuple[PageRow, ...]
    total_rows: int          # rows left after filtering
    total_pages: int
    page_number: int
    page_size: int

    @property
    def records(self) -> list[Record]:
        return [r.record for r in self.rows]

    @property
    def indices(self) -> list[int]:
        return [r.index for r in self.rows]
