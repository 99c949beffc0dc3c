"""
Row mutations: edit one row, delete rows by member id.

Both ask the confirmation collaborator before committing through the
record store. A declined confirmation is reported as CANCELLED and leaves
the dataset untouched.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Sequence

from sheetdesk.config import MEMBER_COLUMN, NAME_COLUMN
from sheetdesk.data.normalize import as_number, display_text
from sheetdesk.data.schemas import Dataset, Record
from sheetdesk.data.store import RecordStore
from sheetdesk.errors import NotFoundError, ValidationWarning

logger = logging.getLogger(__name__)

# (title, text) -> confirmed?
Confirmer = Callable[[str, str], bool]


class MutationOutcome(str, Enum):
    APPLIED = "applied"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class MutationResult:
    outcome: MutationOutcome
    dataset: Dataset        # current version (unchanged when cancelled)
    affected: int = 0

    @property
    def applied(self) -> bool:
        return self.outcome == MutationOutcome.APPLIED


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

def same_identifier(a: Any, b: Any) -> bool:
    """Member ids match numerically when both are numbers (``"7" == 7``)."""
    x, y = as_number(a), as_number(b)
    if x is not None and y is not None:
        return x == y
    return display_text(a) == display_text(b)


def require_member_id(member: Any) -> float:
    number = as_number(member)
    if number is None:
        raise ValidationWarning(f"Member id is not correct: {display_text(member)!r}")
    return number


def locate_row(rows: Sequence[Record], member: Any, name: Any) -> Optional[int]:
    """Index of the first row with this MEMBER and NAME.

    Ambiguous when a dataset repeats a member/name pair; prefer the row
    index carried by query results.
    """
    for i, row in enumerate(rows):
        if same_identifier(row.get(MEMBER_COLUMN), member) and display_text(row.get(NAME_COLUMN)) == display_text(name):
            return i
    return None


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------

def edit_row(
    store: RecordStore,
    name: str,
    index: int,
    record: Record,
    confirm: Confirmer,
) -> MutationResult:
    """Replace the row at *index* of the full (unfiltered) row list.

    Fields missing from *record* keep their stored values; keys that are
    not headers are dropped.
    """
    dataset = store.require(name)
    if not 0 <= index < len(dataset.rows):
        raise NotFoundError(f"Row {index} not found in {name}")

    new_record = dataset.complete({**dataset.rows[index], **record})
    if MEMBER_COLUMN in dataset.headers:
        require_member_id(new_record[MEMBER_COLUMN])

    label = display_text(new_record.get(NAME_COLUMN, ""))
    if not confirm("Are you sure?", f"Do you really want to update member: {label}?"):
        logger.info("Edit of %s row %d cancelled", name, index)
        return MutationResult(MutationOutcome.CANCELLED, dataset)

    rows = list(dataset.rows)
    rows[index] = new_record
    updated = store.replace_rows(name, rows)
    return MutationResult(MutationOutcome.APPLIED, updated, affected=1)


def delete_row(
    store: RecordStore,
    name: str,
    member: Any,
    confirm: Confirmer,
) -> MutationResult:
    """Remove every row whose MEMBER equals *member*; it must be numeric."""
    require_member_id(member)
    dataset = store.require(name)

    remaining = [r for r in dataset.rows if not same_identifier(r.get(MEMBER_COLUMN), member)]
    removed = len(dataset.rows) - len(remaining)

    match = next((r for r in dataset.rows if same_identifier(r.get(MEMBER_COLUMN), member)), None)
    label = display_text(match.get(NAME_COLUMN, member)) if match else display_text(member)
    if not confirm("Are you sure?", f"Do you really want to delete member: {label}?"):
        logger.info("Delete of member %s from %s cancelled", display_text(member), name)
        return MutationResult(MutationOutcome.CANCELLED, dataset)

    updated = store.replace_rows(name, remaining)
    logger.info("Deleted %d row(s) with member %s from %s", removed, display_text(member), name)
    return MutationResult(MutationOutcome.APPLIED, updated, affected=removed)
