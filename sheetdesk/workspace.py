"""
Workspace: the state one user's session holds around the pipeline.

Tracks the active dataset, the current query (with page clamping), and the
edit modal, and routes every outcome through the notification collaborator.
Pipeline errors are reported, then re-raised for the caller.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional, Protocol

from sheetdesk.data.exporter import export_dataset
from sheetdesk.data.mutations import (
    Confirmer,
    MutationOutcome,
    MutationResult,
    delete_row,
    edit_row,
)
from sheetdesk.data.parser import ingest
from sheetdesk.data.query import QueryEngine, clamp_page, count_matches, total_pages
from sheetdesk.data.schemas import Dataset, DatasetSummary, Page, QuerySpec, Record
from sheetdesk.data.store import RecordStore
from sheetdesk.errors import NotFoundError, SheetDeskError, ValidationWarning

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NoticeLevel(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Notice:
    level: NoticeLevel
    title: str
    message: str


class Notifier(Protocol):
    def notify(self, level: NoticeLevel, title: str, message: str) -> None: ...


class LogNotifier:
    """Sends every notice to the log."""

    def notify(self, level: NoticeLevel, title: str, message: str) -> None:
        logger.log(_LOG_LEVELS[level], "%s %s", title, message)


class RecordingNotifier(LogNotifier):
    """Logs notices and keeps them until drained (one request's worth)."""

    def __init__(self) -> None:
        self.notices: list[Notice] = []

    def notify(self, level: NoticeLevel, title: str, message: str) -> None:
        super().notify(level, title, message)
        self.notices.append(Notice(level, title, message))

    def drain(self) -> list[Notice]:
        notices, self.notices = self.notices, []
        return notices


def decline(title: str, text: str) -> bool:
    """Confirmer that always answers no."""
    return False


# ---------------------------------------------------------------------------
# Edit modal
# ---------------------------------------------------------------------------

class EditState(str, Enum):
    CLOSED = "closed"
    EDITING = "editing"
    SAVING = "saving"


class EditModal:
    """closed -> editing(row, draft) -> saving -> closed.

    A cancelled or failed save returns to editing with the draft intact.
    """

    def __init__(self) -> None:
        self.state = EditState.CLOSED
        self.row_index: Optional[int] = None
        self.draft: Record = {}

    def _require(self, state: EditState) -> None:
        if self.state != state:
            raise RuntimeError(f"Edit modal is {self.state.value}, expected {state.value}")

    def open(self, row_index: int, record: Record) -> None:
        self._require(EditState.CLOSED)
        self.state = EditState.EDITING
        self.row_index = row_index
        self.draft = dict(record)

    def set_field(self, name: str, value: Any) -> None:
        self._require(EditState.EDITING)
        self.draft[name] = value

    def begin_save(self) -> tuple[int, Record]:
        self._require(EditState.EDITING)
        self.state = EditState.SAVING
        return self.row_index, dict(self.draft)

    def finish_save(self, applied: bool) -> None:
        self._require(EditState.SAVING)
        if applied:
            self._reset()
        else:
            self.state = EditState.EDITING

    def close(self) -> None:
        self._require(EditState.EDITING)
        self._reset()

    def _reset(self) -> None:
        self.state = EditState.CLOSED
        self.row_index = None
        self.draft = {}


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------

class Workspace:
    """Active dataset, query state and modal state over a RecordStore."""

    def __init__(
        self,
        store: RecordStore,
        confirm: Confirmer = decline,
        notifier: Optional[Notifier] = None,
        engine: Optional[QueryEngine] = None,
    ) -> None:
        self.store = store
        self.confirm = confirm
        self.notifier = notifier or LogNotifier()
        self.engine = engine or QueryEngine()
        self.active: Optional[str] = None
        self.query = QuerySpec()
        self.editor = EditModal()
        self._count_key: Optional[tuple] = None
        self._count = 0

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _notify(self, level: NoticeLevel, title: str, message: str) -> None:
        self.notifier.notify(level, title, message)

    def _report(self, exc: SheetDeskError, message: str) -> None:
        level = NoticeLevel.WARNING if isinstance(exc, ValidationWarning) else NoticeLevel.ERROR
        self._notify(level, "Error!", f"{message} ({exc})")

    @property
    def dataset(self) -> Optional[Dataset]:
        return self.store.get(self.active) if self.active else None

    def _require_active(self) -> Dataset:
        dataset = self.dataset
        if dataset is None:
            exc = NotFoundError("No file selected")
            self._report(exc, "Load a file first.")
            raise exc
        return dataset

    def _activate(self, name: Optional[str]) -> None:
        self.active = name
        self.query = replace(self.query, page_number=1)
        self.editor = EditModal()

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def datasets(self) -> list[DatasetSummary]:
        return self.store.list_datasets()

    def upload(self, content: bytes, filename: str) -> Dataset:
        """Ingest an upload (replacing a same-named file) and make it active."""
        try:
            dataset, replaced = ingest(self.store, content, filename)
        except SheetDeskError as exc:
            self._report(exc, "Failed to process the file.")
            raise
        if replaced:
            self._notify(NoticeLevel.SUCCESS, "Updated!", "File has been updated.")
        else:
            self._notify(NoticeLevel.SUCCESS, "Success!", "File has been uploaded.")
        self._activate(dataset.name)
        return dataset

    def select(self, name: str) -> Dataset:
        try:
            dataset = self.store.require(name)
        except NotFoundError as exc:
            self._report(exc, "File not found.")
            raise
        self._activate(name)
        return dataset

    def delete_file(self, name: str, confirm: Optional[Confirmer] = None) -> MutationOutcome:
        """Remove a stored file; the active pointer is cleared only if it was this file."""
        confirm = confirm or self.confirm
        try:
            self.store.require(name)
            if not confirm("Are you sure?", f"Do you really want to delete the file: {name}?"):
                self._notify(NoticeLevel.INFO, "Cancelled", "The file was not deleted.")
                return MutationOutcome.CANCELLED
            self.store.remove(name)
        except SheetDeskError as exc:
            self._report(exc, "There was an issue deleting the file.")
            raise
        if self.active == name:
            self._activate(None)
        self._notify(NoticeLevel.SUCCESS, "Deleted!", "The file has been deleted.")
        return MutationOutcome.APPLIED

    def export(self, name: str) -> bytes:
        try:
            return export_dataset(self.store.require(name))
        except SheetDeskError as exc:
            self._report(exc, "There was an issue exporting the file.")
            raise

    # ------------------------------------------------------------------
    # Query state
    # ------------------------------------------------------------------

    def search(self, text: str) -> None:
        self.query = replace(self.query, filter_text=text or "")

    def sort(self, token: Optional[str]) -> None:
        try:
            self.query = self.query.with_sort_token(token)
        except ValidationWarning as exc:
            self._report(exc, "Cannot sort.")
            raise

    def set_page_size(self, size: int) -> None:
        if size <= 0:
            exc = ValidationWarning(f"Page size must be positive, got {size}")
            self._report(exc, "Cannot change page size.")
            raise exc
        self.query = replace(self.query, page_size=size)

    def go_to_page(self, number: int) -> None:
        self.query = replace(self.query, page_number=max(number, 1))

    def next_page(self) -> None:
        self.go_to_page(clamp_page(self.query.page_number + 1, self.page_count()))

    def previous_page(self) -> None:
        self.go_to_page(self.query.page_number - 1)

    def page_count(self) -> int:
        """Pages available for the current filter on the active dataset."""
        dataset = self.dataset
        if dataset is None:
            return 0
        key = (dataset.name, dataset.revision, self.query.filter_text)
        if key != self._count_key:
            self._count = count_matches(dataset.rows, self.query.filter_text)
            self._count_key = key
        return total_pages(self._count, self.query.page_size)

    def visible_page(self) -> Page:
        """Clamp the page number to what the filter leaves, then query."""
        pages = self.page_count()
        clamped = clamp_page(self.query.page_number, pages)
        if clamped != self.query.page_number:
            logger.debug("Clamping page %d -> %d", self.query.page_number, clamped)
            self.query = replace(self.query, page_number=clamped)
        return self.engine.page(self.dataset, self.query)

    # ------------------------------------------------------------------
    # Rows
    # ------------------------------------------------------------------

    def row(self, index: int) -> Record:
        dataset = self._require_active()
        if not 0 <= index < len(dataset.rows):
            exc = NotFoundError(f"Row {index} not found in {dataset.name}")
            self._report(exc, "Row not found.")
            raise exc
        return dict(dataset.rows[index])

    def begin_edit(self, index: int) -> Record:
        """Open the edit modal on a row of the full row list; returns the draft."""
        record = self.row(index)
        self.editor.open(index, record)
        return dict(self.editor.draft)

    def set_field(self, name: str, value: Any) -> None:
        self.editor.set_field(name, value)

    def cancel_edit(self) -> None:
        self.editor.close()

    def save_edit(self, confirm: Optional[Confirmer] = None) -> MutationResult:
        dataset = self._require_active()
        index, draft = self.editor.begin_save()
        try:
            result = edit_row(self.store, dataset.name, index, draft, confirm or self.confirm)
        except SheetDeskError as exc:
            self.editor.finish_save(applied=False)
            self._report(exc, "There was an issue updating the data.")
            raise
        self.editor.finish_save(result.applied)
        if result.applied:
            self._notify(NoticeLevel.SUCCESS, "Updated!", "The Member has been updated.")
        else:
            self._notify(NoticeLevel.INFO, "Cancelled", "The Member was not updated.")
        return result

    def delete_member(self, member: Any, confirm: Optional[Confirmer] = None) -> MutationResult:
        dataset = self._require_active()
        try:
            result = delete_row(self.store, dataset.name, member, confirm or self.confirm)
        except ValidationWarning as exc:
            self._notify(NoticeLevel.WARNING, "Member id is not correct!", f"Cannot delete the member! ({exc})")
            raise
        except SheetDeskError as exc:
            self._report(exc, "There was an issue deleting the Member.")
            raise
        if result.applied:
            self._notify(NoticeLevel.SUCCESS, "Deleted!", "The Member has been deleted.")
        else:
            self._notify(NoticeLevel.INFO, "Cancelled", "The Member was not deleted.")
        return result
