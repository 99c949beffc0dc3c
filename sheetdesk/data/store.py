"""
RecordStore: named datasets mirrored to key-value storage.

Every write reads the whole stored collection, applies the change to it,
writes the whole collection back and only then swaps the in-memory copy,
so a failed write never leaves memory ahead of storage.
"""
from __future__ import annotations

import json
import logging
from typing import Optional

from sheetdesk.config import STORAGE_KEY
from sheetdesk.data.schemas import Dataset, DatasetSummary, Record
from sheetdesk.data.storage import KeyValueStorage
from sheetdesk.errors import NotFoundError, PersistenceError

logger = logging.getLogger(__name__)


def _index_of(datasets: list[Dataset], name: str) -> Optional[int]:
    return next((i for i, d in enumerate(datasets) if d.name == name), None)


class RecordStore:
    """In-memory dataset list backed by a single storage key."""

    def __init__(self, storage: KeyValueStorage, key: str = STORAGE_KEY) -> None:
        self.storage = storage
        self.key = key
        self._datasets: list[Dataset] = []
        self._loaded = False

    # ------------------------------------------------------------------
    # Loading & committing
    # ------------------------------------------------------------------

    def load(self) -> "RecordStore":
        """Read every stored dataset into memory."""
        self._datasets = self._read_collection()
        self._loaded = True
        logger.info("Loaded %d dataset(s) from storage key '%s'", len(self._datasets), self.key)
        return self

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def _read_collection(self) -> list[Dataset]:
        text = self.storage.get_item(self.key)
        if not text:
            return []
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise PersistenceError(f"Stored collection '{self.key}' is not valid JSON: {exc}") from exc
        if not isinstance(payload, list):
            raise PersistenceError(f"Stored collection '{self.key}' is not a list")
        try:
            return [Dataset.from_payload(item) for item in payload]
        except (KeyError, TypeError, AttributeError) as exc:
            raise PersistenceError(f"Stored collection '{self.key}' is malformed: {exc}") from exc

    def _commit(self, datasets: list[Dataset]) -> None:
        if datasets:
            text = json.dumps([d.to_payload() for d in datasets], default=str)
            self.storage.set_item(self.key, text)
        else:
            self.storage.remove_item(self.key)
        self._datasets = datasets

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def list_datasets(self) -> list[DatasetSummary]:
        return [DatasetSummary(d.name, len(d.headers), len(d.rows)) for d in self._datasets]

    def names(self) -> list[str]:
        return [d.name for d in self._datasets]

    def get(self, name: str) -> Optional[Dataset]:
        idx = _index_of(self._datasets, name)
        return None if idx is None else self._datasets[idx]

    def require(self, name: str) -> Dataset:
        """Like get(), but raises NotFoundError for unknown names."""
        dataset = self.get(name)
        if dataset is None:
            raise NotFoundError(f"File not found: {name}")
        return dataset

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def upsert(self, dataset: Dataset) -> bool:
        """Add a dataset, replacing any with the same name entirely.

        Returns True when an existing dataset was replaced.
        """
        collection = self._read_collection()
        fresh = Dataset(
            name=dataset.name,
            headers=list(dataset.headers),
            rows=[dataset.complete(r) for r in dataset.rows],
        )
        idx = _index_of(collection, dataset.name)
        if idx is None:
            collection.append(fresh)
        else:
            collection[idx] = fresh
        self._commit(collection)
        logger.info("%s %s (%d rows)", "Replaced" if idx is not None else "Added", dataset.name, len(fresh.rows))
        return idx is not None

    def remove(self, name: str) -> None:
        collection = self._read_collection()
        idx = _index_of(collection, name)
        if idx is None:
            raise NotFoundError(f"File not found: {name}")
        del collection[idx]
        self._commit(collection)
        logger.info("Removed %s", name)

    def replace_rows(self, name: str, rows: list[Record]) -> Dataset:
        """Swap the rows of a dataset, keeping its headers. Returns the new version."""
        collection = self._read_collection()
        idx = _index_of(collection, name)
        if idx is None:
            raise NotFoundError(f"File not found: {name}")
        current = collection[idx]
        updated = Dataset(
            name=current.name,
            headers=list(current.headers),
            rows=[current.complete(r) for r in rows],
        )
        collection[idx] = updated
        self._commit(collection)
        logger.info("Committed %d rows to %s", len(updated.rows), name)
        return updated
