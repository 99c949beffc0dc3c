"""
Key-value persistence: the local-storage stand-in the record store writes to.

Values are opaque text (the store keeps JSON in them). Every write replaces
the whole value for its key.
"""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Optional, Protocol

from sheetdesk.config import STORAGE_FOLDER
from sheetdesk.errors import PersistenceError


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """Dict-backed storage; nothing survives the process."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.items.pop(key, None)


class FileStorage:
    """One ``<key>.json`` file per key under *folder*.

    Writes go to a temp file first and are swapped in with ``os.replace`` so
    a crash mid-write never leaves a truncated collection behind.
    """

    def __init__(self, folder: Path = STORAGE_FOLDER) -> None:
        self.folder = Path(folder)

    def _path(self, key: str) -> Path:
        safe_key = re.sub(r"[^\w\-. ()]", "_", key)
        return self.folder / f"{safe_key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise PersistenceError(f"Cannot read {path}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".json.tmp")
        try:
            self.folder.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, path)
        except OSError as exc:
            raise PersistenceError(f"Cannot write {path}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Cannot remove {path}: {exc}") from exc
