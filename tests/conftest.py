"""Shared fixtures for SheetDesk tests."""

from __future__ import annotations

import pytest

from helpers import HEADERS, ScriptedConfirm
from sheetdesk.data.schemas import Dataset
from sheetdesk.data.storage import MemoryStorage
from sheetdesk.data.store import RecordStore
from sheetdesk.workspace import RecordingNotifier, Workspace


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def store(storage: MemoryStorage) -> RecordStore:
    return RecordStore(storage).load()


@pytest.fixture
def members() -> Dataset:
    return Dataset(
        name="members.xlsx",
        headers=list(HEADERS),
        rows=[
            {"MEMBER": 7, "NAME": "Ana", "ADDRESS": "Oak 1", "DOB": "02-03-1980"},
            {"MEMBER": 3, "NAME": "bob", "ADDRESS": "elm 9", "DOB": "15-07-1992"},
            {"MEMBER": 7, "NAME": "Cara", "ADDRESS": "Pine 4", "DOB": ""},
            {"MEMBER": 12, "NAME": "Dan Smith", "ADDRESS": "Birch 2", "DOB": "30-11-1975"},
        ],
    )


@pytest.fixture
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(answer=True)


@pytest.fixture
def workspace(store: RecordStore, members: Dataset, confirm: ScriptedConfirm) -> Workspace:
    store.upsert(members)
    return Workspace(store, confirm=confirm, notifier=RecordingNotifier())
