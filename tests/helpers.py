"""Builders shared across test modules."""

from __future__ import annotations

import io
from typing import Any, Sequence

from openpyxl import Workbook

HEADERS = ["MEMBER", "NAME", "ADDRESS", "DOB"]


def xlsx_bytes(rows: Sequence[Sequence[Any]], title: str = "Sheet1") -> bytes:
    """Build an xlsx workbook whose first sheet holds *rows*."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(list(row))
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def member_rows(count: int) -> list[dict[str, Any]]:
    return [
        {"MEMBER": 1000 + i, "NAME": f"Member {i}", "ADDRESS": f"{i} Main St", "DOB": "01-01-1970"}
        for i in range(count)
    ]


class ScriptedConfirm:
    """Confirmer that answers from a fixed value and records each prompt."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.prompts: list[tuple[str, str]] = []

    def __call__(self, title: str, text: str) -> bool:
        self.prompts.append((title, text))
        return self.answer
