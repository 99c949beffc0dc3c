"""
Pydantic request/response schemas for the API.
"""
from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel

from sheetdesk.workspace import Notice


class NoticeModel(BaseModel):
    level: str
    title: str
    message: str

    @classmethod
    def from_notice(cls, notice: Notice) -> "NoticeModel":
        return cls(level=notice.level.value, title=notice.title, message=notice.message)


class HealthResponse(BaseModel):
    status: str
    files: int
    active: Optional[str]
    rows: int


class FileSummary(BaseModel):
    name: str
    columns: int
    rows: int


class FilesResponse(BaseModel):
    files: list[FileSummary]
    count: int
    active: Optional[str]


class UploadResponse(BaseModel):
    status: str  # "uploaded" | "updated"
    file: FileSummary
    notices: list[NoticeModel]


class ActionResponse(BaseModel):
    status: str  # "applied" | "cancelled"
    affected: int = 0
    notices: list[NoticeModel]


class RowModel(BaseModel):
    index: int
    record: dict[str, Any]


class RowsResponse(BaseModel):
    file: Optional[str]
    headers: list[str]
    sortable: list[str]
    rows: list[RowModel]
    page: int
    page_size: int
    page_size_choices: list[int]
    total_rows: int
    total_pages: int
    search: str
    sort: str


class MailRequest(BaseModel):
    sender: str = ""
    date: str = ""
    subject: str = ""
    message: str = ""
    attachment: str = ""


class MailPreview(BaseModel):
    form: dict[str, str]
    html: str
    sent: bool = False
    notices: list[NoticeModel]
