"""
Row endpoints on the active file: paged query, edit, delete by member, mail preview.
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Query

from sheetdesk.api.dependencies import drain_notices, get_workspace, parse_confirm, to_http
from sheetdesk.api.response_models import (
    ActionResponse, MailPreview, MailRequest, RowModel, RowsResponse,
)
from sheetdesk.config import PAGE_SIZE_CHOICES, SORTABLE_COLUMNS
from sheetdesk.data.mutations import Confirmer
from sheetdesk.errors import SheetDeskError
from sheetdesk.mail import mail_form_for, render_mail_html
from sheetdesk.workspace import EditState, NoticeLevel, Workspace

router = APIRouter(prefix="/api", tags=["rows"])


@router.get("/rows", response_model=RowsResponse)
def list_rows(
    search: Optional[str] = Query(None, description="Free-text filter"),
    sort: Optional[str] = Query(None, description="<column>-ASC|DESC, empty to clear"),
    page: Optional[int] = Query(None, ge=1),
    page_size: Optional[int] = Query(None, ge=1),
    ws: Workspace = Depends(get_workspace),
):
    """Visible page of the active file. Omitted params keep their last value."""
    try:
        if search is not None:
            ws.search(search)
        if sort is not None:
            ws.sort(sort)
        if page_size is not None:
            ws.set_page_size(page_size)
        if page is not None:
            ws.go_to_page(page)
        result = ws.visible_page()
    except SheetDeskError as exc:
        raise to_http(exc)

    dataset = ws.dataset
    headers = list(dataset.headers) if dataset else []
    return RowsResponse(
        file=ws.active,
        headers=headers,
        sortable=[h for h in headers if h in SORTABLE_COLUMNS],
        rows=[RowModel(index=r.index, record=r.record) for r in result.rows],
        page=result.page_number,
        page_size=result.page_size,
        page_size_choices=list(PAGE_SIZE_CHOICES),
        total_rows=result.total_rows,
        total_pages=result.total_pages,
        search=ws.query.filter_text,
        sort=ws.query.sort_token,
    )


@router.put("/rows/{index}", response_model=ActionResponse)
def edit_row(
    index: int,
    record: dict[str, Any] = Body(...),
    ws: Workspace = Depends(get_workspace),
    confirm: Confirmer = Depends(parse_confirm),
):
    """Replace fields of a row, addressed by its index in the full file."""
    try:
        if ws.editor.state == EditState.EDITING:
            ws.cancel_edit()
        ws.begin_edit(index)
        for field, value in record.items():
            ws.set_field(field, value)
        result = ws.save_edit(confirm=confirm)
    except SheetDeskError as exc:
        raise to_http(exc)
    finally:
        if ws.editor.state == EditState.EDITING:
            ws.cancel_edit()
    return ActionResponse(status=result.outcome.value, affected=result.affected, notices=drain_notices(ws))


@router.delete("/members/{member}", response_model=ActionResponse)
def delete_member(
    member: str,
    ws: Workspace = Depends(get_workspace),
    confirm: Confirmer = Depends(parse_confirm),
):
    """Delete every row of the active file with this MEMBER id."""
    try:
        result = ws.delete_member(member, confirm=confirm)
    except SheetDeskError as exc:
        raise to_http(exc)
    return ActionResponse(status=result.outcome.value, affected=result.affected, notices=drain_notices(ws))


@router.post("/rows/{index}/mail", response_model=MailPreview)
def preview_mail(
    index: int,
    req: Optional[MailRequest] = None,
    ws: Workspace = Depends(get_workspace),
):
    """Mail form pre-filled from the row, plus its HTML preview. Nothing is sent."""
    try:
        row = ws.row(index)
    except SheetDeskError as exc:
        raise to_http(exc)
    req = req or MailRequest()
    form = mail_form_for(row)
    form.sender = req.sender
    form.date = req.date
    form.subject = req.subject
    form.message = req.message
    form.attachment = req.attachment
    html = render_mail_html(form, row)
    ws.notifier.notify(NoticeLevel.INFO, "Info", "In a real application, this would send the email.")
    return MailPreview(form=form.to_dict(), html=html, notices=drain_notices(ws))
