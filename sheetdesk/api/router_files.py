"""
File endpoints: upload, list, select, delete, export.
"""
from __future__ import annotations

from urllib.parse import quote

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from fastapi.responses import Response

from sheetdesk.api.dependencies import drain_notices, get_workspace, parse_confirm, to_http
from sheetdesk.api.response_models import ActionResponse, FileSummary, FilesResponse, UploadResponse
from sheetdesk.data.exporter import export_media_type
from sheetdesk.data.mutations import Confirmer, MutationOutcome
from sheetdesk.errors import SheetDeskError
from sheetdesk.workspace import Workspace

router = APIRouter(prefix="/api", tags=["files"])


@router.get("/files", response_model=FilesResponse)
def list_files(ws: Workspace = Depends(get_workspace)):
    """List stored files with their sizes."""
    files = [FileSummary(name=s.name, columns=s.columns, rows=s.rows) for s in ws.datasets()]
    return FilesResponse(files=files, count=len(files), active=ws.active)


@router.post("/files", response_model=UploadResponse)
async def upload_file(file: UploadFile = File(...), ws: Workspace = Depends(get_workspace)):
    """Upload a spreadsheet; a file with the same name is replaced."""
    if not file.filename:
        raise HTTPException(400, "Missing filename")
    replacing = ws.store.get(file.filename) is not None
    content = await file.read()
    try:
        dataset = ws.upload(content, file.filename)
    except SheetDeskError as exc:
        raise to_http(exc)
    return UploadResponse(
        status="updated" if replacing else "uploaded",
        file=FileSummary(name=dataset.name, columns=len(dataset.headers), rows=len(dataset.rows)),
        notices=drain_notices(ws),
    )


@router.post("/files/{name}/select", response_model=FileSummary)
def select_file(name: str, ws: Workspace = Depends(get_workspace)):
    """Make a stored file the active one."""
    try:
        dataset = ws.select(name)
    except SheetDeskError as exc:
        raise to_http(exc)
    return FileSummary(name=dataset.name, columns=len(dataset.headers), rows=len(dataset.rows))


@router.delete("/files/{name}", response_model=ActionResponse)
def delete_file(
    name: str,
    ws: Workspace = Depends(get_workspace),
    confirm: Confirmer = Depends(parse_confirm),
):
    """Delete a stored file (needs ?confirm=true)."""
    try:
        outcome = ws.delete_file(name, confirm=confirm)
    except SheetDeskError as exc:
        raise to_http(exc)
    return ActionResponse(
        status=outcome.value,
        affected=int(outcome == MutationOutcome.APPLIED),
        notices=drain_notices(ws),
    )


@router.get("/files/{name}/export")
def export_file(name: str, ws: Workspace = Depends(get_workspace)):
    """Download the full stored file as a spreadsheet."""
    try:
        content = ws.export(name)
    except SheetDeskError as exc:
        raise to_http(exc)
    return Response(
        content=content,
        media_type=export_media_type(name),
        headers={"Content-Disposition": f"attachment; filename*=UTF-8''{quote(name)}"},
    )
