"""
Meta endpoints: health.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from sheetdesk.api.dependencies import get_workspace
from sheetdesk.api.response_models import HealthResponse
from sheetdesk.workspace import Workspace

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/health", response_model=HealthResponse)
def health(ws: Workspace = Depends(get_workspace)):
    dataset = ws.dataset
    return HealthResponse(
        status="ok",
        files=len(ws.datasets()),
        active=ws.active,
        rows=len(dataset.rows) if dataset else 0,
    )
