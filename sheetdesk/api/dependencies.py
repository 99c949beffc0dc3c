"""
FastAPI dependencies: Workspace singleton, confirmation answers, error mapping.
"""
from __future__ import annotations

from fastapi import HTTPException, Query

from sheetdesk.api.response_models import NoticeModel
from sheetdesk.data.mutations import Confirmer
from sheetdesk.errors import (
    NotFoundError,
    ParseError,
    PersistenceError,
    SheetDeskError,
    ValidationWarning,
)
from sheetdesk.workspace import RecordingNotifier, Workspace

# ---------------------------------------------------------------------------
# Global workspace singleton (set during startup)
# ---------------------------------------------------------------------------
_workspace: Workspace | None = None


def set_workspace(workspace: Workspace) -> None:
    global _workspace
    if not isinstance(workspace.notifier, RecordingNotifier):
        workspace.notifier = RecordingNotifier()
    _workspace = workspace


def get_workspace() -> Workspace:
    """The shared workspace, with notices from earlier requests discarded."""
    if _workspace is None or not _workspace.store.is_loaded:
        raise HTTPException(503, "Storage not loaded yet")
    _workspace.notifier.drain()
    return _workspace


def drain_notices(ws: Workspace) -> list[NoticeModel]:
    """Notices raised while handling the current request."""
    return [NoticeModel.from_notice(n) for n in ws.notifier.drain()]


# ---------------------------------------------------------------------------
# Confirmation: the client asks the user, then passes the answer along
# ---------------------------------------------------------------------------

def parse_confirm(
    confirm: bool = Query(False, description="The user confirmed this change"),
) -> Confirmer:
    def answer(title: str, text: str) -> bool:
        return confirm
    return answer


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

_STATUS = {
    ParseError: 400,
    ValidationWarning: 400,
    NotFoundError: 404,
    PersistenceError: 500,
}


def to_http(exc: SheetDeskError) -> HTTPException:
    status = next((code for kind, code in _STATUS.items() if isinstance(exc, kind)), 500)
    return HTTPException(status, str(exc))
