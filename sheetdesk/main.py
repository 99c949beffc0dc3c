"""
SheetDesk: FastAPI app factory with startup storage loading.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sheetdesk import __version__
from sheetdesk.api.dependencies import set_workspace
from sheetdesk.api.router_files import router as files_router
from sheetdesk.api.router_meta import router as meta_router
from sheetdesk.api.router_rows import router as rows_router
from sheetdesk.config import STORAGE_FOLDER
from sheetdesk.data.storage import FileStorage
from sheetdesk.data.store import RecordStore
from sheetdesk.workspace import RecordingNotifier, Workspace

logger = logging.getLogger(__name__)


def build_workspace() -> Workspace:
    """Workspace over the on-disk storage folder, loaded and ready."""
    store = RecordStore(FileStorage(STORAGE_FOLDER)).load()
    return Workspace(store, notifier=RecordingNotifier())


def create_app(workspace: Optional[Workspace] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load stored files at startup."""
        ws = workspace or build_workspace()
        if not ws.store.is_loaded:
            ws.store.load()
        set_workspace(ws)
        logger.info("SheetDesk ready: %d stored file(s)", len(ws.datasets()))
        yield

    app = FastAPI(
        title="SheetDesk API",
        description="Spreadsheet import, search, edit and export",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(meta_router)
    app.include_router(files_router)
    app.include_router(rows_router)
    return app


app = create_app()
