"""FastAPI application exposing drivesearch over HTTP."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from drivesearch import __version__
from drivesearch.config import AppConfig
from drivesearch.errors import SnapshotError, SyncError
from drivesearch.index.search import Matcher
from drivesearch.index.storage import load_snapshot
from drivesearch.sync.client import DriveSearchBinary

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="drivesearch", version=__version__)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.state.config = AppConfig()
app.state.matcher = None


class SearchPayload(BaseModel):
    query: str
    limit: int = 20


def _get_matcher() -> Matcher:
    """Return the long-lived matcher, rebuilding it if the snapshot path changed."""
    config: AppConfig = app.state.config
    matcher: Matcher | None = app.state.matcher
    if matcher is None or matcher.cache.storage_path != config.resolve_storage_path():
        matcher = Matcher.from_config(config)
        app.state.matcher = matcher
    return matcher


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/search")
def search_files(payload: SearchPayload) -> dict[str, List[dict[str, Any]]]:
    results = _get_matcher().search(payload.query, limit=payload.limit)
    return {"items": [result.to_item() for result in results]}


@app.post("/sync")
async def sync_files() -> dict[str, str]:
    client = DriveSearchBinary.from_config(app.state.config)
    try:
        await asyncio.to_thread(client.sync)
    except SyncError as exc:
        LOGGER.error("Sync failed: %s", exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc

    _get_matcher().invalidate()
    return {"status": "ok"}


@app.get("/status")
def snapshot_status() -> dict[str, Any]:
    resolved: Path = app.state.config.resolve_storage_path()
    try:
        snapshot = load_snapshot(resolved)
    except SnapshotError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    if snapshot is None:
        return {"path": str(resolved), "synced": False, "file_count": 0, "folder_count": 0}

    return {
        "path": str(resolved),
        "synced": True,
        "file_count": len(snapshot.files),
        "folder_count": len(snapshot.folders),
        "last_sync": snapshot.last_sync,
    }
