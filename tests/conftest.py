"""Shared fixtures for drivesearch tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, List

import pytest


def make_file(name: str, folder: str = "Misc", **overrides: Any) -> Dict[str, Any]:
    """Build a raw file entry as the sync binary writes it."""
    file_id = overrides.pop("id", f"id-{name}")
    entry: Dict[str, Any] = {
        "id": file_id,
        "name": name,
        "web_view_link": f"https://drive.google.com/file/d/{file_id}/view",
        "mime_type": "application/octet-stream",
        "parents": [f"folder-{folder}"],
        "parent_folder_name": folder,
    }
    entry.update(overrides)
    return entry


def make_snapshot(files: List[Dict[str, Any]]) -> Dict[str, Any]:
    folders = {f["parents"][0]: f["parent_folder_name"] for f in files if f["parents"]}
    return {
        "files": files,
        "folders": folders,
        "last_sync": "2024-05-01T09:30:00Z",
        "sync_token": None,
    }


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    return tmp_path / "fuzzy-drive-search" / "drive_files.json"


@pytest.fixture
def write_snapshot(snapshot_path: Path) -> Callable[[List[Dict[str, Any]]], Path]:
    """Write a snapshot containing the given raw file entries."""

    def _write(files: List[Dict[str, Any]]) -> Path:
        snapshot_path.parent.mkdir(parents=True, exist_ok=True)
        snapshot_path.write_text(
            json.dumps(make_snapshot(files), ensure_ascii=False), encoding="utf-8"
        )
        return snapshot_path

    return _write


@pytest.fixture
def budget_files() -> List[Dict[str, Any]]:
    return [
        make_file(
            "Budget 2024.xlsx",
            "Finance",
            keywords=["予算"],
            romaji_keywords=["yosan"],
            mime_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ),
        make_file("notes.txt", "Misc", mime_type="text/plain"),
    ]
