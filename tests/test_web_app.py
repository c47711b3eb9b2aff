"""Tests for the FastAPI web application."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from conftest import make_file
from drivesearch.config import AppConfig
from drivesearch.errors import SyncError
from drivesearch.web.app import _get_matcher, app


client = TestClient(app)


@pytest.fixture(autouse=True)
def web_config(snapshot_path: Path) -> Iterator[AppConfig]:
    """Point the app at a per-test snapshot path."""
    previous = app.state.config
    config = AppConfig(storage_path=snapshot_path, binary_path=Path("/opt/fds"))
    app.state.config = config
    app.state.matcher = None
    yield config
    app.state.config = previous
    app.state.matcher = None


class TestGetMatcher:
    """Tests for the shared matcher."""

    def test_reused_between_calls(self) -> None:
        assert _get_matcher() is _get_matcher()

    def test_rebuilt_when_path_changes(self, tmp_path: Path) -> None:
        first = _get_matcher()
        app.state.config = AppConfig(storage_path=tmp_path / "other.json")

        second = _get_matcher()

        assert second is not first
        assert second.cache.storage_path == tmp_path / "other.json"


class TestSearchEndpoint:
    """Tests for POST /search endpoint."""

    def test_search_success(self, write_snapshot, budget_files) -> None:
        write_snapshot(budget_files)

        response = client.post("/search", json={"query": "budget"})

        assert response.status_code == 200
        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["title"] == "Budget 2024.xlsx"
        assert items[0]["subtitle"] == "Finance"
        assert items[0]["uid"] == "id-Budget 2024.xlsx"

    def test_search_empty_query(self) -> None:
        """Blank queries return no items rather than an error."""
        response = client.post("/search", json={"query": "   "})

        assert response.status_code == 200
        assert response.json() == {"items": []}

    def test_search_missing_snapshot(self) -> None:
        response = client.post("/search", json={"query": "budget"})

        assert response.status_code == 200
        assert response.json() == {"items": []}

    def test_search_limit(self, write_snapshot) -> None:
        write_snapshot([make_file(f"report {i}.pdf") for i in range(30)])

        assert len(client.post("/search", json={"query": "report"}).json()["items"]) == 20
        assert len(client.post("/search", json={"query": "report", "limit": 4}).json()["items"]) == 4

    def test_search_zero_limit(self, write_snapshot) -> None:
        """A zero limit returns nothing, same as Matcher.search."""
        write_snapshot([make_file(f"report {i}.pdf") for i in range(3)])

        response = client.post("/search", json={"query": "report", "limit": 0})

        assert response.status_code == 200
        assert response.json() == {"items": []}

    def test_search_missing_query(self) -> None:
        response = client.post("/search", json={})

        assert response.status_code == 422


class TestSyncEndpoint:
    """Tests for POST /sync endpoint."""

    @patch("drivesearch.web.app.DriveSearchBinary")
    def test_sync_success_invalidates_cache(
        self, mock_binary_class: MagicMock, write_snapshot, budget_files
    ) -> None:
        write_snapshot(budget_files)
        client.post("/search", json={"query": "budget"})
        matcher = _get_matcher()
        assert matcher.cache.is_loaded

        mock_binary_class.from_config.return_value = MagicMock()
        response = client.post("/sync")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert not matcher.cache.is_loaded

    @patch("drivesearch.web.app.DriveSearchBinary")
    def test_sync_failure(self, mock_binary_class: MagicMock) -> None:
        mock_client = MagicMock()
        mock_client.sync.side_effect = SyncError("sync", "token expired")
        mock_binary_class.from_config.return_value = mock_client

        response = client.post("/sync")

        assert response.status_code == 502
        assert "token expired" in response.json()["detail"]


class TestStatusEndpoint:
    """Tests for GET /status endpoint."""

    def test_status_not_synced(self, snapshot_path: Path) -> None:
        response = client.get("/status")

        assert response.status_code == 200
        data = response.json()
        assert data["synced"] is False
        assert data["file_count"] == 0
        assert data["path"] == str(snapshot_path)

    def test_status_synced(self, write_snapshot, budget_files) -> None:
        write_snapshot(budget_files)

        data = client.get("/status").json()

        assert data["synced"] is True
        assert data["file_count"] == 2
        assert data["folder_count"] == 2
        assert data["last_sync"] == "2024-05-01T09:30:00Z"

    def test_status_malformed(self, snapshot_path: Path) -> None:
        snapshot_path.parent.mkdir(parents=True)
        snapshot_path.write_text("{", encoding="utf-8")

        response = client.get("/status")

        assert response.status_code == 500
        assert "Invalid JSON" in response.json()["detail"]
