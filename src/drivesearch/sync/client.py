"""Command-line bridge to the external ``fuzzy-drive-search`` binary."""

from __future__ import annotations

import json
import logging
import subprocess
from pathlib import Path
from typing import List, Optional

from drivesearch.config import AppConfig
from drivesearch.errors import SyncError
from drivesearch.models import MatchResult

LOGGER = logging.getLogger(__name__)


def parse_search_output(output: str) -> List[MatchResult]:
    """Extract launcher items from the binary's ``search`` output.

    The binary may print progress lines before the JSON document, so
    everything before the first ``{`` is ignored.
    """
    if not output.strip():
        return []

    start = output.find("{")
    if start == -1:
        return []

    try:
        payload = json.loads(output[start:])
    except (ValueError, RecursionError) as exc:
        LOGGER.error("Unable to parse search output: %s", exc)
        return []

    items = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        return []
    return [MatchResult.from_item(item) for item in items if isinstance(item, dict)]


class DriveSearchBinary:
    """Runs ``init``, ``sync`` and ``search`` on the external binary."""

    def __init__(
        self,
        binary_path: Path,
        *,
        init_timeout: float = 60.0,
        sync_timeout: float = 30.0,
        search_timeout: float = 10.0,
    ) -> None:
        self.binary_path = Path(binary_path)
        self.init_timeout = init_timeout
        self.sync_timeout = sync_timeout
        self.search_timeout = search_timeout

    @classmethod
    def from_config(cls, config: AppConfig) -> "DriveSearchBinary":
        return cls(
            config.binary_path,
            init_timeout=config.init_timeout,
            sync_timeout=config.sync_timeout,
            search_timeout=config.search_timeout,
        )

    def _run(self, args: List[str], *, timeout: float) -> str:
        command = args[0]
        argv = [str(self.binary_path), *args]
        LOGGER.debug("Running %s (timeout %.0fs)", command, timeout)
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                timeout=timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            raise SyncError(command, f"binary not found at {self.binary_path}") from exc
        except subprocess.TimeoutExpired as exc:
            raise SyncError(command, f"timed out after {timeout:.0f}s") from exc
        except OSError as exc:
            raise SyncError(command, str(exc)) from exc

        if completed.returncode != 0:
            detail = (completed.stderr or completed.stdout or "").strip()
            raise SyncError(command, detail or f"exit status {completed.returncode}")
        return completed.stdout

    def init(self, client_id: Optional[str] = None, client_secret: Optional[str] = None) -> str:
        """Authenticate and run the first sync. Interactive and slow."""
        args = ["init"]
        if client_id:
            args += ["--client-id", client_id]
        if client_secret:
            args += ["--client-secret", client_secret]
        output = self._run(args, timeout=self.init_timeout)
        LOGGER.info("Initialization finished")
        return output

    def sync(self) -> str:
        """Refresh the snapshot file from the cloud provider."""
        output = self._run(["sync"], timeout=self.sync_timeout)
        LOGGER.info("Sync finished")
        return output

    def search(self, query: str) -> List[MatchResult]:
        """Delegate matching to the binary itself."""
        if not query.strip():
            return []
        return parse_search_output(self._run(["search", query], timeout=self.search_timeout))
