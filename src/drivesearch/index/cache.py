"""In-memory snapshot cache with a single reload mutator."""

from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from drivesearch.errors import SnapshotError
from drivesearch.index.storage import load_snapshot
from drivesearch.models import IndexSnapshot

LOGGER = logging.getLogger(__name__)


class CacheState:
    """Owns the current snapshot and the time it was loaded.

    Starts empty. ``reload`` is the only mutator: a successful load replaces
    the snapshot reference in one assignment, a failed load changes nothing.
    Readers grab ``snapshot`` once and keep working on that object.
    """

    def __init__(
        self,
        storage_path: Path,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.storage_path = Path(storage_path)
        self._clock = clock
        self._lock = threading.Lock()
        self._snapshot = IndexSnapshot()
        self._loaded_at: Optional[float] = None

    @property
    def snapshot(self) -> IndexSnapshot:
        return self._snapshot

    @property
    def loaded_at(self) -> Optional[float]:
        return self._loaded_at

    @property
    def is_loaded(self) -> bool:
        return self._loaded_at is not None

    def age(self) -> Optional[float]:
        """Seconds since the last successful load, or None if never loaded."""
        if self._loaded_at is None:
            return None
        return self._clock() - self._loaded_at

    def expire(self) -> None:
        """Mark the current snapshot as stale without dropping it."""
        with self._lock:
            self._loaded_at = None

    def reload(self) -> bool:
        """Re-read the snapshot file. Returns True when the cache was replaced."""
        with self._lock:
            try:
                snapshot = load_snapshot(self.storage_path)
            except SnapshotError as exc:
                LOGGER.error("Snapshot reload failed, keeping previous data: %s", exc)
                return False

            if snapshot is None:
                return False

            self._snapshot = snapshot
            self._loaded_at = self._clock()

        LOGGER.info("Loaded %d files from %s", len(snapshot.files), self.storage_path)
        return True
