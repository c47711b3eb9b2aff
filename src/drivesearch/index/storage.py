"""Read-only access to the JSON snapshot written by the sync binary."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from drivesearch.errors import SnapshotError
from drivesearch.models import IndexSnapshot

LOGGER = logging.getLogger(__name__)


def load_snapshot(path: Path) -> Optional[IndexSnapshot]:
    """Load the snapshot at ``path``.

    Returns ``None`` when the file does not exist yet, which is the normal
    state before the first sync. Raises :class:`SnapshotError` when the file
    exists but cannot be read or does not have the expected shape.
    """
    path = Path(path)
    if not path.exists():
        LOGGER.warning("Snapshot file not found: %s", path)
        return None

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Unable to read {path}: {exc}") from exc

    try:
        data = json.loads(content)
    except (ValueError, RecursionError) as exc:
        raise SnapshotError(f"Invalid JSON in {path}: {exc}") from exc

    try:
        snapshot = IndexSnapshot.from_dict(data)
    except ValueError as exc:
        raise SnapshotError(f"Unexpected snapshot shape in {path}: {exc}") from exc

    LOGGER.debug("Loaded %d files from %s", len(snapshot.files), path)
    return snapshot
