"""Application configuration defaults."""

from __future__ import annotations

import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

APP_DIR_NAME = "fuzzy-drive-search"
STORAGE_FILE_NAME = "drive_files.json"
BINARY_NAME = "fuzzy-drive-search"

STORAGE_ENV = "DRIVESEARCH_STORAGE"
BINARY_ENV = "DRIVESEARCH_BINARY"


def _get_config_dir() -> Path:
    """Get the per-user application data directory for the current platform."""
    if sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    elif sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    else:
        xdg = os.environ.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
    return base / APP_DIR_NAME


def _get_default_storage_path() -> Path:
    override = os.environ.get(STORAGE_ENV)
    if override:
        return Path(override).expanduser()
    return _get_config_dir() / STORAGE_FILE_NAME


def _get_default_binary_path() -> Path:
    override = os.environ.get(BINARY_ENV)
    if override:
        return Path(override).expanduser()
    found = shutil.which(BINARY_NAME)
    # Keep the bare name so the failure names the binary the user needs to install
    return Path(found) if found else Path(BINARY_NAME)


@dataclass(slots=True)
class AppConfig:
    storage_path: Path | None = None
    binary_path: Path | None = None
    staleness_seconds: float = 5 * 60
    max_results: int = 20
    init_timeout: float = 60.0
    sync_timeout: float = 30.0
    search_timeout: float = 10.0

    def __post_init__(self) -> None:
        if self.storage_path is None:
            self.storage_path = _get_default_storage_path()
        if self.binary_path is None:
            self.binary_path = _get_default_binary_path()

    def resolve_storage_path(self, base_dir: Path | None = None) -> Path:
        if self.storage_path is None:
            self.storage_path = _get_default_storage_path()
        path = Path(self.storage_path).expanduser()
        if path.is_absolute() or base_dir is None:
            return path
        return base_dir / path
