"""Exception classes for drivesearch."""


class DriveSearchError(Exception):
    """Base exception for drivesearch errors."""
    pass


class SnapshotError(DriveSearchError):
    """Raised when the snapshot file cannot be read or has the wrong shape."""
    pass


class SyncError(DriveSearchError):
    """Raised when the external sync binary fails, times out or is missing."""

    def __init__(self, command: str, detail: str) -> None:
        super().__init__(f"{command} failed: {detail}")
        self.command = command
        self.detail = detail
