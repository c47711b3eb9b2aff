"""Local fuzzy search over a synced cloud drive file index."""

__version__ = "0.1.0"
