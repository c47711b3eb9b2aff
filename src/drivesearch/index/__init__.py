"""Snapshot loading, caching and matching."""
