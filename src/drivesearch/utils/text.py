"""Query normalization helpers."""

from __future__ import annotations

from typing import Iterable, List


def split_terms(query: str) -> List[str]:
    """Lower-case ``query`` and split it on runs of whitespace.

    Full-width spaces count as whitespace, so Japanese input separated by
    ``\\u3000`` splits the same way as ASCII input.
    """
    return query.lower().split()


def contains_any(term: str, values: Iterable[str]) -> bool:
    """Return True if ``term`` is a case-insensitive substring of any value."""
    return any(term in value.lower() for value in values)
