"""Keyword and substring search over the cached snapshot."""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from drivesearch.config import AppConfig
from drivesearch.index.cache import CacheState
from drivesearch.models import FileRecord, MatchResult
from drivesearch.utils.text import contains_any, split_terms

LOGGER = logging.getLogger(__name__)

DEFAULT_STALENESS_SECONDS = 5 * 60
DEFAULT_MAX_RESULTS = 20


def match_record(record: FileRecord, terms: Sequence[str]) -> Optional[int]:
    """Score ``record`` against lower-cased ``terms``.

    Every term has to appear in the file name, a keyword or a romanized
    keyword. Returns the number of terms found in the file name itself, or
    None when some term is missing everywhere.
    """
    name = record.name.lower()
    score = 0
    for term in terms:
        if term in name:
            score += 1
        elif not (
            contains_any(term, record.keywords) or contains_any(term, record.romaji_keywords)
        ):
            return None
    return score


def rank_records(records: Sequence[FileRecord], terms: Sequence[str]) -> List[FileRecord]:
    """Filter and order records by name score, keeping snapshot order on ties."""
    scored: List[Tuple[int, FileRecord]] = []
    for record in records:
        score = match_record(record, terms)
        if score is not None:
            scored.append((score, record))
    # sort is stable, so equal scores keep snapshot order
    scored.sort(key=lambda item: item[0], reverse=True)
    return [record for _, record in scored]


class Matcher:
    """High-level API answering queries from a :class:`CacheState`."""

    def __init__(
        self,
        cache: CacheState,
        *,
        staleness_seconds: float = DEFAULT_STALENESS_SECONDS,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        self.cache = cache
        self.staleness_seconds = staleness_seconds
        self.max_results = max_results

    @classmethod
    def from_config(cls, config: AppConfig) -> "Matcher":
        cache = CacheState(config.resolve_storage_path())
        return cls(
            cache,
            staleness_seconds=config.staleness_seconds,
            max_results=config.max_results,
        )

    def needs_reload(self) -> bool:
        if self.cache.snapshot.is_empty:
            return True
        age = self.cache.age()
        return age is None or age > self.staleness_seconds

    def invalidate(self) -> None:
        """Force a reload on the next query, e.g. right after a sync."""
        self.cache.expire()

    def search(self, query: str, *, limit: Optional[int] = None) -> List[MatchResult]:
        terms = split_terms(query)
        if not terms:
            return []

        if self.needs_reload() and not self.cache.reload():
            LOGGER.debug(
                "Searching %d cached files without a fresh snapshot",
                len(self.cache.snapshot.files),
            )

        snapshot = self.cache.snapshot
        cap = self.max_results if limit is None else max(0, min(limit, self.max_results))
        ranked = rank_records(snapshot.files, terms)
        LOGGER.debug(
            "Query %r matched %d of %d files", query, len(ranked), len(snapshot.files)
        )
        return [MatchResult.from_record(record) for record in ranked[:cap]]
