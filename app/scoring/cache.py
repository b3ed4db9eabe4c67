from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from app.core.config.scoring import get_scoring_value
from app.schemas.scoring import ScoreBreakdown

logger = logging.getLogger(__name__)

CacheKey = tuple[int, int, str, str, str]


@dataclass(frozen=True, slots=True)
class _CacheEntry:
    candidate: str
    requirement: str
    format: str
    result: ScoreBreakdown


class BoundedScoreCache:
    """Memoizes score results for repeated identical inputs.

    Entries are keyed by a cheap fingerprint and verified against the full
    texts on lookup. Once ``capacity`` entries exist, new results are no
    longer stored; nothing is evicted.
    """

    def __init__(self, capacity: int | None = None, prefix_chars: int | None = None) -> None:
        self.capacity = int(get_scoring_value("cache.capacity", 10)) if capacity is None else capacity
        self.prefix_chars = int(get_scoring_value("cache.prefix_chars", 50)) if prefix_chars is None else prefix_chars
        if self.capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._entries: dict[CacheKey, _CacheEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def _key(self, candidate: str, requirement: str, file_format: str) -> CacheKey:
        return (
            len(candidate),
            len(requirement),
            candidate[: self.prefix_chars],
            requirement[: self.prefix_chars],
            file_format,
        )

    def get(self, candidate: str, requirement: str, file_format: str = "") -> ScoreBreakdown | None:
        key = self._key(candidate, requirement, file_format)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and entry.candidate == candidate and entry.requirement == requirement:
                self.hits += 1
                return entry.result
            self.misses += 1
            return None

    def put(self, candidate: str, requirement: str, file_format: str, result: ScoreBreakdown) -> bool:
        key = self._key(candidate, requirement, file_format)
        with self._lock:
            if key in self._entries:
                return False
            if len(self._entries) >= self.capacity:
                logger.debug("score_cache_full capacity=%d", self.capacity)
                return False
            self._entries[key] = _CacheEntry(candidate, requirement, file_format, result)
            return True

    def clear(self) -> int:
        with self._lock:
            removed = len(self._entries)
            self._entries.clear()
            self.hits = 0
            self.misses = 0
        logger.info("score_cache_cleared entries=%d", removed)
        return removed

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {
                "size": len(self._entries),
                "capacity": self.capacity,
                "hits": self.hits,
                "misses": self.misses,
            }
