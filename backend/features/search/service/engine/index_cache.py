"""TTL cache for the built search index."""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, List, Optional, Sequence

from backend.services.system.logger_service import get_logger
from .index_builder import build_search_index
from .models import CachedIndexResult, CatalogRecord, IndexedItem

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60


class IndexCache:
    """
    Single-slot cache for the search index.

    The slot is reused while it is younger than the TTL and was built from
    the same number of records. The key is the item count only, so an edit
    that keeps the count serves the old index until the TTL runs out or
    invalidate() is called.
    """

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS,
                 clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._index: Optional[List[IndexedItem]] = None
        self._built_at: Optional[float] = None
        self._item_count: Optional[int] = None
        self._stats: Dict[str, int] = {
            "hits": 0,
            "misses": 0,
            "rebuilds": 0,
            "invalidations": 0,
        }

    def _is_fresh(self, now: float, item_count: int) -> bool:
        return (
            self._index is not None
            and self._built_at is not None
            and now - self._built_at < self.ttl_seconds
            and self._item_count == item_count
        )

    def get(self, records: Sequence[CatalogRecord], force_rebuild: bool = False) -> CachedIndexResult:
        """Return the cached index or rebuild it from records."""
        started = time.perf_counter()

        # Held through the rebuild so readers never see a half-swapped slot
        with self._lock:
            now = self._clock()
            if not force_rebuild and self._is_fresh(now, len(records)):
                self._stats["hits"] += 1
                return CachedIndexResult(
                    index=self._index,
                    from_cache=True,
                    build_time_ms=(time.perf_counter() - started) * 1000,
                )

            self._stats["misses"] += 1
            index = build_search_index(records)
            self._index = index
            self._built_at = now
            self._item_count = len(records)
            self._stats["rebuilds"] += 1

        build_time_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "Search index rebuilt",
            extra={
                "item_count": len(index),
                "build_time_ms": round(build_time_ms, 2),
                "forced": force_rebuild,
            }
        )
        return CachedIndexResult(index=index, from_cache=False, build_time_ms=build_time_ms)

    def invalidate(self) -> None:
        with self._lock:
            self._index = None
            self._built_at = None
            self._item_count = None
            self._stats["invalidations"] += 1
        logger.info("Search index cache invalidated")

    def stats(self) -> Dict[str, object]:
        with self._lock:
            age = None
            if self._built_at is not None:
                age = round(self._clock() - self._built_at, 3)
            return {
                **self._stats,
                "cached": self._index is not None,
                "item_count": self._item_count,
                "age_seconds": age,
                "ttl_seconds": self.ttl_seconds,
            }


index_cache = IndexCache()


def get_cached_index(records: Sequence[CatalogRecord], force_rebuild: bool = False) -> CachedIndexResult:
    return index_cache.get(records, force_rebuild=force_rebuild)


def invalidate_cache() -> None:
    index_cache.invalidate()
