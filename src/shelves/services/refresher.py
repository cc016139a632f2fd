"""Single-flight shelf refresh with the last result kept in the cache."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from django.conf import settings
from django.core.cache import cache

from .pipeline import ShelfResult, build_shelves

logger = logging.getLogger(__name__)

CACHE_KEY = "shelves:last-result"


class ShelfRefresher:
    """Run the pipeline at most once at a time.

    A refresh requested while another one is running does not queue up; it
    returns the last completed result instead.
    """

    def __init__(
        self,
        builder: Optional[Callable[[], ShelfResult]] = None,
        *,
        cache_key: str = CACHE_KEY,
        ttl: Optional[int] = None,
    ):
        self.builder = builder
        self.cache_key = cache_key
        self.ttl = ttl if ttl is not None else getattr(settings, "SHELVES_CACHE_TTL", 30)
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    def last(self) -> Optional[ShelfResult]:
        cached = cache.get(self.cache_key)
        return cached if isinstance(cached, ShelfResult) else None

    def refresh(self) -> ShelfResult:
        if not self._lock.acquire(blocking=False):
            logger.info("Shelf refresh already in flight; serving last result")
            return self.last() or ShelfResult()
        try:
            result = (self.builder or build_shelves)()
            cache.set(self.cache_key, result, self.ttl)
            return result
        finally:
            self._lock.release()

    def current(self) -> ShelfResult:
        """Cached result when fresh, otherwise a new refresh."""
        return self.last() or self.refresh()


default_refresher = ShelfRefresher()
