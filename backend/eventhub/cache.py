"""In-process read-through cache for event reads.

Entries expire after ``CACHE_TTL_SECONDS`` and the whole cache is dropped on
every event write, so a stale entry can never outlive the write that made it
stale. Keys must carry every parameter that shapes the cached value.
"""
import logging
import threading
import time
from typing import Any, Callable, Hashable, Optional

from eventhub.config import settings

logger = logging.getLogger(__name__)


class EventCache:
    def __init__(self, ttl_seconds: float, enabled: bool = True, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[Hashable, tuple[float, Any]] = {}
        self._generation = 0

    def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Any],
        is_fresh: Optional[Callable[[Any], bool]] = None,
    ) -> Any:
        """Return the cached value for ``key`` or call ``loader`` and store its result.

        ``is_fresh``, when given, is checked against a cached value before it is
        served; a value it rejects is reloaded as if it had expired. Exceptions
        raised by ``loader`` propagate and nothing is stored.
        """
        if not self.enabled:
            return loader()

        now = self._clock()
        with self._lock:
            hit = self._entries.get(key)
            generation = self._generation
        if hit is not None and hit[0] > now and (is_fresh is None or is_fresh(hit[1])):
            return hit[1]

        value = loader()
        with self._lock:
            # a write landed while loading; the value may already be stale
            if generation == self._generation:
                self._entries[key] = (now + self.ttl_seconds, value)
        return value

    def invalidate_all(self) -> None:
        with self._lock:
            dropped = len(self._entries)
            self._entries.clear()
            self._generation += 1
        if dropped:
            logger.debug("Evicted %d cached event entries", dropped)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


event_cache = EventCache(ttl_seconds=settings.CACHE_TTL_SECONDS, enabled=settings.CACHE_ENABLED)
