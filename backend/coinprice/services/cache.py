"""In-memory TTL cache for the edge service."""

import threading
import time
from typing import Any, Callable


class CacheService:
    """Thread-safe in-memory cache with per-entry TTL.

    Entries are readable while ``now - created_at < ttl``. Stale entries are
    dropped on read. ``set`` always replaces the whole entry, so the last
    write for a key wins.
    """

    def __init__(self, default_ttl: float = 60, clock: Callable[[], float] = time.monotonic):
        self._store: dict[str, tuple[Any, float, float]] = {}
        self._default_ttl = default_ttl
        self._clock = clock
        self._lock = threading.Lock()

    async def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            value, created_at, ttl = entry
            if self._clock() - created_at >= ttl:
                del self._store[key]
                return None
            return value

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        with self._lock:
            self._store[key] = (value, self._clock(), ttl)
