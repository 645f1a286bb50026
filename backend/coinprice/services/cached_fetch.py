"""Cache-or-fetch orchestration shared by the edge and ticker tiers."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Protocol

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: float | None = None) -> None: ...


def normalize_coin_id(coin_id: str) -> str:
    """Canonical cache key for a coin identifier."""
    return coin_id.strip().lower()


class CachedFetcher:
    """Serve records from a store, fetching and storing them on a miss.

    Only successful fetches are stored; any exception raised by ``fetch``
    propagates to every caller waiting on that fetch and leaves the store
    untouched. Concurrent misses for the same key share one fetch.
    """

    def __init__(
        self,
        store: RecordStore,
        fetch: Callable[[str], Awaitable[Any]],
        ttl: float,
        normalize: Callable[[str], str] = normalize_coin_id,
        name: str = "cache",
    ):
        self._store = store
        self._fetch = fetch
        self._ttl = ttl
        self._normalize = normalize
        self._name = name
        self._inflight: dict[str, asyncio.Future] = {}

    async def get(self, key: str) -> Any:
        key = self._normalize(key)
        cached = await self._store.get(key)
        if cached is not None:
            logger.info(f"[{self._name}] Returning from cache: {key}")
            return cached

        pending = self._inflight.get(key)
        if pending is None:
            logger.info(f"[{self._name}] No cache for: {key}. Fetching...")
            pending = asyncio.ensure_future(self._populate(key))
            self._inflight[key] = pending
            pending.add_done_callback(lambda fut: self._forget(key, fut))
        else:
            logger.info(f"[{self._name}] Joining in-flight fetch for: {key}")
        # A cancelled waiter must not cancel the fetch other waiters share.
        return await asyncio.shield(pending)

    async def refresh(self, key: str) -> Any:
        """Fetch regardless of what the store holds, then write through."""
        key = self._normalize(key)
        logger.info(f"[{self._name}] Forced refresh for: {key}")
        return await self._populate(key)

    async def _populate(self, key: str) -> Any:
        record = await self._fetch(key)
        await self._store.set(key, record, self._ttl)
        logger.info(f"[{self._name}] Cache saved for: {key}")
        return record

    def _forget(self, key: str, fut: asyncio.Future) -> None:
        if self._inflight.get(key) is fut:
            del self._inflight[key]
        if not fut.cancelled():
            # Mark the exception retrieved when every waiter has gone away.
            fut.exception()
