"""Ticker-tier relay: caches the edge service's answers for the widget."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from coinprice.errors import EdgeResponseError, EdgeUnreachableError, PriceLookupError
from coinprice.models.price import TickerRecord, error_record, usable_price
from coinprice.services.cached_fetch import CachedFetcher, normalize_coin_id
from coinprice.services.transient_store import TransientStore

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "symbol", "price")


class EdgeClient:
    """Reads ``GET /price/{coin_id}`` from the edge service."""

    def __init__(self, base_url: str, timeout: float, http: httpx.AsyncClient | None = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http = http or httpx.AsyncClient()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch(self, coin_id: str) -> TickerRecord:
        logger.info(f"Fetching data from edge service for: {coin_id}")
        url = f"{self._base_url}/price/{quote(coin_id, safe='')}"
        try:
            resp = await self._http.get(url, timeout=self._timeout)
        except httpx.HTTPError as e:
            logger.error(f"Edge request failed for {coin_id}: {e!r}")
            raise EdgeUnreachableError(f"Edge service unreachable: {e!r}") from e

        try:
            data = resp.json()
        except ValueError:
            data = None

        if not resp.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            logger.error(f"Edge service returned HTTP {resp.status_code} for {coin_id}: {message}")
            raise EdgeResponseError(message or f"HTTP {resp.status_code}", resp.status_code)

        if not _is_price_payload(data):
            logger.error(f"Invalid data format for {coin_id}. Body: {resp.text}")
            raise EdgeUnreachableError("Invalid data")
        return TickerRecord.from_edge(data)


def _is_price_payload(data: Any) -> bool:
    if not isinstance(data, dict) or not all(f in data for f in REQUIRED_FIELDS):
        return False
    for field in ("name", "symbol"):
        if not isinstance(data[field], str) or not data[field].strip():
            return False
    return usable_price(data["price"]) is not None


class ConsumerRelay:
    """Fetch-or-cache path for the ticker widget.

    ``get_price`` and ``force_refresh`` raise PriceLookupError subclasses;
    ``display`` is the presentation boundary that turns them into an error
    record. Errors are never written to the store.
    """

    def __init__(
        self,
        edge: EdgeClient,
        store: TransientStore,
        coin_id: str = "bitcoin",
        ttl: float = 60,
    ):
        self.coin_id = normalize_coin_id(coin_id)
        self._fetcher = CachedFetcher(store, edge.fetch, ttl, name="ticker")

    async def get_price(self, coin_id: str | None = None) -> TickerRecord:
        return await self._fetcher.get(coin_id or self.coin_id)

    async def force_refresh(self, coin_id: str | None = None) -> TickerRecord:
        return await self._fetcher.refresh(coin_id or self.coin_id)

    async def display(self, coin_id: str | None = None, force: bool = False) -> TickerRecord:
        coin_id = coin_id or self.coin_id
        try:
            if force:
                return await self.force_refresh(coin_id)
            return await self.get_price(coin_id)
        except PriceLookupError as e:
            return error_record(coin_id, e)
