"""Upstream pricing provider client (CoinGecko coin endpoint)."""

import logging
from urllib.parse import quote

import httpx

from coinprice.errors import CoinNotFoundError, UpstreamError
from coinprice.models.price import PriceRecord

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-cg-pro-api-key"

# Ask only for market data, everything else off
COIN_QUERY_PARAMS = {
    "localization": "false",
    "tickers": "false",
    "market_data": "true",
    "community_data": "false",
    "developer_data": "false",
    "sparkline": "false",
}


class UpstreamClient:
    """Fetches one coin's USD price from the provider.

    Makes exactly one request per call with no retries. ``timeout`` is
    required so a hung provider can never block a caller indefinitely.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float,
        http: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._http = http or httpx.AsyncClient()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def fetch_price(self, coin_id: str) -> PriceRecord:
        """Return the current price record for ``coin_id``.

        Raises CoinNotFoundError on a provider 404, InvalidPayloadError when
        the payload lacks a usable price and UpstreamError for any other
        transport, HTTP or decoding failure.
        """
        url = f"{self._base_url}/{quote(coin_id, safe='')}"
        try:
            resp = await self._http.get(
                url,
                params=COIN_QUERY_PARAMS,
                headers={API_KEY_HEADER: self._api_key},
                timeout=self._timeout,
            )
        except httpx.HTTPError as e:
            logger.warning(f"Provider request failed for {coin_id}: {e!r}")
            raise UpstreamError(f"Request to provider failed: {e!r}") from e

        if resp.status_code == 404:
            logger.warning(f"Provider reports unknown coin: {coin_id}")
            raise CoinNotFoundError(coin_id)
        if not resp.is_success:
            logger.warning(f"Provider returned HTTP {resp.status_code} for {coin_id}")
            raise UpstreamError(f"Provider returned HTTP {resp.status_code}")

        try:
            payload = resp.json()
        except ValueError as e:
            logger.warning(f"Provider returned malformed JSON for {coin_id}")
            raise UpstreamError("Provider returned malformed JSON") from e

        return PriceRecord.from_provider(payload)
