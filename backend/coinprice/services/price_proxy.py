"""Edge-tier price lookup: in-memory cache in front of the provider."""

import logging

from coinprice.errors import CoinNotFoundError, PriceUnavailableError, UpstreamError
from coinprice.models.price import PriceRecord
from coinprice.services.cache import CacheService
from coinprice.services.cached_fetch import CachedFetcher, normalize_coin_id
from coinprice.services.upstream import UpstreamClient

logger = logging.getLogger(__name__)


class PriceProxyService:
    """Serves provider prices, memoized per coin for ``ttl`` seconds."""

    def __init__(self, upstream: UpstreamClient, cache: CacheService, ttl: float = 60):
        self._fetcher = CachedFetcher(cache, upstream.fetch_price, ttl, name="edge")

    async def get_price(self, coin_id: str) -> PriceRecord:
        """Raises CoinNotFoundError or PriceUnavailableError; never caches either."""
        try:
            return await self._fetcher.get(coin_id)
        except CoinNotFoundError:
            raise
        except UpstreamError as e:
            logger.error(f"Error fetching data for {coin_id}: {e}")
            raise PriceUnavailableError(normalize_coin_id(coin_id)) from e
