"""GMX v2 pool APY clients.

Both feeds read the public GMX REST API and map markets onto deposit assets
through their GM pool addresses. ``GmxApyClient`` uses the reported total
APY, ``GmxMarketsClient`` derives a fee APY from per-market rates.
"""

import logging
from abc import abstractmethod
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

import aiohttp
from aiolimiter import AsyncLimiter

from config.settings import Settings, get_settings
from src.data.cache.disk_cache import CacheKeys, DiskCache
from src.data.clients.base import PoolApySource
from src.protocols.gmx.config import (
    DEFAULT_FALLBACK_POOL_APY,
    FALLBACK_POOL_APY,
    GMX_API_RATE_LIMIT,
    GMX_API_RATE_WINDOW,
    GMX_POOL_ADDRESSES,
)
from src.protocols.gmx.pool import PoolRateAnalytics

logger = logging.getLogger(__name__)


class GmxRestClient(PoolApySource):
    """Shared session, rate limiting and disk caching for GMX REST feeds."""

    feed_name = "gmx"

    def __init__(
        self,
        settings: Optional[Settings] = None,
        cache: Optional[DiskCache] = None,
        pool_addresses: Mapping[str, str] = GMX_POOL_ADDRESSES,
        fallback_apys: Mapping[str, Decimal] = FALLBACK_POOL_APY,
    ):
        self.settings = settings or get_settings()
        self.cache = cache
        self._pool_addresses = pool_addresses
        self._fallback_apys = fallback_apys
        self._rate_limiter = AsyncLimiter(GMX_API_RATE_LIMIT, GMX_API_RATE_WINDOW)
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.settings.rpc_timeout_seconds)
            )
        return self._session

    async def _get_json(self, path: str, params: Optional[Dict[str, str]] = None) -> Any:
        url = f"{self.settings.gmx_api_url.rstrip('/')}/{path}"
        async with self._rate_limiter:
            session = await self._get_session()
            async with session.get(url, params=params) as response:
                response.raise_for_status()
                return await response.json()

    def fallback_apy(self, asset_id: str) -> Decimal:
        return self._fallback_apys.get(asset_id, DEFAULT_FALLBACK_POOL_APY)

    @abstractmethod
    async def _fetch_markets(self) -> Dict[str, dict]:
        """Market entries keyed by market token address."""
        ...

    @abstractmethod
    def parse_markets(self, markets: Mapping[str, dict]) -> Dict[str, Decimal]:
        """Map market entries onto asset ids (percentages)."""
        ...

    async def get_pool_apys(self) -> Dict[str, Decimal]:
        cache_key = CacheKeys.pool_apys(self.settings.destination_chain_id, self.feed_name)
        if self.cache is not None:
            cached = self.cache.get_rates(cache_key)
            if cached is not None:
                logger.debug(f"Cache hit for {self.feed_name} pool APYs")
                return cached

        markets = await self._fetch_markets()
        result = self.parse_markets(markets)
        logger.info(f"Fetched fresh {self.feed_name} pool APYs: {result}")

        if self.cache is not None:
            self.cache.set_rates(cache_key, result)
        return result

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()


class GmxApyClient(GmxRestClient):
    """
    Pool APY feed backed by ``GET /apy?period=total``.

    The API reports APY as a decimal fraction per market token address;
    values are converted to percentages. Assets whose pool is missing from
    the response get their fallback value. Snapshots are cached on disk.
    """

    feed_name = "gmx"

    async def _fetch_markets(self) -> Dict[str, dict]:
        data = await self._get_json("apy", params={"period": "total"})
        return data.get("markets") or {}

    def parse_markets(self, markets: Mapping[str, dict]) -> Dict[str, Decimal]:
        result: Dict[str, Decimal] = {}
        for asset_id, pool_address in self._pool_addresses.items():
            entry = markets.get(pool_address) or markets.get(pool_address.lower()) or {}
            apy = entry.get("apy")
            if isinstance(apy, (int, float)) and not isinstance(apy, bool):
                result[asset_id] = Decimal(str(apy)) * 100
            else:
                result[asset_id] = self.fallback_apy(asset_id)
        return result


class GmxMarketsClient(GmxRestClient):
    """
    Pool APY feed backed by ``GET /markets/info``.

    Each market carries 30-decimal per-second borrowing, funding and net
    rates; the pool APY is the LP fee APY derived from them by
    ``PoolRateAnalytics.fee_apy``.
    """

    feed_name = "gmx_markets"

    async def _fetch_markets(self) -> Dict[str, dict]:
        data = await self._get_json("markets/info")
        return {
            market["marketToken"].lower(): market
            for market in data.get("markets") or []
            if isinstance(market, dict) and market.get("marketToken")
        }

    def parse_markets(self, markets: Mapping[str, dict]) -> Dict[str, Decimal]:
        result: Dict[str, Decimal] = {}
        for asset_id, pool_address in self._pool_addresses.items():
            market = markets.get(pool_address.lower())
            if market is None:
                result[asset_id] = self.fallback_apy(asset_id)
                continue
            result[asset_id] = PoolRateAnalytics.fee_apy(market)
            logger.debug(
                f"{asset_id} pool fee APY {result[asset_id]:.2f}% "
                f"(TVL ${PoolRateAnalytics.pool_tvl_usd(market):,.0f})"
            )
        return result


POOL_SOURCES = {
    "apy": GmxApyClient,
    "markets": GmxMarketsClient,
}


def build_pool_source(settings: Settings, cache: Optional[DiskCache] = None) -> GmxRestClient:
    """Pool APY feed selected by ``settings.gmx_pool_source``."""
    return POOL_SOURCES[settings.gmx_pool_source](settings, cache=cache)
