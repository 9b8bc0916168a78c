"""Asset rate resolution.

Obtains a lending-market APY and a pool-market APY for each supported
asset. Upstream failures never propagate: they are logged and replaced by
static fallback values.
"""

import asyncio
import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from src.analytics.rates import normalize
from src.core.models import AssetInfo, AssetRates
from src.data.clients.base import LendingRateClient, PoolApySource
from src.protocols.aave.config import FALLBACK_SUPPLY_APY
from src.protocols.assets import AssetRegistry, get_default_registry
from src.protocols.gmx.config import (
    DEFAULT_FALLBACK_POOL_APY,
    DEFAULT_POOL_APY_ESTIMATE,
    FALLBACK_POOL_APY,
    POOL_APY_ESTIMATES,
)

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_SUPPLY_APY = Decimal("0")


class AssetRateResolver:
    """Resolves {lending, pool} APY pairs per asset.

    Without a lending client every asset gets its fallback supply APY.
    Without a pool source pool APYs come from the deterministic estimate
    table; with one, a failed or partial feed falls back per asset.
    """

    def __init__(
        self,
        lending_client: Optional[LendingRateClient] = None,
        pool_source: Optional[PoolApySource] = None,
        registry: Optional[AssetRegistry] = None,
        fallback_supply_apys: Mapping[str, Decimal] = FALLBACK_SUPPLY_APY,
        pool_apy_estimates: Mapping[str, Decimal] = POOL_APY_ESTIMATES,
        fallback_pool_apys: Mapping[str, Decimal] = FALLBACK_POOL_APY,
    ):
        self.lending_client = lending_client
        self.pool_source = pool_source
        self.registry = registry or get_default_registry()
        self._fallback_supply_apys = fallback_supply_apys
        self._pool_apy_estimates = pool_apy_estimates
        self._fallback_pool_apys = fallback_pool_apys

    def fallback_supply_apy(self, asset_id: str) -> Decimal:
        return self._fallback_supply_apys.get(asset_id, DEFAULT_FALLBACK_SUPPLY_APY)

    def fallback_pool_apy(self, asset_id: str) -> Decimal:
        return self._fallback_pool_apys.get(asset_id, DEFAULT_FALLBACK_POOL_APY)

    async def _lending_apy(self, asset: AssetInfo) -> Optional[Decimal]:
        """Live lending APY, or None when unavailable."""
        if self.lending_client is None:
            return None
        try:
            rate = await self.lending_client.fetch_lending_rate(asset)
            apy = normalize(rate)
        except Exception as e:
            logger.warning(f"Lending rate fetch failed for {asset.id}, using fallback: {e}")
            return None
        logger.debug(f"Live lending APY for {asset.id}: {apy}")
        return apy

    async def _pool_apys(self) -> Optional[Dict[str, Decimal]]:
        """Live pool APY snapshot, or None when no feed is wired or it failed."""
        if self.pool_source is None:
            return None
        try:
            return await self.pool_source.get_pool_apys()
        except Exception as e:
            logger.warning(f"Pool APY feed failed, using fallback table: {e}")
            return {}

    def _pool_apy(self, asset_id: str, snapshot: Optional[Dict[str, Decimal]]):
        if snapshot is None:
            return self._pool_apy_estimates.get(asset_id, DEFAULT_POOL_APY_ESTIMATE), False
        if asset_id in snapshot:
            return snapshot[asset_id], False
        return self.fallback_pool_apy(asset_id), True

    async def _resolve(
        self, asset: AssetInfo, pool_snapshot: Optional[Dict[str, Decimal]]
    ) -> AssetRates:
        lending_apy = await self._lending_apy(asset)
        lending_is_fallback = lending_apy is None
        if lending_is_fallback:
            lending_apy = self.fallback_supply_apy(asset.id)

        pool_apy, pool_is_fallback = self._pool_apy(asset.id, pool_snapshot)

        return AssetRates(
            asset_id=asset.id,
            lending_apy=lending_apy,
            pool_apy=pool_apy,
            lending_is_fallback=lending_is_fallback,
            pool_is_fallback=pool_is_fallback,
        )

    async def resolve_asset_rates(self, asset_id: str) -> AssetRates:
        """
        Resolve the current rate pair for one asset.

        Never raises for upstream failures.

        Raises:
            AssetNotFoundError: If the asset is not supported
        """
        asset = self.registry.get(asset_id)
        return await self._resolve(asset, await self._pool_apys())

    async def resolve_many(self, asset_ids: Optional[Iterable[str]] = None) -> Dict[str, AssetRates]:
        """
        Resolve several assets concurrently (all supported assets by default).

        The pool feed is read once; lending fetches run in parallel and fail
        independently.
        """
        assets: List[AssetInfo] = (
            list(self.registry)
            if asset_ids is None
            else [self.registry.get(asset_id) for asset_id in asset_ids]
        )
        pool_snapshot = await self._pool_apys()
        results = await asyncio.gather(
            *(self._resolve(asset, pool_snapshot) for asset in assets)
        )
        return {rates.asset_id: rates for rates in results}

    async def close(self) -> None:
        """Close the underlying clients."""
        if self.lending_client is not None:
            await self.lending_client.close()
        if self.pool_source is not None:
            await self.pool_source.close()
