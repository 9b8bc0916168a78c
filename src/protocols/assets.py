"""Supported deposit assets (Arbitrum One).

Single authoritative lookup for asset metadata: addresses, decimals,
asset class and the GMX pool each asset is routed to.
"""

from decimal import Decimal
from functools import lru_cache
from typing import Dict, Iterable, Iterator, List, Optional

from src.core.errors import AssetNotFoundError
from src.core.models import AssetClass, AssetInfo
from src.protocols.gmx.config import GMX_POOL_ADDRESSES

DEFAULT_ASSETS = (
    AssetInfo(
        id="wbtc",
        symbol="WBTC",
        name="Wrapped Bitcoin",
        address="0x2f2a2543B76A4166549F7aaB2e75Bef0aefC5B0f",
        decimals=8,
        asset_class=AssetClass.VOLATILE,
        gmx_pool_address=GMX_POOL_ADDRESSES["wbtc"],
        max_ltv=Decimal("0.75"),
    ),
    AssetInfo(
        id="weth",
        symbol="WETH",
        name="Wrapped Ether",
        address="0x82aF49447D8a07e3bd95BD0d56f35241523fBab1",
        decimals=18,
        asset_class=AssetClass.VOLATILE,
        gmx_pool_address=GMX_POOL_ADDRESSES["weth"],
        max_ltv=Decimal("0.80"),
    ),
    AssetInfo(
        id="arb",
        symbol="ARB",
        name="Arbitrum",
        address="0x912CE59144191C1204E64559FE8253a0e49E6548",
        decimals=18,
        asset_class=AssetClass.VOLATILE,
        gmx_pool_address=GMX_POOL_ADDRESSES["arb"],
        max_ltv=Decimal("0.65"),
    ),
    AssetInfo(
        id="usdc",
        symbol="USDC",
        name="USD Coin",
        address="0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
        decimals=6,
        asset_class=AssetClass.STABLECOIN,
        gmx_pool_address=GMX_POOL_ADDRESSES["usdc"],
        max_ltv=Decimal("0.85"),
    ),
)


class AssetRegistry:
    """Immutable id -> AssetInfo lookup."""

    def __init__(self, assets: Iterable[AssetInfo] = DEFAULT_ASSETS):
        self._assets: Dict[str, AssetInfo] = {}
        for asset in assets:
            if asset.id in self._assets:
                raise ValueError(f"Duplicate asset id: {asset.id}")
            self._assets[asset.id] = asset

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._assets

    def __iter__(self) -> Iterator[AssetInfo]:
        return iter(self._assets.values())

    def __len__(self) -> int:
        return len(self._assets)

    @property
    def ids(self) -> List[str]:
        return list(self._assets.keys())

    def get(self, asset_id: str) -> AssetInfo:
        """Get an asset record.

        Raises:
            AssetNotFoundError: If the asset is not supported
        """
        try:
            return self._assets[asset_id]
        except KeyError:
            raise AssetNotFoundError(asset_id) from None

    def find(self, asset_id: str) -> Optional[AssetInfo]:
        return self._assets.get(asset_id)

    def by_address(self, address: str) -> Optional[AssetInfo]:
        """Look up an asset by token address (case-insensitive)."""
        address = address.lower()
        for asset in self._assets.values():
            if asset.address.lower() == address:
                return asset
        return None


@lru_cache()
def get_default_registry() -> AssetRegistry:
    """Get the shared registry of supported assets."""
    return AssetRegistry()
