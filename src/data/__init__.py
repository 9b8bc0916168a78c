"""Data layer for the yield router."""

from .cache.disk_cache import DiskCache, CacheKeys
from .clients.base import (
    LendingRateClient,
    PoolApySource,
    PositionStore,
    PriceFeed,
    ProtocolType,
)
from .clients.aave import AaveRateClient, AaveReserveParser
from .clients.gmx import GmxApyClient, GmxMarketsClient
from .resolver import AssetRateResolver
from .sources.prices import StaticPriceFeed, DEFAULT_PRICES_USD
from .sources.positions import InMemoryPositionStore, DEMO_POSITION

__all__ = [
    "DiskCache",
    "CacheKeys",
    # Interfaces
    "LendingRateClient",
    "PoolApySource",
    "PositionStore",
    "PriceFeed",
    "ProtocolType",
    # Live clients
    "AaveRateClient",
    "AaveReserveParser",
    "GmxApyClient",
    "GmxMarketsClient",
    # Resolution
    "AssetRateResolver",
    # Static sources
    "StaticPriceFeed",
    "DEFAULT_PRICES_USD",
    "InMemoryPositionStore",
    "DEMO_POSITION",
]
