"""Protocol clients and collaborator interfaces."""

from .base import (
    LendingRateClient,
    PoolApySource,
    PositionStore,
    PriceFeed,
    ProtocolType,
)
from .aave import AaveRateClient, AaveReserveParser
from .gmx import GmxApyClient, GmxMarketsClient

__all__ = [
    "LendingRateClient",
    "PoolApySource",
    "PositionStore",
    "PriceFeed",
    "ProtocolType",
    "AaveRateClient",
    "AaveReserveParser",
    "GmxApyClient",
    "GmxMarketsClient",
]
