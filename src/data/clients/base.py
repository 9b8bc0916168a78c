"""External collaborator interfaces.

Defines the abstract capabilities the engine consumes: a remote rate
fetch, a pool APY feed, a price feed and a position store. Each has a
live or in-memory implementation in this package; tests inject mocks.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from enum import Enum
from typing import Dict

from src.core.models import AssetInfo, PositionSnapshot, YieldSourceRate


class ProtocolType(Enum):
    """Yield source protocols."""

    AAVE = "aave"  # lending market
    GMX = "gmx"    # liquidity pool


class LendingRateClient(ABC):
    """Remote rate-fetch capability for the lending-market source."""

    @property
    def protocol_type(self) -> ProtocolType:
        return ProtocolType.AAVE

    @abstractmethod
    async def fetch_lending_rate(self, asset: AssetInfo) -> YieldSourceRate:
        """Fetch the current raw supply rate for one asset.

        One request/response round trip; implementations raise on any
        failure (network, malformed response, missing tuple field).
        """
        ...

    async def close(self) -> None:
        """Close any open connections and clean up resources."""


class PoolApySource(ABC):
    """Feed of already-normalized pool APYs (percentages) keyed by asset id."""

    @property
    def protocol_type(self) -> ProtocolType:
        return ProtocolType.GMX

    @abstractmethod
    async def get_pool_apys(self) -> Dict[str, Decimal]:
        """Return pool APY per asset id; assets may be missing."""
        ...

    async def close(self) -> None:
        """Close any open connections and clean up resources."""


class PriceFeed(ABC):
    """USD price lookup."""

    @abstractmethod
    def get_price_usd(self, asset_id: str) -> Decimal:
        """Current USD price of one unit of the asset."""
        ...


class PositionStore(ABC):
    """Read access to user positions."""

    @abstractmethod
    def get_position(self, position_id: str) -> PositionSnapshot:
        """Get a position snapshot.

        Raises:
            PositionNotFoundError: If the id does not resolve
        """
        ...
