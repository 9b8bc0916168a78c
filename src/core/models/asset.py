"""Supported deposit asset records."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class AssetClass(Enum):
    """Asset class driving the blending weights."""

    STABLECOIN = "stablecoin"
    VOLATILE = "volatile"


@dataclass(frozen=True)
class AssetInfo:
    """Static metadata for one supported deposit asset."""

    id: str
    symbol: str
    name: str
    address: str  # Token address on the destination chain
    decimals: int
    asset_class: AssetClass
    gmx_pool_address: str
    max_ltv: Decimal  # 0-1

    @property
    def is_stablecoin(self) -> bool:
        return self.asset_class == AssetClass.STABLECOIN

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "address": self.address,
            "decimals": self.decimals,
            "assetClass": self.asset_class.value,
            "gmxPoolAddress": self.gmx_pool_address,
            "maxLtv": str(self.max_ltv),
        }
