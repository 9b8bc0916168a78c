"""Position snapshot read model."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class PositionSnapshot:
    """One user's deposit position as owned by the position store.

    All amounts are USD; ``current_apy`` is a percentage.
    """

    total_value_usd: Decimal
    current_apy: Decimal
    borrowed_usd: Decimal
    borrow_capacity_usd: Decimal
    position_id: Optional[str] = None

    @property
    def available_to_borrow(self) -> Decimal:
        """Remaining borrow headroom."""
        return self.borrow_capacity_usd - self.borrowed_usd

    @classmethod
    def from_dict(cls, data: Dict[str, Any], position_id: Optional[str] = None) -> "PositionSnapshot":
        return cls(
            total_value_usd=Decimal(str(data["totalValueUsd"])),
            current_apy=Decimal(str(data["currentApy"])),
            borrowed_usd=Decimal(str(data["borrowedUsd"])),
            borrow_capacity_usd=Decimal(str(data["borrowCapacityUsd"])),
            position_id=position_id or data.get("id"),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.position_id,
            "totalValueUsd": str(self.total_value_usd),
            "currentApy": str(self.current_apy),
            "borrowedUsd": str(self.borrowed_usd),
            "borrowCapacityUsd": str(self.borrow_capacity_usd),
        }
