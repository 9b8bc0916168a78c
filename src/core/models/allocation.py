"""Deposit allocation models."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from src.core.errors import InvalidAllocationError, UnknownAssetError

# Percentages must sum to 100 within this tolerance
ALLOCATION_TOLERANCE = Decimal("0.01")
FULL_ALLOCATION = Decimal("100")


@dataclass(frozen=True)
class AllocationLine:
    """Share of a deposit routed to one asset."""

    asset_id: str
    percentage: Decimal  # 0-100

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AllocationLine":
        if not isinstance(data, Mapping):
            raise InvalidAllocationError(f"Allocation line must be an object, got {data!r}")
        asset_id = data.get("assetId")
        raw = data.get("percentage")
        if not asset_id:
            raise InvalidAllocationError(f"Allocation line is missing assetId: {data!r}")
        if not isinstance(asset_id, str):
            raise InvalidAllocationError(f"Invalid assetId {asset_id!r}")
        try:
            percentage = Decimal(str(raw))
        except (InvalidOperation, ValueError):
            raise InvalidAllocationError(
                f"Invalid percentage {raw!r} for asset {asset_id}"
            )
        if not percentage.is_finite() or percentage < 0:
            raise InvalidAllocationError(
                f"Invalid percentage {raw!r} for asset {asset_id}"
            )
        return cls(asset_id=asset_id, percentage=percentage)

    @property
    def weight(self) -> Decimal:
        """Percentage as a 0-1 fraction."""
        return self.percentage / FULL_ALLOCATION

    def to_dict(self) -> dict:
        return {"assetId": self.asset_id, "percentage": str(self.percentage)}


@dataclass(frozen=True)
class Allocation:
    """A set of allocation lines, either custom or a named preset."""

    lines: Tuple[AllocationLine, ...]
    name: Optional[str] = None

    @classmethod
    def from_dicts(cls, items: Sequence[Mapping[str, Any]], name: Optional[str] = None) -> "Allocation":
        if not isinstance(items, (list, tuple)):
            raise InvalidAllocationError(f"Allocations must be a list, got {items!r}")
        return cls(lines=tuple(AllocationLine.from_dict(item) for item in items), name=name)

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]], name: Optional[str] = None) -> "Allocation":
        return cls(
            lines=tuple(AllocationLine(asset_id, Decimal(pct)) for asset_id, pct in pairs),
            name=name,
        )

    @property
    def total_percentage(self) -> Decimal:
        return sum((line.percentage for line in self.lines), Decimal("0"))

    @property
    def asset_ids(self) -> List[str]:
        return [line.asset_id for line in self.lines]

    def validate(self, supported_assets: Iterable[str]) -> None:
        """Check the allocation invariants.

        Raises:
            InvalidAllocationError: If empty or the sum drifts beyond tolerance
            UnknownAssetError: If a line references an unsupported asset
        """
        if not self.lines:
            raise InvalidAllocationError("Must provide allocations or preset")

        total = self.total_percentage
        if abs(total - FULL_ALLOCATION) > ALLOCATION_TOLERANCE:
            raise InvalidAllocationError(
                f"Allocations must sum to 100%, got {total.normalize():f}%"
            )

        supported = set(supported_assets)
        for line in self.lines:
            if line.asset_id not in supported:
                raise UnknownAssetError(line.asset_id)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "allocations": [line.to_dict() for line in self.lines],
        }
