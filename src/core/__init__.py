"""Core module - models, constants and errors."""

from .models import (
    AssetInfo,
    AssetYieldProfile,
    Allocation,
    AllocationLine,
    PositionSnapshot,
    Quote,
    BorrowSimulationResult,
)
from .constants import SECONDS_PER_YEAR

__all__ = [
    "AssetInfo",
    "AssetYieldProfile",
    "Allocation",
    "AllocationLine",
    "PositionSnapshot",
    "Quote",
    "BorrowSimulationResult",
    "SECONDS_PER_YEAR",
]
