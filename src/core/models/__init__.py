"""Core data models for the yield router."""

from .rates import (
    SourceKind,
    FixedPointValue,
    YieldSourceRate,
    AssetRates,
    AssetYieldProfile,
)
from .asset import AssetClass, AssetInfo
from .allocation import Allocation, AllocationLine, ALLOCATION_TOLERANCE
from .position import PositionSnapshot
from .quote import Quote, QuoteLine, QuoteFees
from .borrow import (
    BorrowSimulationResult,
    BorrowSummary,
    BorrowTradeoff,
    PositionMetrics,
    RiskWarning,
    WarningCode,
    WarningSeverity,
)

__all__ = [
    "SourceKind",
    "FixedPointValue",
    "YieldSourceRate",
    "AssetRates",
    "AssetYieldProfile",
    "AssetClass",
    "AssetInfo",
    "Allocation",
    "AllocationLine",
    "ALLOCATION_TOLERANCE",
    "PositionSnapshot",
    "Quote",
    "QuoteLine",
    "QuoteFees",
    "BorrowSimulationResult",
    "BorrowSummary",
    "BorrowTradeoff",
    "PositionMetrics",
    "RiskWarning",
    "WarningCode",
    "WarningSeverity",
]
