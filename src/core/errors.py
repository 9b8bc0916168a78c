"""Exception taxonomy for the quoting engine.

Every error a caller can see carries a stable wire ``code`` and an
HTTP-equivalent ``status`` so the API layer can build response envelopes
without inspecting exception types.
"""

from decimal import Decimal
from typing import Any


class YieldRouterError(Exception):
    """Base class for all engine errors."""

    code = "INTERNAL_ERROR"
    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class RateParseError(YieldRouterError, ValueError):
    """Raw fixed-point rate could not be parsed."""

    def __init__(self, raw: Any, reason: str = "not an integer"):
        super().__init__(f"Cannot parse raw rate {raw!r}: {reason}")
        self.raw = raw


class AmountTooLowError(YieldRouterError, ValueError):
    """Deposit amount is missing, non-numeric or not positive."""

    code = "AMOUNT_TOO_LOW"
    status = 400

    def __init__(self, amount: Any):
        super().__init__(f"Amount must be greater than 0, got {amount!r}")
        self.amount = amount


class InvalidAllocationError(YieldRouterError, ValueError):
    """Allocation is missing or its percentages do not sum to 100."""

    code = "INVALID_ALLOCATION"
    status = 400


class UnknownAssetError(InvalidAllocationError):
    """Allocation references an asset outside the supported set."""

    def __init__(self, asset_id: str):
        super().__init__(f"Asset {asset_id} not found")
        self.asset_id = asset_id


class AssetNotFoundError(YieldRouterError, LookupError):
    """Requested asset id is not in the supported set."""

    code = "ASSET_NOT_SUPPORTED"
    status = 404

    def __init__(self, asset_id: str):
        super().__init__(f"Asset {asset_id} not found")
        self.asset_id = asset_id


class PositionNotFoundError(YieldRouterError, LookupError):
    """Position handle did not resolve in the position store."""

    code = "POSITION_NOT_FOUND"
    status = 404

    def __init__(self, position_id: str):
        super().__init__(f"Position {position_id} not found")
        self.position_id = position_id


class InsufficientCollateralError(YieldRouterError, ValueError):
    """Requested borrow exceeds the remaining borrow capacity."""

    code = "INSUFFICIENT_COLLATERAL"
    status = 400

    def __init__(self, requested: Decimal, available: Decimal):
        super().__init__(
            f"Cannot borrow ${requested:.2f}. Max available: ${available:.2f}"
        )
        self.requested = requested
        self.available = available
