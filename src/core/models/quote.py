"""Deposit quote data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Tuple


@dataclass(frozen=True)
class QuoteLine:
    """Per-asset breakdown of a deposit quote.

    Native-unit amounts are integers in the asset's smallest unit.
    """

    asset_id: str
    percentage: Decimal
    usd_allocated: Decimal
    usdc_allocated: int       # micro-USDC
    estimated_amount: int     # native units
    lending_amount: int       # native units routed to the lending market
    pool_amount: int          # native units routed to the liquidity pool
    lending_apy: Decimal
    pool_apy: Decimal
    blended_apy: Decimal

    def to_dict(self) -> dict:
        return {
            "assetId": self.asset_id,
            "allocation": str(self.percentage),
            "usdAllocated": f"{self.usd_allocated:.2f}",
            "usdcAllocated": str(self.usdc_allocated),
            "estimatedAmount": str(self.estimated_amount),
            "aaveAmount": str(self.lending_amount),
            "gmxAmount": str(self.pool_amount),
            "aaveApy": f"{self.lending_apy:.2f}",
            "gmxApy": f"{self.pool_apy:.2f}",
            "blendedApy": f"{self.blended_apy:.2f}",
        }


@dataclass(frozen=True)
class QuoteFees:
    """Deposit fees in micro-USDC."""

    bridge_fee: int
    swap_fee: int
    protocol_fee: int = 0

    @property
    def total_fees(self) -> int:
        return self.bridge_fee + self.swap_fee + self.protocol_fee

    def to_dict(self) -> dict:
        return {
            "bridgeFee": str(self.bridge_fee),
            "swapFee": str(self.swap_fee),
            "protocolFee": str(self.protocol_fee),
            "totalFees": str(self.total_fees),
        }


@dataclass(frozen=True)
class Quote:
    """Time-boxed, immutable priced preview of a deposit allocation."""

    id: str
    created_at: datetime
    expires_at: datetime
    input_amount: Decimal
    source_chain_id: int
    destination_chain_id: int
    breakdown: Tuple[QuoteLine, ...] = ()
    estimated_apy: Decimal = Decimal("0")
    estimated_monthly_earnings: Decimal = Decimal("0")
    borrow_capacity_usd: Decimal = Decimal("0")
    fees: QuoteFees = field(default_factory=lambda: QuoteFees(0, 0, 0))
    preset: Optional[str] = None
    estimated_gas: int = 150_000
    gas_price: int = 50_000_000  # 0.05 gwei

    @property
    def is_cross_chain(self) -> bool:
        return self.source_chain_id != self.destination_chain_id

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(tz=timezone.utc)
        return now >= self.expires_at

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "expiresAt": int(self.expires_at.timestamp() * 1000),
            "inputAmount": str(self.input_amount),
            "sourceChain": self.source_chain_id,
            "preset": self.preset,
            "breakdown": [line.to_dict() for line in self.breakdown],
            "estimatedApy": f"{self.estimated_apy:.2f}",
            "estimatedMonthlyEarnings": f"{self.estimated_monthly_earnings:.2f}",
            "borrowCapacityUsd": f"{self.borrow_capacity_usd:.2f}",
            "fees": self.fees.to_dict(),
            "estimatedGas": str(self.estimated_gas),
            "gasPrice": str(self.gas_price),
        }
