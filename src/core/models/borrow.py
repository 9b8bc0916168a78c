"""Borrow simulation result models."""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import List


class WarningSeverity(Enum):
    """How loudly a risk warning should be surfaced."""

    INFO = "info"
    WARNING = "warning"
    DANGER = "danger"


class WarningCode(Enum):
    LOW_HEALTH_FACTOR = "LOW_HEALTH_FACTOR"
    HIGH_UTILIZATION = "HIGH_UTILIZATION"


@dataclass(frozen=True)
class RiskWarning:
    """Advisory warning attached to a simulation."""

    code: WarningCode
    message: str
    severity: WarningSeverity

    def to_dict(self) -> dict:
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass(frozen=True)
class PositionMetrics:
    """Earnings and risk figures for a position at one point of a simulation."""

    total_value_usd: Decimal
    gross_apy: Decimal
    borrow_cost_apy: Decimal
    net_apy: Decimal
    daily_earnings: Decimal
    monthly_earnings: Decimal
    yearly_earnings: Decimal
    borrowed_usd: Decimal
    health_factor: Decimal

    def to_dict(self) -> dict:
        return {
            "totalValueUsd": f"{self.total_value_usd:.2f}",
            "grossApy": f"{self.gross_apy:.2f}",
            "borrowCostApy": f"{self.borrow_cost_apy:.2f}",
            "netApy": f"{self.net_apy:.2f}",
            "dailyEarnings": f"{self.daily_earnings:.2f}",
            "monthlyEarnings": f"{self.monthly_earnings:.2f}",
            "yearlyEarnings": f"{self.yearly_earnings:.2f}",
            "borrowedUsd": f"{self.borrowed_usd:.2f}",
            "healthFactor": f"{self.health_factor:.2f}",
        }


@dataclass(frozen=True)
class BorrowTradeoff:
    """What the user gives up in yield for the cash they receive."""

    cash_you_get: Decimal
    earnings_reduction: Decimal
    break_even_days: int = 0
    why_borrow: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "cashYouGet": f"{self.cash_you_get:.2f}",
            "earningsReduction": f"{self.earnings_reduction:.2f}",
            "breakEvenDays": self.break_even_days,
            "whyBorrow": list(self.why_borrow),
        }


@dataclass(frozen=True)
class BorrowSummary:
    headline: str
    subtext: str
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "headline": self.headline,
            "subtext": self.subtext,
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class BorrowSimulationResult:
    """Before/after economics of borrowing against a position."""

    before: PositionMetrics
    after: PositionMetrics
    tradeoff: BorrowTradeoff
    warnings: List[RiskWarning]
    summary: BorrowSummary
    borrow_amount: Decimal
    # Net yearly earnings restated as a rate; tracks after.net_apy
    net_apy_from_earnings: Decimal

    @property
    def health_factor_before(self) -> Decimal:
        return self.before.health_factor

    @property
    def health_factor_after(self) -> Decimal:
        return self.after.health_factor

    def to_dict(self) -> dict:
        return {
            "simulation": {
                "before": self.before.to_dict(),
                "after": self.after.to_dict(),
                "tradeoff": self.tradeoff.to_dict(),
                "warnings": [w.to_dict() for w in self.warnings],
                "netApyFromEarnings": f"{self.net_apy_from_earnings:.2f}",
            },
            "summary": self.summary.to_dict(),
        }
