"""Risk calculation utilities for borrow simulation."""

from dataclasses import dataclass
from decimal import Decimal
from typing import List

from src.core.models import RiskWarning, WarningCode, WarningSeverity

# Reported instead of infinity when nothing is borrowed
NO_DEBT_HEALTH_FACTOR = Decimal("999")


@dataclass(frozen=True)
class RiskThresholds:
    """Warning thresholds."""

    low_health_factor: Decimal = Decimal("1.5")
    danger_health_factor: Decimal = Decimal("1.2")
    # Share of position value above which a borrow counts as high utilization
    high_utilization_ratio: Decimal = Decimal("0.4")


DEFAULT_RISK_THRESHOLDS = RiskThresholds()


class RiskCalculator:
    """
    Calculator for position risk metrics.

    Handles health factor, utilization and advisory warnings.
    """

    def __init__(self, thresholds: RiskThresholds = DEFAULT_RISK_THRESHOLDS):
        self.thresholds = thresholds

    @staticmethod
    def health_factor(borrow_capacity: Decimal, borrowed: Decimal) -> Decimal:
        """
        Calculate health factor.

        HF = Borrow Capacity / Borrowed

        Args:
            borrow_capacity: Maximum USD that can be borrowed against the position
            borrowed: USD currently borrowed

        Returns:
            Health factor (999 when nothing is borrowed)
        """
        if borrowed <= 0:
            return NO_DEBT_HEALTH_FACTOR
        return borrow_capacity / borrowed

    @staticmethod
    def utilization(borrowed: Decimal, total_value: Decimal) -> Decimal:
        """Borrowed share of position value (0-1)."""
        if total_value <= 0:
            return Decimal("0")
        return borrowed / total_value

    def health_factor_warning(self, health_factor: Decimal) -> List[RiskWarning]:
        if health_factor >= self.thresholds.low_health_factor:
            return []
        severity = (
            WarningSeverity.DANGER
            if health_factor < self.thresholds.danger_health_factor
            else WarningSeverity.WARNING
        )
        return [
            RiskWarning(
                code=WarningCode.LOW_HEALTH_FACTOR,
                message=f"Health factor will be {health_factor:.2f}. Consider borrowing less.",
                severity=severity,
            )
        ]

    def utilization_warning(self, borrow_amount: Decimal, total_value: Decimal) -> List[RiskWarning]:
        limit = total_value * self.thresholds.high_utilization_ratio
        if borrow_amount <= limit:
            return []
        pct = self.thresholds.high_utilization_ratio * 100
        return [
            RiskWarning(
                code=WarningCode.HIGH_UTILIZATION,
                message=f"Borrowing more than {pct:.0f}% of your position value increases risk.",
                severity=WarningSeverity.INFO,
            )
        ]

    def warnings(
        self,
        health_factor_after: Decimal,
        borrow_amount: Decimal,
        total_value: Decimal,
    ) -> List[RiskWarning]:
        """Advisory warnings for a borrow, health factor first."""
        return self.health_factor_warning(health_factor_after) + self.utilization_warning(
            borrow_amount, total_value
        )
