"""Borrow simulation against an existing deposit position."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple

from src.core.constants import DAYS_PER_YEAR, MONTHS_PER_YEAR, USDC_MICRO
from src.core.errors import AmountTooLowError, InsufficientCollateralError
from src.core.models import (
    BorrowSimulationResult,
    BorrowSummary,
    BorrowTradeoff,
    PositionMetrics,
    PositionSnapshot,
)
from src.engine.risk import RiskCalculator
from src.protocols.aave.config import DEFAULT_BORROW_APR

logger = logging.getLogger(__name__)

WHY_BORROW = (
    "Get cash without selling your crypto",
    "No capital gains tax triggered",
    "Keep 100% of your asset upside",
    "Pay back anytime with no penalties",
)


@dataclass(frozen=True)
class BorrowConfig:
    """Borrow cost and recommendation constants."""

    # Weighted-average borrow APR (%)
    borrow_apr: Decimal = DEFAULT_BORROW_APR
    # Borrows below this share of value are recommended for short-term needs
    comfortable_borrow_ratio: Decimal = Decimal("0.3")
    why_borrow: Tuple[str, ...] = field(default=WHY_BORROW)


DEFAULT_BORROW_CONFIG = BorrowConfig()


def parse_micro_usdc(value: Any) -> Decimal:
    """Convert a micro-USDC amount string to USD.

    Raises:
        AmountTooLowError: If missing, non-numeric or negative
    """
    if value is None or isinstance(value, bool):
        raise AmountTooLowError(value)
    try:
        micro = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise AmountTooLowError(value) from None
    if not micro.is_finite() or micro < 0:
        raise AmountTooLowError(value)
    return micro / USDC_MICRO


class BorrowSimulator:
    """
    Computes before/after economics of borrowing against a position.

    Borrow cost is charged on the new borrow only:
        net_apy = current_apy - (borrow / total_value) * borrow_apr
    """

    def __init__(
        self,
        config: BorrowConfig = DEFAULT_BORROW_CONFIG,
        risk: Optional[RiskCalculator] = None,
    ):
        self.config = config
        self.risk = risk or RiskCalculator()

    def net_apy(self, position: PositionSnapshot, borrow_amount: Decimal) -> Decimal:
        """Rate-level net APY after borrowing."""
        if position.total_value_usd <= 0:
            return position.current_apy
        return position.current_apy - (
            borrow_amount / position.total_value_usd
        ) * self.config.borrow_apr

    def _before(self, position: PositionSnapshot) -> PositionMetrics:
        yearly = position.total_value_usd * position.current_apy / 100
        daily = yearly / DAYS_PER_YEAR
        return PositionMetrics(
            total_value_usd=position.total_value_usd,
            gross_apy=position.current_apy,
            borrow_cost_apy=Decimal("0"),
            net_apy=position.current_apy,
            daily_earnings=daily,
            monthly_earnings=yearly / MONTHS_PER_YEAR,
            yearly_earnings=yearly,
            borrowed_usd=position.borrowed_usd,
            health_factor=self.risk.health_factor(
                position.borrow_capacity_usd, position.borrowed_usd
            ),
        )

    def _after(
        self, position: PositionSnapshot, before: PositionMetrics, borrow_amount: Decimal
    ) -> PositionMetrics:
        borrow_interest_daily = borrow_amount * self.config.borrow_apr / 100 / DAYS_PER_YEAR
        daily = before.daily_earnings - borrow_interest_daily
        yearly = daily * DAYS_PER_YEAR
        borrowed = position.borrowed_usd + borrow_amount
        return PositionMetrics(
            total_value_usd=position.total_value_usd,
            gross_apy=position.current_apy,
            borrow_cost_apy=self.config.borrow_apr,
            net_apy=self.net_apy(position, borrow_amount),
            daily_earnings=daily,
            monthly_earnings=yearly / MONTHS_PER_YEAR,
            yearly_earnings=yearly,
            borrowed_usd=borrowed,
            health_factor=self.risk.health_factor(position.borrow_capacity_usd, borrowed),
        )

    def _summary(
        self,
        position: PositionSnapshot,
        before: PositionMetrics,
        after: PositionMetrics,
        borrow_amount: Decimal,
    ) -> BorrowSummary:
        comfortable = borrow_amount < position.total_value_usd * self.config.comfortable_borrow_ratio
        return BorrowSummary(
            headline=(
                f"You'll earn ${after.monthly_earnings:.0f}/mo "
                f"instead of ${before.monthly_earnings:.0f}/mo"
            ),
            subtext=f"But you get ${borrow_amount:,.2f} cash without selling",
            recommendation=(
                "Good for short-term liquidity needs"
                if comfortable
                else "Consider if you really need this much - higher risk"
            ),
        )

    def simulate(self, position: PositionSnapshot, borrow_amount: Decimal) -> BorrowSimulationResult:
        """
        Simulate borrowing ``borrow_amount`` USD against a position.

        Args:
            position: Current position snapshot
            borrow_amount: Additional USD to borrow

        Returns:
            BorrowSimulationResult with before/after metrics and warnings

        Raises:
            InsufficientCollateralError: If the borrow exceeds remaining capacity
        """
        if position.borrowed_usd + borrow_amount > position.borrow_capacity_usd:
            raise InsufficientCollateralError(borrow_amount, position.available_to_borrow)

        before = self._before(position)
        after = self._after(position, before, borrow_amount)

        warnings = self.risk.warnings(after.health_factor, borrow_amount, position.total_value_usd)
        if warnings:
            logger.debug(
                f"Borrow of {borrow_amount} on {position.position_id}: "
                f"{[w.code.value for w in warnings]}"
            )

        net_apy_from_earnings = (
            after.yearly_earnings / position.total_value_usd * 100
            if position.total_value_usd > 0
            else after.net_apy
        )

        return BorrowSimulationResult(
            before=before,
            after=after,
            tradeoff=BorrowTradeoff(
                cash_you_get=borrow_amount,
                earnings_reduction=before.yearly_earnings - after.yearly_earnings,
                break_even_days=0,
                why_borrow=list(self.config.why_borrow),
            ),
            warnings=warnings,
            summary=self._summary(position, before, after, borrow_amount),
            borrow_amount=borrow_amount,
            net_apy_from_earnings=net_apy_from_earnings,
        )
