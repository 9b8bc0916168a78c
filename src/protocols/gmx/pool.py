"""GM pool rate analytics.

GMX exposes borrowing, funding and net rates per market as per-second
rates in 30-decimal fixed point. These helpers annualize them linearly and
derive an LP fee APY from them.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

from src.analytics.rates import normalize_linear_rate
from src.core.errors import RateParseError

logger = logging.getLogger(__name__)

TWO = Decimal("2")


class PoolRateAnalytics:
    """Derives pool APYs from a GMX market info snapshot.

    The snapshot is a mapping with (string or int) keys such as
    ``borrowingRateLong``, ``fundingRateShort`` or ``netRateLong``.
    """

    @staticmethod
    def parse_rate_string(raw: Optional[Any]) -> Decimal:
        """Annualize one raw rate; missing or malformed values become 0."""
        if raw is None or raw == "":
            return Decimal("0")
        try:
            return normalize_linear_rate(raw)
        except RateParseError as e:
            logger.debug(f"Ignoring malformed pool rate: {e}")
            return Decimal("0")

    @classmethod
    def _pair(cls, market: Mapping[str, Any], prefix: str) -> Dict[str, Decimal]:
        return {
            "long": cls.parse_rate_string(market.get(f"{prefix}Long")),
            "short": cls.parse_rate_string(market.get(f"{prefix}Short")),
        }

    @classmethod
    def borrowing_apy(cls, market: Mapping[str, Any]) -> Dict[str, Decimal]:
        """Borrowing APY paid to the pool; the sign only marks the side."""
        rates = cls._pair(market, "borrowingRate")
        return {side: abs(rate) for side, rate in rates.items()}

    @classmethod
    def funding_apy(cls, market: Mapping[str, Any]) -> Dict[str, Decimal]:
        """Signed funding APY per side."""
        return cls._pair(market, "fundingRate")

    @classmethod
    def net_rate_apy(cls, market: Mapping[str, Any]) -> Dict[str, Decimal]:
        """Signed net rate per side."""
        return cls._pair(market, "netRate")

    @classmethod
    def fee_apy(cls, market: Mapping[str, Any]) -> Decimal:
        """
        LP fee APY approximation.

        fee_apy = max(0, avg(borrowing) + max(0, avg(net)))
        """
        net = cls.net_rate_apy(market)
        borrowing = cls.borrowing_apy(market)

        avg_net = (net["long"] + net["short"]) / TWO
        avg_borrowing = (borrowing["long"] + borrowing["short"]) / TWO

        return max(Decimal("0"), avg_borrowing + max(Decimal("0"), avg_net))

    @staticmethod
    def pool_tvl_usd(market: Mapping[str, Any]) -> Decimal:
        """Pool value in USD (pool values are also 30-decimal fixed point)."""
        raw = market.get("poolValueMax") or market.get("poolValueMin") or 0
        try:
            value = int(raw)
        except (TypeError, ValueError):
            return Decimal("0")
        return Decimal(value) / Decimal(10**30)
