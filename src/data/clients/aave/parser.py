"""Aave v3 on-chain response parser.

Extracts raw ray rates from AaveProtocolDataProvider.getReserveData
result tuples. Rates stay as integers here; annualization happens in
src.analytics.rates.
"""

from typing import Any, Sequence

from src.analytics.rates import parse_raw_rate
from src.core.errors import RateParseError
from src.core.models import YieldSourceRate
from src.protocols.aave.config import (
    LIQUIDITY_RATE_INDEX,
    VARIABLE_BORROW_RATE_INDEX,
)


class AaveReserveParser:
    """Parser for getReserveData result tuples."""

    @staticmethod
    def _field(result: Any, index: int) -> int:
        if not isinstance(result, Sequence) or isinstance(result, (str, bytes)):
            raise RateParseError(result, "reserve data is not a tuple")
        if len(result) <= index:
            raise RateParseError(result, f"missing field at position {index}")
        value = parse_raw_rate(result[index])
        if value < 0:
            raise RateParseError(result[index], "ray rates are unsigned")
        return value

    @classmethod
    def parse_liquidity_rate(cls, result: Any) -> YieldSourceRate:
        """Supply (liquidity) rate observation."""
        return YieldSourceRate.lending(cls._field(result, LIQUIDITY_RATE_INDEX))

    @classmethod
    def parse_variable_borrow_rate(cls, result: Any) -> YieldSourceRate:
        """Variable borrow rate observation."""
        return YieldSourceRate.lending(cls._field(result, VARIABLE_BORROW_RATE_INDEX))
