"""Fixed-point rate normalization.

Converts on-chain per-second rate encodings into annualized percentages:

- Lending-market rates are per-second compounding rates in ray (1e27)
  fixed point: APY = ((1 + r/1e27) ** SECONDS_PER_YEAR - 1) * 100
- Pool-market rates (fees, funding, borrowing) are per-second linear rates
  in 30-decimal fixed point: APR = r/1e30 * SECONDS_PER_YEAR * 100

All arithmetic is done in Decimal with an extended context so that
near-zero rates do not round away to exactly 0.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Any

from src.core.constants import (
    FLOAT_PRECISION_EXPONENT,
    RAY_EXPONENT,
    SECONDS_PER_YEAR,
)
from src.core.errors import RateParseError
from src.core.models import FixedPointValue, SourceKind, YieldSourceRate

# Enough digits to hold 1 + 1e-27 exactly and keep ~50 significant digits after
RATE_CONTEXT_PRECISION = 80

HUNDRED = Decimal("100")


def parse_raw_rate(raw: Any) -> int:
    """Parse a raw fixed-point rate into an integer.

    Accepts ints, decimal strings, 0x-prefixed hex strings and integral
    Decimals. Signs are preserved.

    Raises:
        RateParseError: If the value is missing, non-numeric or fractional
    """
    if isinstance(raw, bool) or raw is None:
        raise RateParseError(raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, Decimal):
        if not raw.is_finite() or raw != raw.to_integral_value():
            raise RateParseError(raw, "not an integral value")
        return int(raw)
    if isinstance(raw, (bytes, bytearray)):
        if not raw:
            raise RateParseError(raw, "empty")
        return int.from_bytes(raw, "big")
    if isinstance(raw, str):
        text = raw.strip()
        try:
            if text.lower().startswith(("0x", "-0x")):
                return int(text, 16)
            return int(text, 10)
        except ValueError:
            raise RateParseError(raw) from None
    raise RateParseError(raw, f"unsupported type {type(raw).__name__}")


def normalize_compounding_rate(raw: Any) -> Decimal:
    """Annualize a per-second ray rate with per-second compounding.

    Args:
        raw: Per-second rate in 27-decimal fixed point

    Returns:
        APY as a percentage (e.g. Decimal("4.52") for 4.52%)

    Raises:
        RateParseError: If raw is malformed or negative
    """
    value = parse_raw_rate(raw)
    if value < 0:
        raise RateParseError(raw, "compounding rates are unsigned")
    if value == 0:
        return Decimal("0")

    per_second = FixedPointValue(value, RAY_EXPONENT).to_decimal()
    with localcontext() as ctx:
        ctx.prec = RATE_CONTEXT_PRECISION
        growth = (Decimal(1) + per_second) ** SECONDS_PER_YEAR
        apy = (growth - Decimal(1)) * HUNDRED
    return +apy


def normalize_linear_rate(raw: Any) -> Decimal:
    """Annualize a per-second 30-decimal rate linearly (no compounding).

    The sign is preserved; funding rates use it as a side indicator.

    Raises:
        RateParseError: If raw is malformed
    """
    value = parse_raw_rate(raw)
    scaled = FixedPointValue(value * SECONDS_PER_YEAR * 100, FLOAT_PRECISION_EXPONENT)
    return +scaled.to_decimal()


def normalize(rate: YieldSourceRate) -> Decimal:
    """Normalize one raw observation according to its source kind."""
    if rate.source_kind == SourceKind.LENDING_MARKET:
        return normalize_compounding_rate(rate.rate_per_second.value)
    return normalize_linear_rate(rate.rate_per_second.value)


def to_percentage(value: Any) -> Decimal:
    """Coerce an already-annualized percentage into Decimal.

    Non-numeric input becomes NaN so the blending floor can absorb it.
    """
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Decimal("NaN")
