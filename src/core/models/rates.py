"""Yield source rate data models."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class SourceKind(Enum):
    """Class of yield source a rate was observed on."""

    LENDING_MARKET = "lending_market"  # Aave-style ray rate, compounding
    POOL_MARKET = "pool_market"        # GMX-style 30-decimal rate, linear


@dataclass(frozen=True)
class FixedPointValue:
    """Arbitrary-precision integer scaled by 10**exponent."""

    value: int
    exponent: int

    def to_decimal(self) -> Decimal:
        """Exact decimal value, independent of the active context precision."""
        sign, digits, exponent = Decimal(self.value).as_tuple()
        return Decimal((sign, digits, exponent - self.exponent))

    def __str__(self) -> str:
        return f"{self.value}e-{self.exponent}"


SUPPORTED_EXPONENTS = {
    SourceKind.LENDING_MARKET: 27,
    SourceKind.POOL_MARKET: 30,
}


@dataclass(frozen=True)
class YieldSourceRate:
    """One raw per-second rate observation from a yield source."""

    source_kind: SourceKind
    rate_per_second: FixedPointValue

    def __post_init__(self):
        expected = SUPPORTED_EXPONENTS[self.source_kind]
        if self.rate_per_second.exponent != expected:
            raise ValueError(
                f"{self.source_kind.value} rates use {expected}-decimal precision, "
                f"got {self.rate_per_second.exponent}"
            )

    @property
    def precision_exponent(self) -> int:
        return self.rate_per_second.exponent

    @classmethod
    def lending(cls, raw: int) -> "YieldSourceRate":
        """Build a lending-market observation from a raw ray integer."""
        return cls(SourceKind.LENDING_MARKET, FixedPointValue(raw, 27))

    @classmethod
    def pool(cls, raw: int) -> "YieldSourceRate":
        """Build a pool-market observation from a raw 30-decimal integer."""
        return cls(SourceKind.POOL_MARKET, FixedPointValue(raw, 30))


@dataclass(frozen=True)
class AssetRates:
    """Normalized lending and pool APYs for one asset (percentages)."""

    asset_id: str
    lending_apy: Decimal
    pool_apy: Decimal
    lending_is_fallback: bool = False
    pool_is_fallback: bool = False


@dataclass(frozen=True)
class AssetYieldProfile:
    """Blended yield figures for one asset (all values are percentages)."""

    asset_id: str
    lending_apy: Decimal
    pool_apy: Decimal
    blended_apy: Decimal
    net_apy: Decimal
    lending_weight: Decimal
    pool_weight: Decimal

    def to_dict(self) -> dict:
        """Wire shape: rounded headline figures, unrounded raw source rates."""
        return {
            "aaveApy": round(float(self.lending_apy), 2),
            "gmxApy": float(self.pool_apy),
            "rawAaveApy": float(self.lending_apy),
            "rawGmxApy": float(self.pool_apy),
            "grossApy": round(float(self.blended_apy), 2),
            "netApy": round(float(self.net_apy), 2),
        }
