"""Unit tests for fixed-point rate normalization."""

import pytest
from decimal import Decimal

from src.analytics.rates import (
    normalize,
    normalize_compounding_rate,
    normalize_linear_rate,
    parse_raw_rate,
    to_percentage,
)
from src.core.errors import RateParseError
from src.core.models import FixedPointValue, SourceKind, YieldSourceRate


# ~5% APY expressed as a per-second ray rate
FIVE_PCT_RAY = 1547125956666413085


class TestFixedPointValue:
    """Tests for FixedPointValue."""

    def test_to_decimal_exact(self):
        value = FixedPointValue(1, 27)
        assert value.to_decimal() == Decimal("1E-27")

    def test_to_decimal_large_value_not_rounded(self):
        raw = 123456789012345678901234567890123
        assert FixedPointValue(raw, 30).to_decimal() == Decimal("123.456789012345678901234567890123")

    def test_yield_source_rate_rejects_wrong_exponent(self):
        with pytest.raises(ValueError, match="27-decimal"):
            YieldSourceRate(SourceKind.LENDING_MARKET, FixedPointValue(1, 30))

    def test_yield_source_rate_constructors(self):
        assert YieldSourceRate.lending(5).precision_exponent == 27
        assert YieldSourceRate.pool(5).precision_exponent == 30


class TestParseRawRate:
    """Tests for parse_raw_rate."""

    def test_int(self):
        assert parse_raw_rate(42) == 42

    def test_decimal_string(self):
        assert parse_raw_rate(" 1000 ") == 1000

    def test_hex_string(self):
        assert parse_raw_rate("0x10") == 16

    def test_negative_string(self):
        assert parse_raw_rate("-5") == -5

    def test_integral_decimal(self):
        assert parse_raw_rate(Decimal("7")) == 7

    def test_bytes(self):
        assert parse_raw_rate(b"\x01\x00") == 256

    @pytest.mark.parametrize("raw", [None, True, "abc", "1.5", Decimal("1.5"), 1.5, ""])
    def test_malformed(self, raw):
        with pytest.raises(RateParseError):
            parse_raw_rate(raw)


class TestCompoundingRate:
    """Tests for ray rate annualization."""

    def test_zero(self):
        assert normalize_compounding_rate(0) == Decimal("0")

    def test_five_percent(self):
        apy = normalize_compounding_rate(FIVE_PCT_RAY)
        assert abs(apy - Decimal("5")) < Decimal("0.0001")

    def test_tiny_rate_does_not_round_to_zero(self):
        apy = normalize_compounding_rate(1)
        assert apy > 0
        # 1e-27 per second is ~3.15e-18 % per year
        assert abs(apy - Decimal("3.1536E-18")) < Decimal("1E-22")

    def test_monotonic(self):
        rates = [0, 1, 10**9, 10**17, FIVE_PCT_RAY, 3 * FIVE_PCT_RAY, 10**19]
        apys = [normalize_compounding_rate(r) for r in rates]
        assert apys == sorted(apys)

    def test_accepts_string(self):
        assert normalize_compounding_rate(str(FIVE_PCT_RAY)) == normalize_compounding_rate(FIVE_PCT_RAY)

    def test_negative_rejected(self):
        with pytest.raises(RateParseError, match="unsigned"):
            normalize_compounding_rate(-1)

    def test_malformed(self):
        with pytest.raises(RateParseError):
            normalize_compounding_rate("not-a-rate")


class TestLinearRate:
    """Tests for 30-decimal linear annualization."""

    def test_one_percent(self):
        # 1% per year = 0.01 / 31536000 per second
        raw = 10**28 // 31536000
        apy = normalize_linear_rate(raw)
        assert abs(apy - Decimal("1")) < Decimal("0.000001")

    def test_exact_linear(self):
        raw = 10**22
        assert normalize_linear_rate(raw) == Decimal("10") ** -8 * 31536000 * 100

    def test_sign_preserved(self):
        assert normalize_linear_rate(-(10**22)) < 0

    def test_zero(self):
        assert normalize_linear_rate(0) == 0


class TestNormalize:
    def test_dispatches_by_source_kind(self):
        assert normalize(YieldSourceRate.lending(FIVE_PCT_RAY)) == normalize_compounding_rate(FIVE_PCT_RAY)
        assert normalize(YieldSourceRate.pool(10**22)) == normalize_linear_rate(10**22)


class TestToPercentage:
    def test_float(self):
        assert to_percentage(4.5) == Decimal("4.5")

    def test_garbage_is_nan(self):
        assert to_percentage("n/a").is_nan()
