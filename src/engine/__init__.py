"""Quote engine, borrow simulator and risk rules."""

from .presets import PRESETS, get_preset, preset_names
from .quote import QuoteConfig, QuoteEngine, DEFAULT_QUOTE_CONFIG, parse_amount, to_native_units
from .risk import RiskCalculator, RiskThresholds, NO_DEBT_HEALTH_FACTOR
from .borrow import BorrowConfig, BorrowSimulator, DEFAULT_BORROW_CONFIG, parse_micro_usdc

__all__ = [
    "PRESETS",
    "get_preset",
    "preset_names",
    "QuoteConfig",
    "QuoteEngine",
    "DEFAULT_QUOTE_CONFIG",
    "parse_amount",
    "to_native_units",
    "RiskCalculator",
    "RiskThresholds",
    "NO_DEBT_HEALTH_FACTOR",
    "BorrowConfig",
    "BorrowSimulator",
    "DEFAULT_BORROW_CONFIG",
    "parse_micro_usdc",
]
