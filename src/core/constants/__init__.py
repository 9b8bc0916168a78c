"""Core constants module.

Re-exports all constants for convenience.
"""

from src.core.constants.generic import (
    SECONDS_PER_YEAR,
    DAYS_PER_YEAR,
    MONTHS_PER_YEAR,
    RAY_EXPONENT,
    FLOAT_PRECISION_EXPONENT,
    USDC_DECIMALS,
    USDC_MICRO,
)

from src.core.constants.chains import ARBITRUM_ONE_CHAIN_ID

__all__ = [
    # Generic
    "SECONDS_PER_YEAR",
    "DAYS_PER_YEAR",
    "MONTHS_PER_YEAR",
    "RAY_EXPONENT",
    "FLOAT_PRECISION_EXPONENT",
    "USDC_DECIMALS",
    "USDC_MICRO",
    # Chains
    "ARBITRUM_ONE_CHAIN_ID",
]
