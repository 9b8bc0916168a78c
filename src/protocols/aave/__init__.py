"""Aave v3 protocol configuration."""

from src.protocols.aave.config import (
    AAVE_V3_POOL_DATA_PROVIDER,
    DEFAULT_BORROW_APR,
    FALLBACK_SUPPLY_APY,
    LIQUIDITY_RATE_INDEX,
    POOL_DATA_PROVIDER_ABI,
)

__all__ = [
    "AAVE_V3_POOL_DATA_PROVIDER",
    "DEFAULT_BORROW_APR",
    "FALLBACK_SUPPLY_APY",
    "LIQUIDITY_RATE_INDEX",
    "POOL_DATA_PROVIDER_ABI",
]
