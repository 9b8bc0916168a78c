"""Aave v3 protocol client."""

from .client import AaveRateClient
from .parser import AaveReserveParser

__all__ = ["AaveRateClient", "AaveReserveParser"]
