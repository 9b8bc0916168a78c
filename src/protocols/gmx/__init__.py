"""GMX v2 protocol configuration.

Pool analytics live in src.protocols.gmx.pool and are imported explicitly.
"""

from src.protocols.gmx.config import (
    DEFAULT_POOL_APY_ESTIMATE,
    FALLBACK_POOL_APY,
    GMX_POOL_ADDRESSES,
    POOL_APY_ESTIMATES,
)

__all__ = [
    "DEFAULT_POOL_APY_ESTIMATE",
    "FALLBACK_POOL_APY",
    "GMX_POOL_ADDRESSES",
    "POOL_APY_ESTIMATES",
]
