"""Protocol-specific configuration and the supported-asset registry.

- Aave v3 (lending market, src.protocols.aave)
- GMX v2 (liquidity pools, src.protocols.gmx)
"""

from src.protocols.assets import AssetRegistry, DEFAULT_ASSETS, get_default_registry

__all__ = [
    "AssetRegistry",
    "DEFAULT_ASSETS",
    "get_default_registry",
]
