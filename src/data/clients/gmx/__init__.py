"""GMX v2 protocol client."""

from .client import POOL_SOURCES, GmxApyClient, GmxMarketsClient, GmxRestClient, build_pool_source

__all__ = [
    "POOL_SOURCES",
    "GmxApyClient",
    "GmxMarketsClient",
    "GmxRestClient",
    "build_pool_source",
]
