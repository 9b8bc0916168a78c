"""SQLite-based disk cache with TTL support for rate snapshots."""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

import diskcache

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class DiskCache:
    """
    SQLite-based disk cache with TTL support.

    Uses diskcache for persistent caching with automatic expiration. Cache
    errors are logged and treated as misses; they never reach the caller.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        namespace: str = "rates",
    ):
        self.settings = settings or get_settings()
        self.namespace = namespace
        self._cache: Optional[diskcache.Cache] = None

    def _get_cache(self) -> diskcache.Cache:
        """Get or create the cache instance."""
        if self._cache is None:
            cache_dir = self.settings.ensure_cache_dir() / self.namespace
            cache_dir.mkdir(parents=True, exist_ok=True)
            self._cache = diskcache.Cache(str(cache_dir))
        return self._cache

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value from the cache, or default if missing or expired."""
        try:
            return self._get_cache().get(key, default=default)
        except Exception as e:
            logger.warning(f"Cache get error for key {key}: {e}")
            return default

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> bool:
        """
        Set a value in the cache.

        Args:
            key: Cache key
            value: Picklable value to cache
            ttl: Time-to-live in seconds (None = use settings default)

        Returns:
            True if successful
        """
        if ttl is None:
            ttl = self.settings.cache_ttl_seconds

        try:
            self._get_cache().set(key, value, expire=ttl)
            return True
        except Exception as e:
            logger.warning(f"Cache set error for key {key}: {e}")
            return False

    def get_rates(self, key: str) -> Optional[Dict[str, Decimal]]:
        """Get a cached {asset_id: percentage} snapshot."""
        raw = self.get(key)
        if not raw:
            return None
        try:
            return {asset_id: Decimal(value) for asset_id, value in raw.items()}
        except (AttributeError, ArithmeticError, ValueError) as e:
            logger.warning(f"Discarding corrupt rate snapshot {key}: {e}")
            return None

    def set_rates(self, key: str, rates: Dict[str, Decimal], ttl: Optional[int] = None) -> bool:
        """Cache a {asset_id: percentage} snapshot (stored as strings)."""
        return self.set(key, {asset_id: str(value) for asset_id, value in rates.items()}, ttl)

    def delete(self, key: str) -> bool:
        try:
            return self._get_cache().delete(key)
        except Exception as e:
            logger.warning(f"Cache delete error for key {key}: {e}")
            return False

    def clear(self) -> int:
        """
        Clear all values from the cache.

        Returns:
            Number of items cleared
        """
        try:
            cache = self._get_cache()
            count = len(cache)
            cache.clear()
            return count
        except Exception as e:
            logger.warning(f"Cache clear error: {e}")
            return 0

    def close(self):
        """Close the cache connection."""
        if self._cache:
            self._cache.close()
            self._cache = None


class CacheKeys:
    """Standard cache key patterns."""

    @staticmethod
    def pool_apys(chain_id: int, feed: str = "gmx") -> str:
        return f"{feed}:pool_apys:{chain_id}"
