"""Pydantic settings for yield router configuration."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Arbitrum RPC
    arbitrum_rpc_url: str = Field(
        default="https://arb1.arbitrum.io/rpc",
        description="Public Arbitrum One JSON-RPC endpoint",
    )
    alchemy_api_key: Optional[str] = Field(default=None, description="Alchemy API key for Arbitrum RPC")
    rpc_timeout_seconds: int = Field(default=10, ge=1, le=120, description="Timeout for one rate fetch")

    # GMX pool analytics
    gmx_api_url: str = Field(
        default="https://arbitrum-api.gmxinfra.io",
        description="GMX REST API base URL",
    )
    gmx_pool_source: Literal["apy", "markets"] = Field(
        default="apy",
        description="Pool APY feed: reported total APY, or fee APY derived from market rates",
    )

    # Quoting
    destination_chain_id: int = Field(default=42161, description="Chain where deposits are deployed")
    quote_ttl_seconds: int = Field(default=60, ge=1, le=3600, description="Quote validity window")

    # Cache Configuration
    cache_dir: Path = Field(default=Path(".cache/yield-router"), description="Cache directory path")
    cache_ttl_seconds: int = Field(default=300, ge=60, le=3600, description="Cache TTL in seconds")

    # Logging
    log_level: str = Field(default="WARNING", description="Root log level")

    @field_validator("cache_dir", mode="before")
    @classmethod
    def parse_cache_dir(cls, v):
        """Convert string to Path."""
        if isinstance(v, str):
            return Path(v)
        return v

    @field_validator("gmx_pool_source", mode="before")
    @classmethod
    def parse_gmx_pool_source(cls, v):
        """Normalize feed names."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v):
        """Normalize log level names."""
        if isinstance(v, str):
            return v.strip().upper() or "WARNING"
        return v

    @property
    def rpc_url(self) -> str:
        """Get the Arbitrum RPC URL, preferring Alchemy when a key is set."""
        if self.alchemy_api_key:
            return f"https://arb-mainnet.g.alchemy.com/v2/{self.alchemy_api_key}"
        return self.arbitrum_rpc_url

    def ensure_cache_dir(self) -> Path:
        """Ensure cache directory exists and return it."""
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        return self.cache_dir


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
