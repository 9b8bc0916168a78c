"""Pytest configuration and fixtures."""

import pytest
from decimal import Decimal
from typing import Dict
from unittest.mock import MagicMock

from src.analytics.blending import BlendingEngine
from src.core.models import AssetYieldProfile, PositionSnapshot
from src.protocols.assets import AssetRegistry


@pytest.fixture
def registry() -> AssetRegistry:
    """Registry of the default supported assets."""
    return AssetRegistry()


@pytest.fixture
def blending(registry) -> BlendingEngine:
    return BlendingEngine(registry=registry)


@pytest.fixture
def sample_profiles(blending) -> Dict[str, AssetYieldProfile]:
    """Blended profiles built from round source APYs."""
    return {
        "wbtc": blending.blend("wbtc", Decimal("1"), Decimal("10")),   # 6.4
        "weth": blending.blend("weth", Decimal("2"), Decimal("20")),   # 12.8
        "arb": blending.blend("arb", Decimal("0"), Decimal("15")),     # 9.0
        "usdc": blending.blend("usdc", Decimal("4"), Decimal("10")),   # 4.0
    }


@pytest.fixture
def demo_position() -> PositionSnapshot:
    return PositionSnapshot(
        total_value_usd=Decimal("125420.50"),
        current_apy=Decimal("13.52"),
        borrowed_usd=Decimal("15000"),
        borrow_capacity_usd=Decimal("62710.25"),
        position_id="pos_demo_001",
    )


@pytest.fixture
def mock_settings(tmp_path):
    """Create mock settings for testing."""
    settings = MagicMock()
    settings.arbitrum_rpc_url = "https://arb1.arbitrum.io/rpc"
    settings.rpc_url = "https://arb1.arbitrum.io/rpc"
    settings.rpc_timeout_seconds = 5
    settings.gmx_api_url = "https://arbitrum-api.gmxinfra.io"
    settings.gmx_pool_source = "apy"
    settings.destination_chain_id = 42161
    settings.quote_ttl_seconds = 60
    settings.cache_dir = tmp_path / "cache"
    settings.cache_ttl_seconds = 300
    settings.ensure_cache_dir.return_value = settings.cache_dir
    settings.cache_dir.mkdir(parents=True, exist_ok=True)

    return settings
