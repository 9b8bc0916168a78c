"""Unit tests for GMX pool analytics and the pool APY client."""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from src.data.cache.disk_cache import CacheKeys, DiskCache
from src.data.clients.gmx import GmxApyClient, GmxMarketsClient, build_pool_source
from src.protocols.gmx.config import GMX_POOL_ADDRESSES
from src.protocols.gmx.pool import PoolRateAnalytics


# 1e-8 per second in 30-decimal fixed point = 31.536% per year
RAW = 10**22
RAW_APY = Decimal("31.536")


class TestPoolRateAnalytics:
    """Tests for PoolRateAnalytics."""

    def test_parse_rate_string(self):
        assert PoolRateAnalytics.parse_rate_string(str(RAW)) == RAW_APY

    @pytest.mark.parametrize("raw", [None, "", "garbage", "1.5"])
    def test_parse_rate_string_defaults_to_zero(self, raw):
        assert PoolRateAnalytics.parse_rate_string(raw) == Decimal("0")

    def test_borrowing_apy_uses_absolute_value(self):
        market = {"borrowingRateLong": str(-RAW), "borrowingRateShort": str(RAW)}
        assert PoolRateAnalytics.borrowing_apy(market) == {"long": RAW_APY, "short": RAW_APY}

    def test_funding_apy_keeps_sign(self):
        market = {"fundingRateLong": str(-RAW), "fundingRateShort": str(RAW)}
        funding = PoolRateAnalytics.funding_apy(market)
        assert funding["long"] == -RAW_APY
        assert funding["short"] == RAW_APY

    def test_fee_apy_ignores_negative_net(self):
        market = {
            "borrowingRateLong": str(RAW),
            "borrowingRateShort": "0",
            "netRateLong": str(RAW),
            "netRateShort": str(-2 * RAW),
        }
        assert PoolRateAnalytics.fee_apy(market) == RAW_APY / 2

    def test_fee_apy_adds_positive_net(self):
        market = {
            "borrowingRateLong": str(RAW),
            "borrowingRateShort": str(RAW),
            "netRateLong": str(RAW),
            "netRateShort": str(RAW),
        }
        assert PoolRateAnalytics.fee_apy(market) == RAW_APY * 2

    def test_fee_apy_empty_market(self):
        assert PoolRateAnalytics.fee_apy({}) == Decimal("0")

    def test_pool_tvl_usd(self):
        assert PoolRateAnalytics.pool_tvl_usd({"poolValueMax": str(5 * 10**36)}) == Decimal("5000000")
        assert PoolRateAnalytics.pool_tvl_usd({"poolValueMax": "bad"}) == Decimal("0")


class TestGmxApyClient:
    """Tests for GmxApyClient."""

    @pytest.fixture
    def client(self, mock_settings):
        return GmxApyClient(settings=mock_settings)

    @pytest.fixture
    def markets(self):
        return {
            GMX_POOL_ADDRESSES["wbtc"]: {"apy": 0.1687},
            GMX_POOL_ADDRESSES["weth"].lower(): {"apy": 0.2},
        }

    def test_parse_markets(self, client, markets):
        apys = client.parse_markets(markets)

        assert apys["wbtc"] == Decimal("16.87")
        # Lower-case keys match too; usdc shares the ETH/USD pool
        assert apys["weth"] == Decimal("20.0")
        assert apys["usdc"] == Decimal("20.0")
        # Missing pool falls back
        assert apys["arb"] == Decimal("17.76")

    def test_parse_markets_non_numeric_apy(self, client):
        apys = client.parse_markets({GMX_POOL_ADDRESSES["wbtc"]: {"apy": "high"}})
        assert apys["wbtc"] == Decimal("16.87")

    @pytest.mark.asyncio
    async def test_get_pool_apys(self, client, markets):
        with patch.object(client, "_fetch_markets", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.return_value = markets
            apys = await client.get_pool_apys()
            assert apys["wbtc"] == Decimal("16.87")
            mock_fetch.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_pool_apys_propagates_http_errors(self, client):
        with patch.object(client, "_fetch_markets", new_callable=AsyncMock) as mock_fetch:
            mock_fetch.side_effect = ConnectionError("gmx down")
            with pytest.raises(ConnectionError):
                await client.get_pool_apys()

    @pytest.mark.asyncio
    async def test_cache_hit_skips_fetch(self, mock_settings, markets):
        cache = DiskCache(settings=mock_settings)
        client = GmxApyClient(settings=mock_settings, cache=cache)
        try:
            with patch.object(client, "_fetch_markets", new_callable=AsyncMock) as mock_fetch:
                mock_fetch.return_value = markets
                first = await client.get_pool_apys()
                second = await client.get_pool_apys()

                assert first == second
                mock_fetch.assert_awaited_once()
                assert cache.get_rates(CacheKeys.pool_apys(42161))["wbtc"] == Decimal("16.87")
        finally:
            cache.close()

    @pytest.mark.asyncio
    async def test_fetch_markets_request(self, client, markets):
        response = MagicMock()
        response.raise_for_status = MagicMock()
        response.json = AsyncMock(return_value={"markets": markets})

        session = MagicMock()
        session.get.return_value.__aenter__.return_value = response

        with patch.object(client, "_get_session", new_callable=AsyncMock) as mock_session:
            mock_session.return_value = session
            result = await client._fetch_markets()

        assert result == markets
        session.get.assert_called_once_with(
            "https://arbitrum-api.gmxinfra.io/apy", params={"period": "total"}
        )


class TestGmxMarketsClient:
    """Tests for GmxMarketsClient."""

    @pytest.fixture
    def client(self, mock_settings):
        return GmxMarketsClient(settings=mock_settings)

    @pytest.fixture
    def markets_info(self):
        return [
            {
                "marketToken": GMX_POOL_ADDRESSES["wbtc"],
                "borrowingRateLong": str(RAW),
                "borrowingRateShort": str(RAW),
                "netRateLong": str(-RAW),
                "netRateShort": str(-RAW),
                "poolValueMax": str(5 * 10**36),
            },
            {
                "marketToken": GMX_POOL_ADDRESSES["weth"],
                "borrowingRateLong": str(RAW),
                "borrowingRateShort": "0",
                "netRateLong": str(RAW),
                "netRateShort": str(RAW),
            },
        ]

    @pytest.mark.asyncio
    async def test_fetch_markets_indexes_by_lower_address(self, client, markets_info):
        with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = {"markets": markets_info + [{"name": "no token"}]}
            markets = await client._fetch_markets()

        mock_get.assert_awaited_once_with("markets/info")
        assert set(markets) == {
            GMX_POOL_ADDRESSES["wbtc"].lower(),
            GMX_POOL_ADDRESSES["weth"].lower(),
        }

    @pytest.mark.asyncio
    async def test_get_pool_apys_uses_fee_apy(self, client, markets_info):
        with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = {"markets": markets_info}
            apys = await client.get_pool_apys()

        # Negative net rate adds nothing
        assert apys["wbtc"] == RAW_APY
        # avg borrowing RAW/2 plus avg net RAW
        assert apys["weth"] == RAW_APY / 2 + RAW_APY
        assert apys["usdc"] == apys["weth"]
        # No ARB/USD market in the payload
        assert apys["arb"] == Decimal("17.76")

    @pytest.mark.asyncio
    async def test_cache_key_separate_from_apy_feed(self, mock_settings, markets_info):
        cache = DiskCache(settings=mock_settings)
        client = GmxMarketsClient(settings=mock_settings, cache=cache)
        try:
            with patch.object(client, "_get_json", new_callable=AsyncMock) as mock_get:
                mock_get.return_value = {"markets": markets_info}
                await client.get_pool_apys()

            assert cache.get_rates(CacheKeys.pool_apys(42161, "gmx_markets"))["wbtc"] == RAW_APY
            assert cache.get_rates(CacheKeys.pool_apys(42161)) is None
        finally:
            cache.close()


class TestBuildPoolSource:
    @pytest.mark.parametrize("name, expected", [("apy", GmxApyClient), ("markets", GmxMarketsClient)])
    def test_selects_feed(self, mock_settings, name, expected):
        mock_settings.gmx_pool_source = name
        assert isinstance(build_pool_source(mock_settings), expected)
