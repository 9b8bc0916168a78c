"""Integration tests for the JSON handlers."""

import asyncio
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.api.handlers import ApiHandlers
from src.core.models import YieldSourceRate
from src.data.clients.base import LendingRateClient, PoolApySource
from src.data.resolver import AssetRateResolver


def assert_envelope(body, success):
    assert body["success"] is success
    assert isinstance(body["meta"]["timestamp"], int)
    assert body["meta"]["requestId"]


class TestApiHandlers:
    """End-to-end flows through resolver, blending and engines."""

    @pytest.fixture
    def lending_client(self):
        client = MagicMock(spec=LendingRateClient)
        client.fetch_lending_rate = AsyncMock(side_effect=ConnectionError("rpc down"))
        client.close = AsyncMock()
        return client

    @pytest.fixture
    def pool_source(self):
        source = MagicMock(spec=PoolApySource)
        source.get_pool_apys = AsyncMock(return_value={
            "wbtc": Decimal("16.87"),
            "weth": Decimal("19.29"),
            "arb": Decimal("17.76"),
            "usdc": Decimal("19.29"),
        })
        source.close = AsyncMock()
        return source

    @pytest.fixture
    def handlers(self, lending_client, pool_source, registry):
        resolver = AssetRateResolver(lending_client, pool_source, registry=registry)
        return ApiHandlers(resolver=resolver)

    @pytest.mark.asyncio
    async def test_blended_apy_all_assets(self, handlers):
        response = await handlers.get_blended_apy()

        assert response.status == 200
        assert_envelope(response.body, True)
        data = response.body["data"]
        assert set(data["assets"]) == {"wbtc", "weth", "arb", "usdc"}
        assert data["chainId"] == 42161

        # Live fetch failed: fallback 1.85 lending, feed 19.29 pool
        weth = data["assets"]["weth"]
        assert weth["aaveApy"] == 1.85
        assert weth["rawGmxApy"] == 19.29
        assert weth["grossApy"] == round(1.85 * 0.4 + 19.29 * 0.6, 2)
        assert weth["netApy"] == round((1.85 * 0.4 + 19.29 * 0.6) * 0.9, 2)

        assert set(data["presets"]) == {"conservative", "balanced", "growth"}

    @pytest.mark.asyncio
    async def test_blended_apy_single_asset(self, handlers):
        response = await handlers.get_blended_apy({"assetId": "usdc"})

        data = response.body["data"]
        assert list(data["assets"]) == ["usdc"]
        # 4.20*0.5 + 19.29*0.2
        assert data["assets"]["usdc"]["grossApy"] == 5.96
        assert "presets" not in data

    @pytest.mark.asyncio
    async def test_blended_apy_live_rate(self, handlers, lending_client):
        lending_client.fetch_lending_rate.side_effect = None
        lending_client.fetch_lending_rate.return_value = YieldSourceRate.lending(0)

        response = await handlers.get_blended_apy({"assetId": "wbtc"})
        assert response.body["data"]["assets"]["wbtc"]["aaveApy"] == 0.0

    @pytest.mark.asyncio
    async def test_blended_apy_unknown_asset(self, handlers):
        response = await handlers.get_blended_apy({"assetId": "doge"})
        assert response.status == 404
        assert response.body["error"] == {
            "code": "ASSET_NOT_SUPPORTED",
            "message": "Asset doge not found",
        }

    @pytest.mark.asyncio
    async def test_list_assets(self, handlers):
        response = await handlers.list_assets()
        assets = response.body["data"]["assets"]
        assert [a["id"] for a in assets] == ["wbtc", "weth", "arb", "usdc"]
        assert assets[3]["assetClass"] == "stablecoin"

    @pytest.mark.asyncio
    async def test_quote_preset(self, handlers):
        response = await handlers.get_quote({"amountUsdc": "1000", "preset": "conservative", "sourceChain": 1})

        assert response.status == 200
        assert_envelope(response.body, True)
        quote = response.body["data"]["quote"]
        assert quote["id"].startswith("quote_")
        assert quote["sourceChain"] == 1
        assert quote["fees"]["bridgeFee"] == "1000000"
        assert quote["borrowCapacityUsd"] == "600.00"
        assert [line["assetId"] for line in quote["breakdown"]] == ["wbtc", "weth", "usdc"]

    @pytest.mark.asyncio
    async def test_concurrent_quotes_are_independent(self, handlers):
        bodies = [
            {"amountUsdc": "1000", "preset": "conservative"},
            {"amountUsdc": "250", "preset": "growth", "sourceChain": 1},
            {"amountUsdc": "500", "allocations": [{"assetId": "usdc", "percentage": "100"}]},
        ]
        responses = await asyncio.gather(*(handlers.get_quote(body) for body in bodies))

        quotes = [response.body["data"]["quote"] for response in responses]
        assert len({quote["id"] for quote in quotes}) == 3
        assert [quote["inputAmount"] for quote in quotes] == ["1000", "250", "500"]
        assert [quote["preset"] for quote in quotes] == ["conservative", "growth", None]
        assert [quote["fees"]["bridgeFee"] for quote in quotes] == ["0", "250000", "0"]
        assert [len(quote["breakdown"]) for quote in quotes] == [3, 4, 1]

    @pytest.mark.asyncio
    async def test_quote_amount_too_low(self, handlers):
        response = await handlers.get_quote({"amountUsdc": "0", "preset": "balanced"})

        assert response.status == 400
        assert_envelope(response.body, False)
        assert response.body["error"]["code"] == "AMOUNT_TOO_LOW"
        assert "data" not in response.body

    @pytest.mark.asyncio
    async def test_quote_bad_allocation_sum(self, handlers):
        response = await handlers.get_quote({
            "amountUsdc": "1000",
            "allocations": [
                {"assetId": "wbtc", "percentage": "50"},
                {"assetId": "weth", "percentage": "30"},
                {"assetId": "usdc", "percentage": "19"},
            ],
        })
        assert response.status == 400
        assert response.body["error"]["code"] == "INVALID_ALLOCATION"
        assert "99" in response.body["error"]["message"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("allocations", [
        ["wbtc"],
        {"wbtc": "100"},
        [{"assetId": ["x"], "percentage": "100"}],
    ])
    async def test_quote_malformed_allocations(self, handlers, allocations):
        response = await handlers.get_quote({"amountUsdc": "1000", "allocations": allocations})
        assert response.status == 400
        assert response.body["error"]["code"] == "INVALID_ALLOCATION"

    @pytest.mark.asyncio
    async def test_quote_unknown_asset(self, handlers):
        response = await handlers.get_quote({
            "amountUsdc": "1000",
            "allocations": [{"assetId": "doge", "percentage": "100"}],
        })
        assert response.body["error"] == {
            "code": "INVALID_ALLOCATION",
            "message": "Asset doge not found",
        }

    @pytest.mark.asyncio
    async def test_simulate_borrow(self, handlers):
        response = await handlers.simulate_borrow({
            "positionId": "pos_demo_001",
            "borrowAmountUsdc": "10000000000",
        })

        assert response.status == 200
        data = response.body["data"]
        assert data["simulation"]["after"]["healthFactor"] == "2.51"
        assert data["simulation"]["warnings"] == []
        assert data["summary"]["recommendation"] == "Good for short-term liquidity needs"

    @pytest.mark.asyncio
    async def test_concurrent_simulations_are_independent(self, handlers):
        small, large = await asyncio.gather(
            handlers.simulate_borrow({"positionId": "pos_demo_001", "borrowAmountUsdc": "10000000000"}),
            handlers.simulate_borrow({"positionId": "pos_demo_001", "borrowAmountUsdc": "45000000000"}),
        )

        assert small.body["data"]["simulation"]["after"]["borrowedUsd"] == "25000.00"
        assert large.body["data"]["simulation"]["after"]["borrowedUsd"] == "60000.00"
        assert small.body["data"]["simulation"]["warnings"] == []
        assert [w["code"] for w in large.body["data"]["simulation"]["warnings"]] == [
            "LOW_HEALTH_FACTOR",
        ]

    @pytest.mark.asyncio
    async def test_simulate_borrow_insufficient_collateral(self, handlers):
        response = await handlers.simulate_borrow({
            "positionId": "pos_demo_001",
            "borrowAmountUsdc": "60000000000",
        })
        assert response.status == 400
        assert response.body["error"]["code"] == "INSUFFICIENT_COLLATERAL"
        assert response.body["error"]["message"] == "Cannot borrow $60000.00. Max available: $47710.25"

    @pytest.mark.asyncio
    async def test_simulate_borrow_position_not_found(self, handlers):
        response = await handlers.simulate_borrow({"positionId": "pos_nope", "borrowAmountUsdc": "1"})
        assert response.status == 404
        assert response.body["error"]["code"] == "POSITION_NOT_FOUND"
        assert "pos_nope" in response.body["error"]["message"]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_internal(self, handlers):
        handlers.borrow_simulator = MagicMock()
        handlers.borrow_simulator.simulate.side_effect = RuntimeError("boom")

        response = await handlers.simulate_borrow({
            "positionId": "pos_demo_001",
            "borrowAmountUsdc": "1000000",
        })
        assert response.status == 500
        assert response.body["error"] == {"code": "INTERNAL_ERROR", "message": "boom"}

    @pytest.mark.asyncio
    async def test_close(self, handlers, lending_client, pool_source):
        await handlers.close()
        lending_client.close.assert_awaited_once()
        pool_source.close.assert_awaited_once()
