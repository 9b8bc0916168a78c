"""Framework-agnostic request handlers.

Each handler takes a decoded JSON body, runs the engine and returns an
``ApiResponse`` holding the HTTP-equivalent status and the response
envelope:

    {success, data | error: {code, message}, meta: {timestamp, requestId}}
"""

import logging
import time
import uuid
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from src.analytics.blending import BlendingEngine
from src.core.errors import YieldRouterError
from src.core.models import AssetYieldProfile
from src.data.clients.base import PositionStore
from src.data.resolver import AssetRateResolver
from src.data.sources.positions import InMemoryPositionStore
from src.engine.borrow import BorrowSimulator, parse_micro_usdc
from src.engine.presets import PRESETS
from src.engine.quote import QuoteEngine

logger = logging.getLogger(__name__)


@dataclass
class ApiResponse:
    status: int
    body: Dict[str, Any]

    @property
    def success(self) -> bool:
        return bool(self.body.get("success"))


def _meta() -> Dict[str, Any]:
    return {
        "timestamp": int(time.time() * 1000),
        "requestId": str(uuid.uuid4()),
    }


def ok(data: Dict[str, Any]) -> ApiResponse:
    return ApiResponse(200, {"success": True, "data": data, "meta": _meta()})


def fail(error: YieldRouterError) -> ApiResponse:
    return ApiResponse(error.status, {"success": False, "error": error.to_dict(), "meta": _meta()})


class ApiHandlers:
    """Wires the resolver, blending, quote and borrow engines behind JSON handlers."""

    def __init__(
        self,
        resolver: Optional[AssetRateResolver] = None,
        blending: Optional[BlendingEngine] = None,
        quote_engine: Optional[QuoteEngine] = None,
        borrow_simulator: Optional[BorrowSimulator] = None,
        position_store: Optional[PositionStore] = None,
    ):
        self.resolver = resolver or AssetRateResolver()
        self.blending = blending or BlendingEngine(registry=self.resolver.registry)
        self.quote_engine = quote_engine or QuoteEngine(registry=self.resolver.registry)
        self.borrow_simulator = borrow_simulator or BorrowSimulator()
        self.position_store = position_store or InMemoryPositionStore()

    async def _guard(self, name: str, handler: Callable[[], Awaitable[Dict[str, Any]]]) -> ApiResponse:
        try:
            return ok(await handler())
        except YieldRouterError as e:
            logger.info(f"{name} rejected: {e.code} {e.message}")
            return fail(e)
        except Exception as e:
            logger.error(f"{name} error: {e}", exc_info=True)
            return fail(YieldRouterError(str(e) or f"{name} failed"))

    async def profiles(self, asset_ids=None) -> Dict[str, AssetYieldProfile]:
        """Resolve and blend current rates."""
        rates = await self.resolver.resolve_many(asset_ids)
        return {asset_id: self.blending.blend_rates(r) for asset_id, r in rates.items()}

    async def get_blended_apy(self, params: Optional[Dict[str, Any]] = None) -> ApiResponse:
        """Blended APY per asset, plus the portfolio APY of every preset."""
        params = params or {}

        async def handle() -> Dict[str, Any]:
            asset_id = params.get("assetId")
            asset_ids = [asset_id] if asset_id else None
            profiles = await self.profiles(asset_ids)

            data: Dict[str, Any] = {
                "chainId": params.get("chainId") or self.quote_engine.config.destination_chain_id,
                "assets": {a: p.to_dict() for a, p in profiles.items()},
                "updatedAt": int(time.time() * 1000),
            }
            if asset_ids is None:
                data["presets"] = {
                    name: f"{BlendingEngine.portfolio_apy(profiles, allocation):.2f}"
                    for name, allocation in PRESETS.items()
                }
            return data

        return await self._guard("APY", handle)

    async def list_assets(self) -> ApiResponse:
        async def handle() -> Dict[str, Any]:
            return {"assets": [asset.to_dict() for asset in self.resolver.registry]}

        return await self._guard("Assets", handle)

    async def get_quote(self, body: Dict[str, Any]) -> ApiResponse:
        """Deposit quote for {amountUsdc, sourceChain?, allocations?, preset?}."""

        async def handle() -> Dict[str, Any]:
            quote = self.quote_engine.quote(
                body.get("amountUsdc"),
                await self.profiles(),
                source_chain_id=body.get("sourceChain"),
                allocations=body.get("allocations"),
                preset=body.get("preset"),
            )
            return {"quote": quote.to_dict()}

        return await self._guard("Quote", handle)

    async def simulate_borrow(self, body: Dict[str, Any]) -> ApiResponse:
        """Borrow simulation for {positionId, borrowAmountUsdc (micro units)}."""

        async def handle() -> Dict[str, Any]:
            position = self.position_store.get_position(body.get("positionId") or "")
            borrow_amount = parse_micro_usdc(body.get("borrowAmountUsdc"))
            result = self.borrow_simulator.simulate(position, borrow_amount)
            return result.to_dict()

        return await self._guard("Borrow simulation", handle)

    async def close(self) -> None:
        await self.resolver.close()
