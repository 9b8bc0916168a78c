"""Aave v3 on-chain rate client.

Reads reserve data from the AaveProtocolDataProvider on Arbitrum One via
a JSON-RPC eth_call.
"""

import logging
from typing import Optional, Sequence

import aiohttp
from web3 import AsyncHTTPProvider, AsyncWeb3

from config.settings import Settings, get_settings
from src.core.models import AssetInfo, YieldSourceRate
from src.data.clients.aave.parser import AaveReserveParser
from src.data.clients.base import LendingRateClient
from src.protocols.aave.config import (
    AAVE_V3_POOL_DATA_PROVIDER,
    POOL_DATA_PROVIDER_ABI,
)

logger = logging.getLogger(__name__)


class AaveRateClient(LendingRateClient):
    """Fetches raw Aave supply rates with one eth_call per asset."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        data_provider_address: str = AAVE_V3_POOL_DATA_PROVIDER,
    ):
        self.settings = settings or get_settings()
        self._data_provider_address = data_provider_address
        self._parser = AaveReserveParser()
        self._web3: Optional[AsyncWeb3] = None

    def _get_web3(self) -> AsyncWeb3:
        """Get or create Web3 instance."""
        if self._web3 is None:
            timeout = aiohttp.ClientTimeout(total=self.settings.rpc_timeout_seconds)
            self._web3 = AsyncWeb3(
                AsyncHTTPProvider(self.settings.rpc_url, request_kwargs={"timeout": timeout})
            )
        return self._web3

    async def get_reserve_data(self, asset: AssetInfo) -> Sequence[int]:
        """Raw getReserveData result tuple for an asset."""
        web3 = self._get_web3()
        contract = web3.eth.contract(
            address=web3.to_checksum_address(self._data_provider_address),
            abi=POOL_DATA_PROVIDER_ABI,
        )
        return await contract.functions.getReserveData(
            web3.to_checksum_address(asset.address)
        ).call()

    async def fetch_lending_rate(self, asset: AssetInfo) -> YieldSourceRate:
        result = await self.get_reserve_data(asset)
        rate = self._parser.parse_liquidity_rate(result)
        logger.debug(f"Aave liquidity rate for {asset.id}: {rate.rate_per_second}")
        return rate

    async def fetch_borrow_rate(self, asset: AssetInfo) -> YieldSourceRate:
        """Variable borrow rate for an asset."""
        result = await self.get_reserve_data(asset)
        return self._parser.parse_variable_borrow_rate(result)

    async def close(self) -> None:
        """Disconnect the provider, closing its cached HTTP sessions."""
        if self._web3 is not None:
            await self._web3.provider.disconnect()
            self._web3 = None
