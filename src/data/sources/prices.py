"""Static USD price feed."""

from decimal import Decimal
from types import MappingProxyType
from typing import Mapping

from src.core.errors import AssetNotFoundError
from src.data.clients.base import PriceFeed

DEFAULT_PRICES_USD = MappingProxyType({
    "wbtc": Decimal("97500"),
    "weth": Decimal("3250"),
    "arb": Decimal("0.85"),
    "usdc": Decimal("1.00"),
})


class StaticPriceFeed(PriceFeed):
    """Price feed backed by a fixed table."""

    def __init__(self, prices: Mapping[str, Decimal] = DEFAULT_PRICES_USD):
        self._prices = dict(prices)

    def get_price_usd(self, asset_id: str) -> Decimal:
        try:
            return self._prices[asset_id]
        except KeyError:
            raise AssetNotFoundError(asset_id) from None
