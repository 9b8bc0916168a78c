"""Deposit quote engine."""

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import ROUND_FLOOR, Decimal, InvalidOperation, localcontext
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from config.settings import Settings
from src.core.constants import ARBITRUM_ONE_CHAIN_ID, MONTHS_PER_YEAR, USDC_MICRO
from src.core.errors import AmountTooLowError
from src.core.models import (
    Allocation,
    AssetYieldProfile,
    Quote,
    QuoteFees,
    QuoteLine,
)
from src.analytics.blending import BlendingEngine
from src.data.clients.base import PriceFeed
from src.data.sources.prices import StaticPriceFeed
from src.engine.presets import get_preset
from src.protocols.assets import AssetRegistry, get_default_registry

logger = logging.getLogger(__name__)

# Wide enough for 18-decimal native units of large deposits
QUOTE_CONTEXT_PRECISION = 60


@dataclass(frozen=True)
class QuoteConfig:
    """Fee schedule and routing constants applied at quote time."""

    bridge_fee_rate: Decimal = Decimal("0.001")
    swap_fee_rate: Decimal = Decimal("0.003")
    # Yield fee is taken on earnings, never on the deposit
    protocol_fee_rate: Decimal = Decimal("0")
    lending_split: Decimal = Decimal("0.6")
    pool_split: Decimal = Decimal("0.4")
    borrow_ltv: Decimal = Decimal("0.6")
    ttl_seconds: int = 60
    destination_chain_id: int = ARBITRUM_ONE_CHAIN_ID
    estimated_gas: int = 150_000
    gas_price: int = 50_000_000

    @classmethod
    def from_settings(cls, settings: Settings) -> "QuoteConfig":
        return cls(
            ttl_seconds=settings.quote_ttl_seconds,
            destination_chain_id=settings.destination_chain_id,
        )


DEFAULT_QUOTE_CONFIG = QuoteConfig()


def parse_amount(value: Any) -> Decimal:
    """Parse a USD deposit amount.

    Raises:
        AmountTooLowError: If missing, non-numeric or not positive
    """
    if value is None or isinstance(value, bool):
        raise AmountTooLowError(value)
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise AmountTooLowError(value) from None
    if not amount.is_finite() or amount <= 0:
        raise AmountTooLowError(value)
    return amount


def floor_int(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_FLOOR))


def to_native_units(usd_amount: Decimal, price_usd: Decimal, decimals: int) -> int:
    """USD amount to integer base units of an asset, rounded down."""
    with localcontext() as ctx:
        ctx.prec = QUOTE_CONTEXT_PRECISION
        return floor_int(usd_amount / price_usd * (Decimal(10) ** decimals))


class QuoteEngine:
    """
    Prices a deposit across an allocation.

    Pure with respect to its inputs: source APYs arrive as blended
    profiles, prices come from the injected feed.
    """

    def __init__(
        self,
        price_feed: Optional[PriceFeed] = None,
        registry: Optional[AssetRegistry] = None,
        config: QuoteConfig = DEFAULT_QUOTE_CONFIG,
    ):
        self.price_feed = price_feed or StaticPriceFeed()
        self.registry = registry or get_default_registry()
        self.config = config

    def resolve_allocation(
        self,
        allocations: Optional[Union[Allocation, Iterable[Dict[str, Any]]]] = None,
        preset: Optional[str] = None,
    ) -> Allocation:
        """Pick the effective allocation (a preset wins over explicit lines) and validate it."""
        if preset:
            allocation = get_preset(preset)
        elif isinstance(allocations, Allocation):
            allocation = allocations
        else:
            allocation = Allocation.from_dicts(allocations or [])

        allocation.validate(self.registry.ids)
        return allocation

    def calculate_fees(self, input_amount: Decimal, source_chain_id: int) -> QuoteFees:
        """Deposit fees in micro-USDC, floored."""
        micro = input_amount * USDC_MICRO
        bridge_fee = 0
        if source_chain_id != self.config.destination_chain_id:
            bridge_fee = floor_int(micro * self.config.bridge_fee_rate)
        return QuoteFees(
            bridge_fee=bridge_fee,
            swap_fee=floor_int(micro * self.config.swap_fee_rate),
            protocol_fee=floor_int(micro * self.config.protocol_fee_rate),
        )

    def _line(
        self,
        asset_id: str,
        percentage: Decimal,
        input_amount: Decimal,
        profile: Optional[AssetYieldProfile],
    ) -> QuoteLine:
        asset = self.registry.get(asset_id)
        price = self.price_feed.get_price_usd(asset_id)
        usd_allocated = input_amount * percentage / 100

        if profile is None:
            logger.warning(f"No yield profile for {asset_id}, quoting it at 0% APY")
            zero = Decimal("0")
            lending_apy = pool_apy = blended_apy = zero
        else:
            lending_apy = profile.lending_apy
            pool_apy = profile.pool_apy
            blended_apy = profile.blended_apy

        return QuoteLine(
            asset_id=asset_id,
            percentage=percentage,
            usd_allocated=usd_allocated,
            usdc_allocated=floor_int(usd_allocated * USDC_MICRO),
            estimated_amount=to_native_units(usd_allocated, price, asset.decimals),
            lending_amount=to_native_units(
                usd_allocated * self.config.lending_split, price, asset.decimals
            ),
            pool_amount=to_native_units(
                usd_allocated * self.config.pool_split, price, asset.decimals
            ),
            lending_apy=lending_apy,
            pool_apy=pool_apy,
            blended_apy=blended_apy,
        )

    def quote(
        self,
        amount: Any,
        profiles: Mapping[str, AssetYieldProfile],
        source_chain_id: Optional[int] = None,
        allocations: Optional[Union[Allocation, Iterable[Dict[str, Any]]]] = None,
        preset: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Quote:
        """
        Build a time-boxed quote for a deposit.

        Args:
            amount: Deposit amount in USD (string or number)
            profiles: Blended yield profile per asset id
            source_chain_id: Chain the funds come from (defaults to destination)
            allocations: Explicit allocation lines ({assetId, percentage})
            preset: Preset name; takes precedence over allocations
            now: Creation time (defaults to current UTC time)

        Returns:
            Quote expiring ttl_seconds after creation

        Raises:
            AmountTooLowError: If the amount is not a positive number
            InvalidAllocationError: If no allocation resolves or it does not sum to 100
            UnknownAssetError: If a line references an unsupported asset
        """
        input_amount = parse_amount(amount)
        allocation = self.resolve_allocation(allocations, preset)
        if source_chain_id is None:
            source_chain_id = self.config.destination_chain_id

        breakdown = tuple(
            self._line(line.asset_id, line.percentage, input_amount, profiles.get(line.asset_id))
            for line in allocation.lines
        )

        estimated_apy = BlendingEngine.portfolio_apy(profiles, allocation)
        monthly_earnings = input_amount * estimated_apy / 100 / MONTHS_PER_YEAR

        created_at = now or datetime.now(tz=timezone.utc)
        quote = Quote(
            id=f"quote_{uuid.uuid4()}",
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=self.config.ttl_seconds),
            input_amount=input_amount,
            source_chain_id=source_chain_id,
            destination_chain_id=self.config.destination_chain_id,
            breakdown=breakdown,
            estimated_apy=estimated_apy,
            estimated_monthly_earnings=monthly_earnings,
            borrow_capacity_usd=input_amount * self.config.borrow_ltv,
            fees=self.calculate_fees(input_amount, source_chain_id),
            preset=allocation.name,
            estimated_gas=self.config.estimated_gas,
            gas_price=self.config.gas_price,
        )
        logger.info(
            f"Quoted {input_amount} USD from chain {source_chain_id}: "
            f"{len(breakdown)} assets, {estimated_apy:.2f}% APY"
        )
        return quote
