"""Asset-level and portfolio-level APY blending."""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping, Optional

from src.core.models import (
    Allocation,
    AssetClass,
    AssetRates,
    AssetYieldProfile,
)
from src.analytics.rates import to_percentage
from src.protocols.assets import AssetRegistry, get_default_registry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceWeights:
    """Share of blended yield attributed to each source kind."""

    lending: Decimal
    pool: Decimal

    @property
    def total(self) -> Decimal:
        return self.lending + self.pool


@dataclass(frozen=True)
class BlendingConfig:
    """Weighting table and protocol fee.

    Stablecoin weights sum to 0.70 on purpose: the remaining 30% belongs to
    yield sources that are not modeled, and the blend stays partial.
    """

    stablecoin_weights: SourceWeights = field(
        default_factory=lambda: SourceWeights(Decimal("0.50"), Decimal("0.20"))
    )
    default_weights: SourceWeights = field(
        default_factory=lambda: SourceWeights(Decimal("0.40"), Decimal("0.60"))
    )
    # Taken on yield, not principal
    protocol_fee_rate: Decimal = Decimal("0.10")

    def weights_for(self, asset_class: AssetClass) -> SourceWeights:
        if asset_class == AssetClass.STABLECOIN:
            return self.stablecoin_weights
        return self.default_weights


DEFAULT_BLENDING_CONFIG = BlendingConfig()


def floor_rate(value: Any) -> Decimal:
    """Clamp a normalized rate to a finite, non-negative Decimal."""
    rate = to_percentage(value)
    if not rate.is_finite() or rate < 0:
        return Decimal("0")
    return rate


class BlendingEngine:
    """
    Combines lending-market and pool-market APYs into one figure per asset.

    blended = lending * w_lending + pool * w_pool
    net     = blended * (1 - protocol_fee_rate)
    """

    def __init__(
        self,
        registry: Optional[AssetRegistry] = None,
        config: BlendingConfig = DEFAULT_BLENDING_CONFIG,
    ):
        self.registry = registry or get_default_registry()
        self.config = config

    def net_apy(self, blended_apy: Decimal) -> Decimal:
        """Deduct the protocol's yield fee."""
        return blended_apy * (Decimal("1") - self.config.protocol_fee_rate)

    def blend(self, asset_id: str, lending_apy: Any, pool_apy: Any) -> AssetYieldProfile:
        """
        Blend one asset's source APYs.

        NaN or negative inputs are floored to 0 before weighting.

        Args:
            asset_id: Supported asset id
            lending_apy: Lending-market APY (%)
            pool_apy: Pool-market APY (%)

        Returns:
            AssetYieldProfile with blended and net APY

        Raises:
            AssetNotFoundError: If the asset is not in the registry
        """
        asset = self.registry.get(asset_id)
        weights = self.config.weights_for(asset.asset_class)

        lending = floor_rate(lending_apy)
        pool = floor_rate(pool_apy)
        if lending != to_percentage(lending_apy) or pool != to_percentage(pool_apy):
            logger.debug(
                f"Floored source APYs for {asset_id}: "
                f"lending={lending_apy!r} pool={pool_apy!r}"
            )

        blended = lending * weights.lending + pool * weights.pool

        return AssetYieldProfile(
            asset_id=asset_id,
            lending_apy=lending,
            pool_apy=pool,
            blended_apy=blended,
            net_apy=self.net_apy(blended),
            lending_weight=weights.lending,
            pool_weight=weights.pool,
        )

    def blend_rates(self, rates: AssetRates) -> AssetYieldProfile:
        """Blend a resolved rate pair."""
        return self.blend(rates.asset_id, rates.lending_apy, rates.pool_apy)

    @staticmethod
    def portfolio_apy(
        profiles: Mapping[str, AssetYieldProfile],
        allocation: Allocation,
    ) -> Decimal:
        """
        Percentage-weighted blended APY of an allocation.

        Uses each asset's full blended APY, not the net APY. Assets without
        a profile contribute nothing.
        """
        total = Decimal("0")
        for line in allocation.lines:
            profile = profiles.get(line.asset_id)
            if profile is None:
                continue
            total += profile.blended_apy * line.weight
        return total
