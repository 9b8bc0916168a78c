"""Named preset allocations."""

from types import MappingProxyType
from typing import List

from src.core.errors import InvalidAllocationError
from src.core.models import Allocation

PRESETS = MappingProxyType({
    "conservative": Allocation.from_pairs(
        [("wbtc", "50"), ("weth", "30"), ("usdc", "20")],
        name="conservative",
    ),
    "balanced": Allocation.from_pairs(
        [("wbtc", "35"), ("weth", "35"), ("arb", "20"), ("usdc", "10")],
        name="balanced",
    ),
    "growth": Allocation.from_pairs(
        [("wbtc", "25"), ("weth", "30"), ("arb", "35"), ("usdc", "10")],
        name="growth",
    ),
})


def preset_names() -> List[str]:
    return list(PRESETS.keys())


def get_preset(name: str) -> Allocation:
    """Look up a preset allocation by name.

    Raises:
        InvalidAllocationError: If the preset does not exist
    """
    try:
        return PRESETS[name]
    except (KeyError, TypeError):
        raise InvalidAllocationError(
            f"Unknown preset {name!r}, expected one of: {', '.join(PRESETS)}"
        ) from None
