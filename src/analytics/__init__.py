"""Rate normalization and yield blending."""

from .rates import (
    normalize,
    normalize_compounding_rate,
    normalize_linear_rate,
    parse_raw_rate,
)
from .blending import BlendingConfig, BlendingEngine, DEFAULT_BLENDING_CONFIG

__all__ = [
    "normalize",
    "normalize_compounding_rate",
    "normalize_linear_rate",
    "parse_raw_rate",
    "BlendingConfig",
    "BlendingEngine",
    "DEFAULT_BLENDING_CONFIG",
]
