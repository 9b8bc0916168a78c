"""GMX v2 protocol-specific configuration and constants (Arbitrum One)."""

from decimal import Decimal
from types import MappingProxyType

# REST API rate limits
GMX_API_RATE_LIMIT = 60  # requests per minute
GMX_API_RATE_WINDOW = 60  # seconds

# GM pool (market token) addresses backing each deposit asset
GMX_POOL_ADDRESSES = MappingProxyType({
    "wbtc": "0x47c031236e19d024b42f8AE6780E44A573170703",  # BTC/USD
    "weth": "0x70d95587d40A2caf56bd97485aB3Eec10Bee6336",  # ETH/USD
    "arb": "0xC25cEf6061Cf5dE5eb761b50E4743c1F5D7E5407",   # ARB/USD
    "usdc": "0x70d95587d40A2caf56bd97485aB3Eec10Bee6336",  # ETH/USD
})

# Deterministic pool APY estimates (%), stand-in for a live pool feed
POOL_APY_ESTIMATES = MappingProxyType({
    "wbtc": Decimal("12.0"),
    "weth": Decimal("15.0"),
    "arb": Decimal("18.0"),
    "usdc": Decimal("5.0"),
})
DEFAULT_POOL_APY_ESTIMATE = Decimal("10.0")

# Pool APY (%) used when the live pool feed misses an asset
FALLBACK_POOL_APY = MappingProxyType({
    "wbtc": Decimal("16.87"),
    "weth": Decimal("19.29"),
    "arb": Decimal("17.76"),
    "usdc": Decimal("19.29"),
})
DEFAULT_FALLBACK_POOL_APY = Decimal("15")
