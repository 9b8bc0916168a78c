"""Aave v3 protocol-specific configuration and constants (Arbitrum One)."""

from decimal import Decimal
from types import MappingProxyType

# AaveProtocolDataProvider (Arbitrum One)
AAVE_V3_POOL_DATA_PROVIDER = "0x69FA688f1Dc47d4B5d8029D5a35FB7a548310654"

# AaveProtocolDataProvider.getReserveData(asset) return tuple
POOL_DATA_PROVIDER_ABI = [
    {
        "inputs": [{"name": "asset", "type": "address"}],
        "name": "getReserveData",
        "outputs": [
            {"name": "unbacked", "type": "uint256"},
            {"name": "accruedToTreasuryScaled", "type": "uint256"},
            {"name": "totalAToken", "type": "uint256"},
            {"name": "totalStableDebt", "type": "uint256"},
            {"name": "totalVariableDebt", "type": "uint256"},
            {"name": "liquidityRate", "type": "uint256"},
            {"name": "variableBorrowRate", "type": "uint256"},
            {"name": "stableBorrowRate", "type": "uint256"},
            {"name": "averageStableBorrowRate", "type": "uint256"},
            {"name": "liquidityIndex", "type": "uint256"},
            {"name": "variableBorrowIndex", "type": "uint256"},
            {"name": "lastUpdateTimestamp", "type": "uint40"},
        ],
        "stateMutability": "view",
        "type": "function",
    },
]

# Tuple positions in the getReserveData result
LIQUIDITY_RATE_INDEX = 5
VARIABLE_BORROW_RATE_INDEX = 6

# Supply APY (%) used when the live fetch fails
FALLBACK_SUPPLY_APY = MappingProxyType({
    "wbtc": Decimal("0.02"),
    "weth": Decimal("1.85"),
    "usdc": Decimal("4.20"),
    "arb": Decimal("0.15"),
})

# Weighted-average borrow APR (%) charged on borrowed USD
DEFAULT_BORROW_APR = Decimal("4.8")
