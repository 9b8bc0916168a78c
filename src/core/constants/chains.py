"""Chain identifiers."""

# Deposits settle on Arbitrum One
ARBITRUM_ONE_CHAIN_ID = 42161
