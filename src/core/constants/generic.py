"""Generic constants for DeFi rate calculations.

These constants are protocol-agnostic and can be used across different protocols.
"""

# Time constants (365-day year, matching on-chain annualization)
SECONDS_PER_YEAR = 365 * 24 * 3600  # 31,536,000
DAYS_PER_YEAR = 365
MONTHS_PER_YEAR = 12

# Fixed-point decimals: ray (Aave rates and indexes), 30 (GMX rates and USD values)
RAY_EXPONENT = 27
FLOAT_PRECISION_EXPONENT = 30

# USDC amounts on the wire are 6-decimal micro units
USDC_DECIMALS = 6
USDC_MICRO = 10**USDC_DECIMALS
