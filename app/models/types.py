"""
Standard type definitions for database models.

Provides consistent types for monetary and percentage fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for order totals, commissions, balances
# Precision: 18 digits total, 2 after decimal point (currency minor unit)
# Range: up to 9,999,999,999,999,999.99
MoneyType = DECIMAL(18, 2)

# Sales volume accumulators share the money precision
VolumeType = DECIMAL(18, 2)

# Commission rate percentage
# Precision: 7 digits total, 4 after decimal point
# Suitable for: direct and override rates (e.g., 12.5000%, 0.5000%)
# Range: 0.0000 to 999.9999
RatePercentType = DECIMAL(7, 4)
