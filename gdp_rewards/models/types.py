"""
Standard type definitions for database models.

Provides consistent types for monetary and percentage fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for GDP prices, balances, rewards
# Precision: 18 digits total, 8 after decimal point
# Range: up to 9,999,999,999.99999999
MoneyType = DECIMAL(18, 8)

# Standard percentage type for admin-configured reward settings
# Precision: 5 digits total, 2 after decimal point
# Column range: 0.00 to 999.99; reward_settings bounds it to 0-100 with check constraints
PercentType = DECIMAL(5, 2)
