"""
Standard type definitions for database models.

Provides consistent types for monetary and rate fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for PKR amounts, balances, rewards
# Precision: 18 digits total, 2 after decimal point
# Rewards and commissions are whole rupees; the scale leaves room for
# admin adjustments made elsewhere.
MoneyType = DECIMAL(18, 2)

# Commission rate type (fraction, e.g. 0.1000 = 10%)
RateType = DECIMAL(7, 4)
