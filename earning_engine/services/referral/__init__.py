"""Referral commission cascades (task commissions and signup commissions)."""

from earning_engine.services.referral.commission_cascader import (
    CascadeResult,
    CommissionCascader,
    CommissionCredit,
)
from earning_engine.services.referral.signup_commission import (
    SignupCommissionService,
)


__all__ = [
    "CascadeResult",
    "CommissionCascader",
    "CommissionCredit",
    "SignupCommissionService",
]
