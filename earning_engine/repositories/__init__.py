"""
Repositories.

Data access layer, one repository per aggregate.
"""

from earning_engine.repositories.base import BaseRepository
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.notification_repository import (
    NotificationRepository,
)
from earning_engine.repositories.referral_commission_repository import (
    ReferralCommissionEarningRepository,
)
from earning_engine.repositories.signup_commission_repository import (
    SignupCommissionRepository,
)
from earning_engine.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from earning_engine.repositories.task_repository import TaskRepository
from earning_engine.repositories.transaction_repository import (
    TransactionRepository,
)
from earning_engine.repositories.user_repository import UserRepository


__all__ = [
    "BaseRepository",
    "MembershipPlanRepository",
    "NotificationRepository",
    "ReferralCommissionEarningRepository",
    "SignupCommissionRepository",
    "TaskCompletionRepository",
    "TaskRepository",
    "TransactionRepository",
    "UserRepository",
]
