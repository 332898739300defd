"""
Shared enumerations for database models.
"""

from enum import StrEnum


class MembershipStatus(StrEnum):
    """User membership status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    EXPIRED = "EXPIRED"


class TaskStatus(StrEnum):
    """Task template status."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


class TaskCompletionStatus(StrEnum):
    """
    Task completion status.

    PENDING -> COMPLETED is the payout path; PENDING -> REJECTED is the
    admin review outcome. Neither terminal state ever changes again.
    """

    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    REJECTED = "REJECTED"


class TransactionType(StrEnum):
    """Ledger transaction type."""

    TASK_REWARD = "TASK_REWARD"
    REFERRAL_COMMISSION = "REFERRAL_COMMISSION"


class TransactionStatus(StrEnum):
    """Ledger transaction status."""

    COMPLETED = "COMPLETED"


class CommissionSource(StrEnum):
    """Which cascade produced a referral commission earning."""

    TASK = "TASK"
    SIGNUP = "SIGNUP"
