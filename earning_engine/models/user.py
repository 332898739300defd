"""
User model.

Represents a platform member with membership and earning state.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from earning_engine.models.base import Base
from earning_engine.models.enums import MembershipStatus
from earning_engine.models.types import MoneyType


if TYPE_CHECKING:
    from earning_engine.models.task_completion import TaskCompletion
    from earning_engine.models.transaction import Transaction


class User(Base):
    """
    User entity.

    Balance counters (balance, total_earnings, available_voucher_pkr,
    total_points, tasks_completed, referral_earnings) only grow, and only
    through the ledger writer and the commission cascades, using atomic
    SQL increments.

    Attributes:
        id: Primary key
        sponsor_id: Referring user (parent pointer, may be None)
        membership_plan: Tier name (BASIC/STANDARD/PREMIUM) or None
        membership_status: ACTIVE/INACTIVE/EXPIRED
        membership_start_date: Start of the earning window
        tasks_enabled: Admin kill-switch for earning
        earnings_continue_until: Admin override that can only extend the window
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            "balance >= 0", name="check_user_balance_non_negative"
        ),
        CheckConstraint(
            "total_earnings >= 0",
            name="check_user_total_earnings_non_negative",
        ),
        CheckConstraint(
            "available_voucher_pkr >= 0",
            name="check_user_voucher_non_negative",
        ),
        CheckConstraint(
            "total_points >= 0", name="check_user_points_non_negative"
        ),
        CheckConstraint(
            "tasks_completed >= 0",
            name="check_user_tasks_completed_non_negative",
        ),
    )

    # Primary key
    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )

    # Identity
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str | None] = mapped_column(
        String(255), nullable=True, unique=True
    )
    referral_code: Mapped[str | None] = mapped_column(
        String(20), nullable=True, unique=True, index=True
    )

    # Referral
    sponsor_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Membership
    membership_plan: Mapped[str | None] = mapped_column(
        String(50), nullable=True, index=True
    )
    membership_status: Mapped[str] = mapped_column(
        String(20),
        default=MembershipStatus.INACTIVE,
        nullable=False,
        index=True,
    )
    membership_start_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    membership_end_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    earnings_continue_until: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Admin override; can only extend the earning window",
    )
    tasks_enabled: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    # Balances
    balance: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    total_earnings: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    available_voucher_pkr: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    referral_earnings: Mapped[Decimal] = mapped_column(
        MoneyType,
        default=Decimal("0"),
        nullable=False,
        comment="Signup-referral commissions received",
    )
    total_points: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    tasks_completed: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    sponsor: Mapped[Optional["User"]] = relationship(
        "User",
        remote_side=[id],
        back_populates="referrals",
        foreign_keys=[sponsor_id],
    )
    referrals: Mapped[list["User"]] = relationship(
        "User",
        back_populates="sponsor",
        foreign_keys=[sponsor_id],
    )
    task_completions: Mapped[list["TaskCompletion"]] = relationship(
        "TaskCompletion",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    transactions: Mapped[list["Transaction"]] = relationship(
        "Transaction",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_membership_active(self) -> bool:
        """Check whether the membership is ACTIVE."""
        return self.membership_status == MembershipStatus.ACTIVE

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<User(id={self.id}, plan={self.membership_plan}, "
            f"status={self.membership_status}, sponsor_id={self.sponsor_id})>"
        )
