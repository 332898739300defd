"""
MembershipPlan model.

Membership tier catalog. Read-only to the earning engine; seeded from
DEFAULT_PLANS and edited by administrators.
"""

from datetime import UTC, datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from earning_engine.models.base import Base


class MembershipPlan(Base):
    """
    Membership plan entity.

    Attributes:
        id: Primary key
        name: Tier name (BASIC/STANDARD/PREMIUM), unique
        display_name: Human readable name
        price: Plan price in PKR
        daily_task_earning: PKR earned per day across all tasks
        tasks_per_day: Tasks per day (5 in practice)
        max_earning_days: Earning window without qualifying referrals
        extended_earning_days: Earning window with a qualifying referral
        minimum_withdrawal: Minimum withdrawal in PKR
        voucher_amount: Voucher granted with the plan in PKR
        is_active: Plan is offered
    """

    __tablename__ = "membership_plans"
    __table_args__ = (
        CheckConstraint(
            "daily_task_earning >= 0",
            name="check_plan_daily_task_earning_non_negative",
        ),
        CheckConstraint(
            "tasks_per_day > 0", name="check_plan_tasks_per_day_positive"
        ),
        CheckConstraint(
            "extended_earning_days >= max_earning_days",
            name="check_plan_extended_days_not_shorter",
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    name: Mapped[str] = mapped_column(
        String(50), unique=True, index=True, nullable=False
    )
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)

    price: Mapped[int] = mapped_column(Integer, nullable=False)
    daily_task_earning: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    tasks_per_day: Mapped[int] = mapped_column(
        Integer, default=5, nullable=False
    )
    max_earning_days: Mapped[int] = mapped_column(
        Integer, default=30, nullable=False
    )
    extended_earning_days: Mapped[int] = mapped_column(
        Integer, default=60, nullable=False
    )
    minimum_withdrawal: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    voucher_amount: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

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

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<MembershipPlan(id={self.id}, name={self.name}, "
            f"daily_task_earning={self.daily_task_earning})>"
        )
