"""
SignupCommission model.

Fixed PKR amounts paid up the sponsor chain when a referred user's
membership is activated. Unrelated to the task-completion cascade rates.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from earning_engine.models.base import Base
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.models.types import MoneyType, RateType


class SignupCommission(Base):
    """
    Signup commission entry (one per plan and level).

    Attributes:
        id: Primary key
        membership_plan_id: Plan being purchased by the referred user
        level: Sponsor level (1-5)
        amount: Fixed PKR amount paid at this level
        percentage: Informational percentage shown in the admin UI
        is_active: Entry is applied
    """

    __tablename__ = "signup_commissions"
    __table_args__ = (
        UniqueConstraint(
            "membership_plan_id", "level", name="uq_signup_commission_level"
        ),
        CheckConstraint(
            "level >= 1 AND level <= 5", name="check_signup_commission_level"
        ),
        CheckConstraint(
            "amount >= 0", name="check_signup_commission_amount_non_negative"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    membership_plan_id: Mapped[int] = mapped_column(
        ForeignKey("membership_plans.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    percentage: Mapped[Decimal] = mapped_column(
        RateType, default=Decimal("0"), nullable=False
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    membership_plan: Mapped[MembershipPlan] = relationship("MembershipPlan")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<SignupCommission(plan_id={self.membership_plan_id}, "
            f"level={self.level}, amount={self.amount})>"
        )
