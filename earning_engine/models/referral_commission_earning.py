"""
ReferralCommissionEarning model.

Per-level commission audit record, kept apart from the generic
transaction log for reporting.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from earning_engine.models.base import Base
from earning_engine.models.enums import CommissionSource
from earning_engine.models.types import MoneyType


class ReferralCommissionEarning(Base):
    """
    Referral commission earning entity.

    Attributes:
        id: Primary key
        user_id: Sponsor who received the commission
        referred_user_id: User whose event produced the commission
        membership_plan: Plan of the referred user at the time
        level: Chain position (1-5)
        amount: PKR amount
        source: TASK (task cascade) or SIGNUP (membership activation)
        transaction_id: Matching ledger row
        earning_date: When it was earned
    """

    __tablename__ = "referral_commission_earnings"
    __table_args__ = (
        CheckConstraint(
            "level >= 1 AND level <= 5", name="check_commission_level_range"
        ),
        CheckConstraint(
            "amount > 0", name="check_commission_amount_positive"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    referred_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    membership_plan: Mapped[str | None] = mapped_column(
        String(50), nullable=True
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    source: Mapped[str] = mapped_column(
        String(20), default=CommissionSource.TASK, nullable=False, index=True
    )
    transaction_id: Mapped[int | None] = mapped_column(
        ForeignKey("transactions.id", ondelete="SET NULL"), nullable=True
    )
    earning_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<ReferralCommissionEarning(user_id={self.user_id}, "
            f"referred_user_id={self.referred_user_id}, level={self.level}, "
            f"amount={self.amount}, source={self.source})>"
        )
