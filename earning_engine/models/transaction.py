"""
Transaction model.

Append-only audit ledger of money movements.
"""

from datetime import UTC, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import JSON, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from earning_engine.models.base import Base
from earning_engine.models.enums import TransactionStatus
from earning_engine.models.types import MoneyType


if TYPE_CHECKING:
    from earning_engine.models.user import User


class Transaction(Base):
    """
    Transaction entity.

    Rows are inserted once and never updated or deleted.

    Attributes:
        id: Primary key
        user_id: Credited user
        type: TASK_REWARD/REFERRAL_COMMISSION
        amount: PKR amount
        status: COMPLETED
        reference: External reference (signup cascade idempotence key)
        meta: JSON metadata (level, source user, rate)
    """

    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(MoneyType, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=TransactionStatus.COMPLETED, nullable=False
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    reference: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )
    meta: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
        index=True,
    )

    user: Mapped["User"] = relationship("User", back_populates="transactions")

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<Transaction(id={self.id}, user_id={self.user_id}, "
            f"type={self.type}, amount={self.amount})>"
        )
