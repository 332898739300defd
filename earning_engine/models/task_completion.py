"""
TaskCompletion model.

One row per assigned task slot per user per business day.
"""

from datetime import UTC, date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from earning_engine.models.base import Base
from earning_engine.models.enums import TaskCompletionStatus
from earning_engine.models.task import Task
from earning_engine.models.types import MoneyType


if TYPE_CHECKING:
    from earning_engine.models.user import User


class TaskCompletion(Base):
    """
    Task completion entity.

    The reward is frozen at assignment time and paid unchanged at approval.
    Status moves PENDING -> COMPLETED or PENDING -> REJECTED, never back.

    Attributes:
        id: Primary key
        user_id: Assigned user
        task_id: Task template
        assignment_date: Business-local calendar day of the assignment
        slot: Position in the day's assignment (0..tasks_per_day-1)
        status: PENDING/COMPLETED/REJECTED
        progress: 0..100
        reward: Frozen PKR reward
        tracking_data: Submitted proof blob
        submitted_at: When the user submitted proof (None = not submitted)
        completed_at: When the payout was written
    """

    __tablename__ = "task_completions"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "assignment_date",
            "slot",
            name="uq_task_completion_user_day_slot",
        ),
        CheckConstraint(
            "progress >= 0 AND progress <= 100",
            name="check_task_completion_progress_range",
        ),
        CheckConstraint(
            "reward >= 0", name="check_task_completion_reward_non_negative"
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
    task_id: Mapped[int] = mapped_column(
        ForeignKey("tasks.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assignment_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    slot: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20),
        default=TaskCompletionStatus.PENDING,
        nullable=False,
        index=True,
    )
    progress: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    reward: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )
    tracking_data: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    submitted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User", back_populates="task_completions"
    )
    task: Mapped[Task] = relationship("Task", lazy="joined", innerjoin=True)

    @property
    def is_pending(self) -> bool:
        """Check if the completion still awaits a payout decision."""
        return self.status == TaskCompletionStatus.PENDING

    @property
    def is_submitted(self) -> bool:
        """Check if proof was submitted."""
        return self.submitted_at is not None

    def __repr__(self) -> str:
        """String representation."""
        return (
            f"<TaskCompletion(id={self.id}, user_id={self.user_id}, "
            f"task_id={self.task_id}, day={self.assignment_date}, "
            f"slot={self.slot}, status={self.status})>"
        )
