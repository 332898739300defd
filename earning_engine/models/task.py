"""
Task model.

Reusable task template assigned to users by the daily assignment.
"""

from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from earning_engine.config.business_constants import (
    CONTENT_DEFAULT_MIN_DURATION,
    CONTENT_DEFAULT_MIN_SCROLL_PERCENTAGE,
)
from earning_engine.models.base import Base
from earning_engine.models.enums import TaskStatus
from earning_engine.models.types import MoneyType


class Task(Base):
    """
    Task template entity.

    Content-engagement thresholds are only applied to content tasks
    (type CONTENT_ENGAGEMENT or any task with an article_url).

    Attributes:
        id: Primary key
        title: Task title
        type: DAILY/SIMPLE/BASIC/CONTENT_ENGAGEMENT/VIDEO_WATCH/...
        status: ACTIVE/INACTIVE
        reward: Nominal reward shown in the catalog (payouts use the plan)
        min_duration: Seconds the article must stay open
        min_scroll_percentage: Required scroll depth
        min_ad_clicks: Required advertisement clicks (0 = none)
        completions: Number of approved completions
    """

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "completions >= 0", name="check_task_completions_non_negative"
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(
        String(50), nullable=False, index=True
    )
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), default=TaskStatus.ACTIVE, nullable=False, index=True
    )
    reward: Mapped[Decimal] = mapped_column(
        MoneyType, default=Decimal("0"), nullable=False
    )

    # Content engagement
    article_url: Mapped[str | None] = mapped_column(
        String(500), nullable=True
    )
    min_duration: Mapped[int] = mapped_column(
        Integer, default=CONTENT_DEFAULT_MIN_DURATION, nullable=False
    )
    min_scroll_percentage: Mapped[int] = mapped_column(
        Integer, default=CONTENT_DEFAULT_MIN_SCROLL_PERCENTAGE, nullable=False
    )
    require_scrolling: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    require_mouse_movement: Mapped[bool] = mapped_column(
        Boolean, default=True, nullable=False
    )
    min_ad_clicks: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    # Counters
    completions: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )
    attempts: Mapped[int] = mapped_column(
        Integer, default=0, nullable=False
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )

    @property
    def is_content_task(self) -> bool:
        """Check whether engagement telemetry must be validated."""
        return bool(self.article_url) or self.type == "CONTENT_ENGAGEMENT"

    def __repr__(self) -> str:
        """String representation."""
        return f"<Task(id={self.id}, type={self.type}, status={self.status})>"
