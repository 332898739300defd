"""
TaskCompletion repository.

Data access layer for task assignments and their payout state.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.enums import TaskCompletionStatus
from earning_engine.models.task_completion import TaskCompletion
from earning_engine.repositories.base import BaseRepository


class TaskCompletionRepository(BaseRepository[TaskCompletion]):
    """Task completion repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task completion repository."""
        super().__init__(TaskCompletion, session)

    async def find_for_day(
        self, user_id: int, assignment_date: date
    ) -> list[TaskCompletion]:
        """
        Get a user's assignment rows for one business day, by slot.

        Args:
            user_id: User ID
            assignment_date: Business-local date

        Returns:
            List of completions (task loaded)
        """
        stmt = (
            select(TaskCompletion)
            .where(
                TaskCompletion.user_id == user_id,
                TaskCompletion.assignment_date == assignment_date,
            )
            .order_by(TaskCompletion.slot)
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_pending_for_task(
        self,
        user_id: int,
        task_id: int,
        assignment_date: date,
        for_update: bool = False,
    ) -> TaskCompletion | None:
        """
        Get a PENDING assignment of a task for one business day.

        Rows left over from earlier days are never returned. When the task
        fills several slots that day, the lowest slot wins.

        Args:
            user_id: User ID
            task_id: Task ID
            assignment_date: Business-local date of the assignment
            for_update: Lock the row until the transaction ends

        Returns:
            Completion or None
        """
        stmt = (
            select(TaskCompletion)
            .where(
                TaskCompletion.user_id == user_id,
                TaskCompletion.task_id == task_id,
                TaskCompletion.assignment_date == assignment_date,
                TaskCompletion.status == TaskCompletionStatus.PENDING,
            )
            .order_by(TaskCompletion.slot)
            .limit(1)
        )
        if for_update:
            stmt = stmt.with_for_update(of=TaskCompletion).execution_options(
                populate_existing=True
            )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def has_completed_task(
        self, user_id: int, task_id: int, assignment_date: date
    ) -> bool:
        """Check whether the user was paid for this task on that day."""
        return await self.exists(
            user_id=user_id,
            task_id=task_id,
            assignment_date=assignment_date,
            status=TaskCompletionStatus.COMPLETED,
        )

    async def mark_completed(
        self, completion_id: int, reward: Decimal, completed_at: datetime
    ) -> bool:
        """
        Flip a PENDING completion to COMPLETED (compare-and-set).

        Only one concurrent caller can win; the loser sees False.

        Args:
            completion_id: Completion ID
            reward: Reward being paid
            completed_at: Payout time

        Returns:
            True if this call performed the transition
        """
        stmt = (
            update(TaskCompletion)
            .where(
                TaskCompletion.id == completion_id,
                TaskCompletion.status == TaskCompletionStatus.PENDING,
            )
            .values(
                status=TaskCompletionStatus.COMPLETED,
                reward=reward,
                progress=100,
                completed_at=completed_at,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def mark_rejected(
        self, completion_id: int, notes: str | None = None
    ) -> bool:
        """
        Flip a PENDING completion to REJECTED (compare-and-set).

        Args:
            completion_id: Completion ID
            notes: Reviewer notes

        Returns:
            True if this call performed the transition
        """
        values: dict[str, Any] = {"status": TaskCompletionStatus.REJECTED}
        if notes is not None:
            values["notes"] = notes
        stmt = (
            update(TaskCompletion)
            .where(
                TaskCompletion.id == completion_id,
                TaskCompletion.status == TaskCompletionStatus.PENDING,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def count_completed_between(
        self, user_id: int, start: datetime, end: datetime
    ) -> int:
        """
        Count a user's payouts with completed_at in [start, end).

        Args:
            user_id: User ID
            start: Range start (inclusive)
            end: Range end (exclusive)

        Returns:
            Number of completions
        """
        stmt = select(func.count()).select_from(TaskCompletion).where(
            TaskCompletion.user_id == user_id,
            TaskCompletion.status == TaskCompletionStatus.COMPLETED,
            TaskCompletion.completed_at >= start,
            TaskCompletion.completed_at < end,
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0
