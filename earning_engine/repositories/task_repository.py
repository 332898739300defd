"""
Task repository.

Data access layer for Task model.
"""

from collections.abc import Iterable

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.enums import TaskStatus
from earning_engine.models.task import Task
from earning_engine.repositories.base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Task repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task repository."""
        super().__init__(Task, session)

    async def find_active_by_types(
        self, types: Iterable[str], limit: int | None = None
    ) -> list[Task]:
        """
        Get ACTIVE tasks of the given types, newest first.

        Args:
            types: Allowed task types
            limit: Max number of tasks

        Returns:
            List of tasks
        """
        stmt = (
            select(Task)
            .where(
                Task.status == TaskStatus.ACTIVE,
                Task.type.in_(list(types)),
            )
            .order_by(Task.created_at.desc(), Task.id.desc())
        )
        if limit:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_completions(self, task_id: int) -> bool:
        """
        Atomically add one approved completion to a task.

        Args:
            task_id: Task ID

        Returns:
            True if the task row was updated
        """
        stmt = (
            update(Task)
            .where(Task.id == task_id)
            .values(completions=Task.completions + 1)
        )
        result = await self.session.execute(stmt)
        return result.rowcount > 0
