"""
Manual review of submitted tasks.

Approval goes through the same ledger writer as auto-approval and pays the
reward frozen on the completion at assignment time.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import StrEnum

from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.enums import TaskCompletionStatus
from earning_engine.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from earning_engine.services.base_service import BaseService, transaction
from earning_engine.services.ledger.ledger_writer import LedgerWriter
from earning_engine.services.notification import NotificationService
from earning_engine.utils.datetime_utils import utc_now
from earning_engine.utils.exceptions import (
    TaskCompletionNotFoundError,
    TaskNotPendingReviewError,
)


class ReviewAction(StrEnum):
    """Admin decision on a submission."""

    APPROVE = "approve"
    REJECT = "reject"


@dataclass
class ReviewResult:
    """Outcome of a review."""

    completion_id: int
    status: TaskCompletionStatus
    reward: Decimal | None = None


class TaskReviewService(BaseService):
    """Approves or rejects submissions waiting for review."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize task review service."""
        super().__init__(session)
        self.completion_repo = TaskCompletionRepository(session)
        self.ledger = LedgerWriter(session)
        self.notifications = NotificationService(session)

    @transaction
    async def review(
        self,
        completion_id: int,
        action: ReviewAction,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> ReviewResult:
        """
        Apply an admin decision to a submitted PENDING completion.

        Args:
            completion_id: Completion ID
            action: approve or reject
            notes: Reviewer notes
            now: Review time (defaults to current UTC time)

        Returns:
            ReviewResult

        Raises:
            TaskCompletionNotFoundError: Unknown completion
            TaskNotPendingReviewError: Not PENDING or never submitted
        """
        now = now or utc_now()
        completion = await self.completion_repo.get_by_id(
            completion_id, for_update=True
        )
        if completion is None:
            raise TaskCompletionNotFoundError()
        if not completion.is_pending or not completion.is_submitted:
            raise TaskNotPendingReviewError()

        if action == ReviewAction.APPROVE:
            if notes is not None:
                completion.notes = notes
            payout = await self.ledger.approve(
                completion, completion.reward, now=now
            )
            self.logger.info(
                "Submission approved",
                extra={"completion_id": completion.id, "reward": str(payout.reward)},
            )
            return ReviewResult(
                completion_id=completion.id,
                status=TaskCompletionStatus.COMPLETED,
                reward=payout.reward,
            )

        if not await self.completion_repo.mark_rejected(completion.id, notes):
            raise TaskNotPendingReviewError()
        await self.session.refresh(completion)

        task_title = completion.task.title if completion.task else "Task"
        await self.notifications.notify_user(
            completion.user_id,
            title="Task Submission Rejected",
            message=f'Your task "{task_title}" submission was not approved.',
            category="TASK",
            type="WARNING",
            data={"completion_id": completion.id, "notes": notes},
        )
        self.logger.info(
            "Submission rejected", extra={"completion_id": completion.id}
        )
        return ReviewResult(
            completion_id=completion.id,
            status=TaskCompletionStatus.REJECTED,
        )
