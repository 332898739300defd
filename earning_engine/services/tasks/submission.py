"""
Task submission service.

Validates a submission, re-runs the eligibility gate and either pays the
task immediately (auto-approvable types) or queues it for admin review.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import AUTO_APPROVE_TASK_TYPES
from earning_engine.config.settings import Settings, settings
from earning_engine.models.enums import TaskCompletionStatus, TaskStatus
from earning_engine.models.task import Task
from earning_engine.models.task_completion import TaskCompletion
from earning_engine.models.user import User
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from earning_engine.repositories.task_repository import TaskRepository
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.services.base_service import BaseService, transaction
from earning_engine.services.eligibility.evaluator import EligibilityEvaluator
from earning_engine.services.ledger.ledger_writer import LedgerWriter
from earning_engine.services.notification import NotificationService
from earning_engine.services.reward.reward_calculator import RewardCalculator
from earning_engine.services.tasks.engagement_validator import (
    EngagementProof,
    missing_requirements,
)
from earning_engine.utils.datetime_utils import business_date, utc_now
from earning_engine.utils.exceptions import (
    RequirementsNotMetError,
    TaskAlreadyCompletedError,
    TaskNotFoundError,
    TaskNotStartedError,
    UserNotFoundError,
)


@dataclass
class TaskSubmission:
    """Proof sent by the user."""

    proof_text: str | None = None
    proof_links: list[str] = field(default_factory=list)
    notes: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SubmissionResult:
    """Outcome of a submission."""

    completion_id: int
    status: TaskCompletionStatus
    message: str
    reward_earned: int | None = None
    auto_approved: bool = False
    requires_approval: bool = False


class TaskSubmissionService(BaseService):
    """Handles task submissions."""

    def __init__(
        self, session: AsyncSession, config: Settings = settings
    ) -> None:
        """
        Initialize task submission service.

        Args:
            session: Async database session
            config: Application settings
        """
        super().__init__(session)
        self.config = config
        self.calculator = RewardCalculator(config)
        self.eligibility = EligibilityEvaluator(session)
        self.ledger = LedgerWriter(session)
        self.notifications = NotificationService(session)
        self.user_repo = UserRepository(session)
        self.plan_repo = MembershipPlanRepository(session)
        self.task_repo = TaskRepository(session)
        self.completion_repo = TaskCompletionRepository(session)

    @transaction
    async def submit(
        self,
        user_id: int,
        task_id: int,
        submission: TaskSubmission,
        now: datetime | None = None,
    ) -> SubmissionResult:
        """
        Submit proof for an assigned task.

        Args:
            user_id: Submitting user
            task_id: Task being submitted
            submission: Proof
            now: Request time (defaults to current UTC time)

        Returns:
            SubmissionResult with COMPLETED (paid) or PENDING (under review)

        Raises:
            TaskNotFoundError: Unknown or inactive task
            UserNotFoundError: Unknown user
            TaskNotStartedError: No PENDING assignment of the task today
            TaskAlreadyCompletedError: The assignment was already paid
            RequirementsNotMetError: Engagement proof below thresholds
            NotEligibleError: The user may not earn now
        """
        now = now or utc_now()

        task = await self.task_repo.get_by_id(task_id)
        if task is None or task.status != TaskStatus.ACTIVE:
            raise TaskNotFoundError("Task not found or inactive")

        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        today = business_date(now, self.config.business_timezone)
        completion = await self._get_pending_completion(user.id, task.id, today)

        if task.is_content_task:
            proof = EngagementProof.from_metadata(submission.metadata)
            missing = missing_requirements(task, proof)
            if missing:
                raise RequirementsNotMetError(missing)

        plan = await self.plan_repo.get_by_name(user.membership_plan)
        await self.eligibility.ensure_eligible(user, now=now, plan=plan)

        self._record_proof(completion, submission, now)

        if task.type in AUTO_APPROVE_TASK_TYPES:
            reward = self.calculator.per_task_reward(plan)
            await self.ledger.approve(completion, reward, now=now)
            return SubmissionResult(
                completion_id=completion.id,
                status=TaskCompletionStatus.COMPLETED,
                message=(
                    "Task completed successfully! "
                    f"PKR {reward} has been added to your account."
                ),
                reward_earned=reward,
                auto_approved=True,
            )

        await self.session.flush()
        await self._notify_review_needed(user, task, completion)

        self.logger.info(
            "Task submitted for review",
            extra={
                "user_id": user.id,
                "task_id": task.id,
                "completion_id": completion.id,
            },
        )
        return SubmissionResult(
            completion_id=completion.id,
            status=TaskCompletionStatus.PENDING,
            message=(
                "Task submitted successfully! "
                "Your submission is being reviewed."
            ),
            requires_approval=True,
        )

    async def _get_pending_completion(
        self, user_id: int, task_id: int, today: date
    ) -> TaskCompletion:
        completion = await self.completion_repo.get_pending_for_task(
            user_id, task_id, today, for_update=True
        )
        if completion is not None:
            return completion
        if await self.completion_repo.has_completed_task(
            user_id, task_id, today
        ):
            raise TaskAlreadyCompletedError()
        raise TaskNotStartedError()

    @staticmethod
    def _record_proof(
        completion: TaskCompletion,
        submission: TaskSubmission,
        now: datetime,
    ) -> None:
        completion.tracking_data = {
            "proofText": submission.proof_text,
            "proofLinks": list(submission.proof_links),
            "submittedAt": now.isoformat(),
            "metadata": dict(submission.metadata),
        }
        completion.notes = submission.notes
        completion.progress = 100
        completion.submitted_at = now

    async def _notify_review_needed(
        self, user: User, task: Task, completion: TaskCompletion
    ) -> None:
        await self.notifications.notify_admins(
            title="New Task Submission",
            message=f"User has submitted task: {task.title}",
            category="TASK_SUBMISSION",
            data={
                "task_id": task.id,
                "completion_id": completion.id,
                "user_id": user.id,
                "task_title": task.title,
                "user_name": user.name or user.email,
            },
        )
