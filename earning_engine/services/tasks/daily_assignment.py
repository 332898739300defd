"""
Daily task assignment.

Creates, once per business day, ``tasks_per_day`` PENDING completions for a
user. A second request on the same day returns the same rows.
"""

from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import (
    ASSIGNABLE_TASK_TYPES,
    DEFAULT_TASK_TEMPLATES,
)
from earning_engine.config.settings import Settings, settings
from earning_engine.models.enums import TaskCompletionStatus, TaskStatus
from earning_engine.models.membership_plan import MembershipPlan
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
from earning_engine.services.eligibility.evaluator import (
    EligibilityEvaluator,
    EligibilityResult,
)
from earning_engine.services.reward.reward_calculator import RewardCalculator
from earning_engine.utils.datetime_utils import (
    active_days_since,
    business_date,
    utc_now,
)
from earning_engine.utils.exceptions import UserNotFoundError


@dataclass
class DailyAssignment:
    """Today's assignment for a user."""

    assignment_date: date
    completions: list[TaskCompletion]
    per_task_reward: int
    plan: MembershipPlan | None
    created: bool

    @property
    def total_reward(self) -> int:
        """What the whole day pays."""
        return self.per_task_reward * len(self.completions)


@dataclass
class DailyAssignmentStatus:
    """Read-only view of today's assignment."""

    assignment_date: date
    completions: list[TaskCompletion]
    per_task_reward: int
    plan: MembershipPlan | None
    eligibility: EligibilityResult
    active_days: int

    @property
    def completed_count(self) -> int:
        return sum(
            1 for c in self.completions
            if c.status == TaskCompletionStatus.COMPLETED
        )

    @property
    def pending_count(self) -> int:
        return sum(
            1 for c in self.completions
            if c.status == TaskCompletionStatus.PENDING
        )


class DailyTaskAssignmentService(BaseService):
    """Assigns and reports a user's daily tasks."""

    def __init__(
        self, session: AsyncSession, config: Settings = settings
    ) -> None:
        """
        Initialize daily task assignment service.

        Args:
            session: Async database session
            config: Application settings
        """
        super().__init__(session)
        self.config = config
        self.calculator = RewardCalculator(config)
        self.eligibility = EligibilityEvaluator(session)
        self.user_repo = UserRepository(session)
        self.plan_repo = MembershipPlanRepository(session)
        self.task_repo = TaskRepository(session)
        self.completion_repo = TaskCompletionRepository(session)

    async def _get_user(self, user_id: int, for_update: bool = False) -> User:
        user = await self.user_repo.get_by_id(user_id, for_update=for_update)
        if user is None:
            raise UserNotFoundError()
        return user

    @transaction
    async def assign_daily_tasks(
        self, user_id: int, now: datetime | None = None
    ) -> DailyAssignment:
        """
        Create or return today's task assignment.

        Args:
            user_id: User ID
            now: Request time (defaults to current UTC time)

        Returns:
            DailyAssignment (``created`` is False when rows already existed)

        Raises:
            UserNotFoundError: Unknown user
            NotEligibleError: The user may not earn today
        """
        now = now or utc_now()
        # Serializes concurrent assignment requests of one user
        user = await self._get_user(user_id, for_update=True)
        today = business_date(now, self.config.business_timezone)
        quota = self.config.tasks_per_day

        existing = await self.completion_repo.find_for_day(user.id, today)
        plan = await self.plan_repo.get_by_name(user.membership_plan)
        per_task = self.calculator.per_task_reward(plan)

        if len(existing) >= quota:
            return DailyAssignment(
                assignment_date=today,
                completions=existing,
                per_task_reward=per_task,
                plan=plan,
                created=False,
            )

        await self.eligibility.ensure_eligible(user, now=now, plan=plan)

        templates = await self.task_repo.find_active_by_types(
            ASSIGNABLE_TASK_TYPES, limit=quota
        )
        if not templates:
            templates = await self._create_default_tasks(per_task)

        taken_slots = {c.slot for c in existing}
        try:
            async with self.session.begin_nested():
                for slot in range(quota):
                    if slot in taken_slots:
                        continue
                    task = templates[slot % len(templates)]
                    self.session.add(
                        TaskCompletion(
                            user_id=user.id,
                            task_id=task.id,
                            assignment_date=today,
                            slot=slot,
                            status=TaskCompletionStatus.PENDING,
                            progress=0,
                            reward=per_task,
                            created_at=now,
                        )
                    )
                await self.session.flush()
        except IntegrityError:
            # Another request filled today's slots first
            self.logger.info(
                "Daily tasks already assigned by a concurrent request",
                extra={
                    "user_id": user.id,
                    "assignment_date": today.isoformat(),
                },
            )
            return DailyAssignment(
                assignment_date=today,
                completions=await self.completion_repo.find_for_day(
                    user.id, today
                ),
                per_task_reward=per_task,
                plan=plan,
                created=False,
            )

        completions = await self.completion_repo.find_for_day(user.id, today)
        self.logger.info(
            "Daily tasks assigned",
            extra={
                "user_id": user.id,
                "assignment_date": today.isoformat(),
                "tasks": len(completions),
                "per_task_reward": per_task,
            },
        )
        return DailyAssignment(
            assignment_date=today,
            completions=completions,
            per_task_reward=per_task,
            plan=plan,
            created=True,
        )

    async def _create_default_tasks(self, per_task: int) -> list[Task]:
        """Seed the built-in task templates into an empty catalog."""
        tasks = [
            Task(
                title=template.title,
                description=template.description,
                type=template.type,
                category=template.category,
                instructions=template.instructions,
                status=TaskStatus.ACTIVE,
                reward=per_task,
            )
            for template in DEFAULT_TASK_TEMPLATES
        ]
        self.session.add_all(tasks)
        await self.session.flush()

        self.logger.warning(
            "Task catalog empty, default tasks created",
            extra={"count": len(tasks)},
        )
        return tasks

    async def get_status(
        self, user_id: int, now: datetime | None = None
    ) -> DailyAssignmentStatus:
        """
        Report today's assignment without creating anything.

        Args:
            user_id: User ID
            now: Request time (defaults to current UTC time)

        Returns:
            DailyAssignmentStatus
        """
        now = now or utc_now()
        user = await self._get_user(user_id)
        today = business_date(now, self.config.business_timezone)

        plan = await self.plan_repo.get_by_name(user.membership_plan)
        completions = await self.completion_repo.find_for_day(user.id, today)
        eligibility = await self.eligibility.evaluate(user, now=now, plan=plan)
        start = user.membership_start_date or now

        return DailyAssignmentStatus(
            assignment_date=today,
            completions=completions,
            per_task_reward=self.calculator.per_task_reward(plan),
            plan=plan,
            eligibility=eligibility,
            active_days=active_days_since(start, now),
        )
