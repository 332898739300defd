"""
Integration tests for daily task assignment.

Tests cover:
- Idempotence within one business day, also under concurrent requests
- Round-robin over a small catalog
- Default templates for an empty catalog
- The eligibility gate
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from earning_engine.config.settings import Settings
from earning_engine.models import Task, TaskCompletion
from earning_engine.models.enums import MembershipStatus, TaskCompletionStatus
from earning_engine.services.eligibility import EligibilityReason
from earning_engine.services.tasks import DailyTaskAssignmentService
from earning_engine.utils.exceptions import NotEligibleError, UserNotFoundError


pytestmark = pytest.mark.integration


class TestAssignDailyTasks:
    """Assignment creates tasks_per_day rows once per day."""

    @pytest.mark.asyncio
    async def test_assigns_five_pending_tasks(
        self, session, config, plans, make_user, make_task, now
    ):
        user = await make_user(plan="PREMIUM")
        for _ in range(6):
            await make_task()

        assignment = await DailyTaskAssignmentService(
            session, config
        ).assign_daily_tasks(user.id, now=now)

        assert assignment.created is True
        assert len(assignment.completions) == 5
        assert assignment.per_task_reward == 80
        assert assignment.total_reward == 400
        assert [c.slot for c in assignment.completions] == [0, 1, 2, 3, 4]
        for completion in assignment.completions:
            assert completion.status == TaskCompletionStatus.PENDING
            assert completion.progress == 0
            assert completion.reward == Decimal("80")
            assert completion.assignment_date == now.date()

    @pytest.mark.asyncio
    async def test_second_call_returns_same_rows(
        self, session, config, plans, make_user, make_task, count_rows, now
    ):
        user = await make_user()
        await make_task()
        service = DailyTaskAssignmentService(session, config)

        first = await service.assign_daily_tasks(user.id, now=now)
        second = await service.assign_daily_tasks(
            user.id, now=now + timedelta(hours=3)
        )

        assert second.created is False
        assert [c.id for c in second.completions] == [
            c.id for c in first.completions
        ]
        assert await count_rows(TaskCompletion, user_id=user.id) == 5

    @pytest.mark.asyncio
    async def test_losing_concurrent_request_returns_todays_rows(
        self,
        session,
        session_maker,
        config,
        plans,
        make_user,
        make_task,
        count_rows,
        now,
        monkeypatch,
    ):
        """The second request read an empty day before the first committed."""
        user = await make_user()
        await make_task()
        user_id = user.id
        first = await DailyTaskAssignmentService(
            session, config
        ).assign_daily_tasks(user_id, now=now)
        first_ids = [c.id for c in first.completions]

        async with session_maker() as other:
            late = DailyTaskAssignmentService(other, config)
            find_for_day = late.completion_repo.find_for_day
            reads = []

            async def stale_first_read(*args, **kwargs):
                reads.append(args)
                if len(reads) == 1:
                    return []
                return await find_for_day(*args, **kwargs)

            monkeypatch.setattr(
                late.completion_repo, "find_for_day", stale_first_read
            )
            second = await late.assign_daily_tasks(user_id, now=now)

        assert second.created is False
        assert [c.id for c in second.completions] == first_ids
        assert await count_rows(TaskCompletion, user_id=user_id) == 5

    @pytest.mark.asyncio
    async def test_already_assigned_day_skips_gate(
        self, session, config, plans, make_user, make_task, now
    ):
        """Returning existing rows does not depend on eligibility."""
        user = await make_user()
        await make_task()
        service = DailyTaskAssignmentService(session, config)
        await service.assign_daily_tasks(user.id, now=now)

        user.tasks_enabled = False
        await session.commit()

        again = await service.assign_daily_tasks(user.id, now=now)
        assert again.created is False

    @pytest.mark.asyncio
    async def test_next_business_day_gets_new_rows(
        self, session, config, plans, make_user, make_task, count_rows, now
    ):
        user = await make_user()
        await make_task()
        service = DailyTaskAssignmentService(session, config)

        await service.assign_daily_tasks(user.id, now=now)
        tomorrow = await service.assign_daily_tasks(
            user.id, now=now + timedelta(days=1)
        )

        assert tomorrow.created is True
        assert tomorrow.assignment_date == (now + timedelta(days=1)).date()
        assert await count_rows(TaskCompletion, user_id=user.id) == 10

    @pytest.mark.asyncio
    async def test_round_robin_over_small_catalog(
        self, session, config, plans, make_user, make_task, now
    ):
        user = await make_user()
        older = await make_task(created_at=now - timedelta(days=2))
        newer = await make_task(created_at=now - timedelta(days=1))

        assignment = await DailyTaskAssignmentService(
            session, config
        ).assign_daily_tasks(user.id, now=now)

        assert [c.task_id for c in assignment.completions] == [
            newer.id,
            older.id,
            newer.id,
            older.id,
            newer.id,
        ]

    @pytest.mark.asyncio
    async def test_only_active_assignable_types(
        self, session, config, plans, make_user, make_task, now
    ):
        user = await make_user()
        wanted = await make_task(type="VIDEO_WATCH")
        await make_task(type="SURVEY")
        await make_task(status="INACTIVE")

        assignment = await DailyTaskAssignmentService(
            session, config
        ).assign_daily_tasks(user.id, now=now)

        assert {c.task_id for c in assignment.completions} == {wanted.id}

    @pytest.mark.asyncio
    async def test_empty_catalog_creates_default_tasks(
        self, session, config, plans, make_user, count_rows, now
    ):
        user = await make_user(plan="STANDARD")

        assignment = await DailyTaskAssignmentService(
            session, config
        ).assign_daily_tasks(user.id, now=now)

        assert await count_rows(Task) == 5
        titles = [c.task.title for c in assignment.completions]
        assert "Daily Check-in Task" in titles
        assert len(set(c.task_id for c in assignment.completions)) == 5
        assert assignment.per_task_reward == 30

    @pytest.mark.asyncio
    async def test_global_override_freezes_reward(
        self, session, plans, make_user, make_task, now
    ):
        config = Settings(
            database_url="sqlite+aiosqlite:///:memory:",
            environment="test",
            global_task_amount=40,
        )
        user = await make_user(plan="PREMIUM")
        await make_task()

        assignment = await DailyTaskAssignmentService(
            session, config
        ).assign_daily_tasks(user.id, now=now)

        assert {c.reward for c in assignment.completions} == {Decimal("40")}


class TestAssignmentGate:
    """Nothing is created for an ineligible user."""

    @pytest.mark.asyncio
    async def test_inactive_membership_refused(
        self, session, config, plans, make_user, make_task, count_rows, now
    ):
        user = await make_user(status=MembershipStatus.INACTIVE)
        user_id = user.id
        await make_task()

        with pytest.raises(NotEligibleError) as exc_info:
            await DailyTaskAssignmentService(
                session, config
            ).assign_daily_tasks(user_id, now=now)

        assert exc_info.value.reason_code == EligibilityReason.MEMBERSHIP_INACTIVE
        assert await count_rows(TaskCompletion) == 0

    @pytest.mark.asyncio
    async def test_expired_window_refused(
        self, session, config, plans, make_user, make_task, count_rows, now
    ):
        user = await make_user(start=now - timedelta(days=31))
        user_id = user.id
        await make_task()

        with pytest.raises(NotEligibleError) as exc_info:
            await DailyTaskAssignmentService(
                session, config
            ).assign_daily_tasks(user_id, now=now)

        assert exc_info.value.reason_code == EligibilityReason.REFERRAL_REQUIRED
        assert await count_rows(TaskCompletion) == 0

    @pytest.mark.asyncio
    async def test_unknown_user(self, session, config, now):
        with pytest.raises(UserNotFoundError):
            await DailyTaskAssignmentService(
                session, config
            ).assign_daily_tasks(424242, now=now)


class TestAssignmentStatus:
    """Read-only status of today's assignment."""

    @pytest.mark.asyncio
    async def test_status_counts(
        self, session, config, plans, make_user, make_task, now
    ):
        user = await make_user(start=now - timedelta(days=2, hours=1))
        await make_task()
        service = DailyTaskAssignmentService(session, config)
        assignment = await service.assign_daily_tasks(user.id, now=now)

        assignment.completions[0].status = TaskCompletionStatus.COMPLETED
        await session.commit()

        status = await service.get_status(user.id, now=now)

        assert status.completed_count == 1
        assert status.pending_count == 4
        assert status.per_task_reward == 10
        assert status.eligibility.eligible is True
        assert status.active_days == 3

    @pytest.mark.asyncio
    async def test_status_creates_nothing(
        self, session, config, plans, make_user, count_rows, now
    ):
        user = await make_user(tasks_enabled=False)

        status = await DailyTaskAssignmentService(
            session, config
        ).get_status(user.id, now=now)

        assert status.completions == []
        assert status.eligibility.reason == EligibilityReason.TASKS_DISABLED
        assert await count_rows(TaskCompletion) == 0
