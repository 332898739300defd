"""
Integration tests for the ledger writer.

Tests cover:
- Every write of a payout landing together
- Full rollback when a later step fails
- Exactly one payout for concurrent approvals of one completion
"""

from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError

from earning_engine.models import (
    Notification,
    ReferralCommissionEarning,
    Task,
    TaskCompletion,
    Transaction,
    User,
)
from earning_engine.models.enums import TaskCompletionStatus, TransactionType
from earning_engine.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from earning_engine.services.ledger import LedgerWriter
from earning_engine.services.referral import CommissionCascader
from earning_engine.services.tasks import TaskSubmission, TaskSubmissionService
from earning_engine.utils.exceptions import (
    LedgerError,
    TaskAlreadyCompletedError,
)


pytestmark = pytest.mark.integration


class TestPayout:
    """A payout writes every row and counter once."""

    @pytest.mark.asyncio
    async def test_approve_writes_full_payout(
        self, session, make_user, make_task, assign, fetch, count_rows, now
    ):
        sponsor = await make_user()
        user = await make_user(sponsor=sponsor)
        task = await make_task(title="Daily Check-in Task")
        completion = await assign(user, task, reward=50)

        result = await LedgerWriter(session).approve(completion, 50, now=now)
        await session.commit()

        assert result.reward == Decimal("50")
        assert result.points == 50
        assert [c.amount for c in result.commissions.credits] == [Decimal("5")]

        paid = await fetch(TaskCompletion, completion.id)
        assert paid.status == TaskCompletionStatus.COMPLETED
        assert paid.reward == Decimal("50")
        assert paid.progress == 100
        assert paid.completed_at is not None

        earner = await fetch(User, user.id)
        assert earner.balance == Decimal("50")
        assert earner.total_earnings == Decimal("50")
        assert earner.total_points == 50
        assert earner.tasks_completed == 1

        assert (await fetch(Task, task.id)).completions == 1
        assert await count_rows(
            Transaction, user_id=user.id, type=TransactionType.TASK_REWARD
        ) == 1

        upline = await fetch(User, sponsor.id)
        assert upline.balance == Decimal("5")
        assert upline.available_voucher_pkr == Decimal("5")
        assert upline.total_earnings == Decimal("5")

        assert await count_rows(
            Notification, recipient_id=user.id, title="Task Completed"
        ) == 1

    @pytest.mark.asyncio
    async def test_no_sponsor_no_cascade(
        self, session, make_user, make_task, assign, count_rows, now
    ):
        user = await make_user()
        completion = await assign(user, await make_task(), reward=30)

        result = await LedgerWriter(session).approve(completion, 30, now=now)
        await session.commit()

        assert result.total_commissions == Decimal("0")
        assert await count_rows(ReferralCommissionEarning) == 0
        assert await count_rows(Transaction) == 1


class TestRollback:
    """A failure anywhere leaves no trace of the payout."""

    @pytest.mark.asyncio
    async def test_cascade_failure_rolls_back_everything(
        self,
        session,
        config,
        plans,
        make_user,
        make_task,
        assign,
        fetch,
        count_rows,
        monkeypatch,
        now,
    ):
        sponsor = await make_user()
        user = await make_user(sponsor=sponsor)
        task = await make_task(type="DAILY")
        completion = await assign(user, task, reward=10)
        user_id, task_id, completion_id = user.id, task.id, completion.id

        async def broken_cascade(self, **kwargs):
            raise OperationalError("UPDATE users", {}, Exception("disk I/O error"))

        monkeypatch.setattr(CommissionCascader, "cascade", broken_cascade)

        service = TaskSubmissionService(session, config)
        with pytest.raises(LedgerError):
            await service.submit(user_id, task_id, TaskSubmission(), now=now)

        completion = await fetch(TaskCompletion, completion_id)
        assert completion.status == TaskCompletionStatus.PENDING
        assert completion.submitted_at is None

        earner = await fetch(User, user_id)
        assert earner.balance == Decimal("0")
        assert earner.total_points == 0
        assert earner.tasks_completed == 0

        assert (await fetch(Task, task_id)).completions == 0
        assert await count_rows(Transaction) == 0
        assert await count_rows(Notification) == 0


class TestDoublePayout:
    """Approving one completion twice pays once."""

    @pytest.mark.asyncio
    async def test_second_approval_of_same_object_is_refused(
        self, session, make_user, make_task, assign, fetch, now
    ):
        user = await make_user()
        user_id = user.id
        completion = await assign(user, await make_task(), reward=20)
        writer = LedgerWriter(session)

        await writer.approve(completion, 20, now=now)
        await session.commit()

        with pytest.raises(TaskAlreadyCompletedError):
            await writer.approve(completion, 20, now=now)
        await session.rollback()

        assert (await fetch(User, user_id)).balance == Decimal("20")

    @pytest.mark.asyncio
    async def test_concurrent_sessions_pay_once(
        self,
        session_maker,
        make_user,
        make_task,
        assign,
        fetch,
        count_rows,
        now,
    ):
        user = await make_user()
        task = await make_task()
        completion = await assign(user, task, reward=20)
        user_id, task_id = user.id, task.id

        # Both requests read the row while it is still PENDING
        async with session_maker() as first, session_maker() as second:
            first_view = await TaskCompletionRepository(
                first
            ).get_pending_for_task(user_id, task_id, now.date())
            second_view = await TaskCompletionRepository(
                second
            ).get_pending_for_task(user_id, task_id, now.date())
            await first.commit()
            await second.commit()
            assert first_view.is_pending and second_view.is_pending

            await LedgerWriter(first).approve(first_view, 20, now=now)
            await first.commit()

            with pytest.raises(TaskAlreadyCompletedError):
                await LedgerWriter(second).approve(second_view, 20, now=now)
            await second.rollback()

        earner = await fetch(User, user_id)
        assert earner.balance == Decimal("20")
        assert earner.tasks_completed == 1
        assert await count_rows(Transaction, user_id=user_id) == 1
        assert (await fetch(TaskCompletion, completion.id)).status == (
            TaskCompletionStatus.COMPLETED
        )
