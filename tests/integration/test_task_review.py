"""Integration tests for manual review of submissions."""

from decimal import Decimal

import pytest

from earning_engine.models import Notification, TaskCompletion, Transaction, User
from earning_engine.models.enums import TaskCompletionStatus
from earning_engine.services.tasks import ReviewAction, TaskReviewService
from earning_engine.utils.exceptions import (
    TaskCompletionNotFoundError,
    TaskNotPendingReviewError,
)


pytestmark = pytest.mark.integration


@pytest.fixture
def submitted(make_user, make_task, assign, now):
    """A VIDEO_WATCH submission waiting for review, with a sponsor."""

    async def _submitted(reward: int = 25):
        sponsor = await make_user()
        user = await make_user(sponsor=sponsor)
        task = await make_task(type="VIDEO_WATCH", title="Watch the intro")
        completion = await assign(user, task, reward=reward, submitted_at=now)
        return sponsor, user, completion

    return _submitted


class TestApprove:
    """Approval pays the reward frozen at assignment."""

    @pytest.mark.asyncio
    async def test_approve_pays_frozen_reward(
        self, session, submitted, fetch, count_rows, now
    ):
        sponsor, user, completion = await submitted(reward=25)

        result = await TaskReviewService(session).review(
            completion.id, ReviewAction.APPROVE, notes="Looks good", now=now
        )

        assert result.status == TaskCompletionStatus.COMPLETED
        assert result.reward == Decimal("25")

        stored = await fetch(TaskCompletion, completion.id)
        assert stored.status == TaskCompletionStatus.COMPLETED
        assert stored.notes == "Looks good"
        assert (await fetch(User, user.id)).balance == Decimal("25")
        # 10% of 25 is 2.5, rounded up
        assert (await fetch(User, sponsor.id)).balance == Decimal("3")
        assert await count_rows(
            Notification, recipient_id=user.id, title="Task Completed"
        ) == 1

    @pytest.mark.asyncio
    async def test_second_approval_refused(
        self, session, submitted, fetch, count_rows, now
    ):
        _, user, completion = await submitted()
        user_id, completion_id = user.id, completion.id
        service = TaskReviewService(session)

        await service.review(completion_id, ReviewAction.APPROVE, now=now)
        with pytest.raises(TaskNotPendingReviewError):
            await service.review(completion_id, ReviewAction.APPROVE, now=now)

        assert (await fetch(User, user_id)).balance == Decimal("25")
        assert await count_rows(Transaction, user_id=user_id) == 1

    @pytest.mark.asyncio
    async def test_unsubmitted_completion_cannot_be_reviewed(
        self, session, make_user, make_task, assign, now
    ):
        user = await make_user()
        completion = await assign(user, await make_task(type="VIDEO_WATCH"))
        completion_id = completion.id

        with pytest.raises(TaskNotPendingReviewError):
            await TaskReviewService(session).review(
                completion_id, ReviewAction.APPROVE, now=now
            )

    @pytest.mark.asyncio
    async def test_unknown_completion(self, session, now):
        with pytest.raises(TaskCompletionNotFoundError):
            await TaskReviewService(session).review(
                987654, ReviewAction.APPROVE, now=now
            )


class TestReject:
    """Rejection is terminal and moves no money."""

    @pytest.mark.asyncio
    async def test_reject_marks_and_notifies(
        self, session, submitted, fetch, count_rows, now
    ):
        _, user, completion = await submitted()

        result = await TaskReviewService(session).review(
            completion.id, ReviewAction.REJECT, notes="Blurry proof", now=now
        )

        assert result.status == TaskCompletionStatus.REJECTED
        assert result.reward is None

        stored = await fetch(TaskCompletion, completion.id)
        assert stored.status == TaskCompletionStatus.REJECTED
        assert stored.notes == "Blurry proof"
        assert (await fetch(User, user.id)).balance == Decimal("0")
        assert await count_rows(Transaction) == 0
        assert await count_rows(
            Notification,
            recipient_id=user.id,
            title="Task Submission Rejected",
        ) == 1

    @pytest.mark.asyncio
    async def test_rejected_cannot_be_approved(
        self, session, submitted, fetch, now
    ):
        _, user, completion = await submitted()
        user_id, completion_id = user.id, completion.id
        service = TaskReviewService(session)

        await service.review(completion_id, ReviewAction.REJECT, now=now)
        with pytest.raises(TaskNotPendingReviewError):
            await service.review(completion_id, ReviewAction.APPROVE, now=now)

        assert (await fetch(User, user_id)).balance == Decimal("0")
