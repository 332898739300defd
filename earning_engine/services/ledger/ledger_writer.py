"""
Ledger writer.

The one code path that pays for a task. A payout is a single unit of work
on the caller's session: the completion flip, the user's counters, the
task counter, the ledger row, the sponsor cascade and the success
notification are committed together or rolled back together. The writer
never commits; services wrap it with ``@transaction``.

The PENDING -> COMPLETED flip is a compare-and-set UPDATE, so of any number
of concurrent payouts for one completion exactly one proceeds.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.enums import (
    TransactionStatus,
    TransactionType,
)
from earning_engine.models.task_completion import TaskCompletion
from earning_engine.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from earning_engine.repositories.task_repository import TaskRepository
from earning_engine.repositories.transaction_repository import (
    TransactionRepository,
)
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.services.notification import NotificationService
from earning_engine.services.referral.commission_cascader import (
    CascadeResult,
    CommissionCascader,
)
from earning_engine.utils.datetime_utils import ensure_utc, utc_now
from earning_engine.utils.exceptions import (
    EarningEngineError,
    LedgerError,
    TaskAlreadyCompletedError,
)
from earning_engine.utils.money import floor_points


@dataclass
class PayoutResult:
    """Result of a task payout."""

    completion_id: int
    user_id: int
    task_id: int
    reward: Decimal
    points: int
    commissions: CascadeResult

    @property
    def total_commissions(self) -> Decimal:
        """Total commission paid to sponsors."""
        return self.commissions.total


class LedgerWriter:
    """Writes the payout for one task completion."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize ledger writer.

        Args:
            session: Async database session (caller owns the transaction)
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.task_repo = TaskRepository(session)
        self.completion_repo = TaskCompletionRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.cascader = CommissionCascader(session)
        self.notifications = NotificationService(session)

    async def approve(
        self,
        completion: TaskCompletion,
        reward: Decimal | int,
        now: datetime | None = None,
    ) -> PayoutResult:
        """
        Pay ``reward`` for a PENDING completion.

        Steps, in order:
        1. Flip the completion to COMPLETED and freeze the reward
        2. Add the reward to the user's balance and total earnings,
           floor(reward) to points and one to tasks completed
        3. Add one to the task's completions
        4. Append a TASK_REWARD transaction
        5. Cascade commissions when the user has a sponsor
        6. Queue the success notification

        Args:
            completion: PENDING completion being paid
            reward: Integer PKR reward
            now: Ledger time (defaults to current UTC time)

        Returns:
            PayoutResult

        Raises:
            TaskAlreadyCompletedError: Another payout already flipped the row
            LedgerError: Any database failure; nothing is kept
        """
        now = ensure_utc(now) if now else utc_now()
        amount = Decimal(reward)
        points = floor_points(amount)

        try:
            flipped = await self.completion_repo.mark_completed(
                completion.id, amount, now
            )
            if not flipped:
                logger.info(
                    "Completion already paid, payout refused",
                    extra={"completion_id": completion.id},
                )
                raise TaskAlreadyCompletedError()

            user_updated = await self.user_repo.increment_counters(
                completion.user_id,
                balance=amount,
                total_earnings=amount,
                total_points=points,
                tasks_completed=1,
            )
            if not user_updated:
                raise LedgerError(f"User {completion.user_id} not found")

            await self.task_repo.increment_completions(completion.task_id)

            await self.transaction_repo.create(
                user_id=completion.user_id,
                type=TransactionType.TASK_REWARD,
                amount=amount,
                status=TransactionStatus.COMPLETED,
                description="Task completion reward",
                meta={
                    "task_id": completion.task_id,
                    "completion_id": completion.id,
                },
                created_at=now,
            )

            user = await self.user_repo.get_by_id(completion.user_id)
            commissions = CascadeResult()
            if user is not None and user.sponsor_id is not None:
                commissions = await self.cascader.cascade(
                    source_user_id=user.id,
                    first_sponsor_id=user.sponsor_id,
                    plan_name=user.membership_plan,
                    task_reward=amount,
                    now=now,
                )

            # The compare-and-set bypassed the identity map
            await self.session.refresh(completion)
        except EarningEngineError:
            raise
        except SQLAlchemyError as e:
            logger.error(
                "Ledger write aborted",
                extra={"completion_id": completion.id, "error": str(e)},
                exc_info=True,
            )
            raise LedgerError() from e

        logger.info(
            "Task reward paid",
            extra={
                "user_id": completion.user_id,
                "task_id": completion.task_id,
                "completion_id": completion.id,
                "reward": str(amount),
                "commissions": str(commissions.total),
            },
        )

        task_title = completion.task.title if completion.task else "Task"
        await self.notifications.notify_user(
            completion.user_id,
            title="Task Completed",
            message=(
                f'Your task "{task_title}" is complete. '
                f"PKR {amount} has been added to your account."
            ),
            category="TASK",
            data={"task_id": completion.task_id, "reward": str(amount)},
        )

        return PayoutResult(
            completion_id=completion.id,
            user_id=completion.user_id,
            task_id=completion.task_id,
            reward=amount,
            points=points,
            commissions=commissions,
        )
