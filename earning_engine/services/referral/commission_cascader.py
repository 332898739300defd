"""
Task commission cascader.

Pays a share of a completed task's reward up the sponsor chain. The chain is
walked through ``sponsor_id`` pointers for at most TASK_COMMISSION_DEPTH
steps; the step counter is also what stops a cyclic sponsor graph. Runs
inside the ledger writer's transaction and never commits.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import (
    TASK_COMMISSION_DEPTH,
    TASK_COMMISSION_RATES,
)
from earning_engine.models.enums import (
    CommissionSource,
    MembershipStatus,
    TransactionStatus,
    TransactionType,
)
from earning_engine.repositories.referral_commission_repository import (
    ReferralCommissionEarningRepository,
)
from earning_engine.repositories.transaction_repository import (
    TransactionRepository,
)
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.services.notification import NotificationService
from earning_engine.services.reward.reward_calculator import (
    commission_for_level,
)
from earning_engine.utils.exceptions import LedgerError


@dataclass
class CommissionCredit:
    """One sponsor credit produced by a cascade."""

    sponsor_id: int
    level: int
    amount: Decimal


@dataclass
class CascadeResult:
    """Result of a commission cascade."""

    credits: list[CommissionCredit] = field(default_factory=list)
    skipped_levels: list[int] = field(default_factory=list)

    @property
    def total(self) -> Decimal:
        """Total amount credited across levels."""
        return sum((c.amount for c in self.credits), Decimal("0"))


class CommissionCascader:
    """
    Distributes task commissions to up to five sponsor levels.

    Levels follow chain position: an inactive sponsor earns nothing but the
    walk continues through it, so the next sponsor gets the next level's rate.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize commission cascader.

        Args:
            session: Async database session (owned by the ledger writer)
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.earning_repo = ReferralCommissionEarningRepository(session)
        self.notifications = NotificationService(session)

    async def cascade(
        self,
        source_user_id: int,
        first_sponsor_id: int | None,
        plan_name: str | None,
        task_reward: Decimal | int,
        now: datetime,
    ) -> CascadeResult:
        """
        Credit commissions for one completed task.

        Args:
            source_user_id: User who completed the task
            first_sponsor_id: The user's direct sponsor
            plan_name: The completing user's plan (recorded for reporting)
            task_reward: Reward paid for the task
            now: Ledger time

        Returns:
            CascadeResult with one credit per paid level

        Raises:
            LedgerError: If a sponsor row could not be credited
        """
        result = CascadeResult()
        current_id = first_sponsor_id
        level = 1

        while current_id is not None and level <= TASK_COMMISSION_DEPTH:
            sponsor = await self.user_repo.get_by_id(current_id)
            if sponsor is None:
                logger.debug(
                    "Sponsor missing, chain ends",
                    extra={"sponsor_id": current_id, "level": level},
                )
                break

            if sponsor.membership_status != MembershipStatus.ACTIVE:
                logger.debug(
                    "Inactive sponsor skipped",
                    extra={
                        "sponsor_id": sponsor.id,
                        "level": level,
                        "source_user_id": source_user_id,
                    },
                )
                result.skipped_levels.append(level)
            else:
                amount = commission_for_level(task_reward, level)
                if amount > 0:
                    credit = await self._credit(
                        sponsor_id=sponsor.id,
                        source_user_id=source_user_id,
                        plan_name=plan_name,
                        level=level,
                        amount=Decimal(amount),
                        task_reward=Decimal(task_reward),
                        now=now,
                    )
                    result.credits.append(credit)

            current_id = sponsor.sponsor_id
            level += 1

        return result

    async def _credit(
        self,
        sponsor_id: int,
        source_user_id: int,
        plan_name: str | None,
        level: int,
        amount: Decimal,
        task_reward: Decimal,
        now: datetime,
    ) -> CommissionCredit:
        rate = TASK_COMMISSION_RATES[level]

        updated = await self.user_repo.increment_counters(
            sponsor_id,
            balance=amount,
            available_voucher_pkr=amount,
            total_earnings=amount,
        )
        if not updated:
            raise LedgerError(f"Sponsor {sponsor_id} could not be credited")

        txn = await self.transaction_repo.create(
            user_id=sponsor_id,
            type=TransactionType.REFERRAL_COMMISSION,
            amount=amount,
            status=TransactionStatus.COMPLETED,
            description=f"Level {level} referral commission from task completion",
            meta={
                "level": level,
                "referred_user_id": source_user_id,
                "task_reward": str(task_reward),
                "commission_rate": str(rate),
                "source": CommissionSource.TASK.value,
            },
            created_at=now,
        )
        await self.earning_repo.create(
            user_id=sponsor_id,
            referred_user_id=source_user_id,
            membership_plan=plan_name,
            level=level,
            amount=amount,
            source=CommissionSource.TASK,
            transaction_id=txn.id,
            earning_date=now,
        )

        logger.info(
            "Task commission credited",
            extra={
                "sponsor_id": sponsor_id,
                "source_user_id": source_user_id,
                "level": level,
                "rate": str(rate),
                "amount": str(amount),
            },
        )

        await self.notifications.notify_user(
            sponsor_id,
            title="Referral Commission Earned",
            message=(
                f"You earned PKR {amount} commission from your Level {level} "
                "referral's task completion."
            ),
            category="REFERRAL",
            data={"level": level, "referred_user_id": source_user_id},
        )

        return CommissionCredit(sponsor_id=sponsor_id, level=level, amount=amount)
