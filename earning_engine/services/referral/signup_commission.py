"""
Signup commission service.

Pays the fixed per-plan signup commissions up to five sponsor levels when a
referred user's membership is activated. This schedule is configured per
plan in ``signup_commissions`` and is independent of the task commission
rates.
"""

from datetime import datetime, timedelta
from decimal import Decimal

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import SIGNUP_COMMISSION_DEPTH
from earning_engine.models.enums import (
    CommissionSource,
    MembershipStatus,
    TransactionStatus,
    TransactionType,
)
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.models.user import User
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.referral_commission_repository import (
    ReferralCommissionEarningRepository,
)
from earning_engine.repositories.signup_commission_repository import (
    SignupCommissionRepository,
)
from earning_engine.repositories.transaction_repository import (
    TransactionRepository,
)
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.services.eligibility.evaluator import (
    has_qualifying_referral,
)
from earning_engine.services.notification import NotificationService
from earning_engine.services.referral.commission_cascader import (
    CascadeResult,
    CommissionCredit,
)
from earning_engine.utils.datetime_utils import ensure_utc
from earning_engine.utils.exceptions import LedgerError


def signup_reference(user_id: int, plan_name: str, level: int) -> str:
    """Ledger reference that makes each signup commission payable once."""
    return f"{user_id}:{plan_name.upper()}:L{level}"


class SignupCommissionService:
    """Distributes signup commissions for a newly activated membership."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize signup commission service.

        Args:
            session: Async database session (caller owns the transaction)
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.plan_repo = MembershipPlanRepository(session)
        self.schedule_repo = SignupCommissionRepository(session)
        self.transaction_repo = TransactionRepository(session)
        self.earning_repo = ReferralCommissionEarningRepository(session)
        self.notifications = NotificationService(session)

    async def distribute(
        self, new_user: User, plan: MembershipPlan, now: datetime
    ) -> CascadeResult:
        """
        Credit signup commissions for ``new_user`` buying ``plan``.

        Levels without an active schedule entry are skipped and the walk
        continues. A level already paid for this user and plan (same ledger
        reference) is not paid again.

        Args:
            new_user: User whose membership was activated
            plan: Plan that was activated
            now: Ledger time

        Returns:
            CascadeResult with one credit per paid level
        """
        result = CascadeResult()
        schedule = await self.schedule_repo.get_schedule(plan.id)
        current_id = new_user.sponsor_id
        level = 1

        while current_id is not None and level <= SIGNUP_COMMISSION_DEPTH:
            sponsor = await self.user_repo.get_by_id(current_id)
            if sponsor is None:
                break

            amount = schedule.get(level)
            reference = signup_reference(new_user.id, plan.name, level)

            if not amount or amount <= 0:
                result.skipped_levels.append(level)
            elif await self.transaction_repo.exists(reference=reference):
                logger.info(
                    "Signup commission already paid",
                    extra={"reference": reference},
                )
                result.skipped_levels.append(level)
            else:
                await self._credit(sponsor, new_user, plan, level, amount, now)
                result.credits.append(
                    CommissionCredit(
                        sponsor_id=sponsor.id, level=level, amount=amount
                    )
                )
                if level == 1:
                    await self._extend_sponsor_window(sponsor, plan)

            current_id = sponsor.sponsor_id
            level += 1

        logger.info(
            "Signup commissions processed",
            extra={
                "user_id": new_user.id,
                "plan": plan.name,
                "levels_paid": len(result.credits),
                "total": str(result.total),
            },
        )
        return result

    async def _credit(
        self,
        sponsor: User,
        new_user: User,
        plan: MembershipPlan,
        level: int,
        amount: Decimal,
        now: datetime,
    ) -> None:
        updated = await self.user_repo.increment_counters(
            sponsor.id,
            balance=amount,
            referral_earnings=amount,
            total_earnings=amount,
        )
        if not updated:
            raise LedgerError(f"Sponsor {sponsor.id} could not be credited")

        member = new_user.name or new_user.email or "new member"
        txn = await self.transaction_repo.create(
            user_id=sponsor.id,
            type=TransactionType.REFERRAL_COMMISSION,
            amount=amount,
            status=TransactionStatus.COMPLETED,
            description=f"Level {level} referral commission from {member}",
            reference=signup_reference(new_user.id, plan.name, level),
            meta={
                "level": level,
                "referred_user_id": new_user.id,
                "membership_plan": plan.name,
                "source": CommissionSource.SIGNUP.value,
            },
            created_at=now,
        )
        await self.earning_repo.create(
            user_id=sponsor.id,
            referred_user_id=new_user.id,
            membership_plan=plan.name.upper(),
            level=level,
            amount=amount,
            source=CommissionSource.SIGNUP,
            transaction_id=txn.id,
            earning_date=now,
        )

        logger.info(
            "Signup commission credited",
            extra={
                "sponsor_id": sponsor.id,
                "user_id": new_user.id,
                "plan": plan.name,
                "level": level,
                "amount": str(amount),
            },
        )

        await self.notifications.notify_user(
            sponsor.id,
            title=f"Level {level} Commission Earned!",
            message=(
                f"You earned Rs.{amount} commission from {member}'s "
                f"{plan.display_name} purchase."
            ),
            category="REFERRAL",
            data={"level": level, "referred_user_id": new_user.id},
        )

    async def _extend_sponsor_window(
        self, sponsor: User, plan: MembershipPlan
    ) -> None:
        """
        Extend the direct sponsor's earning window after a qualifying signup.

        The window only ever moves later.
        """
        if sponsor.membership_status != MembershipStatus.ACTIVE:
            return
        if not has_qualifying_referral(sponsor.membership_plan, [plan.name]):
            return

        sponsor_plan = await self.plan_repo.get_by_name(sponsor.membership_plan)
        start = ensure_utc(sponsor.membership_start_date)
        if sponsor_plan is None or start is None:
            return

        new_end = start + timedelta(days=sponsor_plan.extended_earning_days)
        current = ensure_utc(sponsor.earnings_continue_until)
        if current is not None and new_end <= current:
            return

        sponsor.earnings_continue_until = new_end
        await self.session.flush()

        logger.info(
            "Sponsor earning window extended",
            extra={"sponsor_id": sponsor.id, "until": new_end.isoformat()},
        )
        await self.notifications.notify_user(
            sponsor.id,
            title="Earning Period Extended!",
            message=(
                f"Your earning period has been extended to "
                f"{new_end.date().isoformat()} due to your successful referral!"
            ),
            category="REFERRAL",
            type="INFO",
        )
