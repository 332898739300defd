"""
User statistics.

Read-only dashboard figures. Per-task reward and the earning window come
from the same calculator and evaluator the payout path uses.
"""

from dataclasses import dataclass, field
from datetime import datetime, time, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import TASK_COMMISSION_DEPTH
from earning_engine.config.settings import Settings, settings
from earning_engine.models.enums import MembershipStatus
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.models.user import User
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.referral_commission_repository import (
    ReferralCommissionEarningRepository,
)
from earning_engine.repositories.task_completion_repository import (
    TaskCompletionRepository,
)
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.services.eligibility.evaluator import (
    EligibilityEvaluator,
    EligibilityResult,
)
from earning_engine.services.reward.reward_calculator import RewardCalculator
from earning_engine.utils.datetime_utils import (
    active_days_since,
    business_date,
    ensure_utc,
    utc_now,
)
from earning_engine.utils.exceptions import UserNotFoundError


@dataclass
class UserStatistics:
    """Dashboard statistics for one user."""

    user: User
    plan: MembershipPlan | None
    eligibility: EligibilityResult
    per_task_amount: int
    tasks_per_day: int
    completions_today: int
    active_days: int
    voucher_balance: Decimal
    total_referrals: int
    commission_breakdown: dict[int, Decimal] = field(default_factory=dict)

    @property
    def daily_earnings_today(self) -> int:
        return self.completions_today * self.per_task_amount


class UserStatisticsService:
    """Builds user dashboard statistics."""

    def __init__(
        self, session: AsyncSession, config: Settings = settings
    ) -> None:
        """
        Initialize user statistics service.

        Args:
            session: Async database session
            config: Application settings
        """
        self.session = session
        self.config = config
        self.calculator = RewardCalculator(config)
        self.eligibility = EligibilityEvaluator(session)
        self.user_repo = UserRepository(session)
        self.plan_repo = MembershipPlanRepository(session)
        self.completion_repo = TaskCompletionRepository(session)
        self.commission_repo = ReferralCommissionEarningRepository(session)

    async def get_statistics(
        self, user_id: int, now: datetime | None = None
    ) -> UserStatistics:
        """
        Collect statistics for a user.

        Args:
            user_id: User ID
            now: Request time (defaults to current UTC time)

        Returns:
            UserStatistics

        Raises:
            UserNotFoundError: Unknown user
        """
        now = now or utc_now()
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError()

        plan = await self.plan_repo.get_by_name(user.membership_plan)
        eligibility = await self.eligibility.evaluate(user, now=now, plan=plan)
        referral_plans = await self.user_repo.get_direct_referral_plans(user.id)

        day_start, day_end = self._business_day_bounds(now)
        completions_today = await self.completion_repo.count_completed_between(
            user.id, day_start, day_end
        )

        by_level = await self.commission_repo.sum_by_level(user.id)
        breakdown = {
            level: by_level.get(level, Decimal("0"))
            for level in range(1, TASK_COMMISSION_DEPTH + 1)
        }

        voucher = Decimal(user.available_voucher_pkr or 0)
        if (
            voucher == 0
            and user.membership_status == MembershipStatus.ACTIVE
            and plan is not None
        ):
            voucher = Decimal(plan.voucher_amount)

        start = user.membership_start_date or user.created_at or now

        return UserStatistics(
            user=user,
            plan=plan,
            eligibility=eligibility,
            per_task_amount=self.calculator.per_task_reward(plan),
            tasks_per_day=self.calculator.tasks_per_day,
            completions_today=completions_today,
            active_days=active_days_since(start, now),
            voucher_balance=voucher,
            total_referrals=len(referral_plans),
            commission_breakdown=breakdown,
        )

    def _business_day_bounds(self, now: datetime) -> tuple[datetime, datetime]:
        """UTC bounds of the business day containing ``now``."""
        zone = ZoneInfo(self.config.business_timezone)
        day = business_date(now, self.config.business_timezone)
        start = ensure_utc(datetime.combine(day, time.min, tzinfo=zone))
        return start, start + timedelta(days=1)
