"""
Eligibility evaluator.

Decides, fresh on every request, whether a user may earn right now and how
long the earning window lasts. Nothing here is persisted; the only stored
input besides the user's membership is the admin override
``earnings_continue_until``.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import StrEnum

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import (
    DEFAULT_EXTENDED_EARNING_DAYS,
    DEFAULT_MAX_EARNING_DAYS,
    QUALIFYING_REFERRAL_TIERS,
    normalize_tier,
)
from earning_engine.models.enums import MembershipStatus
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.models.user import User
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.utils.datetime_utils import (
    days_until,
    ensure_utc,
    utc_now,
)
from earning_engine.utils.exceptions import NotEligibleError


class EligibilityReason(StrEnum):
    """Outcome of the eligibility gate."""

    ELIGIBLE = "ELIGIBLE"
    MEMBERSHIP_INACTIVE = "MEMBERSHIP_INACTIVE"
    TASKS_DISABLED = "TASKS_DISABLED"
    REFERRAL_REQUIRED = "REFERRAL_REQUIRED"
    WINDOW_EXPIRED = "WINDOW_EXPIRED"


@dataclass(frozen=True)
class EligibilityResult:
    """Eligibility decision with the computed earning window."""

    eligible: bool
    reason: EligibilityReason
    message: str | None
    window_start: datetime | None = None
    window_end: datetime | None = None
    total_earning_days: int = 0
    days_remaining: int = 0
    has_qualifying_referral: bool = False

    def raise_if_ineligible(self) -> None:
        """
        Raise NotEligibleError unless eligible.

        Raises:
            NotEligibleError: With the human readable reason
        """
        if not self.eligible:
            raise NotEligibleError(self.message or "Not eligible", self.reason)


def has_qualifying_referral(
    plan_name: str | None, referral_plans: Sequence[str | None]
) -> bool:
    """
    Apply the tier rule for extending the earning window.

    BASIC (or no recognised plan) accepts any direct referral. STANDARD
    needs a STANDARD or PREMIUM referral. PREMIUM needs a PREMIUM referral.

    Args:
        plan_name: The user's own plan name
        referral_plans: Plan names of the user's direct referrals

    Returns:
        True if at least one referral qualifies
    """
    if not referral_plans:
        return False

    accepted = QUALIFYING_REFERRAL_TIERS.get(normalize_tier(plan_name))
    if accepted is None:
        return True

    return any(normalize_tier(p) in accepted for p in referral_plans)


def evaluate_eligibility(
    user: User,
    plan: MembershipPlan | None,
    referral_plans: Sequence[str | None],
    now: datetime,
) -> EligibilityResult:
    """
    Decide whether a user may earn at ``now``.

    Pure function over already loaded data.

    Args:
        user: User being evaluated
        plan: The user's resolved plan (None falls back to 30/60 days)
        referral_plans: Plan names of the user's direct referrals
        now: Evaluation time

    Returns:
        EligibilityResult
    """
    if user.membership_status != MembershipStatus.ACTIVE:
        return EligibilityResult(
            eligible=False,
            reason=EligibilityReason.MEMBERSHIP_INACTIVE,
            message="Membership not active",
        )

    if not user.tasks_enabled:
        return EligibilityResult(
            eligible=False,
            reason=EligibilityReason.TASKS_DISABLED,
            message="Tasks are disabled for your account. Please contact admin.",
        )

    now = ensure_utc(now)
    start = ensure_utc(user.membership_start_date or user.created_at) or now
    base_days = plan.max_earning_days if plan else DEFAULT_MAX_EARNING_DAYS
    extended_days = (
        plan.extended_earning_days if plan else DEFAULT_EXTENDED_EARNING_DAYS
    )
    override = ensure_utc(user.earnings_continue_until)

    qualified = has_qualifying_referral(user.membership_plan, referral_plans)
    total_days = extended_days if qualified else base_days

    window_end = start + timedelta(days=total_days)
    if override is not None and override > window_end:
        window_end = override

    if now <= window_end:
        return EligibilityResult(
            eligible=True,
            reason=EligibilityReason.ELIGIBLE,
            message=None,
            window_start=start,
            window_end=window_end,
            total_earning_days=total_days,
            days_remaining=days_until(window_end, now),
            has_qualifying_referral=qualified,
        )

    if qualified:
        reason = EligibilityReason.WINDOW_EXPIRED
        message = "Your earning period has expired"
    else:
        reason = EligibilityReason.REFERRAL_REQUIRED
        if referral_plans:
            message = (
                "Your earning continuation requires specific referral "
                "types. Please check your referral requirements."
            )
        else:
            message = (
                f"Your {base_days}-day earning period has expired. "
                "You need at least 1 referral to continue earning."
            )

    return EligibilityResult(
        eligible=False,
        reason=reason,
        message=message,
        window_start=start,
        window_end=window_end,
        total_earning_days=total_days,
        days_remaining=0,
        has_qualifying_referral=qualified,
    )


class EligibilityEvaluator:
    """
    Loads a user's plan and direct referrals and evaluates eligibility.
    """

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize eligibility evaluator.

        Args:
            session: Async database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.plan_repo = MembershipPlanRepository(session)

    async def evaluate(
        self,
        user: User,
        now: datetime | None = None,
        plan: MembershipPlan | None = None,
    ) -> EligibilityResult:
        """
        Evaluate eligibility for a loaded user.

        Args:
            user: User to evaluate
            now: Evaluation time (defaults to current UTC time)
            plan: Already resolved plan, looked up by name when omitted

        Returns:
            EligibilityResult
        """
        now = now or utc_now()
        if plan is None:
            plan = await self.plan_repo.get_by_name(user.membership_plan)
        referral_plans = await self.user_repo.get_direct_referral_plans(user.id)

        result = evaluate_eligibility(user, plan, referral_plans, now)

        if not result.eligible:
            logger.info(
                "User not eligible to earn",
                extra={
                    "user_id": user.id,
                    "reason": result.reason,
                    "plan": user.membership_plan,
                    "referrals": len(referral_plans),
                },
            )
        return result

    async def ensure_eligible(
        self,
        user: User,
        now: datetime | None = None,
        plan: MembershipPlan | None = None,
    ) -> EligibilityResult:
        """
        Evaluate eligibility and raise when the user may not earn.

        Raises:
            NotEligibleError: If the gate refuses earning
        """
        result = await self.evaluate(user, now=now, plan=plan)
        result.raise_if_ineligible()
        return result
