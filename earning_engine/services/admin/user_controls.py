"""
Admin user controls.

Task kill-switch, earning window extension and membership activation.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.enums import MembershipStatus
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.models.user import User
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.user_repository import UserRepository
from earning_engine.services.base_service import BaseService, transaction
from earning_engine.services.notification import NotificationService
from earning_engine.services.referral.commission_cascader import CascadeResult
from earning_engine.services.referral.signup_commission import (
    SignupCommissionService,
)
from earning_engine.utils.datetime_utils import ensure_utc, utc_now
from earning_engine.utils.exceptions import (
    InvalidEarningWindowError,
    PlanNotFoundError,
    UserNotFoundError,
)


@dataclass
class ActivationResult:
    """Result of a membership activation."""

    user: User
    plan: MembershipPlan
    commissions: CascadeResult


class AdminUserControlService(BaseService):
    """Admin controls over a user's earning."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize admin user control service."""
        super().__init__(session)
        self.user_repo = UserRepository(session)
        self.plan_repo = MembershipPlanRepository(session)
        self.notifications = NotificationService(session)
        self.signup_commissions = SignupCommissionService(session)

    async def _get_user(self, user_id: int) -> User:
        user = await self.user_repo.get_by_id(user_id, for_update=True)
        if user is None:
            raise UserNotFoundError()
        return user

    @transaction
    async def set_tasks_enabled(self, user_id: int, enabled: bool) -> User:
        """
        Enable or disable earning for a user.

        Args:
            user_id: User ID
            enabled: New kill-switch value

        Returns:
            Updated user
        """
        user = await self._get_user(user_id)
        user.tasks_enabled = enabled
        await self.session.flush()

        state = "enabled" if enabled else "disabled"
        await self.notifications.notify_admins(
            title="Task Control Updated",
            message=f"Admin {state} tasks for user {user.name or user.email}",
            category="ADMIN",
            data={"user_id": user.id, "tasks_enabled": enabled},
        )
        self.logger.info(
            f"Tasks {state} for user",
            extra={"user_id": user.id, "tasks_enabled": enabled},
        )
        return user

    @transaction
    async def extend_earning_window(
        self, user_id: int, until: datetime
    ) -> User:
        """
        Move a user's earning override later.

        Args:
            user_id: User ID
            until: New ``earnings_continue_until``

        Returns:
            Updated user

        Raises:
            InvalidEarningWindowError: ``until`` is not later than the
                current override
        """
        user = await self._get_user(user_id)
        until = ensure_utc(until)
        current = ensure_utc(user.earnings_continue_until)
        if current is not None and until <= current:
            raise InvalidEarningWindowError()

        user.earnings_continue_until = until
        await self.session.flush()

        self.logger.info(
            "Earning window extended by admin",
            extra={"user_id": user.id, "until": until.isoformat()},
        )
        return user

    @transaction
    async def activate_membership(
        self,
        user_id: int,
        plan_name: str,
        now: datetime | None = None,
    ) -> ActivationResult:
        """
        Activate a membership and pay signup commissions up the chain.

        Args:
            user_id: User ID
            plan_name: Plan name (any case)
            now: Activation time (defaults to current UTC time)

        Returns:
            ActivationResult

        Raises:
            UserNotFoundError: Unknown user
            PlanNotFoundError: Unknown plan
        """
        now = ensure_utc(now) if now else utc_now()
        user = await self._get_user(user_id)
        plan = await self.plan_repo.get_by_name(plan_name)
        if plan is None:
            raise PlanNotFoundError()

        window_end = now + timedelta(days=plan.max_earning_days)
        user.membership_plan = plan.name
        user.membership_status = MembershipStatus.ACTIVE
        user.tasks_enabled = True
        user.membership_start_date = now
        user.membership_end_date = window_end
        user.earnings_continue_until = window_end
        await self.session.flush()

        self.logger.info(
            "Membership activated",
            extra={"user_id": user.id, "plan": plan.name},
        )

        commissions = CascadeResult()
        if user.sponsor_id is not None:
            commissions = await self.signup_commissions.distribute(
                user, plan, now
            )

        return ActivationResult(user=user, plan=plan, commissions=commissions)
