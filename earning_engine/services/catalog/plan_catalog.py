"""
Plan catalog seeding.

Writes the default membership plans and their signup-commission schedule.
Existing rows are left untouched so admin edits survive a re-run.
"""

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.config.business_constants import (
    DEFAULT_PLANS,
    DEFAULT_SIGNUP_COMMISSIONS,
    PlanDefinition,
)
from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.repositories.membership_plan_repository import (
    MembershipPlanRepository,
)
from earning_engine.repositories.signup_commission_repository import (
    SignupCommissionRepository,
)
from earning_engine.services.base_service import BaseService, transaction


@dataclass
class SeedResult:
    """Rows created by a seeding run."""

    plans_created: int = 0
    commissions_created: int = 0


class PlanCatalogService(BaseService):
    """Seeds the membership plan catalog."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize plan catalog service."""
        super().__init__(session)
        self.plan_repo = MembershipPlanRepository(session)
        self.commission_repo = SignupCommissionRepository(session)

    @transaction
    async def seed_defaults(self) -> SeedResult:
        """
        Create missing default plans and signup-commission levels.

        Returns:
            SeedResult with the number of created rows
        """
        result = SeedResult()

        for tier, definition in DEFAULT_PLANS.items():
            plan = await self.plan_repo.get_by_name(tier)
            if plan is None:
                plan = await self._create_plan(definition)
                result.plans_created += 1

            existing_levels = await self.commission_repo.find_by(
                membership_plan_id=plan.id
            )
            known = {row.level for row in existing_levels}
            for level, amount in DEFAULT_SIGNUP_COMMISSIONS[tier].items():
                if level in known:
                    continue
                await self.commission_repo.create(
                    membership_plan_id=plan.id,
                    level=level,
                    amount=Decimal(amount),
                    percentage=(
                        Decimal(amount) * 100 / definition.price
                    ).quantize(Decimal("0.0001")),
                    is_active=True,
                )
                result.commissions_created += 1

        self.logger.info(
            "Plan catalog seeded",
            extra={
                "plans_created": result.plans_created,
                "commissions_created": result.commissions_created,
            },
        )
        return result

    async def _create_plan(self, definition: PlanDefinition) -> MembershipPlan:
        return await self.plan_repo.create(
            name=str(definition.name),
            display_name=definition.display_name,
            price=definition.price,
            daily_task_earning=definition.daily_task_earning,
            tasks_per_day=definition.tasks_per_day,
            max_earning_days=definition.max_earning_days,
            extended_earning_days=definition.extended_earning_days,
            minimum_withdrawal=definition.minimum_withdrawal,
            voucher_amount=definition.voucher_amount,
            is_active=True,
        )
