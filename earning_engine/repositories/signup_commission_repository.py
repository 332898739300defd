"""
SignupCommission repository.

Reads the per-plan fixed signup commission schedule.
"""

from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.signup_commission import SignupCommission
from earning_engine.repositories.base import BaseRepository


class SignupCommissionRepository(BaseRepository[SignupCommission]):
    """Signup commission repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize signup commission repository."""
        super().__init__(SignupCommission, session)

    async def get_schedule(self, membership_plan_id: int) -> dict[int, Decimal]:
        """
        Get active amounts per level for a plan.

        Args:
            membership_plan_id: Plan ID

        Returns:
            Mapping of level to PKR amount
        """
        stmt = (
            select(SignupCommission.level, SignupCommission.amount)
            .where(
                SignupCommission.membership_plan_id == membership_plan_id,
                SignupCommission.is_active.is_(True),
            )
            .order_by(SignupCommission.level)
        )
        result = await self.session.execute(stmt)
        return {level: amount for level, amount in result.all()}
