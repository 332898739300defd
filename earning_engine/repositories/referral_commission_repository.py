"""
ReferralCommissionEarning repository.

Read side of the per-level commission audit records.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.referral_commission_earning import (
    ReferralCommissionEarning,
)
from earning_engine.repositories.base import BaseRepository


class ReferralCommissionEarningRepository(
    BaseRepository[ReferralCommissionEarning]
):
    """Referral commission earning repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize referral commission earning repository."""
        super().__init__(ReferralCommissionEarning, session)

    async def sum_by_level(
        self, user_id: int, source: str | None = None
    ) -> dict[int, Decimal]:
        """
        Total commission a sponsor earned at each level.

        Args:
            user_id: Sponsor user ID
            source: Restrict to TASK or SIGNUP earnings

        Returns:
            Mapping of level to total amount (levels without earnings omitted)
        """
        stmt = (
            select(
                ReferralCommissionEarning.level,
                func.sum(ReferralCommissionEarning.amount),
            )
            .where(ReferralCommissionEarning.user_id == user_id)
            .group_by(ReferralCommissionEarning.level)
        )
        if source is not None:
            stmt = stmt.where(ReferralCommissionEarning.source == source)

        result = await self.session.execute(stmt)
        return {
            level: Decimal(str(total)) for level, total in result.all()
        }
