"""
MembershipPlan repository.

Data access layer for the plan catalog.
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.membership_plan import MembershipPlan
from earning_engine.repositories.base import BaseRepository


class MembershipPlanRepository(BaseRepository[MembershipPlan]):
    """Membership plan repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize membership plan repository."""
        super().__init__(MembershipPlan, session)

    async def get_by_name(self, name: str | None) -> MembershipPlan | None:
        """
        Get plan by name, ignoring case.

        Args:
            name: Plan name as stored on the user

        Returns:
            Plan or None when the name is empty or unknown
        """
        if not name:
            return None
        stmt = select(MembershipPlan).where(
            func.upper(MembershipPlan.name) == name.strip().upper()
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
