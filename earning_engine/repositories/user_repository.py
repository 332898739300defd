"""
User repository.

Data access layer for User model. Balance counters are only ever changed
through ``increment_counters``, which issues a single atomic UPDATE.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.user import User
from earning_engine.repositories.base import BaseRepository


# Columns that may be incremented
COUNTER_COLUMNS = frozenset({
    "balance",
    "total_earnings",
    "available_voucher_pkr",
    "referral_earnings",
    "total_points",
    "tasks_completed",
})


class UserRepository(BaseRepository[User]):
    """User repository with specific queries."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize user repository."""
        super().__init__(User, session)

    async def get_direct_referral_plans(
        self, user_id: int
    ) -> list[str | None]:
        """
        Get the plan names of a user's direct referrals.

        Args:
            user_id: Sponsor user ID

        Returns:
            One entry per direct referral (None when the referral has no plan)
        """
        stmt = (
            select(User.membership_plan)
            .where(User.sponsor_id == user_id)
            .order_by(User.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_counters(
        self, user_id: int, **deltas: Decimal | int
    ) -> bool:
        """
        Atomically add deltas to balance counters.

        Args:
            user_id: User ID
            **deltas: Column name to amount to add

        Returns:
            True if the user row was updated

        Raises:
            ValueError: On an unknown or negative delta
        """
        values = {}
        for column, delta in deltas.items():
            if column not in COUNTER_COLUMNS:
                raise ValueError(f"Not a counter column: {column}")
            if delta < 0:
                raise ValueError(f"Counters only increase: {column}={delta}")
            values[column] = getattr(User, column) + delta

        if not values:
            return True

        stmt = update(User).where(User.id == user_id).values(**values)
        result = await self.session.execute(stmt)
        return result.rowcount > 0
