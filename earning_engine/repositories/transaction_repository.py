"""
Transaction repository.

Append-only access to the ledger: rows are created and read, never changed.
"""

from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.transaction import Transaction
from earning_engine.repositories.base import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    """Transaction repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize transaction repository."""
        super().__init__(Transaction, session)

    async def sum_amount(self, user_id: int, type: str) -> Decimal:
        """
        Sum a user's ledger amounts of one type.

        Args:
            user_id: User ID
            type: Transaction type

        Returns:
            Total amount (0 when there are none)
        """
        stmt = select(func.coalesce(func.sum(Transaction.amount), 0)).where(
            Transaction.user_id == user_id,
            Transaction.type == type,
        )
        result = await self.session.execute(stmt)
        return Decimal(str(result.scalar() or 0))
