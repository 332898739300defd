"""
Notification repository.

Data access layer for Notification model.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.notification import Notification
from earning_engine.repositories.base import BaseRepository


ADMIN_ROLE = "admin"


class NotificationRepository(BaseRepository[Notification]):
    """Notification repository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification repository."""
        super().__init__(Notification, session)

    async def find_admin_inbox(self) -> list[Notification]:
        """Get notifications addressed to administrators, oldest first."""
        stmt = (
            select(Notification)
            .where(
                Notification.recipient_id.is_(None),
                Notification.role == ADMIN_ROLE,
            )
            .order_by(Notification.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
