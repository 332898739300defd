"""
Notification service.

Writes notification rows inside the caller's transaction. Each write runs
in its own SAVEPOINT: a failed notification is logged and dropped, and
the surrounding payout still commits.
"""

from typing import Any

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from earning_engine.models.notification import Notification
from earning_engine.repositories.notification_repository import ADMIN_ROLE


class NotificationService:
    """Fire-and-forget notification writer."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize notification service."""
        self.session = session

    async def notify_user(
        self,
        user_id: int,
        title: str,
        message: str,
        category: str,
        type: str = "SUCCESS",
        data: dict[str, Any] | None = None,
    ) -> bool:
        """
        Queue a notification for a user.

        Args:
            user_id: Recipient
            title: Title
            message: Message text
            category: Category (TASK, REFERRAL, ...)
            type: INFO/SUCCESS/WARNING
            data: Extra JSON payload

        Returns:
            True if the row was written
        """
        return await self._write(
            Notification(
                recipient_id=user_id,
                title=title,
                message=message,
                category=category,
                type=type,
                data=data,
            )
        )

    async def notify_admins(
        self,
        title: str,
        message: str,
        category: str,
        data: dict[str, Any] | None = None,
    ) -> bool:
        """
        Queue a notification for the administrators' inbox.

        Returns:
            True if the row was written
        """
        return await self._write(
            Notification(
                recipient_id=None,
                role=ADMIN_ROLE,
                title=title,
                message=message,
                category=category,
                type="INFO",
                data=data,
            )
        )

    async def _write(self, notification: Notification) -> bool:
        try:
            async with self.session.begin_nested():
                self.session.add(notification)
        except SQLAlchemyError as e:
            logger.warning(
                "Notification dropped",
                extra={
                    "recipient_id": notification.recipient_id,
                    "title": notification.title,
                    "error": str(e),
                },
            )
            return False
        return True
