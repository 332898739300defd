"""Notification rows for the external delivery system."""

from earning_engine.services.notification.service import NotificationService


__all__ = ["NotificationService"]
