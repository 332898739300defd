"""Admin operations on users."""

from earning_engine.services.admin.user_controls import (
    ActivationResult,
    AdminUserControlService,
)


__all__ = ["ActivationResult", "AdminUserControlService"]
