"""User-facing read models."""

from earning_engine.services.user.statistics import (
    UserStatistics,
    UserStatisticsService,
)


__all__ = ["UserStatistics", "UserStatisticsService"]
