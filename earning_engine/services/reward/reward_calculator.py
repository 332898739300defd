"""
Reward calculator.

Single source of truth for per-task rewards and task commissions. Task
submission, daily assignment, review and user statistics all go through
this module so they always agree on the amount.
"""

from decimal import Decimal
from typing import Protocol

from earning_engine.config.business_constants import (
    FALLBACK_TASK_REWARD,
    TASK_COMMISSION_RATES,
)
from earning_engine.config.settings import Settings, settings
from earning_engine.utils.money import round_pkr


class PlanEarning(Protocol):
    """Anything carrying a plan's daily task earning."""

    daily_task_earning: int


def per_task_reward(
    plan: PlanEarning | None,
    global_override: int | None,
    tasks_per_day: int = 5,
) -> int:
    """
    Calculate the PKR reward for one completed task.

    Precedence: a positive global override, then the plan's daily task
    earning divided by tasks per day (rounded half-up), then the fallback.

    Args:
        plan: Resolved membership plan or None
        global_override: GLOBAL_TASK_AMOUNT, if configured
        tasks_per_day: Tasks per day (5 in practice)

    Returns:
        Integer PKR reward

    Example:
        >>> per_task_reward(None, 40)
        40
        >>> per_task_reward(None, None)
        30
    """
    if global_override and global_override > 0:
        return global_override

    daily = plan.daily_task_earning if plan is not None else 0
    if daily and daily > 0 and tasks_per_day > 0:
        return round_pkr(Decimal(daily) / Decimal(tasks_per_day))

    return FALLBACK_TASK_REWARD


def commission_for_level(task_reward: Decimal | int, level: int) -> int:
    """
    Calculate the task commission for a sponsor level.

    Args:
        task_reward: Reward of the completed task
        level: Chain position (1-5)

    Returns:
        Integer PKR commission (0 for levels without a rate)
    """
    rate = TASK_COMMISSION_RATES.get(level)
    if rate is None:
        return 0
    return round_pkr(Decimal(task_reward) * rate)


class RewardCalculator:
    """
    Reward calculator bound to a configuration.

    Carries the global override and tasks-per-day so call sites never
    read them on their own. The configured tasks-per-day, which is also
    the number of rows assigned each day, is the divisor; a plan's stored
    ``tasks_per_day`` is not consulted.
    """

    def __init__(self, config: Settings = settings) -> None:
        """
        Initialize reward calculator.

        Args:
            config: Application settings
        """
        self.global_override = config.global_task_amount
        self.tasks_per_day = config.tasks_per_day

    def per_task_reward(self, plan: PlanEarning | None) -> int:
        """Per-task reward for a resolved plan (or None)."""
        return per_task_reward(plan, self.global_override, self.tasks_per_day)

    def daily_earning(self, plan: PlanEarning | None) -> int:
        """What a full day of tasks pays."""
        return self.per_task_reward(plan) * self.tasks_per_day

    @staticmethod
    def commission(task_reward: Decimal | int, level: int) -> int:
        """Task commission for a sponsor level."""
        return commission_for_level(task_reward, level)
