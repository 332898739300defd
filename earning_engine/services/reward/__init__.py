"""Reward calculation."""

from earning_engine.services.reward.reward_calculator import (
    RewardCalculator,
    commission_for_level,
    per_task_reward,
)


__all__ = ["RewardCalculator", "commission_for_level", "per_task_reward"]
