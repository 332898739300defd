"""
Business logic constants for the earning engine.

Central location for business rules used across services and the HTTP layer.
Nothing here is read from the environment.
"""

from decimal import Decimal
from enum import StrEnum
from typing import NamedTuple


class PlanTier(StrEnum):
    """Membership tier names."""

    BASIC = "BASIC"
    STANDARD = "STANDARD"
    PREMIUM = "PREMIUM"


class PlanDefinition(NamedTuple):
    """Default membership plan definition (seed data for the catalog)."""

    name: PlanTier
    display_name: str
    price: int  # PKR
    daily_task_earning: int  # PKR per day across all tasks
    tasks_per_day: int
    max_earning_days: int  # Earning window without qualifying referrals
    extended_earning_days: int  # Earning window with a qualifying referral
    minimum_withdrawal: int
    voucher_amount: int


DEFAULT_PLANS: dict[PlanTier, PlanDefinition] = {
    PlanTier.BASIC: PlanDefinition(
        name=PlanTier.BASIC,
        display_name="Basic Plan",
        price=1000,
        daily_task_earning=50,
        tasks_per_day=5,
        max_earning_days=30,
        extended_earning_days=60,
        minimum_withdrawal=2000,
        voucher_amount=500,
    ),
    PlanTier.STANDARD: PlanDefinition(
        name=PlanTier.STANDARD,
        display_name="Standard Plan",
        price=3000,
        daily_task_earning=150,
        tasks_per_day=5,
        max_earning_days=30,
        extended_earning_days=60,
        minimum_withdrawal=4000,
        voucher_amount=1000,
    ),
    PlanTier.PREMIUM: PlanDefinition(
        name=PlanTier.PREMIUM,
        display_name="Premium Plan",
        price=8000,
        daily_task_earning=400,
        tasks_per_day=5,
        max_earning_days=30,
        extended_earning_days=60,
        minimum_withdrawal=10000,
        voucher_amount=1500,
    ),
}

# Used when neither a global override nor a plan earning is available
FALLBACK_TASK_REWARD = 30

# Earning windows used when the user has no resolvable plan
DEFAULT_MAX_EARNING_DAYS = 30
DEFAULT_EXTENDED_EARNING_DAYS = 60

# Referral tiers that let a user of a given tier extend the earning window.
# A tier missing from this map accepts a referral of any tier.
QUALIFYING_REFERRAL_TIERS: dict[PlanTier, frozenset[PlanTier]] = {
    PlanTier.STANDARD: frozenset({PlanTier.STANDARD, PlanTier.PREMIUM}),
    PlanTier.PREMIUM: frozenset({PlanTier.PREMIUM}),
}

# Task-completion commission cascade: share of the task reward per level.
# Independent of the signup-referral schedule (fixed amounts per plan).
TASK_COMMISSION_DEPTH = 5
TASK_COMMISSION_RATES: dict[int, Decimal] = {
    1: Decimal("0.10"),
    2: Decimal("0.05"),
    3: Decimal("0.03"),
    4: Decimal("0.02"),
    5: Decimal("0.01"),
}

# Signup-referral commission cascade depth
SIGNUP_COMMISSION_DEPTH = 5

# Default signup commissions per plan (PKR per level), seeded with the catalog
DEFAULT_SIGNUP_COMMISSIONS: dict[PlanTier, dict[int, int]] = {
    PlanTier.BASIC: {1: 200, 2: 100, 3: 30, 4: 15, 5: 5},
    PlanTier.STANDARD: {1: 250, 2: 200, 3: 170, 4: 160, 5: 120},
    PlanTier.PREMIUM: {1: 700, 2: 600, 3: 500, 4: 400, 5: 300},
}

# Task types whose submissions are paid without admin review
AUTO_APPROVE_TASK_TYPES = frozenset({
    "DAILY",
    "SIMPLE",
    "BASIC",
    "CONTENT_ENGAGEMENT",
})

# Task types eligible for daily assignment
ASSIGNABLE_TASK_TYPES = (
    "DAILY",
    "SIMPLE",
    "BASIC",
    "CONTENT_ENGAGEMENT",
    "VIDEO_WATCH",
)

# Content engagement thresholds applied when a task leaves them unset
CONTENT_DEFAULT_MIN_DURATION = 45  # seconds
CONTENT_DEFAULT_MIN_SCROLL_PERCENTAGE = 50
CONTENT_MIN_USER_INTERACTIONS = 3


class TaskTemplate(NamedTuple):
    """Built-in task template used when the catalog is empty."""

    title: str
    description: str
    type: str
    category: str
    instructions: str


DEFAULT_TASK_TEMPLATES: tuple[TaskTemplate, ...] = (
    TaskTemplate(
        title="Daily Check-in Task",
        description="Complete your daily check-in to earn rewards",
        type="DAILY",
        category="ENGAGEMENT",
        instructions="Click the Complete Task button to finish this daily check-in task.",
    ),
    TaskTemplate(
        title="Platform Engagement Task",
        description="Engage with the platform to earn rewards",
        type="SIMPLE",
        category="ENGAGEMENT",
        instructions="Complete this simple engagement task by clicking the Complete button.",
    ),
    TaskTemplate(
        title="Community Activity Task",
        description="Participate in community activities",
        type="BASIC",
        category="COMMUNITY",
        instructions="Show your community spirit by completing this basic task.",
    ),
    TaskTemplate(
        title="Learning Task",
        description="Learn something new today",
        type="BASIC",
        category="EDUCATION",
        instructions="Expand your knowledge by completing this learning task.",
    ),
    TaskTemplate(
        title="Achievement Task",
        description="Unlock your daily achievement",
        type="DAILY",
        category="ACHIEVEMENT",
        instructions="Claim your daily achievement by completing this task.",
    ),
)


def normalize_tier(name: str | None) -> PlanTier | None:
    """
    Normalize a stored plan name to a known tier.

    Args:
        name: Plan name in any case (or None)

    Returns:
        PlanTier or None if the name is empty or unknown
    """
    if not name:
        return None
    try:
        return PlanTier(name.strip().upper())
    except ValueError:
        return None
