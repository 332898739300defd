"""
Content engagement validation.

Checks the telemetry a client reports for an article task against the
task's thresholds and lists every requirement that was not met.
"""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from earning_engine.config.business_constants import (
    CONTENT_DEFAULT_MIN_DURATION,
    CONTENT_DEFAULT_MIN_SCROLL_PERCENTAGE,
    CONTENT_MIN_USER_INTERACTIONS,
)
from earning_engine.models.task import Task


def _number(value: Any) -> float:
    try:
        number = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    # Non-finite telemetry counts as zero
    return number if math.isfinite(number) else 0.0


@dataclass(frozen=True)
class EngagementProof:
    """Telemetry reported with a content task submission."""

    time_spent: float = 0
    scroll_percentage: float = 0
    user_interactions: float = 0
    ad_clicks: float = 0

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any] | None) -> "EngagementProof":
        """
        Build from the submission's ``metadata`` object.

        Unparseable, missing or non-finite values count as zero.
        """
        metadata = metadata or {}
        return cls(
            time_spent=_number(metadata.get("timeSpent")),
            scroll_percentage=_number(metadata.get("scrollPercentage")),
            user_interactions=_number(metadata.get("userInteractions")),
            ad_clicks=_number(metadata.get("adClicks")),
        )


def missing_requirements(task: Task, proof: EngagementProof) -> list[str]:
    """
    List every unmet engagement requirement of a content task.

    Args:
        task: Content task with its thresholds
        proof: Reported telemetry

    Returns:
        Human readable requirements, empty when all are met
    """
    min_duration = task.min_duration or CONTENT_DEFAULT_MIN_DURATION
    min_scroll = (
        task.min_scroll_percentage or CONTENT_DEFAULT_MIN_SCROLL_PERCENTAGE
    )
    require_scrolling = (
        True if task.require_scrolling is None else task.require_scrolling
    )
    require_interaction = (
        True
        if task.require_mouse_movement is None
        else task.require_mouse_movement
    )
    min_ad_clicks = task.min_ad_clicks or 0

    missing: list[str] = []
    if proof.time_spent < min_duration:
        missing.append(f"Spend at least {min_duration} seconds reading")
    if require_scrolling and proof.scroll_percentage < min_scroll:
        missing.append(f"Scroll to at least {min_scroll}% of the article")
    if require_interaction and proof.user_interactions < CONTENT_MIN_USER_INTERACTIONS:
        missing.append(
            f"Show engagement with at least {CONTENT_MIN_USER_INTERACTIONS} "
            "interactions"
        )
    if min_ad_clicks > 0 and proof.ad_clicks < min_ad_clicks:
        missing.append(f"Click on at least {min_ad_clicks} advertisement(s)")
    return missing
