"""Daily tasks: assignment, submission and review."""

from earning_engine.services.tasks.daily_assignment import (
    DailyAssignment,
    DailyAssignmentStatus,
    DailyTaskAssignmentService,
)
from earning_engine.services.tasks.engagement_validator import (
    EngagementProof,
    missing_requirements,
)
from earning_engine.services.tasks.review import (
    ReviewAction,
    ReviewResult,
    TaskReviewService,
)
from earning_engine.services.tasks.submission import (
    SubmissionResult,
    TaskSubmission,
    TaskSubmissionService,
)


__all__ = [
    "DailyAssignment",
    "DailyAssignmentStatus",
    "DailyTaskAssignmentService",
    "EngagementProof",
    "ReviewAction",
    "ReviewResult",
    "SubmissionResult",
    "TaskReviewService",
    "TaskSubmission",
    "TaskSubmissionService",
    "missing_requirements",
]
