"""
Domain exceptions.

Every error carries an HTTP-equivalent status code and a machine-readable
error code so the API layer can report it without knowing its type.
"""

from typing import Any


class EarningEngineError(Exception):
    """Base class for earning engine errors."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message()
        super().__init__(self.message)

    @classmethod
    def default_message(cls) -> str:
        return "Internal server error"

    def to_dict(self) -> dict[str, Any]:
        """Serialize for an API error body."""
        return {"error": self.message, "code": self.error_code}


class UserNotFoundError(EarningEngineError):
    """User does not exist."""

    status_code = 404
    error_code = "user_not_found"

    @classmethod
    def default_message(cls) -> str:
        return "User not found"


class TaskNotFoundError(EarningEngineError):
    """Task does not exist."""

    status_code = 404
    error_code = "task_not_found"

    @classmethod
    def default_message(cls) -> str:
        return "Task not found"


class TaskCompletionNotFoundError(EarningEngineError):
    """Task completion does not exist."""

    status_code = 404
    error_code = "task_completion_not_found"

    @classmethod
    def default_message(cls) -> str:
        return "Task submission not found"


class NotEligibleError(EarningEngineError):
    """Raised when the eligibility gate refuses earning."""

    status_code = 403
    error_code = "not_eligible"

    def __init__(self, reason: str, reason_code: str | None = None) -> None:
        self.reason = reason
        self.reason_code = reason_code
        super().__init__(reason)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.reason_code:
            data["reason"] = self.reason_code
        return data


class TaskNotStartedError(EarningEngineError):
    """No PENDING assignment exists for the task."""

    status_code = 400
    error_code = "task_not_started"

    @classmethod
    def default_message(cls) -> str:
        return "Task not started. Please start the task first."


class TaskAlreadyCompletedError(EarningEngineError):
    """The assignment was already paid."""

    status_code = 400
    error_code = "task_already_completed"

    @classmethod
    def default_message(cls) -> str:
        return "Task already completed"


class TaskNotPendingReviewError(EarningEngineError):
    """Review requested for a row that is not a submitted PENDING row."""

    status_code = 400
    error_code = "task_not_pending_review"

    @classmethod
    def default_message(cls) -> str:
        return "Submission is not awaiting review"


class RequirementsNotMetError(EarningEngineError):
    """Engagement proof is below one or more thresholds."""

    status_code = 400
    error_code = "requirements_not_met"

    def __init__(self, missing_requirements: list[str]) -> None:
        self.missing_requirements = list(missing_requirements)
        super().__init__("Task requirements not met")

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["missingRequirements"] = self.missing_requirements
        return data


class InvalidEarningWindowError(EarningEngineError):
    """Admin tried to shorten the earning window."""

    status_code = 400
    error_code = "invalid_earning_window"

    @classmethod
    def default_message(cls) -> str:
        return "Earning window can only be extended"


class LedgerError(EarningEngineError):
    """Ledger transaction aborted; nothing was written."""

    status_code = 500
    error_code = "ledger_error"

    @classmethod
    def default_message(cls) -> str:
        return "Failed to record task completion"


class PlanNotFoundError(EarningEngineError):
    """Membership plan does not exist."""

    status_code = 404
    error_code = "plan_not_found"

    @classmethod
    def default_message(cls) -> str:
        return "Membership plan not found"
