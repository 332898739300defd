"""Earning eligibility."""

from earning_engine.services.eligibility.evaluator import (
    EligibilityEvaluator,
    EligibilityReason,
    EligibilityResult,
    evaluate_eligibility,
    has_qualifying_referral,
)


__all__ = [
    "EligibilityEvaluator",
    "EligibilityReason",
    "EligibilityResult",
    "evaluate_eligibility",
    "has_qualifying_referral",
]
