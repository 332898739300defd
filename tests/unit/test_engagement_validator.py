"""Unit tests for content engagement validation."""

from earning_engine.models import Task
from earning_engine.services.tasks import EngagementProof, missing_requirements


def content_task(**overrides) -> Task:
    fields = {
        "title": "Read the article",
        "type": "CONTENT_ENGAGEMENT",
        "article_url": "https://example.com/article",
        "min_duration": 60,
        "min_scroll_percentage": 70,
        "require_scrolling": True,
        "require_mouse_movement": True,
        "min_ad_clicks": 1,
    }
    fields.update(overrides)
    return Task(**fields)


class TestEngagementProof:
    """Parsing client telemetry."""

    def test_from_metadata(self):
        proof = EngagementProof.from_metadata({
            "timeSpent": 75,
            "scrollPercentage": "80",
            "userInteractions": 4,
            "adClicks": 2,
        })

        assert proof.time_spent == 75
        assert proof.scroll_percentage == 80
        assert proof.user_interactions == 4
        assert proof.ad_clicks == 2

    def test_missing_or_garbage_values_are_zero(self):
        proof = EngagementProof.from_metadata({"timeSpent": "soon"})

        assert proof == EngagementProof()
        assert EngagementProof.from_metadata(None) == EngagementProof()

    def test_non_finite_values_are_zero(self):
        proof = EngagementProof.from_metadata({
            "timeSpent": "nan",
            "scrollPercentage": float("nan"),
            "userInteractions": "Infinity",
            "adClicks": float("-inf"),
        })

        assert proof == EngagementProof()


class TestMissingRequirements:
    """Every unmet requirement is reported."""

    def test_all_requirements_met(self):
        proof = EngagementProof(
            time_spent=60, scroll_percentage=70, user_interactions=3, ad_clicks=1
        )

        assert missing_requirements(content_task(), proof) == []

    def test_reports_every_failure(self):
        """Nothing met: four separate items, in a stable order."""
        missing = missing_requirements(content_task(), EngagementProof())

        assert missing == [
            "Spend at least 60 seconds reading",
            "Scroll to at least 70% of the article",
            "Show engagement with at least 3 interactions",
            "Click on at least 1 advertisement(s)",
        ]

    def test_partial_failure(self):
        """Only the unmet items are listed."""
        proof = EngagementProof(
            time_spent=120, scroll_percentage=10, user_interactions=5, ad_clicks=0
        )

        assert missing_requirements(content_task(), proof) == [
            "Scroll to at least 70% of the article",
            "Click on at least 1 advertisement(s)",
        ]

    def test_nan_telemetry_fails_every_requirement(self):
        proof = EngagementProof.from_metadata({
            "timeSpent": "nan",
            "scrollPercentage": "nan",
            "userInteractions": "nan",
            "adClicks": "nan",
        })

        assert len(missing_requirements(content_task(), proof)) == 4

    def test_optional_checks_can_be_switched_off(self):
        """No scrolling, interaction or ad requirement when disabled."""
        task = content_task(
            require_scrolling=False, require_mouse_movement=False, min_ad_clicks=0
        )
        proof = EngagementProof(time_spent=60)

        assert missing_requirements(task, proof) == []

    def test_defaults_apply_when_thresholds_unset(self):
        """Unset thresholds fall back to 45 seconds and 50%."""
        task = content_task(
            min_duration=None, min_scroll_percentage=None, min_ad_clicks=None
        )
        proof = EngagementProof(time_spent=44, scroll_percentage=49)

        assert missing_requirements(task, proof) == [
            "Spend at least 45 seconds reading",
            "Scroll to at least 50% of the article",
            "Show engagement with at least 3 interactions",
        ]


class TestContentTaskDetection:
    """Which tasks need telemetry."""

    def test_content_engagement_type(self):
        assert content_task(article_url=None).is_content_task is True

    def test_any_task_with_article(self):
        task = Task(title="Read", type="DAILY", article_url="https://example.com")
        assert task.is_content_task is True

    def test_plain_daily_task(self):
        assert Task(title="Check in", type="DAILY").is_content_task is False
