"""Unit tests for the transaction decorator and notification writer."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from earning_engine.services.base_service import BaseService, transaction
from earning_engine.services.notification import NotificationService
from earning_engine.utils.exceptions import NotEligibleError


class DummyService(BaseService):
    """Service exercising the decorator."""

    @transaction
    async def succeed(self):
        return "done"

    @transaction
    async def refuse(self):
        raise NotEligibleError("Membership not active")

    @transaction
    async def crash(self):
        raise RuntimeError("boom")


@pytest.fixture
def mock_session():
    """Mock AsyncSession for tests without a database."""
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.add = MagicMock()
    return session


class TestTransactionDecorator:
    """Commit on success, rollback and re-raise on failure."""

    @pytest.mark.asyncio
    async def test_commits_on_success(self, mock_session):
        result = await DummyService(mock_session).succeed()

        assert result == "done"
        mock_session.commit.assert_awaited_once()
        mock_session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_domain_error(self, mock_session):
        with pytest.raises(NotEligibleError):
            await DummyService(mock_session).refuse()

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_unexpected_error(self, mock_session):
        with pytest.raises(RuntimeError):
            await DummyService(mock_session).crash()

        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()


class FailingSavepoint:
    """begin_nested() stand-in whose exit fails like a broken INSERT."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        raise OperationalError("INSERT INTO notifications", {}, Exception("locked"))


class TestNotificationService:
    """Notification failures never propagate."""

    @pytest.mark.asyncio
    async def test_failed_write_is_swallowed(self, mock_session):
        mock_session.begin_nested = MagicMock(return_value=FailingSavepoint())

        written = await NotificationService(mock_session).notify_user(
            1, title="Task Completed", message="Paid", category="TASK"
        )

        assert written is False
        mock_session.add.assert_called_once()
