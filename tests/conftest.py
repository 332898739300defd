"""Pytest configuration and shared fixtures for all tests."""

import os
from collections.abc import AsyncIterator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from itertools import count
from typing import Any

# Settings are loaded at import time; point them at a local database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./earning_engine_test.db")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
import pytest_asyncio
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from earning_engine.config.settings import Settings
from earning_engine.models import (
    Base,
    MembershipPlan,
    Task,
    TaskCompletion,
    User,
)
from earning_engine.models.enums import (
    MembershipStatus,
    TaskCompletionStatus,
    TaskStatus,
)
from earning_engine.repositories.base import BaseRepository
from earning_engine.services.catalog import PlanCatalogService
from earning_engine.utils.database import create_session_maker


# 09:00 UTC is 14:00 in Asia/Karachi, well inside one business day
NOW = datetime(2026, 3, 10, 9, 0, tzinfo=UTC)

_sequence = count(1)


@pytest.fixture
def now() -> datetime:
    """Fixed request time used across tests."""
    return NOW


@pytest.fixture
def config() -> Settings:
    """Settings for tests (no global override)."""
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        environment="test",
        tasks_per_day=5,
        business_timezone="Asia/Karachi",
    )


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncIterator[AsyncEngine]:
    """
    File-backed SQLite engine with the full schema.

    pysqlite's own transaction handling breaks SAVEPOINT; the driver is put
    in autocommit mode and BEGIN is emitted by SQLAlchemy instead.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'engine.db'}")

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return create_session_maker(engine)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncIterator[AsyncSession]:
    """Session used by the test body."""
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def plans(session_maker) -> dict[str, MembershipPlan]:
    """Seeded default plan catalog, keyed by plan name."""
    async with session_maker() as session:
        await PlanCatalogService(session).seed_defaults()
        result = await session.execute(select(MembershipPlan))
        return {plan.name: plan for plan in result.scalars().all()}


@pytest.fixture
def fetch(session_maker) -> Callable[..., Awaitable[Any]]:
    """Load a row in a fresh session (sees only committed state)."""

    async def _fetch(model: type, id: int) -> Any:
        async with session_maker() as session:
            return await session.get(model, id)

    return _fetch


@pytest.fixture
def make_user(session) -> Callable[..., Awaitable[User]]:
    """Factory for committed users."""

    async def _make_user(
        plan: str | None = "BASIC",
        status: str = MembershipStatus.ACTIVE,
        sponsor: User | None = None,
        start: datetime | None = NOW - timedelta(days=1),
        tasks_enabled: bool = True,
        continue_until: datetime | None = None,
    ) -> User:
        n = next(_sequence)
        user = User(
            name=f"Member {n}",
            email=f"member{n}@example.com",
            referral_code=f"REF{n:05d}",
            sponsor_id=sponsor.id if sponsor else None,
            membership_plan=plan,
            membership_status=status,
            membership_start_date=start,
            earnings_continue_until=continue_until,
            tasks_enabled=tasks_enabled,
            created_at=start or NOW,
        )
        session.add(user)
        await session.commit()
        return user

    return _make_user


@pytest.fixture
def make_task(session) -> Callable[..., Awaitable[Task]]:
    """Factory for committed task templates."""

    async def _make_task(
        type: str = "DAILY",
        status: str = TaskStatus.ACTIVE,
        created_at: datetime = NOW - timedelta(days=7),
        **fields: Any,
    ) -> Task:
        n = next(_sequence)
        task = Task(
            title=fields.pop("title", f"Task {n}"),
            description="Test task",
            type=type,
            status=status,
            created_at=created_at,
            **fields,
        )
        session.add(task)
        await session.commit()
        return task

    return _make_task


@pytest.fixture
def assign(session) -> Callable[..., Awaitable[TaskCompletion]]:
    """Factory for committed assignment rows."""

    async def _assign(
        user: User,
        task: Task,
        reward: int = 10,
        slot: int = 0,
        submitted_at: datetime | None = None,
        status: str = TaskCompletionStatus.PENDING,
    ) -> TaskCompletion:
        completion = TaskCompletion(
            user_id=user.id,
            task_id=task.id,
            assignment_date=NOW.date(),
            slot=slot,
            status=status,
            progress=100 if submitted_at else 0,
            reward=reward,
            submitted_at=submitted_at,
            created_at=NOW,
        )
        session.add(completion)
        await session.commit()
        return completion

    return _assign


@pytest.fixture
def count_rows(session_maker) -> Callable[..., Awaitable[int]]:
    """Count committed rows of a model matching column filters."""

    async def _count(model: type, **filters: Any) -> int:
        async with session_maker() as session:
            return await BaseRepository(model, session).count(**filters)

    return _count
