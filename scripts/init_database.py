#!/usr/bin/env python3
"""Initialize database tables and seed the plan catalog."""

import asyncio
import sys

from loguru import logger

from earning_engine.config.settings import settings
from earning_engine.models import Base
from earning_engine.services.catalog import PlanCatalogService
from earning_engine.utils.database import create_engine, create_session_maker

# Configure logger for script
logger.remove()
logger.add(sys.stderr, level="INFO")


async def init_database() -> None:
    """Create all database tables and the default plan catalog."""
    logger.info("Connecting to database...")
    engine = create_engine(settings)

    async with engine.begin() as conn:
        logger.info("Creating tables (checkfirst=True)...")
        await conn.run_sync(
            Base.metadata.create_all,
            checkfirst=True
        )

    session_maker = create_session_maker(engine)
    async with session_maker() as session:
        result = await PlanCatalogService(session).seed_defaults()

    await engine.dispose()
    logger.success(
        f"Database ready: {result.plans_created} plans and "
        f"{result.commissions_created} signup commission levels created"
    )


if __name__ == "__main__":
    asyncio.run(init_database())
