"""
API main entry point.

Starts the aiohttp server for the earning engine.
"""

from aiohttp import web
from loguru import logger

from api.app import create_app
from api.initialization import setup_logging
from api.keys import ENGINE_KEY
from earning_engine.config.settings import settings
from earning_engine.utils.database import create_engine, create_session_maker


async def _dispose_engine(app: web.Application) -> None:
    await app[ENGINE_KEY].dispose()
    logger.info("Database engine disposed")


def main() -> None:
    """Configure logging, build the app and serve it."""
    setup_logging()

    engine = create_engine(settings)
    app = create_app(create_session_maker(engine), settings)
    app[ENGINE_KEY] = engine
    app.on_cleanup.append(_dispose_engine)

    logger.info(f"API listening on {settings.api_host}:{settings.api_port}")
    web.run_app(
        app,
        host=settings.api_host,
        port=settings.api_port,
        print=None,
    )


if __name__ == "__main__":
    main()
