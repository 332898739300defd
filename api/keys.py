"""Typed keys for aiohttp application and request state."""

from aiohttp import web
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from earning_engine.config.settings import Settings


SESSION_MAKER_KEY = web.AppKey("session_maker", async_sessionmaker)
SETTINGS_KEY = web.AppKey("settings", Settings)
ENGINE_KEY = web.AppKey("engine", AsyncEngine)

# Per-request session (request state is a plain mapping)
SESSION_KEY = "db_session"


def get_session(request: web.Request) -> AsyncSession:
    """Get the request's database session."""
    return request[SESSION_KEY]


def get_settings(request: web.Request) -> Settings:
    """Get the application settings."""
    return request.app[SETTINGS_KEY]
