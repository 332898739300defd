"""aiohttp middlewares."""

from api.middlewares.database import database_middleware
from api.middlewares.error_handler import error_middleware


__all__ = ["database_middleware", "error_middleware"]
