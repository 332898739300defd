"""
Global error handler middleware.

Maps domain errors to JSON responses with their status code. Anything
unexpected is logged with its traceback and reported as a generic 500.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web
from loguru import logger

from earning_engine.utils.exceptions import EarningEngineError


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def error_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Translate exceptions into JSON error responses."""
    try:
        return await handler(request)
    except web.HTTPException:
        raise
    except EarningEngineError as e:
        if e.status_code >= 500:
            logger.error(
                f"Request failed: {e.message}",
                extra={"path": request.path, "error_code": e.error_code},
            )
        return web.json_response(
            {"success": False, **e.to_dict()}, status=e.status_code
        )
    except Exception as e:
        logger.exception(
            f"Unhandled exception: {e}",
            extra={"path": request.path, "method": request.method},
        )
        return web.json_response(
            {"success": False, "error": "Internal server error"}, status=500
        )
