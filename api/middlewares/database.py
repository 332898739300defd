"""
Database middleware.

Opens one session per request and closes it after the handler returns.
Services decide when to commit; an uncommitted session is rolled back on
close.
"""

from collections.abc import Awaitable, Callable

from aiohttp import web

from api.keys import SESSION_KEY, SESSION_MAKER_KEY


Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@web.middleware
async def database_middleware(
    request: web.Request, handler: Handler
) -> web.StreamResponse:
    """Provide a database session to the handler."""
    session_maker = request.app[SESSION_MAKER_KEY]
    async with session_maker() as session:
        request[SESSION_KEY] = session
        return await handler(request)
