"""
Request and response helpers shared by handlers.

Identity comes from the upstream auth gateway: ``X-User-Id`` carries the
user ID and ``X-User-Role`` is ``admin`` for administrators.
"""

import json
from datetime import datetime
from decimal import Decimal
from typing import Any

from aiohttp import web


USER_ID_HEADER = "X-User-Id"
USER_ROLE_HEADER = "X-User-Role"
ADMIN_ROLE = "admin"


def json_error(status: type[web.HTTPError], message: str) -> web.HTTPError:
    """Build an HTTP error carrying a JSON body."""
    return status(
        text=json.dumps({"success": False, "error": message}),
        content_type="application/json",
    )


def require_user_id(request: web.Request) -> int:
    """
    Get the authenticated user ID.

    Raises:
        web.HTTPUnauthorized: Header missing or not an integer
    """
    raw = request.headers.get(USER_ID_HEADER, "")
    try:
        return int(raw)
    except ValueError:
        raise json_error(
            web.HTTPUnauthorized, "Authentication required"
        ) from None


def require_admin(request: web.Request) -> int:
    """
    Get the authenticated administrator's user ID.

    Raises:
        web.HTTPUnauthorized: Not authenticated
        web.HTTPForbidden: Authenticated but not an administrator
    """
    user_id = require_user_id(request)
    if request.headers.get(USER_ROLE_HEADER, "").lower() != ADMIN_ROLE:
        raise json_error(web.HTTPForbidden, "Admin access required")
    return user_id


def path_int(request: web.Request, name: str) -> int:
    """
    Get an integer path parameter.

    Raises:
        web.HTTPNotFound: Not an integer
    """
    try:
        return int(request.match_info[name])
    except (KeyError, ValueError):
        raise json_error(web.HTTPNotFound, "Not found") from None


async def read_json(request: web.Request) -> dict[str, Any]:
    """
    Read a JSON object body. An empty body reads as ``{}``.

    Raises:
        web.HTTPBadRequest: Body is not a JSON object
    """
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except ValueError:
        raise json_error(web.HTTPBadRequest, "Invalid JSON body") from None
    if not isinstance(body, dict):
        raise json_error(web.HTTPBadRequest, "Invalid JSON body")
    return body


def money(value: Decimal | int | None) -> int | float:
    """Serialize a PKR amount as a JSON number."""
    if value is None:
        return 0
    amount = Decimal(value)
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def iso(value: datetime | None) -> str | None:
    """Serialize a datetime as ISO 8601."""
    return value.isoformat() if value else None
