"""
Admin handlers.

Submission review and per-user earning controls.
"""

from datetime import datetime

from aiohttp import web

from api.handlers.common import (
    iso,
    json_error,
    money,
    path_int,
    read_json,
    require_admin,
)
from api.keys import get_session
from earning_engine.services.admin import AdminUserControlService
from earning_engine.services.tasks import ReviewAction, TaskReviewService


REVIEW_OUTCOME = {
    ReviewAction.APPROVE: "approved",
    ReviewAction.REJECT: "rejected",
}


def _bad_request(message: str) -> web.HTTPError:
    return json_error(web.HTTPBadRequest, message)


async def review_submission(request: web.Request) -> web.Response:
    """Approve or reject a submitted task."""
    require_admin(request)
    completion_id = path_int(request, "completion_id")
    body = await read_json(request)

    try:
        action = ReviewAction(str(body.get("action", "")).lower())
    except ValueError:
        raise _bad_request("Invalid action. Use approve or reject") from None

    service = TaskReviewService(get_session(request))
    result = await service.review(completion_id, action, notes=body.get("notes"))

    return web.json_response({
        "success": True,
        "message": f"Task submission {REVIEW_OUTCOME[action]} successfully",
        "completionId": result.completion_id,
        "status": result.status,
        "reward": money(result.reward) if result.reward is not None else None,
    })


async def task_control(request: web.Request) -> web.Response:
    """Enable or disable a user's tasks."""
    require_admin(request)
    user_id = path_int(request, "user_id")
    body = await read_json(request)

    enabled = body.get("enabled")
    if not isinstance(enabled, bool):
        raise _bad_request("enabled must be a boolean")

    user = await AdminUserControlService(get_session(request)).set_tasks_enabled(
        user_id, enabled
    )
    state = "enabled" if enabled else "disabled"
    return web.json_response({
        "success": True,
        "message": f"Tasks {state} for user successfully",
        "user": {"id": user.id, "tasksEnabled": user.tasks_enabled},
    })


async def extend_earning_window(request: web.Request) -> web.Response:
    """Move a user's earning window override later."""
    require_admin(request)
    user_id = path_int(request, "user_id")
    body = await read_json(request)

    try:
        until = datetime.fromisoformat(str(body.get("until", "")))
    except ValueError:
        raise _bad_request("until must be an ISO 8601 datetime") from None

    user = await AdminUserControlService(
        get_session(request)
    ).extend_earning_window(user_id, until)
    return web.json_response({
        "success": True,
        "user": {
            "id": user.id,
            "earningsContinueUntil": iso(user.earnings_continue_until),
        },
    })


async def activate_membership(request: web.Request) -> web.Response:
    """Activate a membership and pay signup commissions."""
    require_admin(request)
    user_id = path_int(request, "user_id")
    body = await read_json(request)

    plan_name = body.get("plan")
    if not isinstance(plan_name, str) or not plan_name.strip():
        raise _bad_request("plan is required")

    result = await AdminUserControlService(
        get_session(request)
    ).activate_membership(user_id, plan_name)

    return web.json_response({
        "success": True,
        "user": {
            "id": result.user.id,
            "membershipPlan": result.user.membership_plan,
            "membershipStatus": result.user.membership_status,
            "membershipStartDate": iso(result.user.membership_start_date),
            "earningsContinueUntil": iso(result.user.earnings_continue_until),
        },
        "commissions": [
            {
                "level": credit.level,
                "sponsorId": credit.sponsor_id,
                "amount": money(credit.amount),
            }
            for credit in result.commissions.credits
        ],
        "totalCommissionPaid": money(result.commissions.total),
    })
