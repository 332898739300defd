"""
Task handlers.

Daily assignment and task submission endpoints.
"""

from typing import Any

from aiohttp import web

from api.handlers.common import (
    iso,
    money,
    path_int,
    read_json,
    require_user_id,
)
from api.keys import get_session, get_settings
from earning_engine.models.task_completion import TaskCompletion
from earning_engine.services.tasks import (
    DailyTaskAssignmentService,
    TaskSubmission,
    TaskSubmissionService,
)


def serialize_assignment(completion: TaskCompletion) -> dict[str, Any]:
    """Serialize an assigned task for the client."""
    task = completion.task
    return {
        "id": task.id,
        "completionId": completion.id,
        "slot": completion.slot,
        "title": task.title,
        "description": task.description,
        "type": task.type,
        "reward": money(completion.reward),
        "status": completion.status,
        "progress": completion.progress,
        "completedAt": iso(completion.completed_at),
        "articleUrl": task.article_url,
        "minDuration": task.min_duration,
        "instructions": task.instructions,
    }


async def get_daily_assignment(request: web.Request) -> web.Response:
    """Report today's assignment status."""
    user_id = require_user_id(request)
    service = DailyTaskAssignmentService(
        get_session(request), get_settings(request)
    )
    status = await service.get_status(user_id)
    user_plan = status.plan

    return web.json_response({
        "success": True,
        "status": {
            "assignmentDate": status.assignment_date.isoformat(),
            "canEarnToday": status.eligibility.eligible,
            "reason": status.eligibility.reason,
            "earningMessage": status.eligibility.message or "",
            "hasTasksAssigned": bool(status.completions),
            "completedTasks": status.completed_count,
            "pendingTasks": status.pending_count,
            "totalTasksToday": len(status.completions),
            "dailyEarningAmount": user_plan.daily_task_earning if user_plan else 0,
            "perTaskReward": status.per_task_reward,
            "membershipPlan": user_plan.name if user_plan else None,
            "activeDays": status.active_days,
        },
        "tasks": [serialize_assignment(c) for c in status.completions],
    })


async def post_daily_assignment(request: web.Request) -> web.Response:
    """Create or return today's tasks."""
    user_id = require_user_id(request)
    service = DailyTaskAssignmentService(
        get_session(request), get_settings(request)
    )
    assignment = await service.assign_daily_tasks(user_id)

    if assignment.created:
        message = f"{len(assignment.completions)} daily tasks assigned successfully!"
    else:
        message = "Daily tasks already assigned"

    return web.json_response({
        "success": True,
        "message": message,
        "tasks": [serialize_assignment(c) for c in assignment.completions],
        "totalReward": assignment.total_reward,
        "perTaskReward": assignment.per_task_reward,
        "membershipPlan": (
            assignment.plan.display_name if assignment.plan else None
        ),
    })


async def submit_task(request: web.Request) -> web.Response:
    """Submit proof for an assigned task."""
    user_id = require_user_id(request)
    task_id = path_int(request, "task_id")
    body = await read_json(request)

    links = body.get("proofLinks")
    metadata = body.get("metadata")
    submission = TaskSubmission(
        proof_text=body.get("proofText") or None,
        proof_links=links if isinstance(links, list) else [],
        notes=body.get("notes") or None,
        metadata=metadata if isinstance(metadata, dict) else {},
    )

    service = TaskSubmissionService(get_session(request), get_settings(request))
    result = await service.submit(user_id, task_id, submission)

    payload: dict[str, Any] = {
        "success": True,
        "message": result.message,
        "status": result.status,
        "completionId": result.completion_id,
    }
    if result.auto_approved:
        payload["rewardEarned"] = result.reward_earned
        payload["autoApproved"] = True
    if result.requires_approval:
        payload["requiresApproval"] = True
    return web.json_response(payload)
