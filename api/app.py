"""
Application factory.

Builds the aiohttp application with its routes and middlewares.
"""

from aiohttp import web
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from api.handlers import admin, health, stats, tasks
from api.keys import SESSION_MAKER_KEY, SETTINGS_KEY
from api.middlewares import database_middleware, error_middleware
from earning_engine.config.settings import Settings, settings


def setup_routes(app: web.Application) -> None:
    """Register all routes."""
    app.router.add_get("/health", health.health_handler)
    app.router.add_get("/health/live", health.liveness_handler)

    app.router.add_get("/api/tasks/daily-assignment", tasks.get_daily_assignment)
    app.router.add_post("/api/tasks/daily-assignment", tasks.post_daily_assignment)
    app.router.add_post("/api/tasks/{task_id}/submit", tasks.submit_task)

    app.router.add_get("/api/user/stats", stats.get_user_stats)

    app.router.add_post(
        "/api/admin/submissions/{completion_id}", admin.review_submission
    )
    app.router.add_post(
        "/api/admin/users/{user_id}/task-control", admin.task_control
    )
    app.router.add_post(
        "/api/admin/users/{user_id}/earning-window",
        admin.extend_earning_window,
    )
    app.router.add_post(
        "/api/admin/users/{user_id}/activate-membership",
        admin.activate_membership,
    )


def create_app(
    session_maker: async_sessionmaker[AsyncSession],
    config: Settings = settings,
) -> web.Application:
    """
    Create the web application.

    Args:
        session_maker: Session factory used for every request
        config: Application settings

    Returns:
        Configured application
    """
    app = web.Application(middlewares=[error_middleware, database_middleware])
    app[SESSION_MAKER_KEY] = session_maker
    app[SETTINGS_KEY] = config
    setup_routes(app)
    return app
