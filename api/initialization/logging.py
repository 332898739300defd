"""
API Initialization - Logging Module.

Configures loguru logger for the API process.
Sets up log rotation and retention policies.
"""

from loguru import logger

from earning_engine.config.settings import Settings, settings


def setup_logging(config: Settings = settings) -> None:
    """Configure logger with file rotation."""
    logger.add(
        "logs/earning_engine.log",
        rotation="1 day",
        retention="7 days",
        level=config.log_level,
        encoding="utf-8",
    )

    logger.info(
        "Starting earning engine API...",
        extra={"environment": config.environment},
    )
