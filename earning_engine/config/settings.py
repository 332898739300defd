"""
Application settings.

Loads configuration from environment variables using pydantic-settings.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str
    database_echo: bool = False

    # Task rewards
    global_task_amount: int | None = Field(
        default=None,
        ge=1,
        le=1000,
        description=(
            "Platform-wide per-task payout in PKR. "
            "When set, overrides every plan's daily task earning"
        ),
    )
    tasks_per_day: int = Field(
        default=5,
        ge=1,
        le=10,
        description="Number of task instances assigned per user per day",
    )
    business_timezone: str = Field(
        default="Asia/Karachi",
        description="Timezone defining the calendar day for task assignment",
    )

    # HTTP API
    api_host: str = "0.0.0.0"
    api_port: int = Field(
        default=8080, ge=1, le=65535, description="HTTP API port"
    )

    # Application
    environment: str = "production"
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("global_task_amount", mode="before")
    @classmethod
    def empty_amount_is_unset(cls, v: object) -> object:
        """Treat an empty GLOBAL_TASK_AMOUNT as not configured."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str) -> str:
        """Validate database URL."""
        if not v.startswith((
            "postgresql://",
            "postgresql+asyncpg://",
            "sqlite+aiosqlite://",
        )):
            raise ValueError(
                "DATABASE_URL must start with postgresql+asyncpg:// "
                "(or sqlite+aiosqlite:// for local runs)"
            )
        if v.startswith("postgresql://"):
            v = v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("business_timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone name against the tz database."""
        try:
            ZoneInfo(v)
        except ZoneInfoNotFoundError as e:
            raise ValueError(f"Unknown timezone: {v}") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name."""
        v = v.upper()
        if v not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return v

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        """Validate production-specific requirements."""
        if self.environment == "production":
            if self.debug:
                raise ValueError("DEBUG must be False in production")
            if self.database_url.startswith("sqlite"):
                raise ValueError("SQLite is not supported in production")
        return self


# Global settings instance
settings = Settings()
