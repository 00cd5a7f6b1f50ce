"""Application settings via Pydantic Settings."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from a .env file or environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="WM_",
        extra="ignore",
    )

    # APP
    app_name: str = Field(default="Workforce Manager", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")

    # DATABASE
    database_url: str = Field(
        default="sqlite:///./workforce.db",
        description="Database URL (SQLite or PostgreSQL)",
    )

    # SECURITY
    secret_key: str = Field(
        default="workforce-dev-secret-override-with-WM_SECRET_KEY",
        description="Secret key for JWT tokens",
    )
    access_token_expire_minutes: int = Field(
        default=12 * 60,  # one shift
        description="JWT access token lifetime in minutes",
    )
    refresh_token_expire_days: int = Field(default=7, description="Refresh token lifetime in days")
    algorithm: str = Field(default="HS256", description="JWT signing algorithm")

    # WEB SERVER
    host: str = Field(default="127.0.0.1", description="FastAPI server host")
    port: int = Field(default=8000, description="FastAPI server port")
    reload: bool = Field(default=False, description="Auto-reload on code changes")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    # LOGGING
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log format",
    )
    log_dir: Path = Field(default=Path("./logs"), description="Directory for log files")

    # DAILY RESET SCHEDULER
    scheduler_enabled: bool = Field(
        default=True,
        description="Run the daily asset reset scheduler inside the web process",
    )
    scheduler_check_interval_seconds: int = Field(
        default=60 * 60,
        description="How often the scheduler checks whether a reset is due",
    )
    scheduler_reset_hour: int = Field(
        default=1,
        ge=0,
        le=23,
        description="Hour of day after which the daily reset may run",
    )
    scheduler_initial_delay_seconds: int = Field(
        default=30,
        description="Delay before the first scheduler check after startup",
    )

    # SEED
    default_admin_username: str = Field(default="admin", description="Seeded admin username")
    default_admin_password: str = Field(default="admin123", description="Seeded admin password")


@lru_cache
def get_settings() -> Settings:
    """Settings are read once per process; restart to pick up changed WM_ variables."""
    return Settings()
