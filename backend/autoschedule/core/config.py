"""
Application configuration using Pydantic Settings.

Environment-based infrastructure switching is controlled by the ENVIRONMENT variable.
"""

from functools import lru_cache
from typing import List, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ===========================================
    # Environment
    # ===========================================
    ENVIRONMENT: Literal["local"] = "local"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    # Require an Authorization header (mock provider treats the token as user ID)
    AUTH_ENABLED: bool = False

    # ===========================================
    # Database
    # ===========================================
    DATABASE_URL: str = "sqlite+aiosqlite:///./autoschedule.db"

    # ===========================================
    # LLM Configuration (duration estimation)
    # ===========================================
    LLM_PROVIDER: Literal["gemini-api"] = "gemini-api"

    # Gemini model name (for gemini-api)
    GEMINI_MODEL: str = "gemini-2.0-flash"

    # Google API Key (for gemini-api provider). Empty = estimator falls back to defaults.
    GOOGLE_API_KEY: str = ""

    # ===========================================
    # Auto-scheduling
    # ===========================================
    # IANA timezone in which business hours are evaluated
    SCHEDULE_TIMEZONE: str = "UTC"
    BUSINESS_HOURS_START: str = "09:00"
    BUSINESS_HOURS_END: str = "17:00"
    LUNCH_START: str = "12:30"
    LUNCH_END: str = "13:30"
    SLOT_MINUTES: int = Field(15, ge=1, le=60)
    # Calendar days the slot finder searches before giving up
    SLOT_SEARCH_DAYS: int = Field(14, ge=1)
    # Calendar days of existing tasks / external events loaded per run
    PLANNING_WINDOW_DAYS: int = Field(14, ge=1)
    DEFAULT_TASK_MINUTES: int = Field(30, ge=1)

    # ===========================================
    # Server
    # ===========================================
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    ALLOWED_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"]
    )

    @property
    def is_local(self) -> bool:
        """Check if running in local environment."""
        return self.ENVIRONMENT == "local"


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures settings are loaded only once.
    """
    return Settings()
