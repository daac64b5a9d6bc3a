from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # === App Metadata ===
    PROJECT_NAME: str = "AutoSchedule"
    SERVICE_NAME: str = "autoschedule"
    ENVIRONMENT: str = Field("dev")  # dev, staging, prod, test
    APP_VERSION: str = "1.0.0"

    # === Security ===
    API_KEY: str = Field("super-secret-key")
    ENABLE_API_KEY_SECURITY: bool = Field(True)

    # === Logging / Monitoring ===
    LOG_LEVEL: str = Field("INFO")
    LOG_DIR: str = Field("./logs")
    ENABLE_JSON_LOGS: bool = Field(False)
    SENTRY_DSN: str = Field("")

    # === Database (SQLite by default, any SQLAlchemy URL works) ===
    DATABASE_URL: str = Field("sqlite:///./autoschedule.db")
    STORE_LOCK_TIMEOUT_SECONDS: float = Field(5.0, gt=0)

    # === Scheduling ===
    DEFAULT_INTERVIEWER_ID: str = Field("default")
    SCHEDULER_TIMEZONE: str = Field("UTC")
    SLOT_DURATION_MINUTES: int = Field(60, gt=0)
    SLOT_HORIZON_DAYS: int = Field(14, ge=0)
    DEFAULT_PAGE_LIMIT: int = Field(20, ge=1)
    MAX_PAGE_LIMIT: int = Field(100, ge=1)
    DEFAULT_MAX_INTERVIEWS_PER_WEEK: int = Field(5, ge=1)
    STRICT_SLOT_VALIDATION: bool = Field(False)

    # === Feature Flags ===
    ENABLE_PROMETHEUS: bool = Field(True)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> AppConfig:
    return AppConfig()


# Global config instance
settings = get_settings()
