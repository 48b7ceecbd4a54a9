# python
# app/core/config.py
"""Configuration settings for the Quest Board application.

Uses Pydantic BaseSettings for environment variable management.
"""
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentEnum(str, Enum):
    development = "development"
    testing = "testing"
    staging = "staging"
    production = "production"


class LogLevelEnum(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormatEnum(str, Enum):
    simple = "simple"
    json = "json"


class Settings(BaseSettings):
    # Pydantic v2 settings configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ===== Application Settings =====
    app_name: str = Field(default="Quest Board API", description="Application name")
    environment: EnvironmentEnum = Field(
        default=EnvironmentEnum.development, description="Environment type"
    )
    debug: bool = Field(default=False, description="Debug mode")
    version: str = Field(default="1.0.0", description="Application version")

    # ===== Persistence Settings =====
    data_dir: Path = Field(default=Path("./data"), description="Snapshot storage directory")
    snapshot_key: str = Field(default="board-store", description="Key of the board snapshot")
    persistence_enabled: bool = Field(default=True, description="Persist snapshots to disk")
    save_debounce_seconds: float = Field(
        default=0.5, ge=0, description="Coalescing window for snapshot saves (0 = synchronous)"
    )

    # ===== Board Limits =====
    activity_log_capacity: int = Field(default=1000, description="Maximum activity log entries")
    default_user_id: str = Field(default="local-user", description="Actor for activity entries")
    default_focus_xp: int = Field(default=25, ge=0, description="XP for a completed work session")

    # ===== Monitoring & Logging =====
    log_level: LogLevelEnum = Field(default=LogLevelEnum.INFO, description="Logging level")
    log_format: LogFormatEnum = Field(default=LogFormatEnum.simple, description="Log format")

    # ===== Server Settings =====
    host: str = Field(default="127.0.0.1", description="Host to bind the server")
    port: int = Field(default=8000, description="Port to bind the server")

    # ===== CORS Settings =====
    allowed_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173,http://127.0.0.1:3000",
        description="Allowed CORS origins (comma-separated)",
    )

    @property
    def allowed_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]

    # ===== Computed Properties =====
    @property
    def is_development(self) -> bool:
        return self.environment == EnvironmentEnum.development

    @property
    def is_production(self) -> bool:
        return self.environment == EnvironmentEnum.production

    @property
    def is_testing(self) -> bool:
        return self.environment == EnvironmentEnum.testing

    @property
    def snapshot_path(self) -> Path:
        return self.data_dir / f"{self.snapshot_key}.json"

    # ===== Validation Methods =====
    @field_validator("environment", mode="before")
    @classmethod
    def validate_environment(cls, v):
        if v and isinstance(v, str):
            lv = v.lower()
            if lv in ["dev", "develop"]:
                return "development"
            if lv in ["prod"]:
                return "production"
            return lv
        return v

    @field_validator("activity_log_capacity")
    @classmethod
    def validate_activity_capacity(cls, v):
        if v < 1:
            raise ValueError("Activity log capacity must be at least 1")
        if v > 100000:
            raise ValueError("Activity log capacity cannot exceed 100,000")
        return v

    @field_validator("snapshot_key")
    @classmethod
    def validate_snapshot_key(cls, v: str) -> str:
        v = v.strip()
        if any(sep in v for sep in ("/", "\\")):
            raise ValueError("Snapshot key cannot contain path separators")
        return v


settings = Settings()


class ConfigValidator:
    @staticmethod
    def validate_required_settings(config: Settings | None = None):
        config = config or settings
        errors = []
        if config.persistence_enabled and not config.snapshot_key:
            errors.append("SNAPSHOT_KEY is required when persistence is enabled")
        if not config.default_user_id:
            errors.append("DEFAULT_USER_ID is required")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")

    @staticmethod
    def get_feature_status(config: Settings | None = None) -> dict:
        config = config or settings
        return {
            "persistence_enabled": config.persistence_enabled,
            "debounced_saves": config.save_debounce_seconds > 0,
            "activity_log_capacity": config.activity_log_capacity,
            "environment": config.environment,
        }


def get_config_summary(config: Settings | None = None) -> dict:
    config = config or settings
    return {
        "app_name": config.app_name,
        "version": config.version,
        "environment": config.environment,
        "debug": config.debug,
        "features": ConfigValidator.get_feature_status(config),
        "snapshot_path": str(config.snapshot_path),
    }


__all__ = [
    "settings",
    "Settings",
    "ConfigValidator",
    "get_config_summary",
    "EnvironmentEnum",
    "LogLevelEnum",
    "LogFormatEnum",
]
