from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    backend: Literal["memory", "sqlite", "redis"] = Field(
        default="sqlite",
        description="Key-value backend: memory for throwaway sessions, sqlite for local files",
    )
    sqlite_path: str = "data/rideflow.db"
    key_prefix: str = Field(
        default="rideflow_",
        description="Prefix for the rides, drivers and ride counter keys",
    )
    memory_quota_bytes: int | None = Field(
        default=None,
        gt=0,
        description="Byte limit for the in-memory backend; writes past it fail",
    )

    model_config = SettingsConfigDict(env_prefix="RIDEFLOW_STORAGE_")

    @field_validator("sqlite_path")
    @classmethod
    def validate_sqlite_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("SQLite path must not be empty")
        return v


class RedisSettings(BaseSettings):
    host: str = "localhost"
    port: int = 6379
    db: int = Field(default=0, ge=0)
    password: str = ""
    ssl: bool = False

    model_config = SettingsConfigDict(env_prefix="REDIS_")


class LoggingSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="RIDEFLOW_LOG_")


class Settings(BaseSettings):
    storage: StorageSettings = Field(default_factory=StorageSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
