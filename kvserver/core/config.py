from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "kv-http-store"
    env: str = "development"

    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)

    report_interval_seconds: float = Field(default=5.0, gt=0)
    graceful_shutdown_seconds: int = Field(default=10, ge=0)
    max_body_bytes: int = Field(default=1_000_000, gt=0)
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", env_prefix="", extra="ignore")

    @model_validator(mode="after")
    def validate_log_level(self) -> "Settings":
        if self.log_level.upper() not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"LOG_LEVEL must be a standard level name, got {self.log_level!r}")
        return self

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
