"""Application configuration for the room discovery service."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class Settings(BaseSettings):
    """Runtime configuration."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    app_env: str = Field(default="development")
    service_name: str = Field(default="room-discovery")
    service_version: str = Field(default="1.0.0")
    log_level: str = Field(default="INFO")
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000, ge=1, le=65535)

    database_url: str = Field(default="")
    database_ssl_required: bool = Field(default=False)

    jwt_secret: str = Field(default="")
    jwt_algorithm: str = Field(default="HS256")
    token_ttl_hours: int = Field(default=24, ge=1)

    max_guests: int = Field(default=10, ge=0)
    join_max_attempts: int = Field(default=3, ge=1)
    hls_base_url: str = Field(default="https://example.com/hls")

    @field_validator("cors_allow_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        """Allow comma-separated env values for CORS origins."""

        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value

    @property
    def database_async_url(self) -> str:
        """Return the database URL rewritten for the asyncpg driver."""

        url = self.database_url
        if url.startswith("postgres://"):
            url = url.replace("postgres://", "postgresql+asyncpg://", 1)
        elif url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url


def validate_runtime_settings(settings: Settings) -> None:
    """Fail fast when settings required for serving are missing."""

    missing = []
    if not settings.database_url.strip():
        missing.append("DATABASE_URL")
    if not settings.jwt_secret.strip():
        missing.append("JWT_SECRET")
    if missing:
        raise ConfigurationError(f"Missing required configuration: {', '.join(missing)}")


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
