"""Application configuration loaded via Pydantic settings."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed, immutable configuration sourced from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", frozen=True)

    MATTERMOST_URL: str = Field(...)
    MATTERMOST_TOKEN: str = Field(...)
    # Token Mattermost sends with the /assistant slash command
    MATTERMOST_COMMAND_TOKEN: str | None = Field(default=None)
    MATTERMOST_TIMEOUT_SECONDS: float = Field(default=10.0)
    LOG_PSEUDONYM_SECRET: str = Field(...)
    ASSISTANT_BRIDGE_LOG_LEVEL: str = Field(default="info")
    ASSISTANT_BRIDGE_LOG_DIR: Path | None = Field(default=None)
    # Upper bound on keys scanned by reverse identity lookups
    IDENTITY_SCAN_PAGE_SIZE: int = Field(default=100)
    HEALTHCHECK_API_TOKEN: str | None = Field(default=None)
    ENABLE_ADMIN_AUTH: bool = Field(default=True)

    DATA_DIR: Path = Field(default=Path("/data"))


settings = Settings()  # type: ignore[call-arg]


__all__ = ["Settings", "settings"]
