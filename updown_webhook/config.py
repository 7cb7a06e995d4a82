"""Configuration management for the updown.io webhook receiver."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server settings
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8888)
    log_level: str = Field(default="INFO")
    log_format: Literal["json", "text"] = Field(default="json")

    # Metrics
    subsystem: str = Field(default="webhook")
    build_time: str = Field(default="")
    git_commit: str = Field(default="")

    # updown.io identity
    whitelist_host: str = Field(default="ips.updown.io")
    user_agent: str = Field(default="updown.io")
    # Skips the DNS lookup when set, e.g. ALLOWED_IPS='["198.51.100.7"]'
    allowed_ips: list[str] = Field(default_factory=list)


@lru_cache
def get_settings() -> Settings:
    return Settings()
