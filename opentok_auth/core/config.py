"""Library configuration read from the environment."""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_HOST = "https://api.opentok.com"


class Settings(BaseSettings):
    """OpenTok credentials and host, prefixed with ``OPENTOK_``."""

    model_config = SettingsConfigDict(
        env_prefix="OPENTOK_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str = Field(default="")
    api_secret: SecretStr = Field(default=SecretStr(""))
    api_host: str = Field(default=DEFAULT_API_HOST)
    log_level: str = Field(default="WARNING")

    @field_validator("api_host", mode="before")
    @classmethod
    def _normalize_host(cls, value: object) -> object:
        """Reject blank hosts and drop trailing slashes."""

        if isinstance(value, str):
            value = value.strip().rstrip("/")
            if not value:
                raise ValueError("OpenTok API host cannot be empty")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
