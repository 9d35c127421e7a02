"""Application Settings and Configuration

Pydantic-based settings management using environment variables.
Settings are loaded from environment variables with support for .env files,
type validation, and sensible defaults. All settings are frozen and immutable
after initialization.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..domain.shared.messages import ErrorMessages


class DiscordSettings(BaseModel):
    """Discord connection and chat configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    token: SecretStr = Field(
        default=SecretStr(""), validation_alias=AliasChoices("token", "bot_token", "discord_token")
    )
    command_prefix: str = Field(
        default="!",
        min_length=1,
        max_length=5,
        validation_alias=AliasChoices("command_prefix", "prefix"),
    )
    voice_channel_id: int | None = Field(
        default=None,
        gt=0,
        validation_alias=AliasChoices("voice_channel_id", "channel_id"),
    )
    connect_timeout_s: float = Field(default=10.0, gt=0.0, le=120.0)


class AudioSettings(BaseModel):
    """Audio playback and resolution configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    default_volume: int = Field(default=60, ge=0, le=100)
    max_queue_size: int = Field(default=100, ge=1, le=1000)
    ffmpeg_options: dict[str, str] = Field(
        default_factory=lambda: {
            "before_options": "-reconnect 1 -reconnect_streamed 1 -reconnect_delay_max 5",
            "options": "-vn",
        }
    )
    resolve_concurrency: int = Field(default=5, ge=1, le=32)
    socket_timeout: int = Field(default=10, ge=1, le=120)


class SearchSettings(BaseModel):
    """YouTube Data API search configuration."""

    model_config = SettingsConfigDict(frozen=True, populate_by_name=True)

    youtube_api_key: SecretStr = Field(
        default=SecretStr(""),
        validation_alias=AliasChoices("youtube_api_key", "api_key"),
    )
    api_url: str = "https://www.googleapis.com/youtube/v3/search"

    @property
    def enabled(self) -> bool:
        return bool(self.youtube_api_key.get_secret_value())


class HttpSettings(BaseModel):
    """Shared HTTP client configuration (thumbnails and search)."""

    model_config = SettingsConfigDict(frozen=True)

    timeout_seconds: float = Field(default=10.0, gt=0.0, le=120.0)


class Settings(BaseSettings):
    """Application settings container.

    Automatically loads configuration from environment variables.

    Environment variable naming:
    - ENVIRONMENT, LOG_LEVEL (top-level)
    - DISCORD__TOKEN, DISCORD__VOICE_CHANNEL_ID, DISCORD__COMMAND_PREFIX
    - AUDIO__DEFAULT_VOLUME, AUDIO__MAX_QUEUE_SIZE
    - SEARCH__YOUTUBE_API_KEY
    - HTTP__TIMEOUT_SECONDS
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = "development"
    log_level: str = "INFO"

    discord: DiscordSettings = Field(default_factory=DiscordSettings)
    audio: AudioSettings = Field(default_factory=AudioSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    http: HttpSettings = Field(default_factory=HttpSettings)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(
                ErrorMessages.INVALID_LOG_LEVEL.format(level=v, valid_levels=valid_levels)
            )
        return v_upper


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings.

    Settings are automatically loaded from:
    1. .env file (if present)
    2. Environment variables
    3. Default values
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
