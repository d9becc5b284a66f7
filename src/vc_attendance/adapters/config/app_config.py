"""12-factor configuration adapter using environment variables."""

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")

    # Attendance storage
    data_file: str = Field(
        default="data/attendance.json",
        description="Path of the JSON snapshot holding history, active sessions and stats",
    )
    history_limit: int = Field(
        default=100, description="Maximum number of events kept in the history"
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone defining calendar days and weeks for leaderboards",
    )

    # Export configuration
    export_creator: str = Field(
        default="Discord VC Tracker", description="Creator written into exported workbooks"
    )

    # Rate limiting configuration
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of requests allowed per IP address per minute",
    )

    # Discord voice listener (disabled unless token, guild and channel are set)
    bot_token: str | None = Field(default=None, description="Discord bot token")
    guild_id: int | None = Field(default=None, description="ID of the guild to watch")
    voice_channel_id: int | None = Field(
        default=None, description="ID of the voice channel to track"
    )
    web_api_url: str = Field(
        default="http://localhost:3000",
        description="Base URL the voice listener posts events to",
    )
    event_delivery_timeout: int = Field(
        default=10, description="Timeout for delivering a voice event in seconds"
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be a valid IANA timezone name, got '{v}'") from e
        return v

    @field_validator("history_limit")
    @classmethod
    def validate_history_limit(cls, v: int) -> int:
        """Validate history limit is positive."""
        if v < 1:
            raise ValueError("history_limit must be at least 1")
        return v

    @field_validator("guild_id", "voice_channel_id", "bot_token", mode="before")
    @classmethod
    def empty_as_none(cls, v: Any) -> Any:
        """Treat empty environment values as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def tz(self) -> ZoneInfo:
        """The configured local timezone."""
        return ZoneInfo(self.timezone)

    @property
    def voice_listener_enabled(self) -> bool:
        """Whether the Discord voice listener has everything it needs."""
        return bool(self.bot_token and self.guild_id and self.voice_channel_id)

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores any local .env file."""
        return cls(_env_file=None, **overrides)
