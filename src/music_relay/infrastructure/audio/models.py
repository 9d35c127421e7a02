"""Pydantic models for yt-dlp data transformation and configuration.

These are infrastructure-specific models for parsing raw yt-dlp info dicts
and configuring yt-dlp options.
"""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from music_relay.domain.shared.types import NonEmptyStr, NonNegativeInt, PositiveInt

DEFAULT_RETRIES: Final[int] = 3
DEFAULT_SOCKET_TIMEOUT: Final[int] = 10
PREFERRED_AUDIO_ITAGS: Final[tuple[str, ...]] = ("251", "250", "249")
"""Opus-in-webm audio itags, best first."""


# ── Pydantic models for yt-dlp data ────────────────────────────────────


class AudioFormatInfo(BaseModel):
    """A single format entry from yt-dlp extraction."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    format_id: str = ""
    url: NonEmptyStr | None = None
    acodec: str | None = None
    vcodec: str | None = None

    @field_validator("format_id", mode="before")
    @classmethod
    def _coerce_format_id(cls, v: Any) -> str:
        return "" if v is None else str(v)

    @property
    def is_audio_only(self) -> bool:
        return (
            self.vcodec == "none"
            and self.acodec is not None
            and self.acodec != "none"
        )


class YtDlpTrackInfo(BaseModel):
    """Trimmed yt-dlp extraction result for track conversion.

    Extra fields from yt-dlp are silently ignored.
    Before-validators coerce garbage from external yt-dlp data gracefully.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    webpage_url: str | None = None
    url: str | None = None
    title: NonEmptyStr = "Unknown Title"
    duration: NonNegativeInt | None = None
    thumbnail: str | None = None
    artist: NonEmptyStr | None = None
    creator: NonEmptyStr | None = None
    uploader: NonEmptyStr | None = None
    channel: NonEmptyStr | None = None
    formats: list[AudioFormatInfo] = Field(default_factory=list)

    @field_validator(
        "id", "webpage_url", "url", "thumbnail",
        "artist", "creator", "uploader", "channel",
        mode="before",
    )
    @classmethod
    def _coerce_empty_to_none(cls, v: Any) -> str | None:
        """Convert empty / whitespace-only / non-string values to None."""
        if not isinstance(v, str) or not v.strip():
            return None
        return v

    @field_validator("thumbnail", mode="after")
    @classmethod
    def _http_thumbnail_only(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(("http://", "https://")):
            return None
        return v

    @field_validator("title", mode="before")
    @classmethod
    def _coerce_title(cls, v: Any) -> str:
        """Fall back to default when yt-dlp sends empty or non-string title."""
        if not isinstance(v, str) or not v.strip():
            return "Unknown Title"
        return v

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, v: Any) -> int | None:
        """Coerce to non-negative int; return None for garbage values."""
        if v is None:
            return None
        try:
            val = int(v)
            return val if val >= 0 else None
        except (TypeError, ValueError):
            return None

    @field_validator("formats", mode="before")
    @classmethod
    def _coerce_formats(cls, v: Any) -> list[Any]:
        if not isinstance(v, list):
            return []
        return [f for f in v if isinstance(f, dict)]

    @property
    def display_artist(self) -> str | None:
        return self.artist or self.creator or self.uploader or self.channel

    def entry_url(self) -> str | None:
        """URL of a flat playlist entry, built from its id when yt-dlp omits it."""
        if self.url and self.url.startswith(("http://", "https://")):
            return self.url
        if self.webpage_url:
            return self.webpage_url
        if self.id:
            return f"https://www.youtube.com/watch?v={self.id}"
        return None


# ── yt-dlp option models ───────────────────────────────────────────────


class YtDlpOpts(BaseModel):
    """Typed yt-dlp configuration options passed to YoutubeDL."""

    model_config = ConfigDict(frozen=True)

    quiet: bool = True
    no_warnings: bool = True
    noprogress: bool = True
    noplaylist: bool = True
    forceipv4: bool = True
    retries: PositiveInt = DEFAULT_RETRIES
    socket_timeout: PositiveInt = DEFAULT_SOCKET_TIMEOUT
    skip_download: bool = True
    extract_flat: NonEmptyStr | bool = False
