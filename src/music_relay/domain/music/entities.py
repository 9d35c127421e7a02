"""Core domain entities for the music bounded context."""

from __future__ import annotations

import base64
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from music_relay.domain.shared.types import (
    DurationSeconds,
    HttpUrlStr,
    NonEmptyStr,
    NonNegativeFloat,
    TrackTitleStr,
)

if TYPE_CHECKING:
    from music_relay.application.interfaces.playable import Playable


class Thumbnail(BaseModel):
    """Downloaded cover image, kept base64-encoded for inline rendering."""

    model_config = ConfigDict(frozen=True, strict=True)

    source_url: HttpUrlStr
    mime_type: str = ""
    data: str = ""

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    @property
    def file_extension(self) -> str:
        """Guess a file extension from the MIME type, defaulting to ``jpg``."""
        subtype = self.mime_type.partition("/")[2].partition(";")[0].strip()
        if subtype == "jpeg" or not subtype:
            return "jpg"
        return subtype


class Track(BaseModel):
    """Immutable value object representing a playable track.

    Only two things change over a track's life, and both produce copies:
    the thumbnail is attached before the track is queued, and a playback
    handle is bound when the playback loop takes it off the queue.
    """

    model_config = ConfigDict(frozen=True, strict=True, arbitrary_types_allowed=True)

    title: TrackTitleStr
    public_url: HttpUrlStr
    stream_url: HttpUrlStr
    artist: NonEmptyStr | None = None
    duration_seconds: DurationSeconds | None = None
    thumbnail_url: HttpUrlStr | None = None
    thumbnail: Thumbnail | None = None

    playable: Any = Field(default=None, exclude=True, repr=False)

    @property
    def duration_formatted(self) -> str:
        """Format duration as HH:MM:SS."""
        if self.duration_seconds is None:
            return "Unknown"

        hours, remainder = divmod(self.duration_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"

    @property
    def is_bound(self) -> bool:
        return self.playable is not None

    def with_thumbnail(self, thumbnail: Thumbnail) -> Track:
        """Return a copy of this track carrying the downloaded thumbnail."""
        return self.model_copy(update={"thumbnail": thumbnail})

    def bind(self, playable: Playable) -> Track:
        """Return a copy of this track bound to a playback handle."""
        return self.model_copy(update={"playable": playable})


class NowPlaying(BaseModel):
    """Snapshot of the track currently bound to the playback loop."""

    model_config = ConfigDict(frozen=True)

    track: Track
    elapsed_seconds: NonNegativeFloat = 0.0

    @property
    def progress(self) -> float:
        """Fraction of the track played so far, in [0.0, 1.0]."""
        if not self.track.duration_seconds:
            return 0.0
        return min(1.0, self.elapsed_seconds / self.track.duration_seconds)
