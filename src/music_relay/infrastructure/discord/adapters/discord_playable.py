"""Discord voice playback handle implementing Playable."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import TYPE_CHECKING

import discord

from music_relay.application.interfaces.playable import Playable
from music_relay.config.settings import AudioSettings
from music_relay.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....domain.music.entities import Track

logger = logging.getLogger(__name__)

# Matches yt-dlp's Android client user-agent to avoid YouTube 403 responses
ANDROID_USER_AGENT = "com.google.android.youtube/19.44.38 (Linux; U; Android 14) gzip"


class DiscordPlayable(Playable):
    """One track streamed through FFmpeg into a connected voice client."""

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        track: Track,
        settings: AudioSettings | None = None,
    ) -> None:
        if not track.stream_url:
            raise ValueError(ErrorMessages.NO_STREAM_URL.format(title=track.title))

        self._voice_client = voice_client
        self._track = track
        self._settings = settings or AudioSettings()
        self._volume = self._settings.default_volume / 100
        self._source: discord.PCMVolumeTransformer[discord.FFmpegPCMAudio] | None = None
        self._started_at: float | None = None
        self._stopped_at: float | None = None

    @property
    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._stopped_at if self._stopped_at is not None else time.monotonic()
        return end - self._started_at

    def set_volume(self, volume: float) -> None:
        self._volume = max(0.0, min(1.0, volume))
        if self._source is not None:
            self._source.volume = self._volume

    def _create_source(self) -> discord.PCMVolumeTransformer[discord.FFmpegPCMAudio]:
        ffmpeg_options = self._settings.ffmpeg_options
        base_before_opts = ffmpeg_options.get("before_options", "")
        before_opts = f'{base_before_opts} -headers "User-Agent: {ANDROID_USER_AGENT}"'

        source = discord.FFmpegPCMAudio(
            self._track.stream_url,
            before_options=before_opts.strip(),
            options=ffmpeg_options.get("options", "-vn"),
        )
        return discord.PCMVolumeTransformer(source, volume=self._volume)

    async def play(self) -> None:
        loop = asyncio.get_running_loop()
        finished: asyncio.Future[None] = loop.create_future()

        def resolve(error: Exception | None) -> None:
            if finished.done():
                return
            if error is not None:
                finished.set_exception(error)
            else:
                finished.set_result(None)

        # Runs on discord.py's audio player thread.
        def after_callback(error: Exception | None = None) -> None:
            if error is not None:
                logger.warning(LogTemplates.VOICE_CLIENT_ERROR, error)
            loop.call_soon_threadsafe(resolve, error)

        self._source = self._create_source()
        self._voice_client.play(self._source, after=after_callback)
        self._started_at = time.monotonic()

        try:
            await finished
        finally:
            self._stopped_at = time.monotonic()

    def stop(self) -> None:
        if self._voice_client.is_playing() or self._voice_client.is_paused():
            self._voice_client.stop()


class DiscordPlayableFactory:
    """Binds tracks to playback handles on a single voice connection."""

    def __init__(
        self, voice_client: discord.VoiceClient, settings: AudioSettings | None = None
    ) -> None:
        self._voice_client = voice_client
        self._settings = settings or AudioSettings()

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._voice_client

    def __call__(self, track: Track) -> DiscordPlayable:
        return DiscordPlayable(self._voice_client, track, self._settings)
