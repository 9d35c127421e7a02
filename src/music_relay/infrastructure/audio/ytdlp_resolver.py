"""AudioResolver implementation using yt-dlp for YouTube videos and playlists."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Final, cast
from urllib.parse import parse_qs, urlsplit

from yt_dlp import YoutubeDL
from yt_dlp.utils import DownloadError

from music_relay.application.interfaces.audio_resolver import AudioResolver
from music_relay.config.settings import AudioSettings
from music_relay.domain.music.entities import Track
from music_relay.domain.shared.exceptions import (
    NoFormatFoundError,
    ResolveFailedError,
    UnsupportedURLError,
)
from music_relay.domain.shared.messages import ErrorMessages, LogTemplates

from .models import PREFERRED_AUDIO_ITAGS, AudioFormatInfo, YtDlpOpts, YtDlpTrackInfo

logger = logging.getLogger(__name__)

SUPPORTED_HOSTS: Final[frozenset[str]] = frozenset(
    {"youtube.com", "www.youtube.com", "m.youtube.com", "music.youtube.com", "youtu.be"}
)
MAX_DURATION_SECONDS: Final[int] = 86_400
WATCH_URL: Final[str] = "https://www.youtube.com/watch?v={video_id}"


def is_playlist_url(url: str) -> bool:
    parts = urlsplit(url)
    return parts.path.rstrip("/") == "/playlist" and "list" in parse_qs(parts.query)


def select_audio_format(formats: list[AudioFormatInfo]) -> AudioFormatInfo | None:
    """Pick the preferred opus itag, falling back to any audio-only format."""
    playable = [f for f in formats if f.url]
    by_id = {f.format_id: f for f in playable}
    for itag in PREFERRED_AUDIO_ITAGS:
        if itag in by_id:
            return by_id[itag]

    for fmt in playable:
        if fmt.is_audio_only:
            return fmt
    return None


class YtDlpResolver(AudioResolver):
    """Resolves YouTube URLs with yt-dlp, running each extraction in a worker thread."""

    def __init__(self, settings: AudioSettings | None = None) -> None:
        self._settings = settings or AudioSettings()
        self._base_opts = YtDlpOpts(socket_timeout=self._settings.socket_timeout)

    def _get_opts(self, **overrides: Any) -> YtDlpOpts:
        if overrides:
            return self._base_opts.model_copy(update=overrides)
        return self._base_opts

    def _get_playlist_opts(self) -> YtDlpOpts:
        return self._get_opts(noplaylist=False, extract_flat="in_playlist")

    @staticmethod
    def check_url(url: str) -> None:
        parts = urlsplit(url.strip())
        host = (parts.hostname or "").lower()
        if parts.scheme not in ("http", "https") or host not in SUPPORTED_HOSTS:
            logger.info(LogTemplates.RESOLVER_UNSUPPORTED, url)
            raise UnsupportedURLError(url)

    def _extract_sync(self, url: str, opts: YtDlpOpts) -> dict[str, Any]:
        try:
            with YoutubeDL(params=cast(Any, opts.model_dump())) as ydl:
                data = ydl.extract_info(url, download=False)
        except DownloadError as e:
            logger.warning(LogTemplates.RESOLVER_FAILED_EXTRACT, url, e)
            raise ResolveFailedError(str(e)) from e

        if not isinstance(data, dict):
            raise ResolveFailedError(ErrorMessages.NO_INFO_RETURNED.format(url=url))
        return dict(data)

    def _info_to_track(self, info: YtDlpTrackInfo, source_url: str) -> Track:
        fmt = select_audio_format(info.formats)
        if fmt is None or fmt.url is None:
            logger.warning(LogTemplates.RESOLVER_NO_FORMAT, info.title)
            raise NoFormatFoundError()

        if info.id:
            public_url = WATCH_URL.format(video_id=info.id)
        else:
            public_url = info.webpage_url or source_url

        duration = info.duration
        if duration is not None and duration > MAX_DURATION_SECONDS:
            duration = None

        return Track(
            title=info.title[:500],
            public_url=public_url,
            stream_url=fmt.url,
            artist=info.display_artist,
            duration_seconds=duration,
            thumbnail_url=info.thumbnail,
        )

    async def _resolve_video(self, url: str) -> Track:
        data = await asyncio.to_thread(self._extract_sync, url, self._get_opts())
        return self._info_to_track(YtDlpTrackInfo.model_validate(data), url)

    async def _resolve_playlist(self, url: str) -> list[Track]:
        data = await asyncio.to_thread(self._extract_sync, url, self._get_playlist_opts())

        entries = data.get("entries") or []
        urls = [
            entry_url
            for entry in entries
            if isinstance(entry, dict)
            and (entry_url := YtDlpTrackInfo.model_validate(entry).entry_url())
        ]
        if not urls:
            raise ResolveFailedError(ErrorMessages.EMPTY_PLAYLIST)

        logger.info(LogTemplates.RESOLVER_PLAYLIST, url, len(urls))
        semaphore = asyncio.Semaphore(self._settings.resolve_concurrency)

        async def resolve_entry(entry_url: str) -> Track:
            async with semaphore:
                return await self._resolve_video(entry_url)

        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(resolve_entry(u)) for u in urls]
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

        return [task.result() for task in tasks]

    async def resolve(self, url: str) -> list[Track]:
        self.check_url(url)
        logger.debug(LogTemplates.RESOLVER_RESOLVING, url)

        if is_playlist_url(url):
            return await self._resolve_playlist(url)
        return [await self._resolve_video(url)]
