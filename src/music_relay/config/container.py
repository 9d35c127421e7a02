"""Dependency Injection Container

Manages the application's dependency graph, providing lazy initialization
and lifecycle management for the shared HTTP client, the resolver, the
thumbnail fetcher, and the searcher. A playback engine and its command
router are built per voice session, once a playback handle factory exists.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import httpx

from ..domain.shared.messages import ErrorMessages

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.command_router import CommandRouter
    from ..application.interfaces.audio_resolver import AudioResolver
    from ..application.interfaces.playable import PlayableFactory
    from ..application.interfaces.searcher import Searcher
    from ..application.interfaces.thumbnail_fetcher import ThumbnailFetcher
    from ..application.services.playback_engine import PlaybackEngine
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    _http_client: httpx.AsyncClient | None = None
    _audio_resolver: AudioResolver | None = None
    _thumbnail_fetcher: ThumbnailFetcher | None = None
    _searcher: Searcher | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Infrastructure adapters ===

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Get the HTTP client shared by thumbnail downloads and search."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.settings.http.timeout_seconds,
                follow_redirects=True,
            )
        return self._http_client

    @property
    def audio_resolver(self) -> AudioResolver:
        if self._audio_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._audio_resolver = YtDlpResolver(self.settings.audio)
        return self._audio_resolver

    @property
    def thumbnail_fetcher(self) -> ThumbnailFetcher:
        if self._thumbnail_fetcher is None:
            from ..infrastructure.audio.thumbnail_fetcher import HttpxThumbnailFetcher

            self._thumbnail_fetcher = HttpxThumbnailFetcher(self.http_client)
        return self._thumbnail_fetcher

    @property
    def searcher(self) -> Searcher | None:
        """Get the YouTube searcher, or None when no API key is configured."""
        if self._searcher is None and self.settings.search.enabled:
            from ..infrastructure.audio.youtube_searcher import YouTubeSearcher

            self._searcher = YouTubeSearcher(
                self.settings.search.youtube_api_key,
                self.http_client,
                api_url=self.settings.search.api_url,
            )
        return self._searcher

    # === Per-session services ===

    def create_engine(self, playable_factory: PlayableFactory) -> PlaybackEngine:
        from ..application.services.playback_engine import PlaybackEngine

        return PlaybackEngine(
            resolver=self.audio_resolver,
            thumbnail_fetcher=self.thumbnail_fetcher,
            playable_factory=playable_factory,
            searcher=self.searcher,
            default_volume=self.settings.audio.default_volume,
            queue_capacity=self.settings.audio.max_queue_size,
        )

    def create_router(self, engine: PlaybackEngine) -> CommandRouter:
        from ..application.commands.command_router import CommandRouter

        return CommandRouter(engine, prefix=self.settings.discord.command_prefix)

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Shutdown and cleanup all resources."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

        self._thumbnail_fetcher = None
        self._searcher = None


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)
