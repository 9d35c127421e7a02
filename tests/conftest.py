import asyncio
from collections.abc import Callable
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from music_relay.application.interfaces.audio_resolver import AudioResolver
from music_relay.application.interfaces.playable import Playable
from music_relay.application.interfaces.searcher import Searcher
from music_relay.application.interfaces.thumbnail_fetcher import ThumbnailFetcher
from music_relay.application.services.playback_engine import PlaybackEngine
from music_relay.domain.music.entities import Thumbnail, Track

# ============================================================================
# Playback Fakes
# ============================================================================


class FakePlayable(Playable):
    """Playback handle whose ``play()`` blocks until the test ends it."""

    def __init__(self, track: Track, elapsed: float = 12.0) -> None:
        self.track = track
        self.volume: float | None = None
        self.stopped = False
        self.started = asyncio.Event()
        self._finished = asyncio.Event()
        self._error: Exception | None = None
        self._elapsed = elapsed

    def set_volume(self, volume: float) -> None:
        self.volume = volume

    async def play(self) -> None:
        self.started.set()
        await self._finished.wait()
        if self._error is not None:
            raise self._error

    def stop(self) -> None:
        self.stopped = True
        self._finished.set()

    def complete(self) -> None:
        """End the track as if it had played to the end."""
        self._finished.set()

    def fail(self, error: Exception) -> None:
        self._error = error
        self._finished.set()

    @property
    def elapsed_seconds(self) -> float:
        return self._elapsed


class FakePlayableFactory:
    """Records every handle it creates; titles in ``fail_for`` raise instead."""

    def __init__(self) -> None:
        self.created: list[FakePlayable] = []
        self.fail_for: set[str] = set()

    def __call__(self, track: Track) -> FakePlayable:
        if track.title in self.fail_for:
            raise RuntimeError(f"cannot open {track.title}")
        playable = FakePlayable(track)
        self.created.append(playable)
        return playable

    @property
    def titles(self) -> list[str]:
        return [p.track.title for p in self.created]

    @property
    def last(self) -> FakePlayable:
        return self.created[-1]


async def _wait_until(predicate: Callable[[], bool], timeout: float = 1.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0)


# ============================================================================
# Domain Entity Fixtures
# ============================================================================


@pytest.fixture
def make_track():
    """Factory for tracks with unique URLs derived from the title."""

    def _make(
        title: str = "Test Track",
        *,
        artist: str | None = "Test Artist",
        duration: int | None = 180,
        thumbnail_url: str | None = "https://i.ytimg.com/vi/test/hqdefault.jpg",
    ) -> Track:
        slug = title.lower().replace(" ", "-")
        return Track(
            title=title,
            public_url=f"https://www.youtube.com/watch?v={slug}",
            stream_url=f"https://rr1.googlevideo.com/{slug}",
            artist=artist,
            duration_seconds=duration,
            thumbnail_url=thumbnail_url,
        )

    return _make


@pytest.fixture
def sample_track(make_track):
    return make_track()


@pytest.fixture
def sample_thumbnail():
    return Thumbnail(
        source_url="https://i.ytimg.com/vi/test/hqdefault.jpg",
        mime_type="image/jpeg",
        data="/9j/4AAQ",
    )


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def wait_until():
    """Yield to the event loop until ``predicate()`` holds."""
    return _wait_until


@pytest.fixture
def playable_factory():
    return FakePlayableFactory()


@pytest.fixture
def mock_resolver():
    resolver = AsyncMock(spec=AudioResolver)
    resolver.resolve.return_value = []
    return resolver


@pytest.fixture
def mock_thumbnail_fetcher():
    fetcher = AsyncMock(spec=ThumbnailFetcher)
    fetcher.fetch.side_effect = lambda url: Thumbnail(
        source_url=url, mime_type="image/jpeg", data="/9j/4AAQ"
    )
    return fetcher


@pytest.fixture
def mock_searcher():
    searcher = AsyncMock(spec=Searcher)
    searcher.search.return_value = "https://www.youtube.com/watch?v=found"
    return searcher


@pytest_asyncio.fixture
async def engine(mock_resolver, mock_thumbnail_fetcher, mock_searcher, playable_factory):
    engine = PlaybackEngine(
        resolver=mock_resolver,
        thumbnail_fetcher=mock_thumbnail_fetcher,
        playable_factory=playable_factory,
        searcher=mock_searcher,
    )
    yield engine
    await engine.close()


@pytest.fixture
def enqueue(engine, mock_resolver):
    """Queue the given tracks through the engine's normal add path."""

    async def _enqueue(*tracks: Track) -> list[Track]:
        mock_resolver.resolve.return_value = list(tracks)
        return await engine.add_to_queue("https://www.youtube.com/watch?v=batch")

    return _enqueue
