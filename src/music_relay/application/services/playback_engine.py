"""Playback Engine - owns the queue, the playback loop, and the controls around them."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Final

from ...domain.music.entities import NowPlaying, Track
from ...domain.music.queue import TrackQueue
from ...domain.music.value_objects import (
    LoopAction,
    PlaybackEvent,
    PlaybackState,
    next_transition,
)
from ...domain.shared.exceptions import (
    AlreadyPlayingError,
    AlreadyStoppedError,
    EmptyQueueError,
    IncorrectResultError,
    SearchNotConfiguredError,
    ThumbnailFailedError,
    VolumeOutOfRangeError,
)
from ...domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from ..interfaces.audio_resolver import AudioResolver
    from ..interfaces.playable import Playable, PlayableFactory
    from ..interfaces.searcher import Searcher
    from ..interfaces.thumbnail_fetcher import ThumbnailFetcher

logger = logging.getLogger(__name__)

DEFAULT_VOLUME_PERCENT: Final[int] = 60
STOP_GRACE_SECONDS: Final[float] = 2.0


class PlaybackEngine:
    """Queue plus playback loop for one connected voice session.

    ``start()`` launches the loop as a background task; it pops tracks,
    binds each to a playback handle, and waits for whichever comes first:
    a stop signal, a skip signal, or the track ending on its own. The
    current handle is only touched under ``_handle_lock``, which
    ``set_volume`` shares with the loop.
    """

    def __init__(
        self,
        *,
        resolver: AudioResolver,
        thumbnail_fetcher: ThumbnailFetcher,
        playable_factory: PlayableFactory,
        searcher: Searcher | None = None,
        default_volume: int = DEFAULT_VOLUME_PERCENT,
        queue_capacity: int = TrackQueue.DEFAULT_CAPACITY,
    ) -> None:
        if not 0 <= default_volume <= 100:
            raise VolumeOutOfRangeError(default_volume)

        self._resolver = resolver
        self._thumbnail_fetcher = thumbnail_fetcher
        self._playable_factory = playable_factory
        self._searcher = searcher

        self._queue = TrackQueue(queue_capacity)
        self._state = PlaybackState.IDLE
        self._current_track: Track | None = None
        self._volume = default_volume / 100
        self._handle_lock = asyncio.Lock()

        # Each loop instance gets its own signal queue so a stale STOP/SKIP
        # can never leak into the next start/stop cycle.
        self._signals: asyncio.Queue[PlaybackEvent] = asyncio.Queue()
        self._loop_task: asyncio.Task[None] | None = None

        logger.debug(LogTemplates.ENGINE_CREATED, self._volume, queue_capacity)

    # ── State ──────────────────────────────────────────────────────

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def is_playing(self) -> bool:
        return self._state.is_playing

    @property
    def current_track(self) -> Track | None:
        return self._current_track

    @property
    def queue_length(self) -> int:
        return len(self._queue)

    @property
    def queue_capacity(self) -> int:
        return self._queue.capacity

    @property
    def _loop_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    # ── Controls ───────────────────────────────────────────────────

    async def start(self) -> None:
        """Launch the playback loop and return without waiting for it."""
        if self.is_playing or self._loop_running:
            raise AlreadyPlayingError()
        if self._queue.empty():
            raise EmptyQueueError()

        self._state = PlaybackState.PLAYING
        self._signals = asyncio.Queue()
        self._loop_task = asyncio.create_task(
            self._run(self._signals), name="playback-loop"
        )

    async def stop(self) -> None:
        """Stop playback, returning once the loop has acknowledged and exited."""
        if not self.is_playing:
            raise AlreadyStoppedError()

        self._state = PlaybackState.IDLE
        self._signals.put_nowait(PlaybackEvent.STOP)
        logger.debug(LogTemplates.PLAYBACK_STOP_REQUESTED)

        if self._loop_task is not None:
            await asyncio.shield(self._loop_task)

    async def skip(self) -> None:
        """Skip the current track, or drop the next queued one when idle."""
        if self._queue.empty():
            if not self.is_playing:
                raise EmptyQueueError()
            # Nothing behind the current track.
            await self.stop()
            return

        if not self.is_playing:
            self._queue.discard_next()
            return

        self._signals.put_nowait(PlaybackEvent.SKIP)

    async def add_to_queue(self, url: str) -> list[Track]:
        """Resolve ``url``, fetch every thumbnail, and enqueue the whole batch.

        Either every resolved track is enqueued, in resolution order, or none
        is. Waits for free queue slots when the queue is full.
        """
        tracks = await self._prepare_batch(url)
        await self._enqueue(tracks, url)
        return tracks

    async def search_and_add(self, query: str) -> Track:
        """Search for ``query`` and enqueue the single track it resolves to."""
        if self._searcher is None:
            raise SearchNotConfiguredError()

        url = await self._searcher.search(query)
        tracks = await self._prepare_batch(url)
        if len(tracks) != 1:
            raise IncorrectResultError(len(tracks))

        await self._enqueue(tracks, url)
        return tracks[0]

    async def clear_queue(self) -> int:
        """Drop every queued track; the current track keeps playing."""
        count = self._queue.clear()
        logger.info(LogTemplates.QUEUE_CLEARED, count)
        return count

    async def set_volume(self, percent: int) -> None:
        if not 0 <= percent <= 100:
            raise VolumeOutOfRangeError(percent)

        self._volume = percent / 100
        if self.is_playing:
            async with self._handle_lock:
                self._apply_volume()
        logger.info(LogTemplates.VOLUME_CHANGED, self._volume)

    def get_volume(self) -> float:
        return self._volume

    def get_current_track_info(self) -> NowPlaying | None:
        track = self._current_track
        if track is None:
            return None

        elapsed = track.playable.elapsed_seconds if track.playable is not None else 0.0
        return NowPlaying(track=track, elapsed_seconds=max(0.0, elapsed))

    async def close(self) -> None:
        """Cancel the playback loop and halt whatever is playing."""
        self._state = PlaybackState.IDLE
        task = self._loop_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                current = asyncio.current_task()
                if current is not None and current.cancelling():
                    raise
        logger.info(LogTemplates.ENGINE_CLOSED)

    # ── Enqueue helpers ────────────────────────────────────────────

    async def _prepare_batch(self, url: str) -> list[Track]:
        tracks = await self._resolver.resolve(url)
        try:
            return await self._attach_thumbnails(tracks)
        except ThumbnailFailedError as exc:
            logger.warning(LogTemplates.THUMBNAIL_BATCH_FAILED, url, exc)
            raise

    async def _attach_thumbnails(self, tracks: list[Track]) -> list[Track]:
        """Fetch all thumbnails concurrently; the first failure cancels the rest."""
        logger.debug(
            LogTemplates.THUMBNAIL_FETCHING, sum(1 for t in tracks if t.thumbnail_url)
        )
        try:
            async with asyncio.TaskGroup() as tg:
                tasks = [tg.create_task(self._with_thumbnail(track)) for track in tracks]
        except ExceptionGroup as eg:
            raise eg.exceptions[0] from None

        return [task.result() for task in tasks]

    async def _with_thumbnail(self, track: Track) -> Track:
        if not track.thumbnail_url:
            return track
        thumbnail = await self._thumbnail_fetcher.fetch(track.thumbnail_url)
        return track.with_thumbnail(thumbnail)

    async def _enqueue(self, tracks: list[Track], source: str) -> None:
        await self._queue.put_many(tracks)
        logger.info(LogTemplates.QUEUE_ENQUEUED, len(tracks), source, len(self._queue))

    # ── Playback loop ──────────────────────────────────────────────

    def _apply_volume(self) -> None:
        """Push the stored volume to the current handle. Caller holds the lock."""
        track = self._current_track
        if track is not None and track.playable is not None:
            track.playable.set_volume(self._volume)

    async def _run(self, signals: asyncio.Queue[PlaybackEvent]) -> None:
        logger.info(LogTemplates.PLAYBACK_LOOP_STARTED)
        try:
            while True:
                track = await self._next_track(signals)
                if track is None:
                    break

                event = await self._play(track, signals)
                async with self._handle_lock:
                    self._current_track = None
                self._state, action = next_transition(
                    self._state, event, queue_empty=self._queue.empty()
                )
                if action is LoopAction.TERMINATE:
                    break
        except Exception:
            logger.exception(LogTemplates.PLAYBACK_LOOP_CRASHED)
        finally:
            self._state = PlaybackState.IDLE
            self._current_track = None
            logger.info(LogTemplates.PLAYBACK_LOOP_FINISHED)

    async def _next_track(self, signals: asyncio.Queue[PlaybackEvent]) -> Track | None:
        """Pop the next track, or return None if a stop arrives while waiting."""
        if not self.is_playing:
            return None

        get_task = asyncio.create_task(self._queue.get())
        stop_task = asyncio.create_task(self._wait_for_stop(signals))
        try:
            await asyncio.wait({get_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            get_task.cancel()
            stop_task.cancel()

        if stop_task.done() and not stop_task.cancelled():
            if get_task.done() and not get_task.cancelled():
                logger.debug(LogTemplates.QUEUE_DISCARDED, get_task.result().title)
            return None
        return get_task.result()

    @staticmethod
    async def _wait_for_stop(signals: asyncio.Queue[PlaybackEvent]) -> None:
        # A skip with nothing playing has nothing to act on.
        while await signals.get() is not PlaybackEvent.STOP:
            continue

    async def _bind(self, track: Track) -> Playable:
        playable = self._playable_factory(track)
        async with self._handle_lock:
            self._current_track = track.bind(playable)
            self._apply_volume()
        return playable

    async def _play(
        self, track: Track, signals: asyncio.Queue[PlaybackEvent]
    ) -> PlaybackEvent:
        """Play one track and report which event ended it."""
        try:
            playable = await self._bind(track)
        except Exception as exc:
            logger.warning(LogTemplates.PLAYBACK_TRACK_FAILED, track.title, exc)
            return PlaybackEvent.FAILED

        play_task = asyncio.create_task(playable.play(), name=f"play:{track.title}")
        signal_task = asyncio.create_task(signals.get())
        logger.info(LogTemplates.PLAYBACK_STARTED, track.title)

        try:
            await asyncio.wait({play_task, signal_task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            playable.stop()
            play_task.cancel()
            signal_task.cancel()
            raise

        if signal_task.done():
            event = signal_task.result()
            async with self._handle_lock:
                playable.stop()
            await self._reap(play_task, track)
            if event is PlaybackEvent.STOP:
                logger.info(LogTemplates.PLAYBACK_STOPPED, track.title)
            else:
                logger.info(LogTemplates.PLAYBACK_SKIPPED, track.title)
            return event

        signal_task.cancel()
        error = play_task.exception()
        if error is not None:
            logger.warning(LogTemplates.PLAYBACK_TRACK_FAILED, track.title, error)
            return PlaybackEvent.FAILED

        logger.info(LogTemplates.PLAYBACK_COMPLETED, track.title)
        return PlaybackEvent.COMPLETED

    @staticmethod
    async def _reap(play_task: asyncio.Task[None], track: Track) -> None:
        """Give a stopped handle a moment to wind down, then cancel it."""
        done, _ = await asyncio.wait({play_task}, timeout=STOP_GRACE_SECONDS)
        if not done:
            logger.warning(LogTemplates.PLAYBACK_STILL_RUNNING, track.title)
            play_task.cancel()
            return

        if not play_task.cancelled() and play_task.exception() is not None:
            logger.debug(LogTemplates.PLAYBACK_ERROR, track.title, play_task.exception())
