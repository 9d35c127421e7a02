"""Bounded FIFO hand-off between enqueue callers and the playback loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import ClassVar

from music_relay.domain.music.entities import Track
from music_relay.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class TrackQueue:
    """Bounded FIFO of tracks.

    ``put`` blocks while the queue is full and ``get`` blocks while it is
    empty, so producers and the single consumer need no other locking.
    """

    DEFAULT_CAPACITY: ClassVar[int] = 100

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("Queue capacity must be positive")
        self._capacity = capacity
        self._queue: asyncio.Queue[Track] = asyncio.Queue(maxsize=capacity)

    def __len__(self) -> int:
        return self._queue.qsize()

    @property
    def capacity(self) -> int:
        return self._capacity

    def empty(self) -> bool:
        return self._queue.empty()

    def full(self) -> bool:
        return self._queue.full()

    async def put(self, track: Track) -> None:
        if self._queue.full():
            logger.debug(LogTemplates.QUEUE_WAITING_FOR_SLOT, self._capacity)
        await self._queue.put(track)

    async def put_many(self, tracks: Iterable[Track]) -> None:
        """Push tracks in order, waiting for free slots as needed."""
        for track in tracks:
            await self.put(track)

    async def get(self) -> Track:
        return await self._queue.get()

    def discard_next(self) -> Track | None:
        """Pop the head of the queue without waiting, or None if empty."""
        try:
            track = self._queue.get_nowait()
        except asyncio.QueueEmpty:
            return None
        logger.debug(LogTemplates.QUEUE_DISCARDED, track.title)
        return track

    def clear(self) -> int:
        """Drain every queued track and return how many were removed."""
        count = 0
        while self.discard_next() is not None:
            count += 1
        return count
