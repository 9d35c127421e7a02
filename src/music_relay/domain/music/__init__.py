"""
Music Bounded Context

Domain logic for tracks, the bounded playback queue, and playback state transitions.
"""

from music_relay.domain.music.entities import NowPlaying, Thumbnail, Track
from music_relay.domain.music.queue import TrackQueue
from music_relay.domain.music.value_objects import (
    LoopAction,
    PlaybackEvent,
    PlaybackState,
    next_transition,
)

__all__ = [
    # Entities
    "Track",
    "Thumbnail",
    "NowPlaying",
    # Queue
    "TrackQueue",
    # Value Objects
    "PlaybackState",
    "PlaybackEvent",
    "LoopAction",
    "next_transition",
]
