"""Playback state machine for the music bounded context."""

from __future__ import annotations

from enum import Enum


class PlaybackState(Enum):
    """Engine playback state.

    State transitions:
    - IDLE -> PLAYING (start)
    - PLAYING -> IDLE (stop, or the queue ran dry after a track ended)
    """

    IDLE = "idle"
    PLAYING = "playing"

    @property
    def is_playing(self) -> bool:
        return self == PlaybackState.PLAYING


class PlaybackEvent(Enum):
    """Events that end the playback of a single track."""

    STOP = "stop"
    SKIP = "skip"
    COMPLETED = "completed"
    FAILED = "failed"


class LoopAction(Enum):
    """What the playback loop does after a track ends."""

    CONTINUE = "continue"
    TERMINATE = "terminate"


_TRANSITIONS: dict[tuple[PlaybackState, PlaybackEvent], tuple[PlaybackState, LoopAction]] = {
    (PlaybackState.PLAYING, PlaybackEvent.STOP): (PlaybackState.IDLE, LoopAction.TERMINATE),
    (PlaybackState.PLAYING, PlaybackEvent.SKIP): (PlaybackState.PLAYING, LoopAction.CONTINUE),
}

_DRAINED = (PlaybackState.IDLE, LoopAction.TERMINATE)


def next_transition(
    state: PlaybackState, event: PlaybackEvent, *, queue_empty: bool
) -> tuple[PlaybackState, LoopAction]:
    """Return the next state and loop action for ``event`` arriving in ``state``.

    An IDLE engine always terminates the loop: ``stop()`` flips the state
    before signalling, so the loop sees IDLE by the time it handles STOP.
    A finished or failed track only continues while tracks remain queued.
    """
    if state is PlaybackState.IDLE:
        return _DRAINED

    explicit = _TRANSITIONS.get((state, event))
    if explicit is not None:
        return explicit

    if queue_empty:
        return _DRAINED
    return PlaybackState.PLAYING, LoopAction.CONTINUE
