"""Port interface for the connected audio sink."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class Playable(ABC):
    """A single track bound to an already-connected audio output."""

    @abstractmethod
    def set_volume(self, volume: float) -> None:
        """Apply a volume fraction in [0.0, 1.0], live if already playing."""
        ...

    @abstractmethod
    async def play(self) -> None:
        """Play the bound track, returning once playback has ended.

        Returning normally signals natural completion (or a stop). Raising
        means the track could not be played.
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        """Halt playback; a pending ``play()`` returns shortly after."""
        ...

    @property
    @abstractmethod
    def elapsed_seconds(self) -> float:
        ...


PlayableFactory: TypeAlias = Callable[["Track"], Playable]
"""Binds a track to a new playback handle."""
