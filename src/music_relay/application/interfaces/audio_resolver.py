"""Port interface for resolving URLs to playable tracks."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from music_relay.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.music.entities import Track


class AudioResolver(ABC):
    """Interface for resolving a URL to an ordered list of tracks."""

    @abstractmethod
    async def resolve(self, url: NonEmptyStr) -> list["Track"]:
        """Resolve a single item or a collection URL.

        Collections resolve every entry and keep their original order.

        Raises:
            UnsupportedURLError: The host or path is not recognised.
            NoFormatFoundError: No audio-only format is available.
            ResolveFailedError: The lookup itself failed.
        """
        ...
