"""Port interface for turning a free-text query into a video URL."""

from __future__ import annotations

from abc import ABC, abstractmethod

from music_relay.domain.shared.types import NonEmptyStr


class Searcher(ABC):
    @abstractmethod
    async def search(self, query: NonEmptyStr) -> str:
        """Return the canonical URL of the best match for ``query``.

        Raises:
            SearchNotConfiguredError: No API credentials are configured.
            SearchRequestFailedError: The search request failed.
            SearchEmptyResultError: Nothing matched.
        """
        ...
