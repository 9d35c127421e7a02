"""Port interface for downloading track thumbnails."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ...domain.music.entities import Thumbnail


class ThumbnailFetcher(ABC):
    @abstractmethod
    async def fetch(self, url: str) -> "Thumbnail":
        """Download the image at ``url``.

        Raises:
            ThumbnailNoURLError: ``url`` is empty.
            ThumbnailDownloadError: Non-2xx response or transport failure.
        """
        ...
