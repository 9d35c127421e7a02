"""ThumbnailFetcher implementation over httpx."""

from __future__ import annotations

import base64
import logging

import httpx

from music_relay.application.interfaces.thumbnail_fetcher import ThumbnailFetcher
from music_relay.domain.music.entities import Thumbnail
from music_relay.domain.shared.exceptions import ThumbnailDownloadError, ThumbnailNoURLError
from music_relay.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class HttpxThumbnailFetcher(ThumbnailFetcher):
    """Downloads cover images and keeps them base64-encoded.

    The client is shared with the rest of the process when one is passed in;
    otherwise a private one is created and closed by ``aclose``.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)

    async def fetch(self, url: str) -> Thumbnail:
        if not url:
            raise ThumbnailNoURLError()

        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.THUMBNAIL_FAILED, url, e)
            raise ThumbnailDownloadError(url) from e

        return Thumbnail(
            source_url=url,
            mime_type=response.headers.get("content-type", ""),
            data=base64.b64encode(response.content).decode("ascii"),
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
