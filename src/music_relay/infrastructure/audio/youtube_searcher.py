"""Searcher implementation backed by the YouTube Data API v3."""

from __future__ import annotations

import logging
from typing import Final

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from music_relay.application.interfaces.searcher import Searcher
from music_relay.domain.shared.exceptions import (
    SearchEmptyResultError,
    SearchNotConfiguredError,
    SearchRequestFailedError,
)
from music_relay.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

DEFAULT_API_URL: Final[str] = "https://www.googleapis.com/youtube/v3/search"
WATCH_URL: Final[str] = "https://www.youtube.com/watch?v={video_id}"


# ── Response models ────────────────────────────────────────────────────


class SearchItemId(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    kind: str = ""
    video_id: str | None = Field(default=None, alias="videoId")


class SearchItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: SearchItemId


class SearchResponse(BaseModel):
    """The slice of a ``search.list`` response needed to pick a video."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    items: list[SearchItem] = Field(default_factory=list)

    def first_video_id(self) -> str | None:
        for item in self.items:
            if item.id.video_id:
                return item.id.video_id
        return None


class YouTubeSearcher(Searcher):
    """Finds the top video for a query through ``search.list``."""

    def __init__(
        self,
        api_key: SecretStr | str,
        client: httpx.AsyncClient,
        *,
        api_url: str = DEFAULT_API_URL,
    ) -> None:
        self._api_key = api_key if isinstance(api_key, SecretStr) else SecretStr(api_key)
        self._client = client
        self._api_url = api_url

    async def search(self, query: str) -> str:
        key = self._api_key.get_secret_value()
        if not key:
            raise SearchNotConfiguredError()

        logger.debug(LogTemplates.SEARCH_REQUEST, query)
        params = {"part": "id", "q": query, "key": key, "type": "video"}
        try:
            response = await self._client.get(self._api_url, params=params)
        except httpx.HTTPError as e:
            logger.warning(LogTemplates.SEARCH_FAILED, query, e)
            raise SearchRequestFailedError() from e

        if response.status_code != httpx.codes.OK:
            logger.warning(LogTemplates.SEARCH_FAILED, query, response.status_code)
            raise SearchRequestFailedError()

        try:
            result = SearchResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.warning(LogTemplates.SEARCH_FAILED, query, e)
            raise SearchRequestFailedError() from e

        video_id = result.first_video_id()
        if video_id is None:
            raise SearchEmptyResultError()
        return WATCH_URL.format(video_id=video_id)
