"""Chat command router - parses chat text into engine calls and renders replies."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ...domain.music.entities import Thumbnail
from ...domain.shared.exceptions import (
    AlreadyPlayingError,
    AlreadyStoppedError,
    EmptyQueueError,
    ErrorKind,
    IncorrectResultError,
    NoFormatFoundError,
    NoURLFoundError,
    RelayError,
    ResolveFailedError,
    SearchEmptyResultError,
    SearchNotConfiguredError,
    SearchRequestFailedError,
    ThumbnailDownloadError,
    ThumbnailNoURLError,
    TooFewArgumentsError,
    UnsupportedURLError,
    VolumeOutOfRangeError,
)
from ...domain.shared.messages import ChatMessages, LogTemplates
from ...utils.reply import extract_url, format_now_playing, format_track

if TYPE_CHECKING:
    from ..services.playback_engine import PlaybackEngine

logger = logging.getLogger(__name__)

_ERROR_REPLIES: dict[type[RelayError], str] = {
    AlreadyPlayingError: ChatMessages.ALREADY_PLAYING,
    EmptyQueueError: ChatMessages.EMPTY_QUEUE,
    AlreadyStoppedError: ChatMessages.ALREADY_STOPPED,
    NoFormatFoundError: ChatMessages.NO_FORMAT,
    VolumeOutOfRangeError: ChatMessages.VOLUME_RANGE,
    UnsupportedURLError: ChatMessages.UNSUPPORTED_URL,
    ResolveFailedError: ChatMessages.RESOLVE_FAILED,
    ThumbnailDownloadError: ChatMessages.THUMBNAIL_DOWNLOAD,
    ThumbnailNoURLError: ChatMessages.THUMBNAIL_NO_URL,
    SearchEmptyResultError: ChatMessages.SEARCH_EMPTY,
    SearchRequestFailedError: ChatMessages.SEARCH_REQUEST,
    SearchNotConfiguredError: ChatMessages.SEARCH_NOT_CONFIGURED,
    IncorrectResultError: ChatMessages.INCORRECT_RESULT,
    TooFewArgumentsError: ChatMessages.TOO_FEW_ARGUMENTS,
    NoURLFoundError: ChatMessages.NO_URL_FOUND,
}


def error_reply(error: Exception) -> str:
    """Map an error to its chat reply, falling back to the raw error text."""
    for cls in type(error).__mro__:
        reply = _ERROR_REPLIES.get(cls)
        if reply is not None:
            return reply
    return str(error)


class CommandResult(BaseModel):
    """Reply to a chat command: the text plus the error kind, if any."""

    model_config = ConfigDict(frozen=True)

    message: str
    error: ErrorKind | None = None
    thumbnail: Thumbnail | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


Handler = Callable[[list[str]], Awaitable[CommandResult]]


class CommandRouter:
    """Dispatches prefixed chat commands to one playback engine."""

    def __init__(self, engine: PlaybackEngine, *, prefix: str = "!") -> None:
        self._engine = engine
        self._prefix = prefix
        self._handlers: dict[str, Handler] = {
            "start": self._on_start,
            "stop": self._on_stop,
            "add": self._on_add,
            "search": self._on_search,
            "skip": self._on_skip,
            "vol": self._on_volume,
            "clear": self._on_clear,
            "now": self._on_now,
            "help": self._on_help,
        }

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def commands(self) -> list[str]:
        return list(self._handlers)

    async def handle(self, text: str, *, author: str = "unknown") -> CommandResult | None:
        """Run the command in ``text``.

        Returns None when the text is not addressed to the relay, so the
        caller can stay silent.
        """
        if not text.startswith(self._prefix):
            return None

        words = text[len(self._prefix) :].split()
        if not words:
            return None

        name = words[0].lower()
        handler = self._handlers.get(name)
        if handler is None:
            return None

        logger.debug(LogTemplates.COMMAND_RECEIVED, name, author)
        try:
            return await handler(words)
        except RelayError as e:
            logger.info(LogTemplates.COMMAND_FAILED, name, e)
            return CommandResult(message=error_reply(e), error=e.kind)
        except Exception as e:
            logger.exception(LogTemplates.COMMAND_UNEXPECTED_ERROR, name)
            return CommandResult(message=error_reply(e), error=ErrorKind.UNEXPECTED)

    # ── Handlers ───────────────────────────────────────────────────

    async def _on_start(self, words: list[str]) -> CommandResult:
        await self._engine.start()
        return CommandResult(message=ChatMessages.STARTED)

    async def _on_stop(self, words: list[str]) -> CommandResult:
        await self._engine.stop()
        return CommandResult(message=ChatMessages.STOPPED)

    async def _on_add(self, words: list[str]) -> CommandResult:
        if len(words) < 2:
            raise TooFewArgumentsError()

        url = extract_url(" ".join(words[1:]))
        if url is None:
            raise NoURLFoundError()

        tracks = await self._engine.add_to_queue(url)
        if len(tracks) == 1:
            track = tracks[0]
            return CommandResult(
                message=ChatMessages.ADDED_ONE.format(track=format_track(track)),
                thumbnail=track.thumbnail,
            )
        return CommandResult(message=ChatMessages.ADDED_MANY.format(count=len(tracks)))

    async def _on_search(self, words: list[str]) -> CommandResult:
        if len(words) < 2:
            raise TooFewArgumentsError()

        track = await self._engine.search_and_add(" ".join(words[1:]))
        return CommandResult(
            message=ChatMessages.ADDED_ONE.format(track=format_track(track)),
            thumbnail=track.thumbnail,
        )

    async def _on_skip(self, words: list[str]) -> CommandResult:
        await self._engine.skip()
        return CommandResult(message=ChatMessages.SKIPPED)

    async def _on_volume(self, words: list[str]) -> CommandResult:
        if len(words) < 2:
            volume = round(self._engine.get_volume() * 100)
            return CommandResult(message=ChatMessages.VOLUME_CURRENT.format(volume=volume))

        try:
            value = int(words[1])
        except ValueError as e:
            return CommandResult(message=str(e), error=ErrorKind.UNEXPECTED)

        await self._engine.set_volume(value)
        return CommandResult(message=ChatMessages.VOLUME_SET.format(volume=value))

    async def _on_clear(self, words: list[str]) -> CommandResult:
        await self._engine.clear_queue()
        return CommandResult(message=ChatMessages.CLEARED)

    async def _on_now(self, words: list[str]) -> CommandResult:
        now = self._engine.get_current_track_info()
        if now is None:
            return CommandResult(message=ChatMessages.NOTHING_PLAYING)
        return CommandResult(message=format_now_playing(now), thumbnail=now.track.thumbnail)

    async def _on_help(self, words: list[str]) -> CommandResult:
        return CommandResult(message=ChatMessages.HELP.format(prefix=self._prefix))
