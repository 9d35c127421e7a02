"""Relay error taxonomy.

Every failure the engine or its collaborators can report derives from
``RelayError`` and carries a class-level ``kind`` the chat layer can branch on.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorKind(Enum):
    """Stable identifiers for the failures reported back to chat."""

    ALREADY_PLAYING = "already_playing"
    ALREADY_STOPPED = "already_stopped"
    EMPTY_QUEUE = "empty_queue"
    VOLUME_OUT_OF_RANGE = "volume_out_of_range"
    NO_FORMAT_FOUND = "no_format_found"
    RESOLVE_FAILED = "resolve_failed"
    THUMBNAIL_FAILED = "thumbnail_failed"
    SEARCH_EMPTY_RESULT = "search_empty_result"
    SEARCH_REQUEST_FAILED = "search_request_failed"
    SEARCH_NOT_CONFIGURED = "search_not_configured"
    INCORRECT_RESULT = "incorrect_result"
    TOO_FEW_ARGUMENTS = "too_few_arguments"
    NO_URL_FOUND = "no_url_found"
    UNEXPECTED = "unexpected"


class RelayError(Exception):
    """Base exception for all relay errors."""

    kind: ClassVar[ErrorKind] = ErrorKind.UNEXPECTED
    default_message: ClassVar[str] = "unexpected error"

    def __init__(self, message: str | None = None, code: str | None = None) -> None:
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


# ── Playback state ──────────────────────────────────────────────────


class AlreadyPlayingError(RelayError):
    kind = ErrorKind.ALREADY_PLAYING
    default_message = "the playlist is already playing"


class AlreadyStoppedError(RelayError):
    kind = ErrorKind.ALREADY_STOPPED
    default_message = "the playlist is already stopped"


class EmptyQueueError(RelayError):
    kind = ErrorKind.EMPTY_QUEUE
    default_message = "empty playlist"


class VolumeOutOfRangeError(RelayError):
    """Raised when a volume percentage falls outside 0-100."""

    kind = ErrorKind.VOLUME_OUT_OF_RANGE
    default_message = "the volume level is incorrect"

    def __init__(self, percent: int, message: str | None = None) -> None:
        super().__init__(message or f"volume {percent} is outside 0-100")
        self.percent = percent


# ── Resolution ──────────────────────────────────────────────────────


class ResolveFailedError(RelayError):
    kind = ErrorKind.RESOLVE_FAILED
    default_message = "could not resolve the URL"


class UnsupportedURLError(ResolveFailedError):
    """Raised when the resolver does not recognise the host or path."""

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"unsupported URL: {url}")
        self.url = url


class NoFormatFoundError(RelayError):
    kind = ErrorKind.NO_FORMAT_FOUND
    default_message = "no format found"


# ── Thumbnails ──────────────────────────────────────────────────────


class ThumbnailFailedError(RelayError):
    kind = ErrorKind.THUMBNAIL_FAILED
    default_message = "could not get thumbnail"


class ThumbnailNoURLError(ThumbnailFailedError):
    default_message = "no URL found for thumbnail"


class ThumbnailDownloadError(ThumbnailFailedError):
    """Raised on a non-2xx response or a transport failure."""

    def __init__(self, url: str, message: str | None = None) -> None:
        super().__init__(message or f"could not download thumbnail from {url}")
        self.url = url


# ── Search ──────────────────────────────────────────────────────────


class SearchEmptyResultError(RelayError):
    kind = ErrorKind.SEARCH_EMPTY_RESULT
    default_message = "the search result is empty"


class SearchRequestFailedError(RelayError):
    kind = ErrorKind.SEARCH_REQUEST_FAILED
    default_message = "could not fetch data from youtube"


class SearchNotConfiguredError(RelayError):
    kind = ErrorKind.SEARCH_NOT_CONFIGURED
    default_message = "cannot search without API key"


class IncorrectResultError(RelayError):
    """Raised when a search hit resolves to anything but a single track."""

    kind = ErrorKind.INCORRECT_RESULT
    default_message = "the search result did not resolve to a single track"

    def __init__(self, count: int, message: str | None = None) -> None:
        super().__init__(message or f"expected 1 track from search, got {count}")
        self.count = count


# ── Command parsing ─────────────────────────────────────────────────


class TooFewArgumentsError(RelayError):
    kind = ErrorKind.TOO_FEW_ARGUMENTS
    default_message = "too few arguments in command"


class NoURLFoundError(RelayError):
    kind = ErrorKind.NO_URL_FOUND
    default_message = "no url source found"
