"""Audio infrastructure - yt-dlp resolver, thumbnail fetcher and YouTube search."""

from music_relay.infrastructure.audio.models import AudioFormatInfo, YtDlpOpts, YtDlpTrackInfo
from music_relay.infrastructure.audio.thumbnail_fetcher import HttpxThumbnailFetcher
from music_relay.infrastructure.audio.youtube_searcher import YouTubeSearcher
from music_relay.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "AudioFormatInfo",
    "HttpxThumbnailFetcher",
    "YouTubeSearcher",
    "YtDlpOpts",
    "YtDlpResolver",
    "YtDlpTrackInfo",
]
