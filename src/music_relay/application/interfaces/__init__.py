"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from music_relay.application.interfaces.audio_resolver import AudioResolver
from music_relay.application.interfaces.playable import Playable, PlayableFactory
from music_relay.application.interfaces.searcher import Searcher
from music_relay.application.interfaces.thumbnail_fetcher import ThumbnailFetcher

__all__ = [
    "AudioResolver",
    "Playable",
    "PlayableFactory",
    "Searcher",
    "ThumbnailFetcher",
]
