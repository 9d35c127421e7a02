"""Application services."""

from music_relay.application.services.playback_engine import PlaybackEngine

__all__ = ["PlaybackEngine"]
