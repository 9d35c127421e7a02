"""
Domain Layer

Contains pure playback logic:
- shared/: Error taxonomy, messages, and constrained types
- music/: Track, bounded queue, and the playback state machine
"""

from music_relay.domain.shared.exceptions import ErrorKind, RelayError

__all__ = [
    "ErrorKind",
    "RelayError",
]
