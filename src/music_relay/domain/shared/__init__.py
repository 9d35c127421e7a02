"""
Shared Domain Kernel

Contains the error taxonomy, message constants, and constrained types
shared by every layer.
"""

from music_relay.domain.shared.exceptions import ErrorKind, RelayError

__all__ = [
    "ErrorKind",
    "RelayError",
]
