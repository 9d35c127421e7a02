"""Discord voice-channel music relay."""

__version__ = "0.1.0"
