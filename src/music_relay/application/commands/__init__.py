"""Chat command routing."""

from music_relay.application.commands.command_router import CommandResult, CommandRouter

__all__ = ["CommandResult", "CommandRouter"]
