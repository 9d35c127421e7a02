"""Discord cogs - chat command listeners."""

from music_relay.infrastructure.discord.cogs.relay_cog import RelayCog

__all__ = ["RelayCog"]
