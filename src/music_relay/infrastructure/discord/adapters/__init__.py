from music_relay.infrastructure.discord.adapters.discord_playable import (
    DiscordPlayable,
    DiscordPlayableFactory,
)

__all__ = ["DiscordPlayable", "DiscordPlayableFactory"]
