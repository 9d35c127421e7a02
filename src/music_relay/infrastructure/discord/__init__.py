"""Discord integration - bot, chat cog and voice playback."""
