"""Infrastructure layer - external systems integration.

This layer contains implementations for:
- Discord (bot, cog, voice playback handle)
- Audio (yt-dlp resolver, thumbnail download, YouTube search)
"""
