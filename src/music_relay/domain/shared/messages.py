"""Centralized message constants for validation errors, logging, and chat replies."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Validation Errors
    NO_STREAM_URL = "Track '{title}' has no stream URL"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"

    # Startup Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    VOICE_CHANNEL_REQUIRED = "DISCORD__VOICE_CHANNEL_ID environment variable is required"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not attached to bot"

    # Resolver Errors
    EMPTY_PLAYLIST = "the playlist has no entries"
    NO_INFO_RETURNED = "no information returned for {url}"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Engine Lifecycle
    ENGINE_CREATED = "Playback engine created (volume=%.2f, capacity=%d)"
    ENGINE_CLOSED = "Playback engine closed"

    # Playback Loop
    PLAYBACK_LOOP_STARTED = "Playback loop started"
    PLAYBACK_LOOP_FINISHED = "Playback loop finished"
    PLAYBACK_LOOP_CRASHED = "Playback loop crashed"
    PLAYBACK_STARTED = "Started playing '%s'"
    PLAYBACK_STOPPED = "Stopped playback of '%s'"
    PLAYBACK_SKIPPED = "Skipped '%s'"
    PLAYBACK_COMPLETED = "Finished playing '%s'"
    PLAYBACK_TRACK_FAILED = "Could not play '%s', moving on: %r"
    PLAYBACK_STOP_REQUESTED = "Stop requested, waiting for playback loop"
    PLAYBACK_STILL_RUNNING = "Playable for '%s' did not finish after stop, cancelling"
    PLAYBACK_ERROR = "Playback error for '%s': %s"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued %d track(s) from %s (queue length %d)"
    QUEUE_WAITING_FOR_SLOT = "Queue full (%d), waiting for a free slot"
    QUEUE_DISCARDED = "Discarded '%s' from queue without playing"
    QUEUE_CLEARED = "Cleared %d track(s) from queue"

    # Volume
    VOLUME_CHANGED = "Volume set to %.2f"

    # Resolver
    RESOLVER_UNSUPPORTED = "Unsupported URL: %s"
    RESOLVER_RESOLVING = "Resolving %s"
    RESOLVER_PLAYLIST = "Resolving playlist %s with %d entries"
    RESOLVER_FAILED_EXTRACT = "yt-dlp failed to extract %s: %s"
    RESOLVER_NO_FORMAT = "No audio-only format for '%s'"

    # Thumbnails
    THUMBNAIL_FETCHING = "Fetching %d thumbnail(s)"
    THUMBNAIL_FAILED = "Thumbnail download failed for %s: %s"
    THUMBNAIL_BATCH_FAILED = "Discarding batch from %s: %s"

    # Search
    SEARCH_REQUEST = "Searching YouTube for '%s'"
    SEARCH_FAILED = "YouTube search for '%s' failed: %s"

    # Commands
    COMMAND_RECEIVED = "Command '%s' from %s"
    COMMAND_FAILED = "Command '%s' failed: %s"
    COMMAND_UNEXPECTED_ERROR = "Unexpected error while handling '%s'"

    # Voice
    VOICE_CONNECTING = "Connecting to voice channel %s"
    VOICE_CONNECTED = "Connected to voice channel %s in %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_CHANNEL_NOT_FOUND = "Voice channel %s not found"
    VOICE_DISCONNECTED = "Disconnected from voice channel %s"
    VOICE_CLIENT_ERROR = "Client error while playing: %r"

    # Bot Lifecycle
    BOT_STARTING = "Starting music relay in %s mode"
    LOGGING_FALLBACK = "Could not load %s, falling back to basic config"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Interrupted, shutting down"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_READY = "Logged in as %s (ID: %s)"
    BOT_SESSION_READY = "Relay session ready in channel %s"
    BOT_SESSION_FAILED = "Could not open relay session: %s"
    BOT_SESSION_STALE = "Voice connection to %s dropped, closing old session"
    BOT_SHUTTING_DOWN = "Shutting down"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_REPLY_FAILED = "Could not send reply: %r"
    BOT_COG_LOADED = "Loaded extension %s"
    BOT_CONTAINER_SHUTDOWN = "Container shut down"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error closing container: %r"


class ChatMessages:
    """User-facing chat replies."""

    STARTED = "Playlist started"
    STOPPED = "Playlist stopped"
    SKIPPED = "Song skipped"
    CLEARED = "Playlist cleared"
    VOLUME_SET = "Volume set to {volume}"
    VOLUME_CURRENT = "Current volume is {volume}"
    ADDED_ONE = "Added:\n{track}"
    ADDED_MANY = "Added {count} tracks to the playlist"
    NOTHING_PLAYING = "Nothing is playing"

    # Error replies
    ALREADY_PLAYING = "The playlist is already playing"
    EMPTY_QUEUE = "The playlist is empty"
    ALREADY_STOPPED = "The playlist is already stopped"
    NO_FORMAT = "Could not find correct format for song"
    VOLUME_RANGE = "The volume must be between 0 and 100"
    UNSUPPORTED_URL = "This URL is not supported"
    RESOLVE_FAILED = "Could not get the track from that URL"
    THUMBNAIL_DOWNLOAD = "Could not download the track's thumbnail"
    THUMBNAIL_NO_URL = "Did not find the thumbnail URL."
    SEARCH_EMPTY = "No matching results found"
    SEARCH_REQUEST = "Could not get search results from Youtube"
    SEARCH_NOT_CONFIGURED = (
        "The bot has not been configured to search youtube. "
        "Add a Youtube API key in the config."
    )
    INCORRECT_RESULT = "The search did not return a single song"
    TOO_FEW_ARGUMENTS = "Too few arguments given"
    NO_URL_FOUND = "Could not find URL"

    HELP = (
        "**Usage**\n"
        "`{prefix}start`: Starts the playlist.\n"
        "`{prefix}stop`: Stops the playlist.\n"
        "`{prefix}add $URL`: Add the youtube URL to the playlist.\n"
        "`{prefix}search $QUERY`: Searches and adds the song to the playlist.\n"
        "`{prefix}skip`: Skips a track from the playlist.\n"
        "`{prefix}clear`: Clears the playlist.\n"
        "`{prefix}vol $NUM`: Sets the volume to the specified number. "
        "The number must be between 0-100.\n"
        "`{prefix}now`: Shows the song that is playing.\n"
        "`{prefix}help`: Shows this message."
    )
