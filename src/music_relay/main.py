#!/usr/bin/env python3
"""Console entry point: load settings, configure logging, run the relay bot."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from music_relay.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from music_relay.config.settings import Settings

logger = logging.getLogger(__name__)

LOGGING_CONFIG = Path(__file__).resolve().parents[2] / "logging_config.json"
FALLBACK_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _read_logging_config() -> dict[str, Any] | None:
    try:
        with open(LOGGING_CONFIG) as fh:
            return json.load(fh)
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def setup_logging(log_level: str = "INFO") -> None:
    """Apply logging_config.json, or plain console logging if it is missing or invalid."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    config = _read_logging_config()
    configured = False
    if config is not None:
        try:
            logging.config.dictConfig(config)
            configured = True
        except ValueError:
            pass

    if not configured:
        logging.basicConfig(level=level, format=FALLBACK_FORMAT, datefmt="%H:%M:%S")
        logger.warning(LogTemplates.LOGGING_FALLBACK, LOGGING_CONFIG)

    logging.getLogger().setLevel(level)


def _missing_setting(settings: Settings) -> str | None:
    if not settings.discord.token.get_secret_value():
        return ErrorMessages.DISCORD_TOKEN_REQUIRED
    if settings.discord.voice_channel_id is None:
        return ErrorMessages.VOICE_CHANNEL_REQUIRED
    return None


def main() -> int:
    from music_relay.config.container import create_container
    from music_relay.config.settings import get_settings
    from music_relay.infrastructure.discord.bot import create_bot

    settings = get_settings()
    setup_logging(settings.log_level)

    problem = _missing_setting(settings)
    if problem is not None:
        logger.error(problem)
        return 1

    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    bot = create_bot(create_container(settings), settings)

    try:
        bot.run_with_graceful_shutdown(settings.discord.token.get_secret_value())
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return 1

    logger.info(LogTemplates.BOT_STOPPED)
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
