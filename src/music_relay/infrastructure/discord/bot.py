"""Discord bot that joins one voice channel and relays chat commands to a playback engine."""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from music_relay.domain.shared.messages import LogTemplates

from .adapters.discord_playable import DiscordPlayableFactory

if TYPE_CHECKING:
    from ...application.commands.command_router import CommandRouter
    from ...application.services.playback_engine import PlaybackEngine
    from ...config.container import Container
    from ...config.settings import Settings

logger = logging.getLogger(__name__)

EXTENSIONS: tuple[str, ...] = ("music_relay.infrastructure.discord.cogs.relay_cog",)


@dataclass
class RelaySession:
    """Engine and router bound to the connected voice client."""

    voice_client: discord.VoiceClient
    engine: PlaybackEngine
    router: CommandRouter


class RelayBot(commands.Bot):
    def __init__(
        self,
        container: Container,
        settings: Settings,
        **kwargs,
    ) -> None:
        intents = discord.Intents.default()
        intents.message_content = True
        intents.voice_states = True
        intents.guilds = True

        super().__init__(
            command_prefix=settings.discord.command_prefix,
            intents=intents,
            help_command=None,
            **kwargs,
        )

        self.container = container
        self.settings = settings
        self.session: RelaySession | None = None
        self._session_lock = asyncio.Lock()
        container.set_bot(self)

    async def setup_hook(self) -> None:
        for extension in EXTENSIONS:
            await self.load_extension(extension)
            logger.info(LogTemplates.BOT_COG_LOADED, extension)

    async def on_ready(self) -> None:
        logger.info(
            LogTemplates.BOT_READY,
            self.user,  # type: ignore
            self.user.id,  # type: ignore
        )

        # on_ready fires again after every gateway resume.
        async with self._session_lock:
            if self.session is not None and self.session.voice_client.is_connected():
                return

            stale, self.session = self.session, None
            if stale is not None:
                logger.info(LogTemplates.BOT_SESSION_STALE, stale.voice_client.channel)
                await stale.engine.close()

            try:
                self.session = await self.open_session()
            except Exception as e:
                logger.error(LogTemplates.BOT_SESSION_FAILED, e)

    async def connect_voice(self) -> discord.VoiceClient:
        channel_id = self.settings.discord.voice_channel_id
        channel = self.get_channel(channel_id) if channel_id is not None else None
        if not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.error(LogTemplates.VOICE_CHANNEL_NOT_FOUND, channel_id)
            raise LookupError(channel_id)

        logger.info(LogTemplates.VOICE_CONNECTING, channel.name)
        try:
            async with asyncio.timeout(self.settings.discord.connect_timeout_s):
                voice_client = await channel.connect(self_deaf=True)
        except TimeoutError:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, channel_id)
            raise

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, channel.guild.name)
        return voice_client

    async def open_session(self) -> RelaySession:
        voice_client = await self.connect_voice()
        factory = DiscordPlayableFactory(voice_client, self.settings.audio)
        engine = self.container.create_engine(factory)
        router = self.container.create_router(engine)
        logger.info(LogTemplates.BOT_SESSION_READY, voice_client.channel)
        return RelaySession(voice_client=voice_client, engine=engine, router=router)

    async def close(self) -> None:
        logger.info(LogTemplates.BOT_SHUTTING_DOWN)

        session, self.session = self.session, None
        if session is not None:
            await session.engine.close()
            try:
                await session.voice_client.disconnect(force=True)
                logger.info(LogTemplates.VOICE_DISCONNECTED, session.voice_client.channel)
            except discord.DiscordException as e:
                logger.warning(LogTemplates.VOICE_CLIENT_ERROR, e)

        try:
            await self.container.shutdown()
            logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN)
        except Exception as e:
            logger.warning(LogTemplates.BOT_CONTAINER_SHUTDOWN_ERROR, e)

        await super().close()
        logger.info(LogTemplates.BOT_SHUTDOWN_COMPLETE)

    def run_with_graceful_shutdown(self, token: str, *, shutdown_timeout: float = 30.0) -> None:
        async def runner():
            async with self:
                loop = asyncio.get_running_loop()

                async def _graceful_close() -> None:
                    try:
                        await asyncio.wait_for(self.close(), timeout=shutdown_timeout)
                    except TimeoutError:
                        logger.warning(LogTemplates.BOT_SHUTDOWN_TIMEOUT, shutdown_timeout)

                for sig in (signal.SIGINT, signal.SIGTERM):
                    loop.add_signal_handler(sig, lambda: asyncio.create_task(_graceful_close()))
                await self.start(token)

        asyncio.run(runner())


def create_bot(container: Container, settings: Settings) -> RelayBot:
    return RelayBot(container=container, settings=settings)
