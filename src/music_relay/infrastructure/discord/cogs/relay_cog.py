"""Chat listener that feeds prefixed messages to the command router."""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from music_relay.domain.shared.messages import ErrorMessages, LogTemplates

if TYPE_CHECKING:
    from ....application.commands.command_router import CommandResult
    from ....domain.music.entities import Thumbnail
    from ..bot import RelayBot

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 2000


def thumbnail_file(thumbnail: Thumbnail) -> discord.File:
    return discord.File(
        io.BytesIO(thumbnail.raw_bytes()),
        filename=f"thumbnail.{thumbnail.file_extension}",
    )


class RelayCog(commands.Cog):
    def __init__(self, bot: RelayBot) -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        session = self.bot.session
        if session is None:
            return

        result = await session.router.handle(message.content, author=str(message.author))
        if result is None:
            return

        await self.reply(message.channel, result)

    async def reply(self, channel: discord.abc.Messageable, result: CommandResult) -> None:
        text = result.message[:MAX_MESSAGE_LENGTH]
        try:
            if result.thumbnail is not None and result.thumbnail.data:
                await channel.send(text, file=thumbnail_file(result.thumbnail))
            else:
                await channel.send(text)
        except discord.HTTPException as e:
            logger.warning(LogTemplates.BOT_REPLY_FAILED, e)


async def setup(bot: commands.Bot) -> None:
    if getattr(bot, "container", None) is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(RelayCog(bot))  # type: ignore[arg-type]
