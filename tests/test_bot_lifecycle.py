"""
Unit Tests for Bot Lifecycle

Tests for src/music_relay/infrastructure/discord/bot.py:

1. TestBotInitialization: intents, prefix, help command, container wiring
2. TestSetupHook: extension loading
3. TestOnReady: opening the relay session once per connection
4. TestConnectVoice: channel lookup, connect and timeout
5. TestOpenSession: engine and router built from the container
6. TestBotClose: engine, voice and container teardown order
7. TestCreateBot: factory function
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest

from music_relay.infrastructure.discord.adapters.discord_playable import DiscordPlayableFactory
from music_relay.infrastructure.discord.bot import (
    EXTENSIONS,
    RelayBot,
    RelaySession,
    create_bot,
)


@pytest.fixture
def mock_settings():
    """Create mock settings."""
    settings = MagicMock()
    settings.discord.command_prefix = "!"
    settings.discord.voice_channel_id = 555
    settings.discord.connect_timeout_s = 1.0
    return settings


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.shutdown = AsyncMock()
    container.set_bot = MagicMock()
    return container


def _voice_channel(voice_client=None) -> MagicMock:
    channel = MagicMock(spec=discord.VoiceChannel)
    channel.name = "Music"
    channel.guild.name = "Guild"
    channel.connect = AsyncMock(return_value=voice_client or MagicMock())
    return channel


def _session(connected: bool = True) -> RelaySession:
    voice_client = MagicMock()
    voice_client.is_connected.return_value = connected
    voice_client.disconnect = AsyncMock()
    engine = MagicMock()
    engine.close = AsyncMock()
    return RelaySession(voice_client=voice_client, engine=engine, router=MagicMock())


# =============================================================================
# Bot Initialization Tests
# =============================================================================


class TestBotInitialization:
    """Tests for RelayBot initialization."""

    @pytest.mark.asyncio
    async def test_init_sets_intents(self, mock_container, mock_settings):
        """Should request message content and voice state intents."""
        bot = RelayBot(container=mock_container, settings=mock_settings)

        assert bot.intents.message_content is True
        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True

    @pytest.mark.asyncio
    async def test_init_prefix_and_help(self, mock_container, mock_settings):
        mock_settings.discord.command_prefix = "?"

        bot = RelayBot(container=mock_container, settings=mock_settings)

        assert bot.command_prefix == "?"
        assert bot.help_command is None

    @pytest.mark.asyncio
    async def test_init_registers_with_container(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)

        mock_container.set_bot.assert_called_once_with(bot)
        assert bot.container is mock_container
        assert bot.settings is mock_settings
        assert bot.session is None


# =============================================================================
# Setup Hook Tests
# =============================================================================


class TestSetupHook:
    """Tests for RelayBot.setup_hook."""

    @pytest.mark.asyncio
    async def test_loads_extensions(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)

        with patch.object(bot, "load_extension", new_callable=AsyncMock) as mock_load:
            await bot.setup_hook()

        assert [c.args[0] for c in mock_load.call_args_list] == list(EXTENSIONS)

    @pytest.mark.asyncio
    async def test_extension_failure_propagates(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)

        with patch.object(
            bot, "load_extension", new_callable=AsyncMock, side_effect=RuntimeError("boom")
        ):
            with pytest.raises(RuntimeError):
                await bot.setup_hook()


# =============================================================================
# On Ready Tests
# =============================================================================


class TestOnReady:
    """Tests for RelayBot.on_ready event handler."""

    @pytest.fixture
    def bot(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)
        user = MagicMock()
        user.id = 123456789
        with patch.object(type(bot), "user", PropertyMock(return_value=user)):
            yield bot

    @pytest.mark.asyncio
    async def test_opens_session(self, bot):
        session = _session()

        with patch.object(bot, "open_session", new_callable=AsyncMock, return_value=session):
            await bot.on_ready()

        assert bot.session is session

    @pytest.mark.asyncio
    async def test_reconnect_keeps_live_session(self, bot):
        """A gateway resume should not open a second voice session."""
        bot.session = _session(connected=True)

        with patch.object(bot, "open_session", new_callable=AsyncMock) as mock_open:
            await bot.on_ready()

        mock_open.assert_not_called()

    @pytest.mark.asyncio
    async def test_replaces_dropped_session(self, bot):
        bot.session = _session(connected=False)
        fresh = _session()

        with patch.object(bot, "open_session", new_callable=AsyncMock, return_value=fresh):
            await bot.on_ready()

        assert bot.session is fresh

    @pytest.mark.asyncio
    async def test_dropped_session_engine_closed(self, bot):
        """The old engine must be shut down before a new session replaces it."""
        stale = _session(connected=False)
        bot.session = stale

        with patch.object(bot, "open_session", new_callable=AsyncMock, return_value=_session()):
            await bot.on_ready()

        stale.engine.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_dropped_session_cleared_when_reopen_fails(self, bot):
        bot.session = _session(connected=False)

        with patch.object(
            bot, "open_session", new_callable=AsyncMock, side_effect=LookupError(555)
        ):
            await bot.on_ready()

        assert bot.session is None

    @pytest.mark.asyncio
    async def test_concurrent_ready_opens_once(self, bot):
        async def slow_open():
            await asyncio.sleep(0.01)
            return _session()

        with patch.object(bot, "open_session", side_effect=slow_open) as mock_open:
            await asyncio.gather(bot.on_ready(), bot.on_ready())

        assert mock_open.call_count == 1

    @pytest.mark.asyncio
    async def test_session_failure_logged(self, bot, caplog):
        with patch.object(
            bot, "open_session", new_callable=AsyncMock, side_effect=LookupError(555)
        ):
            await bot.on_ready()

        assert bot.session is None
        assert "Could not open relay session" in caplog.text


# =============================================================================
# Voice Connection Tests
# =============================================================================


class TestConnectVoice:
    """Tests for RelayBot.connect_voice."""

    @pytest.mark.asyncio
    async def test_connects_deafened(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)
        voice_client = MagicMock()
        channel = _voice_channel(voice_client)

        with patch.object(bot, "get_channel", return_value=channel) as mock_get:
            result = await bot.connect_voice()

        mock_get.assert_called_once_with(555)
        channel.connect.assert_awaited_once_with(self_deaf=True)
        assert result is voice_client

    @pytest.mark.asyncio
    async def test_stage_channel_accepted(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)
        channel = MagicMock(spec=discord.StageChannel)
        channel.connect = AsyncMock()

        with patch.object(bot, "get_channel", return_value=channel):
            await bot.connect_voice()

        channel.connect.assert_awaited_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("found", [None, "text"])
    async def test_missing_or_text_channel(self, mock_container, mock_settings, found):
        bot = RelayBot(container=mock_container, settings=mock_settings)
        channel = MagicMock(spec=discord.TextChannel) if found else None

        with patch.object(bot, "get_channel", return_value=channel):
            with pytest.raises(LookupError):
                await bot.connect_voice()

    @pytest.mark.asyncio
    async def test_connect_timeout(self, mock_container, mock_settings):
        mock_settings.discord.connect_timeout_s = 0.01
        bot = RelayBot(container=mock_container, settings=mock_settings)
        channel = _voice_channel()

        async def hang(**kwargs):
            await asyncio.sleep(10)

        channel.connect.side_effect = hang

        with patch.object(bot, "get_channel", return_value=channel):
            with pytest.raises(TimeoutError):
                await bot.connect_voice()


# =============================================================================
# Session Tests
# =============================================================================


class TestOpenSession:
    """Tests for RelayBot.open_session."""

    @pytest.mark.asyncio
    async def test_builds_engine_and_router(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)
        voice_client = MagicMock()

        with patch.object(bot, "connect_voice", new_callable=AsyncMock, return_value=voice_client):
            session = await bot.open_session()

        factory = mock_container.create_engine.call_args.args[0]
        assert isinstance(factory, DiscordPlayableFactory)
        assert factory.voice_client is voice_client
        mock_container.create_router.assert_called_once_with(mock_container.create_engine.return_value)
        assert session.voice_client is voice_client
        assert session.engine is mock_container.create_engine.return_value
        assert session.router is mock_container.create_router.return_value


# =============================================================================
# Close/Shutdown Tests
# =============================================================================


class TestBotClose:
    """Tests for RelayBot.close method."""

    @pytest.mark.asyncio
    async def test_close_order(self, mock_container, mock_settings):
        """Should stop the engine before leaving voice, then release the container."""
        bot = RelayBot(container=mock_container, settings=mock_settings)
        session = _session()
        bot.session = session
        calls = []
        session.engine.close.side_effect = lambda: calls.append("engine")
        session.voice_client.disconnect.side_effect = lambda force: calls.append("voice")
        mock_container.shutdown.side_effect = lambda: calls.append("container")

        await bot.close()

        assert calls == ["engine", "voice", "container"]
        session.voice_client.disconnect.assert_awaited_once_with(force=True)
        assert bot.session is None

    @pytest.mark.asyncio
    async def test_close_without_session(self, mock_container, mock_settings):
        bot = RelayBot(container=mock_container, settings=mock_settings)

        await bot.close()

        mock_container.shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_handles_voice_disconnect_error(self, mock_container, mock_settings):
        """Should handle voice disconnect errors gracefully."""
        bot = RelayBot(container=mock_container, settings=mock_settings)
        bot.session = _session()
        bot.session.voice_client.disconnect.side_effect = discord.ClientException("gone")

        await bot.close()

        mock_container.shutdown.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_handles_container_shutdown_error(self, mock_container, mock_settings):
        """Should handle container shutdown errors gracefully."""
        bot = RelayBot(container=mock_container, settings=mock_settings)
        mock_container.shutdown.side_effect = RuntimeError("Shutdown failed")

        await bot.close()


# =============================================================================
# Factory Tests
# =============================================================================


class TestCreateBot:
    """Tests for create_bot factory."""

    @pytest.mark.asyncio
    async def test_returns_relay_bot(self, mock_container, mock_settings):
        bot = create_bot(mock_container, mock_settings)

        assert isinstance(bot, RelayBot)
        assert bot.container is mock_container
        assert bot.settings is mock_settings
