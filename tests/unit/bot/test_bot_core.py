"""Tests for core bot functionality."""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import hikari
import pytest

from bruhbot.core.bot import BASE_INTENTS, BruhBot
from config.settings import BotSettings

REPO_MODULES = Path(__file__).resolve().parents[3] / "modules"


@pytest.fixture
def bot_settings(tmp_path):
    return BotSettings(
        discord_token="test_token",
        database_url=f"sqlite:///{tmp_path}/bot.db",
        bot_prefix="?",
        enabled_modules=["basic"],
        module_directories=[str(REPO_MODULES)],
        record_command_usage=False,
    )


class TestBruhBot:
    """Test BruhBot core functionality."""

    def test_bot_creation(self, bot_settings):
        bot = BruhBot(bot_settings)

        assert bot.prefix == "?"
        assert bot.store.db is bot.db
        assert bot.message_handler.loader is bot.module_loader
        assert bot.message_handler.prefix == "?"
        assert not bot.message_handler.record_usage
        assert bot.module_loader.module_directories == [REPO_MODULES]
        assert bot.hikari_bot is None

    @pytest.mark.asyncio
    async def test_initialize(self, bot_settings):
        bot = BruhBot(bot_settings)

        await bot.initialize()

        assert bot.module_loader.get_loaded_modules() == ["basic"]
        assert bot.module_loader.get_module("basic").prefix == "?"
        assert await bot.db.health_check()

        await bot.module_loader.unload_module("basic")
        await bot.db.close()

    @patch("bruhbot.core.bot.hikari.GatewayBot")
    def test_build_gateway(self, mock_gateway, bot_settings):
        bot = BruhBot(bot_settings)

        gateway = bot.build_gateway()

        assert gateway is mock_gateway.return_value
        assert bot.hikari_bot is gateway
        intents = mock_gateway.call_args.kwargs["intents"]
        assert intents & BASE_INTENTS == BASE_INTENTS
        gateway.subscribe.assert_any_call(hikari.GuildMessageCreateEvent, bot.on_message_create)
        gateway.subscribe.assert_any_call(hikari.StoppingEvent, bot.on_stopping)

    def test_build_gateway_without_token(self, bot_settings):
        bot_settings.discord_token = ""
        bot = BruhBot(bot_settings)

        with pytest.raises(RuntimeError):
            bot.build_gateway()

    @pytest.mark.asyncio
    async def test_on_message_create(self, bot_settings, mock_message_event):
        bot = BruhBot(bot_settings)
        bot.message_handler.handle_message = AsyncMock(return_value=None)

        await bot.on_message_create(mock_message_event)

        bot.message_handler.handle_message.assert_awaited_once_with(mock_message_event)

    @pytest.mark.asyncio
    async def test_on_stopping_closes_database(self, bot_settings):
        bot = BruhBot(bot_settings)
        bot.db.close = AsyncMock()

        await bot.on_stopping(MagicMock())

        bot.db.close.assert_awaited_once()

    @patch("bruhbot.core.bot.hikari.GatewayBot")
    def test_run(self, mock_gateway, bot_settings):
        bot = BruhBot(bot_settings)
        bot.initialize = AsyncMock()

        bot.run()

        bot.initialize.assert_awaited_once()
        mock_gateway.return_value.run.assert_called_once()
