import asyncio
import logging

import hikari

from config.settings import BotSettings, settings

from ..database import DatabaseManager, DocumentStore
from .message_handler import MessageCommandHandler
from .module_loader import ModuleLoader

logger = logging.getLogger(__name__)

BASE_INTENTS = hikari.Intents.GUILDS | hikari.Intents.GUILD_MEMBERS | hikari.Intents.GUILD_MESSAGES


class BruhBot:
    """Owns every long-lived part of the bot.

    The gateway, database and module table are plain attributes handed to
    whoever needs them; nothing is reachable through module-level globals.
    """

    def __init__(self, bot_settings: BotSettings | None = None) -> None:
        self.settings = bot_settings or settings
        self.prefix = self.settings.bot_prefix

        self.db = DatabaseManager(self.settings.database_url, echo=self.settings.debug)
        self.store = DocumentStore(self.db)
        self.module_loader = ModuleLoader(self)
        self.message_handler = MessageCommandHandler(
            self.module_loader,
            prefix=self.prefix,
            store=self.store,
            record_usage=self.settings.record_command_usage,
        )
        self.hikari_bot: hikari.GatewayBot | None = None

        for directory in self.settings.module_directories:
            self.module_loader.add_module_directory(directory)

    async def initialize(self) -> None:
        await self.db.create_tables()
        await self.module_loader.load_all_modules(self.settings.enabled_modules)
        logger.info(f"Loaded modules: {self.module_loader.get_loaded_modules()}")

    def build_gateway(self) -> hikari.GatewayBot:
        if not self.settings.discord_token:
            raise RuntimeError("DISCORD_TOKEN is not configured")

        intents = BASE_INTENTS | self.module_loader.required_intents
        gateway = hikari.GatewayBot(token=self.settings.discord_token, intents=intents)
        gateway.subscribe(hikari.GuildMessageCreateEvent, self.on_message_create)
        gateway.subscribe(hikari.StoppingEvent, self.on_stopping)
        self.hikari_bot = gateway
        return gateway

    async def on_message_create(self, event: hikari.GuildMessageCreateEvent) -> None:
        run = await self.message_handler.handle_message(event)
        if run is not None:
            logger.debug(f"Command run details: {run.details()}")

    async def on_stopping(self, event: hikari.StoppingEvent) -> None:
        logger.info("Bot is stopping...")
        await self.db.close()

    def run(self) -> None:
        # Modules must be loaded before the gateway exists, their intents decide how it connects
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        loop.run_until_complete(self.initialize())

        self.build_gateway().run()
