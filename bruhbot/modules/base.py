from __future__ import annotations

import dataclasses
import logging
from typing import TYPE_CHECKING, Any

import hikari

from config.settings import settings

from ..commands.decorators import CommandDeclaration
from ..commands.execution import CommandBody, CommandRun
from ..commands.values import is_error
from ..permissions.context import InvocationContext

if TYPE_CHECKING:
    from ..core.bot import BruhBot
    from ..database.persistence import DocumentStore


class BotModule:
    """Base class for bot modules.

    A module is a named bundle of commands. Methods decorated with
    ``@command`` are collected on construction; the loader looks them up by
    name and asks ``command_factory`` for the body to run.
    """

    required_intents: hikari.Intents = hikari.Intents.GUILD_MESSAGES | hikari.Intents.MESSAGE_CONTENT

    def __init__(self, bot: BruhBot | None = None, store: DocumentStore | None = None) -> None:
        self.bot = bot
        self.name = self.__class__.__name__.lower().replace("module", "")
        self.logger = logging.getLogger(f"module.{self.name}")
        self.store = store if store is not None else getattr(bot, "store", None)
        self.prefix = getattr(bot, "prefix", settings.bot_prefix)
        self._declarations: dict[str, CommandDeclaration] = {}
        self._handlers: dict[str, CommandBody] = {}
        self._collect_commands()

    def _collect_commands(self) -> None:
        for attr_name in dir(type(self)):
            attr = getattr(type(self), attr_name, None)
            declaration = getattr(attr, "_command_declaration", None)
            if declaration is None:
                continue

            declaration = dataclasses.replace(declaration, module_name=self.name)
            self._declarations[declaration.name] = declaration
            self._handlers[declaration.name] = getattr(self, attr_name)
            self.logger.debug(f"Collected command {declaration.name} from {attr_name}")

    @property
    def commands(self) -> set[CommandDeclaration]:
        return set(self._declarations.values())

    def get_declaration(self, name: str) -> CommandDeclaration | None:
        return self._declarations.get(name)

    def command_factory(self, declaration: CommandDeclaration, context: InvocationContext) -> CommandBody:
        """Return the body that runs ``declaration`` for the given trigger."""
        try:
            return self._handlers[declaration.name]
        except KeyError:
            raise KeyError(f"Module {self.name} has no command {declaration.name}") from None

    async def on_load(self) -> None:
        self.logger.info(f"Module {self.name} loaded with {len(self._declarations)} commands")

    async def on_unload(self) -> None:
        self.logger.info(f"Module {self.name} unloaded")

    async def on_permission_denied(self, run: CommandRun) -> None:
        await run.context.reply(f"❌ You don't have permission to use `{self.prefix}{run.declaration.name}`")

    async def on_arguments_invalid(self, run: CommandRun) -> None:
        await run.context.reply(self.describe_argument_errors(run))

    def describe_argument_errors(self, run: CommandRun) -> str:
        declaration = run.declaration
        lines = [f"❌ Usage: `{declaration.usage(self.prefix)}`"]
        labels = declaration.labels
        for position, result in enumerate(run.arguments):
            if not is_error(result):
                continue
            label = labels[position] if position < len(labels) else "extra text"
            lines.append(f"• `{label}`: {result.user_message}")
        return "\n".join(lines)

    # Persistence helpers, scoped to this module and the running command
    def _require_store(self) -> DocumentStore:
        if self.store is None:
            raise RuntimeError(f"Module {self.name} has no document store")
        return self.store

    async def store_document(self, run: CommandRun, name: str, document: dict[str, Any]) -> int:
        return await self._require_store().store_document(self.name, run.declaration.name, name, document)

    async def find_document(self, run: CommandRun, name: str, command_name: str | None = None) -> dict[str, Any] | None:
        return await self._require_store().find_document(self.name, command_name or run.declaration.name, name)
