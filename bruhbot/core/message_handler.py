import logging
import time

import hikari

from ..commands.decorators import CommandDeclaration
from ..commands.execution import CommandRun, ExecutionError
from ..database.persistence import DocumentStore
from ..errors import ContextResolutionError
from ..modules.base import BotModule
from ..permissions.context import InvocationContext
from .module_loader import ModuleLoader

logger = logging.getLogger(__name__)


class MessageCommandHandler:
    """Turns prefixed guild messages into command runs."""

    def __init__(
        self,
        loader: ModuleLoader,
        prefix: str = "!",
        store: DocumentStore | None = None,
        record_usage: bool = True,
    ) -> None:
        self.loader = loader
        self.prefix = prefix
        self.store = store
        self.record_usage = record_usage

    def split_trigger(self, content: str | None) -> str | None:
        """Return the command verb of a prefixed message, or None."""
        if not content or not content.startswith(self.prefix):
            return None

        remainder = content[len(self.prefix) :].strip()
        if not remainder:
            return None
        return remainder.split()[0].lower()

    async def handle_message(self, event: hikari.GuildMessageCreateEvent) -> CommandRun | None:
        """Run the command a message triggers.

        Returns the finished run, or None when the message isn't a runnable
        command.
        """
        if event.author.is_bot:
            return None

        verb = self.split_trigger(event.content)
        if verb is None:
            return None

        entry = self.loader.get_command(verb)
        if entry is None:
            logger.debug(f"Unknown command: {self.prefix}{verb}")
            return None

        module, declaration = entry
        logger.info(f"Prefix command called: {self.prefix}{verb} by {event.author.username}")

        try:
            context = InvocationContext.from_message_event(event)
        except ContextResolutionError as e:
            logger.warning(f"Command {self.prefix}{verb} is not runnable: {e}")
            return None

        return await self.run_command(module, declaration, context, invoked_with=verb)

    async def run_command(
        self,
        module: BotModule,
        declaration: CommandDeclaration,
        context: InvocationContext,
        invoked_with: str | None = None,
    ) -> CommandRun:
        body = module.command_factory(declaration, context)
        run = CommandRun(
            declaration,
            context,
            body,
            on_permission_failure=module.on_permission_denied,
            on_argument_failure=module.on_arguments_invalid,
            invoked_with=invoked_with,
        )

        start = time.perf_counter()
        outcome = await run.execute()
        elapsed = time.perf_counter() - start
        logger.info(f"Command {declaration.name} finished as {outcome.value} (took {elapsed:.3f}s)")

        if run.failure and run.events and isinstance(run.events[-1], ExecutionError):
            fault = run.events[-1].exception
            if fault is not None:
                logger.error(
                    f"Error executing command {declaration.name}: {fault}",
                    exc_info=(type(fault), fault, fault.__traceback__),
                )

        await self._record(run, module, elapsed)
        return run

    async def _record(self, run: CommandRun, module: BotModule, elapsed: float) -> None:
        if not self.record_usage or self.store is None:
            return

        details = run.details()
        try:
            await self.store.record_usage(
                guild_id=details.guild_id,
                user_id=details.actor_id,
                command_name=details.command_name,
                module_name=module.name,
                outcome=details.outcome.value if details.outcome else None,
                success=details.success,
                error_message=None if details.success else details.last_info,
                execution_time=elapsed,
            )
        except Exception as e:
            logger.error(f"Error logging command usage: {e}")
