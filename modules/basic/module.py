from __future__ import annotations

import random

from bruhbot.commands import (
    CommandRun,
    DecimalType,
    DecimalValue,
    KeywordType,
    StringType,
    StringValue,
    WildcardType,
    WildcardValue,
    command,
)
from bruhbot.modules import BotModule
from bruhbot.permissions import RoleRequirement

from .config import COIN_SIDES, MAX_NOTE_LENGTH, NOTE_NOT_FOUND, NOTE_SAVED


class BasicModule(BotModule):
    """Small everyday commands, mostly useful to see the parser at work."""

    @command(
        name="echo",
        description="Repeat a quoted piece of text",
        parameters=[("text", StringType(allow_spaces=True))],
    )
    async def echo(self, run: CommandRun, text: StringValue) -> None:
        await run.context.reply(text.value)
        run.log(f"Echoed {len(text.value)} characters")

    @command(
        name="say",
        description="Repeat everything after the command",
        parameters=[("message", WildcardType())],
        aliases=["repeat"],
    )
    async def say(self, run: CommandRun, message: WildcardValue) -> None:
        if not message.value:
            run.log_error("Nothing to say")
            await run.context.reply("🤐 Nothing to say.")
            return
        await run.context.reply(message.value)

    @command(
        name="add",
        description="Add two numbers",
        parameters=[("a", DecimalType()), ("b", DecimalType())],
    )
    async def add(self, run: CommandRun, a: DecimalValue, b: DecimalValue) -> None:
        total = a.value + b.value
        run.log(f"{a.value} + {b.value} = {total}")
        await run.context.reply(f"🧮 {a.value:g} + {b.value:g} = **{total:g}**")

    @command(
        name="flip",
        description="Call a coin flip",
        parameters=[("call", KeywordType(COIN_SIDES))],
    )
    async def flip(self, run: CommandRun, call: StringValue) -> None:
        side = random.choice(sorted(COIN_SIDES))
        won = side == call.value
        run.log(f"Coin landed on {side}")
        await run.context.reply(f"🪙 It's **{side}**! {'You win.' if won else 'You lose.'}")

    @command(
        name="remember",
        description="Store a note under a name",
        parameters=[("name", StringType(allow_spaces=False)), ("note", StringType(allow_spaces=True))],
    )
    async def remember(self, run: CommandRun, name: StringValue, note: StringValue) -> None:
        if len(note.value) > MAX_NOTE_LENGTH:
            run.log_error(f"Note longer than {MAX_NOTE_LENGTH} characters")
            await run.context.reply(f"❌ Notes can be at most {MAX_NOTE_LENGTH} characters long.")
            return

        document_id = await self.store_document(
            run, name.value, {"note": note.value, "author_id": run.context.actor_id}
        )
        run.log(f"Stored note {name.value} as document {document_id}")
        await run.context.reply(NOTE_SAVED.format(name=name.value, document_id=document_id))

    @command(
        name="recall",
        description="Show a note stored with remember",
        parameters=[("name", StringType(allow_spaces=False))],
    )
    async def recall(self, run: CommandRun, name: StringValue) -> None:
        document = await self.find_document(run, name.value, command_name="remember")
        if document is None:
            await run.context.reply(NOTE_NOT_FOUND.format(name=name.value))
            return
        await run.context.reply(f"📒 **{name.value}**: {document['note']}")

    @command(
        name="modules",
        description="List the loaded modules",
        requirement=RoleRequirement.admin(),
    )
    async def list_modules(self, run: CommandRun) -> None:
        loader = getattr(self.bot, "module_loader", None)
        names = loader.get_loaded_modules() if loader else [self.name]
        await run.context.reply("📦 Loaded modules: " + ", ".join(f"`{name}`" for name in names))
