from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import hikari

from ..errors import ContextResolutionError

logger = logging.getLogger(__name__)

Responder = Callable[[str], Awaitable[Any]]


@dataclass(frozen=True)
class InvocationContext:
    """Everything a command invocation knows about its trigger.

    Built once per trigger message and handed to requirements, the argument
    parser and the command body. ``respond`` replaces any global client
    handle: commands reply through it and tests can swap it for a mock.
    """

    actor_id: int
    guild_id: int | None = None
    channel_id: int | None = None
    content: str = ""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    edited_timestamp: datetime | None = None
    channel_name: str | None = None
    channel_type: hikari.ChannelType | None = None
    role_ids: frozenset[int] = frozenset()
    permissions: hikari.Permissions = hikari.Permissions.NONE
    extras: Mapping[str, Any] = field(default_factory=dict)
    respond: Responder | None = field(default=None, compare=False)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a named value, falling back to the context's own fields."""
        if key in self.extras:
            return self.extras[key]
        return getattr(self, key, default)

    async def reply(self, content: str) -> None:
        if self.respond is None:
            logger.debug(f"No responder attached, dropping reply: {content}")
            return
        await self.respond(content)

    @classmethod
    def from_message_event(
        cls, event: hikari.GuildMessageCreateEvent, extras: Mapping[str, Any] | None = None
    ) -> InvocationContext:
        """Resolve a guild message event into a context.

        Raises ``ContextResolutionError`` when the author is no longer a
        member of the guild or the message is gone.
        """
        message = event.message
        if message is None:
            raise ContextResolutionError("The triggering message no longer exists")

        member = event.member
        if member is None:
            raise ContextResolutionError(f"User {event.author_id} is not a member of guild {event.guild_id}")

        permissions = hikari.Permissions.NONE
        for role in member.get_roles():
            permissions |= role.permissions

        channel = event.get_channel()
        return cls(
            actor_id=int(event.author_id),
            guild_id=int(event.guild_id),
            channel_id=int(event.channel_id),
            content=event.content or "",
            timestamp=message.timestamp,
            edited_timestamp=message.edited_timestamp,
            channel_name=getattr(channel, "name", None),
            channel_type=getattr(channel, "type", None),
            role_ids=frozenset(int(role_id) for role_id in member.role_ids),
            permissions=permissions,
            extras=dict(extras or {}),
            respond=message.respond,
        )
