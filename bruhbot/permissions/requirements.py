"""Composable permission requirements.

A requirement is a boolean predicate over an ``InvocationContext``. The set of
requirement kinds is closed: ``evaluate`` knows how to check every one of
them and rejects anything else. Requirements combine with ``&`` and ``|`` or
explicitly through ``AllRequirements`` and ``AnyRequirements``.

Examples of what commands gate on:

- only members with administrator permissions
- only one specific user
- only in one specific guild or channel, or one kind of channel
- only messages sent around a given time
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Union

import hikari

from .context import InvocationContext

logger = logging.getLogger(__name__)


class _Combinable:
    def __and__(self, other: Requirement) -> AllRequirements:
        return AllRequirements((self, other))

    def __or__(self, other: Requirement) -> AnyRequirements:
        return AnyRequirements((self, other))

    def check(self, context: InvocationContext) -> bool:
        return evaluate(self, context)


@dataclass(frozen=True)
class NoPermission(_Combinable):
    """Public command, always passes."""

    name: str = "Public command"


@dataclass(frozen=True)
class AllRequirements(_Combinable):
    """Passes when every child passes. No children means it passes."""

    requirements: frozenset[Requirement] = frozenset()
    name: str = "Only messages that validate all restrictions"

    def __post_init__(self) -> None:
        object.__setattr__(self, "requirements", frozenset(self.requirements))


@dataclass(frozen=True)
class AnyRequirements(_Combinable):
    """Passes when at least one child passes. No children means it fails."""

    requirements: frozenset[Requirement] = frozenset()
    name: str = "Only messages that validate any restriction"

    def __post_init__(self) -> None:
        object.__setattr__(self, "requirements", frozenset(self.requirements))


@dataclass(frozen=True)
class RoleRequirement(_Combinable):
    """Passes when the actor's roles grant every bit in ``permission``."""

    permission: hikari.Permissions
    name: str = "Only messages whose author has a certain guild permission"

    @classmethod
    def admin(cls) -> RoleRequirement:
        return cls(hikari.Permissions.ADMINISTRATOR, name="Only administrators")

    @classmethod
    def all_of(cls, permissions: Iterable[hikari.Permissions]) -> AllRequirements:
        return AllRequirements(cls(permission) for permission in permissions)

    @classmethod
    def any_of(cls, permissions: Iterable[hikari.Permissions]) -> AnyRequirements:
        return AnyRequirements(cls(permission) for permission in permissions)


@dataclass(frozen=True)
class MemberRoleRequirement(_Combinable):
    role_id: int
    name: str = "Only messages whose author has a certain role"


@dataclass(frozen=True)
class IdentityRequirement(_Combinable):
    """Passes when every given id matches the context."""

    user_id: int | None = None
    guild_id: int | None = None
    channel_id: int | None = None
    name: str = "Only a specific user, guild or channel"

    def __post_init__(self) -> None:
        if self.user_id is None and self.guild_id is None and self.channel_id is None:
            raise ValueError("IdentityRequirement needs at least one of user_id, guild_id or channel_id")


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class TimestampField(Enum):
    SENT = "timestamp"
    EDITED = "edited_timestamp"


@dataclass(frozen=True)
class TimeWindowRequirement(_Combinable):
    """Passes when the message time lies within ``center`` +/- ``leeway``, bounds included."""

    center: datetime
    leeway: timedelta
    stamp: TimestampField = TimestampField.SENT
    name: str = "Only messages sent within a time window"

    def __post_init__(self) -> None:
        # Discord timestamps are aware UTC datetimes
        object.__setattr__(self, "center", _as_utc(self.center))


class NameMatch(Enum):
    FULL_NAME = "full_name"
    CONTAINS = "contains"
    NOT_CONTAINS = "not_contains"
    REGEX = "regex"

    def matches(self, name: str, pattern: str) -> bool:
        if self is NameMatch.FULL_NAME:
            return name == pattern
        if self is NameMatch.CONTAINS:
            return pattern in name
        if self is NameMatch.NOT_CONTAINS:
            return pattern not in name
        return re.fullmatch(pattern, name) is not None


@dataclass(frozen=True)
class ChannelNameRequirement(_Combinable):
    pattern: str
    match: NameMatch = NameMatch.FULL_NAME
    name: str = "Only channels with a certain name"


@dataclass(frozen=True)
class ChannelTypeRequirement(_Combinable):
    channel_type: hikari.ChannelType
    name: str = "Only channels of a certain type"


@dataclass(frozen=True)
class ContextValueRequirement(_Combinable):
    """Passes when a named context value equals ``expected``."""

    key: str
    expected: Any
    name: str = "Only contexts holding a certain value"


Requirement = Union[
    NoPermission,
    AllRequirements,
    AnyRequirements,
    RoleRequirement,
    MemberRoleRequirement,
    IdentityRequirement,
    TimeWindowRequirement,
    ChannelNameRequirement,
    ChannelTypeRequirement,
    ContextValueRequirement,
]


def evaluate(requirement: Requirement, context: InvocationContext) -> bool:
    """Check ``requirement`` against ``context``."""
    if isinstance(requirement, NoPermission):
        return True
    if isinstance(requirement, AllRequirements):
        return all(evaluate(child, context) for child in requirement.requirements)
    if isinstance(requirement, AnyRequirements):
        return any(evaluate(child, context) for child in requirement.requirements)
    if isinstance(requirement, RoleRequirement):
        return (context.permissions & requirement.permission) == requirement.permission
    if isinstance(requirement, MemberRoleRequirement):
        return requirement.role_id in context.role_ids
    if isinstance(requirement, IdentityRequirement):
        expected = (
            (requirement.user_id, context.actor_id),
            (requirement.guild_id, context.guild_id),
            (requirement.channel_id, context.channel_id),
        )
        return all(wanted is None or wanted == actual for wanted, actual in expected)
    if isinstance(requirement, TimeWindowRequirement):
        moment = getattr(context, requirement.stamp.value)
        if moment is None:
            # Never edited
            return False
        moment = _as_utc(moment)
        return requirement.center - requirement.leeway <= moment <= requirement.center + requirement.leeway
    if isinstance(requirement, ChannelNameRequirement):
        if context.channel_name is None:
            return False
        return requirement.match.matches(context.channel_name, requirement.pattern)
    if isinstance(requirement, ChannelTypeRequirement):
        return context.channel_type == requirement.channel_type
    if isinstance(requirement, ContextValueRequirement):
        return context.get(requirement.key) == requirement.expected
    raise TypeError(f"Unknown requirement: {requirement!r}")
