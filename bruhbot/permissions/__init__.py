from .context import InvocationContext
from .requirements import (
    AllRequirements,
    AnyRequirements,
    ChannelNameRequirement,
    ChannelTypeRequirement,
    ContextValueRequirement,
    IdentityRequirement,
    MemberRoleRequirement,
    NameMatch,
    NoPermission,
    Requirement,
    RoleRequirement,
    TimestampField,
    TimeWindowRequirement,
    evaluate,
)

__all__ = [
    "AllRequirements",
    "AnyRequirements",
    "ChannelNameRequirement",
    "ChannelTypeRequirement",
    "ContextValueRequirement",
    "IdentityRequirement",
    "InvocationContext",
    "MemberRoleRequirement",
    "NameMatch",
    "NoPermission",
    "Requirement",
    "RoleRequirement",
    "TimeWindowRequirement",
    "TimestampField",
    "evaluate",
]
