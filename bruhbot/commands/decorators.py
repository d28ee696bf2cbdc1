"""Command declarations and the decorator that attaches them to module methods."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from ..permissions.requirements import NoPermission, Requirement
from .parameters import ParameterType


@dataclass(frozen=True)
class CommandDeclaration:
    """Everything needed to run a command.

    ``name`` is the dispatch key and is also stripped from the trigger text
    before the arguments are parsed. ``parameters`` is the ordered list of
    ``(label, type)`` pairs; labels become the keyword arguments passed to the
    command body.
    """

    name: str
    description: str = ""
    parameters: tuple[tuple[str, ParameterType], ...] = ()
    requirement: Requirement = field(default_factory=NoPermission)
    aliases: tuple[str, ...] = ()
    module_name: str | None = None

    def __post_init__(self) -> None:
        if not self.name or " " in self.name:
            raise ValueError(f"Invalid command name: {self.name!r}")
        object.__setattr__(self, "parameters", tuple((label, kind) for label, kind in self.parameters))
        object.__setattr__(self, "aliases", tuple(self.aliases))
        labels = [label for label, _ in self.parameters]
        if len(set(labels)) != len(labels):
            raise ValueError(f"Command {self.name} declares duplicate parameter labels: {labels}")

    @property
    def parameter_types(self) -> list[ParameterType]:
        return [kind for _, kind in self.parameters]

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self.parameters]

    def usage(self, prefix: str = "") -> str:
        parts = [f"{prefix}{self.name}"]
        parts.extend(f"<{label}: {kind.name}>" for label, kind in self.parameters)
        return " ".join(parts)


def command(
    name: str,
    description: str = "",
    parameters: Sequence[tuple[str, ParameterType]] | None = None,
    requirement: Requirement | None = None,
    aliases: Sequence[str] | None = None,
):
    """Declare a module method as a text command.

    The declaration is stored on the function and collected when the module
    is loaded.
    """

    def decorator(func):
        func._command_declaration = CommandDeclaration(
            name=name,
            description=description,
            parameters=tuple(parameters or ()),
            requirement=requirement or NoPermission(),
            aliases=tuple(aliases or ()),
        )
        return func

    return decorator
