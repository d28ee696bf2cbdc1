"""Command execution: permission gate, argument check, fault-isolated body."""

from __future__ import annotations

import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from functools import cached_property
from typing import Any, Union

from ..permissions.context import InvocationContext
from .decorators import CommandDeclaration
from .parsers import ArgumentParser
from .values import ParameterResult, ParameterValue, is_error

logger = logging.getLogger(__name__)

PERMISSION_FAILED_INFO = "Permission check failed. Command cannot execute."
ARGUMENTS_FAILED_INFO = "Argument check failed. Command cannot execute."
BODY_FAULT_INFO = "Unknown exception caused termination."


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ExecutionEvent:
    """A notable, non-fatal moment during command execution."""

    info: str
    timestamp: datetime = field(default_factory=_now)


@dataclass(frozen=True)
class ExecutionError:
    """An error during command execution, optionally caused by an exception.

    When an ``ExecutionError`` is the last entry of a finished run's log, the
    run failed.
    """

    info: str
    exception: BaseException | None = field(default=None, compare=False)
    timestamp: datetime = field(default_factory=_now)


ExecutionEventBase = Union[ExecutionEvent, ExecutionError]


class RunState(Enum):
    CREATED = "created"
    PERMISSION_PASSED = "permission_passed"
    PERMISSION_FAILED = "permission_failed"
    ARGUMENTS_PASSED = "arguments_passed"
    ARGUMENTS_FAILED = "arguments_failed"
    EXECUTED_SUCCESS = "executed_success"
    EXECUTED_FAILURE = "executed_failure"


class RunOutcome(Enum):
    """How a run ended. ``EXECUTED_FAILURE`` follows ``failure`` (the last logged entry), not ``success``."""

    PERMISSION_FAILED = "permission_failed"
    ARGUMENTS_FAILED = "arguments_failed"
    EXECUTED_SUCCESS = "executed_success"
    EXECUTED_FAILURE = "executed_failure"


_TERMINAL_STATES = {
    RunState.PERMISSION_FAILED: RunOutcome.PERMISSION_FAILED,
    RunState.ARGUMENTS_FAILED: RunOutcome.ARGUMENTS_FAILED,
    RunState.EXECUTED_SUCCESS: RunOutcome.EXECUTED_SUCCESS,
    RunState.EXECUTED_FAILURE: RunOutcome.EXECUTED_FAILURE,
}

CommandBody = Callable[..., Awaitable[Any]]
FailureHook = Callable[["CommandRun"], Awaitable[Any]]


@dataclass(frozen=True)
class CommandInformation:
    """Snapshot of a command run, safe to hand out once execution is over."""

    command_name: str
    actor_id: int
    guild_id: int | None
    channel_id: int | None
    success: bool
    failure: bool
    executed: bool
    outcome: RunOutcome | None
    last_info: str
    arguments: tuple[ParameterResult, ...]
    events: tuple[ExecutionEventBase, ...]


class CommandRun:
    """One invocation of a command against one trigger.

    ``execute`` walks the state machine once: the declaration's requirement
    is checked against the context, the text after the command verb is parsed
    against the declared parameters, and the body is awaited with the typed
    values as keyword arguments. Every failure ends up in the event log, none
    is raised to the caller.
    """

    def __init__(
        self,
        declaration: CommandDeclaration,
        context: InvocationContext,
        body: CommandBody,
        *,
        on_permission_failure: FailureHook | None = None,
        on_argument_failure: FailureHook | None = None,
        parser: ArgumentParser | None = None,
        invoked_with: str | None = None,
    ) -> None:
        self.declaration = declaration
        self.context = context
        self.body = body
        self.invoked_with = invoked_with or declaration.name
        self.on_permission_failure = on_permission_failure
        self.on_argument_failure = on_argument_failure
        self.parser = parser or ArgumentParser()
        self.logger = logging.getLogger(f"command.{declaration.name}")

        self._events: list[ExecutionEventBase] = []
        self.history: list[RunState] = [RunState.CREATED]
        self.executed = False

    @property
    def state(self) -> RunState:
        return self.history[-1]

    @property
    def outcome(self) -> RunOutcome | None:
        return _TERMINAL_STATES.get(self.state)

    @property
    def events(self) -> tuple[ExecutionEventBase, ...]:
        return tuple(self._events)

    @property
    def success(self) -> bool:
        return not any(isinstance(event, ExecutionError) for event in self._events)

    @property
    def failure(self) -> bool:
        return self.executed and bool(self._events) and isinstance(self._events[-1], ExecutionError)

    @property
    def argument_text(self) -> str:
        """The trigger content with everything up to the command verb removed."""
        content = self.context.content
        # The verb may be typed in any case and may also appear among the arguments
        verb = re.search(re.escape(self.invoked_with) + r"(?=\s|$)", content, re.IGNORECASE)
        if verb is None:
            return content.strip()
        return content[verb.end() :].strip()

    @cached_property
    def arguments(self) -> list[ParameterResult]:
        self.logger.info(f"Parsing arguments of command '{self.declaration.name}'")
        text = self.argument_text
        self.logger.debug(f"Argument string: '{text}'")
        return self.parser.parse(text, self.declaration.parameter_types)

    def log(self, info: str) -> ExecutionEvent:
        """Record an informational event. Meant to be called by command bodies."""
        event = ExecutionEvent(info)
        self._events.append(event)
        return event

    def log_error(self, info: str, exception: BaseException | None = None) -> ExecutionError:
        """Record an error the body dealt with itself.

        If the body returns right after, the run counts as failed.
        """
        error = ExecutionError(info, exception)
        self._events.append(error)
        return error

    def _arguments_valid(self) -> bool:
        arguments = self.arguments
        if len(arguments) != len(self.declaration.parameters):
            return False
        return not any(is_error(result) for result in arguments)

    def _keyword_arguments(self) -> dict[str, ParameterValue]:
        return dict(zip(self.declaration.labels, self.arguments))

    async def _run_hook(self, hook: FailureHook | None) -> None:
        if hook is None:
            return
        try:
            await hook(self)
        except Exception:
            self.logger.exception(f"Failure hook of command '{self.declaration.name}' raised")

    def _finish(self, state: RunState) -> RunOutcome:
        self.history.append(state)
        self.executed = True
        return _TERMINAL_STATES[state]

    async def execute(self) -> RunOutcome:
        if self.executed:
            return self.outcome

        self.logger.debug("Checking command permissions")
        try:
            permitted = self.declaration.requirement.check(self.context)
            fault = None
        except Exception as e:
            self.logger.warning(f"Permission check of command '{self.declaration.name}' raised", exc_info=True)
            permitted, fault = False, e

        if not permitted:
            self.logger.warning(f"Command '{self.declaration.name}' failed permission check")
            self._events.append(ExecutionError(PERMISSION_FAILED_INFO, fault))
            outcome = self._finish(RunState.PERMISSION_FAILED)
            await self._run_hook(self.on_permission_failure)
            return outcome
        self.history.append(RunState.PERMISSION_PASSED)

        self.logger.debug("Checking command arguments")
        if not self._arguments_valid():
            self.logger.warning(f"Command '{self.declaration.name}' failed argument check")
            self._events.append(ExecutionError(ARGUMENTS_FAILED_INFO))
            outcome = self._finish(RunState.ARGUMENTS_FAILED)
            await self._run_hook(self.on_argument_failure)
            return outcome
        self.history.append(RunState.ARGUMENTS_PASSED)

        try:
            self.logger.debug(f"Executing command '{self.declaration.name}'")
            await self.body(self, **self._keyword_arguments())
        except Exception as e:
            self.logger.warning(f"Command '{self.declaration.name}' failed due to an unknown exception", exc_info=True)
            self._events.append(ExecutionError(BODY_FAULT_INFO, e))

        if self._events and isinstance(self._events[-1], ExecutionError):
            return self._finish(RunState.EXECUTED_FAILURE)
        self.logger.info(f"Command '{self.declaration.name}' finished execution successfully")
        return self._finish(RunState.EXECUTED_SUCCESS)

    def details(self) -> CommandInformation:
        return CommandInformation(
            command_name=self.declaration.name,
            actor_id=self.context.actor_id,
            guild_id=self.context.guild_id,
            channel_id=self.context.channel_id,
            success=self.success,
            failure=self.failure,
            executed=self.executed,
            outcome=self.outcome,
            last_info=self._events[-1].info if self._events else "",
            # Only report arguments that were actually parsed
            arguments=tuple(self.__dict__.get("arguments", ())),
            events=self.events,
        )
