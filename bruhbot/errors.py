class BruhBotError(Exception):
    """Base class for errors raised by the bot framework."""


class ContextResolutionError(BruhBotError):
    """The trigger of a command could not be resolved, so the command is not runnable."""


class ModuleLoadError(BruhBotError):
    pass


class DuplicateCommandError(BruhBotError):
    def __init__(self, command_name: str, owner: str) -> None:
        super().__init__(f"Command '{command_name}' is already registered by module '{owner}'")
        self.command_name = command_name
        self.owner = owner
