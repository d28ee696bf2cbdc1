from .bot import BruhBot
from .message_handler import MessageCommandHandler
from .module_loader import ModuleLoader

__all__ = ["BruhBot", "MessageCommandHandler", "ModuleLoader"]
