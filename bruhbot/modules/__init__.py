from .base import BotModule

__all__ = ["BotModule"]
