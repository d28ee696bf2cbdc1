"""Text command framework for Discord bots."""

__version__ = "1.0.0"
