from .manager import DatabaseManager
from .models import Base, CommandUsage, StoredDocument
from .persistence import DocumentStore

__all__ = [
    "DatabaseManager",
    "DocumentStore",
    "Base",
    "CommandUsage",
    "StoredDocument",
]
