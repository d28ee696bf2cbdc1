"""Document storage for commands.

Modules store their data here instead of talking to the database directly.
Every document is wrapped with the module and command that stored it, so a
command only ever sees its own documents.
"""

import logging
from typing import Any

from sqlalchemy import delete, select

from .manager import DatabaseManager
from .models import CommandUsage, StoredDocument

logger = logging.getLogger(__name__)


class DocumentStore:
    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def store_document(self, module_name: str, command_name: str, name: str, document: dict[str, Any]) -> int:
        """Insert a new document and return its id."""
        logger.info(f"Storing document '{name}' (module: '{module_name}', command: '{command_name}')")
        async with self.db.session() as session:
            stored = StoredDocument(module_name=module_name, command_name=command_name, name=name, value=document)
            session.add(stored)
            await session.flush()
            document_id = stored.id

        logger.info(f"Document '{name}' stored successfully with id {document_id}")
        return document_id

    async def put_document(
        self,
        module_name: str,
        command_name: str,
        document_id: int,
        document: dict[str, Any],
        name: str | None = None,
    ) -> bool:
        """Replace the value of an existing document. Returns False if it doesn't exist in this scope."""
        async with self.db.session() as session:
            stored = await self._find(session, module_name, command_name, document_id)
            if stored is None:
                logger.warning(f"Document with id '{document_id}' not found, nothing to update")
                return False

            stored.value = document
            if name is not None:
                stored.name = name

        logger.info(f"Document with id '{document_id}' updated (module: '{module_name}', command: '{command_name}')")
        return True

    async def get_document(self, module_name: str, command_name: str, document_id: int) -> dict[str, Any] | None:
        logger.info(
            f"Retrieving document with id '{document_id}' (module: '{module_name}', command: '{command_name}')"
        )
        async with self.db.session() as session:
            stored = await self._find(session, module_name, command_name, document_id)

        if stored is None:
            logger.warning(f"Document with id '{document_id}' not found in database")
            return None

        logger.info(f"Document with id '{document_id}' found in database (name: '{stored.name}')")
        return stored.value

    async def get_documents(self, module_name: str, command_name: str) -> list[tuple[str, int]]:
        """List ``(name, id)`` pairs of every document a command stored."""
        async with self.db.session() as session:
            result = await session.execute(
                select(StoredDocument.name, StoredDocument.id)
                .where(
                    StoredDocument.module_name == module_name,
                    StoredDocument.command_name == command_name,
                )
                .order_by(StoredDocument.id)
            )
            documents = [(row.name, row.id) for row in result]

        logger.info(
            f"Documents from command '{command_name}' retrieved (module: '{module_name}'), total: {len(documents)}"
        )
        return documents

    async def find_document(self, module_name: str, command_name: str, name: str) -> dict[str, Any] | None:
        """Return the most recent document stored under ``name``."""
        async with self.db.session() as session:
            result = await session.execute(
                select(StoredDocument)
                .where(
                    StoredDocument.module_name == module_name,
                    StoredDocument.command_name == command_name,
                    StoredDocument.name == name,
                )
                .order_by(StoredDocument.id.desc())
                .limit(1)
            )
            stored = result.scalar_one_or_none()

        return stored.value if stored else None

    async def delete_document(self, module_name: str, command_name: str, document_id: int) -> bool:
        async with self.db.session() as session:
            result = await session.execute(
                delete(StoredDocument).where(
                    StoredDocument.id == document_id,
                    StoredDocument.module_name == module_name,
                    StoredDocument.command_name == command_name,
                )
            )
            deleted = result.rowcount > 0

        if deleted:
            logger.info(f"Document with id '{document_id}' deleted")
        return deleted

    async def record_usage(
        self,
        *,
        guild_id: int | None,
        user_id: int,
        command_name: str,
        module_name: str | None,
        outcome: str | None,
        success: bool,
        error_message: str | None = None,
        execution_time: float | None = None,
    ) -> None:
        async with self.db.session() as session:
            session.add(
                CommandUsage(
                    guild_id=guild_id,
                    user_id=user_id,
                    command_name=command_name,
                    module_name=module_name,
                    outcome=outcome,
                    success=success,
                    error_message=error_message,
                    execution_time=execution_time,
                )
            )

    async def _find(self, session, module_name: str, command_name: str, document_id: int) -> StoredDocument | None:
        result = await session.execute(
            select(StoredDocument).where(
                StoredDocument.id == document_id,
                StoredDocument.module_name == module_name,
                StoredDocument.command_name == command_name,
            )
        )
        return result.scalar_one_or_none()
