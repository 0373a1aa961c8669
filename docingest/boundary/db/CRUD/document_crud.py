"""
Document CRUD operations.

Provides Create, Read, Update, Delete operations for DocumentModel
with owner filtering, row locking and the explicit cascade delete of
a document's attempt logs.

Dependencies: sqlalchemy, docingest.boundary.db.models
System role: Document persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.boundary.db.CRUD.attempt_log_crud import attempt_log_crud
from docingest.boundary.db.CRUD.base_crud import BaseCRUD
from docingest.boundary.db.models.document_model import DocumentModel, IngestionStatus


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with document-specific queries for filtering
    by owner and processing status.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    def lock_statement(self, id: UUID) -> Select:
        """Build the SELECT ... FOR UPDATE used to serialize writers on one document."""
        return (
            select(DocumentModel)
            .where(DocumentModel.id == id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )

    async def get_for_update(
        self,
        session: AsyncSession,
        id: UUID,
    ) -> DocumentModel | None:
        """
        Retrieve a document and lock its row until the transaction ends.

        Concurrent writers for the same document serialize on this lock,
        which keeps attempt numbering collision free. SQLite ignores the
        FOR UPDATE clause.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            Locked DocumentModel if found, None otherwise
        """
        result = await session.execute(self.lock_statement(id))
        return result.scalar_one_or_none()

    async def set_status(
        self,
        session: AsyncSession,
        document: DocumentModel,
        status: IngestionStatus,
        summary: str | None = None,
    ) -> DocumentModel:
        """
        Update a loaded document's status and, when given, its summary.

        Args:
            session: Async database session
            document: Document instance (normally from get_for_update)
            status: New ingestion status
            summary: Replacement summary, or None to leave it unchanged

        Returns:
            The updated DocumentModel (flushed, not committed)
        """
        document.status = status
        if summary is not None:
            document.summary = summary
        await session.flush()
        return document

    async def list_for_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        status: IngestionStatus | None = None,
        newest_first: bool = True,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[DocumentModel]:
        """
        Retrieve documents uploaded by one user.

        Args:
            session: Async database session
            owner_id: Identity-provider user ID
            status: Optional status filter
            newest_first: Order by created_at descending when True
            limit: Maximum number of documents to return
            offset: Number of documents to skip

        Returns:
            Sequence of DocumentModels owned by the user
        """
        stmt = select(DocumentModel).where(DocumentModel.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(DocumentModel.status == status)
        order = DocumentModel.created_at.desc() if newest_first else DocumentModel.created_at.asc()
        stmt = stmt.order_by(order).offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_owner(
        self,
        session: AsyncSession,
        owner_id: str,
        status: IngestionStatus | None = None,
    ) -> int:
        """Count documents uploaded by one user, optionally filtered by status."""
        stmt = select(func.count()).select_from(DocumentModel).where(DocumentModel.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(DocumentModel.status == status)
        result = await session.execute(stmt)
        return result.scalar_one()

    async def delete_with_logs(self, session: AsyncSession, id: UUID) -> bool:
        """
        Delete a document together with all of its attempt logs.

        Args:
            session: Async database session
            id: Document UUID

        Returns:
            True if the document existed and was deleted
        """
        await attempt_log_crud.delete_for_document(session, id)
        return await self.delete_by_id(session, id)


document_crud = DocumentCRUD()
