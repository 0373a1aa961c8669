"""
Attempt log CRUD operations.

Append-only access to the ingestion_logs table: rows are created and
read, never updated. Deletion exists only for document removal.

Dependencies: sqlalchemy, docingest.boundary.db.models
System role: Ingestion history persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.boundary.db.CRUD.base_crud import BaseCRUD
from docingest.boundary.db.models.attempt_log_model import AttemptLogModel
from docingest.boundary.db.models.document_model import IngestionStatus

DISPLAY_ORDER = (AttemptLogModel.attempt_id.desc(), AttemptLogModel.created_at.desc())


class AttemptLogCRUD(BaseCRUD[AttemptLogModel]):
    """CRUD operations for AttemptLogModel."""

    def __init__(self) -> None:
        """Initialize AttemptLogCRUD with AttemptLogModel."""
        super().__init__(AttemptLogModel)

    async def append(
        self,
        session: AsyncSession,
        document_id: UUID,
        attempt_id: int,
        status: IngestionStatus,
        details: str,
    ) -> AttemptLogModel:
        """
        Append a new log row for a document.

        Args:
            session: Async database session
            document_id: Owning document UUID
            attempt_id: Attempt number the event belongs to
            status: Status recorded by the event
            details: Event description

        Returns:
            The created AttemptLogModel (flushed, not committed)
        """
        return await self.create(
            session,
            document_id=document_id,
            attempt_id=attempt_id,
            status=status,
            details=details,
        )

    async def get_latest(
        self,
        session: AsyncSession,
        document_id: UUID,
    ) -> AttemptLogModel | None:
        """
        Retrieve the most recent log row for a document.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            Latest AttemptLogModel by (attempt_id, created_at), None if no logs
        """
        stmt = (
            select(AttemptLogModel)
            .where(AttemptLogModel.document_id == document_id)
            .order_by(*DISPLAY_ORDER)
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_document(
        self,
        session: AsyncSession,
        document_id: UUID,
        limit: int | None = None,
        offset: int = 0,
    ) -> Sequence[AttemptLogModel]:
        """
        Retrieve a page of a document's logs, newest attempt first.

        Args:
            session: Async database session
            document_id: Document UUID
            limit: Maximum number of rows to return
            offset: Number of rows to skip

        Returns:
            Sequence of AttemptLogModels in display order
        """
        stmt = (
            select(AttemptLogModel)
            .where(AttemptLogModel.document_id == document_id)
            .order_by(*DISPLAY_ORDER)
            .offset(offset)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def count_for_document(self, session: AsyncSession, document_id: UUID) -> int:
        """Count all log rows for a document."""
        stmt = (
            select(func.count())
            .select_from(AttemptLogModel)
            .where(AttemptLogModel.document_id == document_id)
        )
        result = await session.execute(stmt)
        return result.scalar_one()

    async def delete_for_document(self, session: AsyncSession, document_id: UUID) -> int:
        """
        Remove every log row of a document.

        Args:
            session: Async database session
            document_id: Document UUID

        Returns:
            Number of rows deleted
        """
        stmt = delete(AttemptLogModel).where(AttemptLogModel.document_id == document_id)
        result = await session.execute(stmt)
        return result.rowcount


attempt_log_crud = AttemptLogCRUD()
