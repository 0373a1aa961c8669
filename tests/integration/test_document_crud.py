"""
Test suite for DocumentCRUD against an in-memory SQLite database.

System role: Verification of document persistence, owner filtering and cascade delete
"""

import uuid

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.boundary.db.CRUD.attempt_log_crud import attempt_log_crud
from docingest.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud
from docingest.boundary.db.models import DocumentModel, IngestionStatus


class TestDocumentCRUDInit:
    def test_init_should_set_model_to_document_model(self) -> None:
        assert DocumentCRUD().model == DocumentModel


class TestDocumentCRUDCreate:
    async def test_create_defaults_to_pending(self, test_async_db: AsyncSession, owner_id: str) -> None:
        document = await document_crud.create(
            test_async_db,
            title="Report",
            storage_key="users/u/documents/a.pdf",
            owner_id=owner_id,
        )

        assert document.id is not None
        assert document.status == IngestionStatus.PENDING
        assert document.summary is None
        assert document.created_at is not None


class TestDocumentCRUDStatus:
    """Test suite for get_for_update() and set_status()."""

    def test_lock_statement_selects_for_update_on_postgres(self) -> None:
        stmt = document_crud.lock_statement(uuid.uuid4())

        compiled = str(stmt.compile(dialect=postgresql.dialect()))

        assert "FOR UPDATE" in compiled
        assert "WHERE documents.id" in compiled

    async def test_get_for_update_returns_document(self, test_async_db: AsyncSession, make_document) -> None:
        document = await make_document()

        locked = await document_crud.get_for_update(test_async_db, document.id)

        assert locked.id == document.id

    async def test_set_status_keeps_summary_when_none(self, test_async_db: AsyncSession, make_document) -> None:
        document = await make_document()
        locked = await document_crud.get_for_update(test_async_db, document.id)

        await document_crud.set_status(test_async_db, locked, IngestionStatus.PROCESSING)
        await test_async_db.commit()

        reloaded = await document_crud.get_by_id(test_async_db, document.id)
        assert reloaded.status == IngestionStatus.PROCESSING
        assert reloaded.summary is None

    async def test_set_status_with_summary(self, test_async_db: AsyncSession, make_document) -> None:
        document = await make_document()
        locked = await document_crud.get_for_update(test_async_db, document.id)

        await document_crud.set_status(test_async_db, locked, IngestionStatus.COMPLETED, summary="ok")
        await test_async_db.commit()

        reloaded = await document_crud.get_by_id(test_async_db, document.id)
        assert reloaded.summary == "ok"


class TestDocumentCRUDOwnerQueries:
    """Test suite for list_for_owner() and count_for_owner()."""

    async def test_lists_only_owner_documents(
        self,
        test_async_db: AsyncSession,
        make_document,
        owner_id: str,
        other_user_id: str,
    ) -> None:
        first = await make_document(title="first")
        second = await make_document(title="second")
        await make_document(owner=other_user_id)

        newest = await document_crud.list_for_owner(test_async_db, owner_id)
        oldest = await document_crud.list_for_owner(test_async_db, owner_id, newest_first=False)

        assert [d.id for d in newest] == [second.id, first.id]
        assert [d.id for d in oldest] == [first.id, second.id]
        assert await document_crud.count_for_owner(test_async_db, owner_id) == 2

    async def test_status_filter(self, test_async_db: AsyncSession, make_document, owner_id: str) -> None:
        await make_document(status=IngestionStatus.FAILED)
        await make_document(status=IngestionStatus.PENDING)

        failed = await document_crud.list_for_owner(test_async_db, owner_id, status=IngestionStatus.FAILED)

        assert [d.status for d in failed] == [IngestionStatus.FAILED]
        assert await document_crud.count_for_owner(test_async_db, owner_id, status=IngestionStatus.FAILED) == 1

    async def test_limit_and_offset(self, test_async_db: AsyncSession, make_document, owner_id: str) -> None:
        for i in range(3):
            await make_document(title=f"doc {i}")

        page = await document_crud.list_for_owner(test_async_db, owner_id, limit=2, offset=2)

        assert len(page) == 1


class TestDocumentCRUDDelete:
    async def test_delete_with_logs_removes_history(self, test_async_db: AsyncSession, make_document) -> None:
        document = await make_document()
        await attempt_log_crud.append(test_async_db, document.id, 1, IngestionStatus.STARTED, "started")
        await test_async_db.commit()

        deleted = await document_crud.delete_with_logs(test_async_db, document.id)
        await test_async_db.commit()

        assert deleted is True
        assert await document_crud.get_by_id(test_async_db, document.id) is None
        assert await attempt_log_crud.count_for_document(test_async_db, document.id) == 0

    async def test_delete_missing_document(self, test_async_db: AsyncSession) -> None:
        assert await document_crud.delete_with_logs(test_async_db, uuid.uuid4()) is False
