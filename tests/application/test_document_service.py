"""
Test suite for DocumentService.

System role: Verification of upload validation, listing and cascade delete
"""

import uuid

import pytest
from botocore.exceptions import ClientError
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.application.services.document_service import DocumentService
from docingest.application.services.ingestion_service import IngestionService
from docingest.boundary.db.CRUD.attempt_log_crud import attempt_log_crud
from docingest.boundary.db.CRUD.document_crud import document_crud
from docingest.boundary.db.models import IngestionStatus
from docingest.core.exceptions import DocumentNotFoundError, InvalidUploadError

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<< >>\nendobj\n"


@pytest.fixture
def service(test_async_db: AsyncSession, mock_s3_client) -> DocumentService:
    return DocumentService(test_async_db, mock_s3_client, max_upload_bytes=1024)


class TestUploadDocument:
    """Test suite for DocumentService.upload_document()."""

    async def test_stores_file_and_creates_pending_document(
        self,
        service: DocumentService,
        mock_s3_client,
        owner_id: str,
    ) -> None:
        document = await service.upload_document(owner_id, "report.pdf", "application/pdf", PDF_BYTES, title="Q3")

        assert document.status == IngestionStatus.PENDING
        assert document.title == "Q3"
        assert document.owner_id == owner_id
        assert document.storage_key.startswith(f"users/{owner_id}/documents/")
        mock_s3_client.upload.assert_called_once_with(document.storage_key, PDF_BYTES, "application/pdf")

    async def test_title_defaults_to_filename(self, service: DocumentService, owner_id: str) -> None:
        document = await service.upload_document(owner_id, "report.pdf", "application/pdf", PDF_BYTES)

        assert document.title == "report.pdf"

    @pytest.mark.parametrize(
        "content_type,body,message",
        [
            ("text/plain", PDF_BYTES, "Only PDF files are allowed"),
            (None, PDF_BYTES, "Only PDF files are allowed"),
            ("application/pdf", b"", "Uploaded file is empty"),
            ("application/pdf", b"x" * 2048, "File exceeds the maximum size"),
        ],
    )
    async def test_rejects_invalid_uploads(
        self,
        service: DocumentService,
        mock_s3_client,
        owner_id: str,
        content_type,
        body: bytes,
        message: str,
    ) -> None:
        with pytest.raises(InvalidUploadError) as exc_info:
            await service.upload_document(owner_id, "report.pdf", content_type, body)

        assert exc_info.value.message.startswith(message)
        mock_s3_client.upload.assert_not_called()


class TestListAndGet:
    async def test_list_documents_paginates(
        self,
        service: DocumentService,
        make_document,
        owner_id: str,
        other_user_id: str,
    ) -> None:
        for _ in range(3):
            await make_document()
        await make_document(owner=other_user_id)

        result = await service.list_documents(owner_id, page=1, limit=2)

        assert len(result.items) == 2
        assert result.pagination.total == 3
        assert result.pagination.total_pages == 2

    async def test_get_document_of_other_user_is_not_found(
        self,
        service: DocumentService,
        make_document,
        other_user_id: str,
    ) -> None:
        document = await make_document()

        with pytest.raises(DocumentNotFoundError):
            await service.get_document(document.id, other_user_id)


class TestDeleteDocument:
    """Test suite for DocumentService.delete_document()."""

    async def test_deletes_rows_and_file(
        self,
        service: DocumentService,
        make_document,
        owner_id: str,
        mock_s3_client,
        session_factory,
    ) -> None:
        document = await make_document()
        async with session_factory() as session:
            await IngestionService(session).start_ingestion(document.id, owner_id)

        await service.delete_document(document.id, owner_id)

        async with session_factory() as session:
            assert await document_crud.get_by_id(session, document.id) is None
            assert await attempt_log_crud.count_for_document(session, document.id) == 0
        mock_s3_client.delete.assert_called_once_with(document.storage_key)

    async def test_storage_failure_after_delete_is_tolerated(
        self,
        service: DocumentService,
        make_document,
        owner_id: str,
        mock_s3_client,
    ) -> None:
        document = await make_document()
        mock_s3_client.delete.side_effect = ClientError({"Error": {"Code": "500"}}, "DeleteObject")

        await service.delete_document(document.id, owner_id)

        mock_s3_client.delete.assert_called_once()

    async def test_other_user_cannot_delete(
        self,
        service: DocumentService,
        make_document,
        other_user_id: str,
        mock_s3_client,
    ) -> None:
        document = await make_document()

        with pytest.raises(DocumentNotFoundError):
            await service.delete_document(document.id, other_user_id)

        mock_s3_client.delete.assert_not_called()

    async def test_missing_document(self, service: DocumentService, owner_id: str) -> None:
        with pytest.raises(DocumentNotFoundError):
            await service.delete_document(uuid.uuid4(), owner_id)
