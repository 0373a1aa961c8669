"""
Test suite for document endpoints.

System role: Verification of upload, list, get and delete routing
"""

import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from docingest.api.deps import get_document_service
from docingest.api.main import create_app
from docingest.boundary.db.models import IngestionStatus
from docingest.core.exceptions import DocumentNotFoundError, InvalidUploadError
from docingest.models.common import PaginationMeta
from docingest.models.document import DocumentListResponse, DocumentResponse


@pytest.fixture
def mock_document_service() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def client(mock_document_service: AsyncMock) -> TestClient:
    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_document_service] = lambda: mock_document_service
    return TestClient(app)


def document_row(owner_id: str = "u1") -> MagicMock:
    now = datetime.now(timezone.utc)
    document = MagicMock()
    document.id = uuid.uuid4()
    document.title = "Report"
    document.storage_key = f"users/{owner_id}/documents/x.pdf"
    document.summary = None
    document.owner_id = owner_id
    document.status = IngestionStatus.PENDING
    document.created_at = now
    document.updated_at = now
    return document


class TestUploadEndpoint:
    """Test suite for POST /api/v1/documents/upload."""

    def test_upload_pdf(self, client, mock_document_service, make_token) -> None:
        mock_document_service.upload_document.return_value = document_row()

        response = client.post(
            "/api/v1/documents/upload",
            files={"file": ("report.pdf", b"%PDF-1.4", "application/pdf")},
            data={"title": "Report"},
            headers=make_token(user_id="u1"),
        )

        assert response.status_code == 201
        assert response.json()["status"] == "pending"
        mock_document_service.upload_document.assert_awaited_once_with(
            user_id="u1",
            filename="report.pdf",
            content_type="application/pdf",
            body=b"%PDF-1.4",
            title="Report",
        )

    def test_rejected_upload_is_400(self, client, mock_document_service, make_token) -> None:
        mock_document_service.upload_document.side_effect = InvalidUploadError(
            "Only PDF files are allowed", filename="notes.txt"
        )

        response = client.post(
            "/api/v1/documents/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            headers=make_token(),
        )

        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "Only PDF files are allowed"


class TestReadEndpoints:
    def test_list_documents(self, client, mock_document_service, make_token) -> None:
        row = document_row()
        mock_document_service.list_documents.return_value = DocumentListResponse(
            items=[DocumentResponse.model_validate(row)],
            pagination=PaginationMeta.build(page=1, limit=10, total=1),
        )

        response = client.get(
            "/api/v1/documents?status=failed&order=oldest",
            headers=make_token(user_id="u1"),
        )

        assert response.status_code == 200
        assert response.json()["items"][0]["id"] == str(row.id)
        mock_document_service.list_documents.assert_awaited_once_with(
            "u1",
            page=1,
            limit=10,
            status=IngestionStatus.FAILED,
            newest_first=False,
        )

    def test_get_document_not_found(self, client, mock_document_service, make_token) -> None:
        document_id = uuid.uuid4()
        mock_document_service.get_document.side_effect = DocumentNotFoundError(document_id)

        response = client.get(f"/api/v1/documents/{document_id}", headers=make_token())

        assert response.status_code == 404
        assert response.json()["detail"]["details"] == {"document_id": str(document_id)}

    def test_viewer_cannot_list(self, client, make_token) -> None:
        response = client.get("/api/v1/documents", headers=make_token(role="viewer"))

        assert response.status_code == 403


class TestDeleteEndpoint:
    def test_delete_returns_no_content(self, client, mock_document_service, make_token) -> None:
        document_id = uuid.uuid4()

        response = client.delete(f"/api/v1/documents/{document_id}", headers=make_token(user_id="u1"))

        assert response.status_code == 204
        mock_document_service.delete_document.assert_awaited_once_with(document_id, "u1")
