"""
Document API endpoints.

Routes:
- POST /documents/upload - Upload a PDF
- GET /documents - List the caller's documents
- GET /documents/{document_id} - Get one document
- DELETE /documents/{document_id} - Delete a document and its history

Dependencies: docingest.application.services, docingest.models
System role: Document HTTP API
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile, status

from docingest.api.deps import get_document_service
from docingest.api.error_handling import handle_ingestion_errors
from docingest.api.security import Principal, require_ingestion_roles
from docingest.application.services.document_service import DocumentService
from docingest.boundary.db.models import IngestionStatus
from docingest.models.document import DocumentListResponse, DocumentResponse

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post(
    "/upload",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_ingestion_errors
async def upload_document(
    file: UploadFile = File(...),
    title: str | None = Form(None),
    principal: Principal = Depends(require_ingestion_roles),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """
    Upload a PDF and register it as a PENDING document.

    Raises:
        HTTPException(400): Not a PDF, empty, or too large
    """
    body = await file.read()
    document = await document_service.upload_document(
        user_id=principal.user_id,
        filename=file.filename or "document.pdf",
        content_type=file.content_type,
        body=body,
        title=title,
    )
    return DocumentResponse.model_validate(document)


@router.get("", response_model=DocumentListResponse)
@handle_ingestion_errors
async def list_documents(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status_filter: IngestionStatus | None = Query(None, alias="status"),
    order: Literal["newest", "oldest"] = Query("newest"),
    principal: Principal = Depends(require_ingestion_roles),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentListResponse:
    """List the caller's documents, newest first unless order=oldest."""
    return await document_service.list_documents(
        principal.user_id,
        page=page,
        limit=limit,
        status=status_filter,
        newest_first=order == "newest",
    )


@router.get("/{document_id}", response_model=DocumentResponse)
@handle_ingestion_errors
async def get_document(
    document_id: UUID,
    principal: Principal = Depends(require_ingestion_roles),
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentResponse:
    """Get one of the caller's documents."""
    document = await document_service.get_document(document_id, principal.user_id)
    return DocumentResponse.model_validate(document)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
@handle_ingestion_errors
async def delete_document(
    document_id: UUID,
    principal: Principal = Depends(require_ingestion_roles),
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    """
    Delete a document together with its attempt logs.

    Raises:
        HTTPException(404): Document not found or not owned by the caller
    """
    await document_service.delete_document(document_id, principal.user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
