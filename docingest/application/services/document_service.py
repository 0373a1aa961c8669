"""
Document service.

Handles document upload, listing, lookup and deletion for the owning
user. Uploaded files go to S3; metadata rows start in PENDING and are
advanced only by the ingestion orchestrator.

Dependencies: sqlalchemy, boto3, docingest.boundary
System role: Document management orchestration
"""

import asyncio
import logging
from uuid import UUID

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.boundary.aws.s3_client import S3DocumentClient
from docingest.boundary.db.CRUD.document_crud import document_crud
from docingest.boundary.db.models import DocumentModel, IngestionStatus
from docingest.core.exceptions import DocumentNotFoundError, InvalidUploadError
from docingest.models.common import PaginationMeta
from docingest.models.document import DocumentListResponse, DocumentResponse

logger = logging.getLogger(__name__)

ALLOWED_CONTENT_TYPES = ("application/pdf",)


class DocumentService:
    """
    Document service.

    Uploads raw PDFs to S3 and manages their metadata rows. Other users'
    documents are reported as not found.
    """

    def __init__(
        self,
        db: AsyncSession,
        s3_client: S3DocumentClient,
        max_upload_bytes: int = 25 * 1024 * 1024,
    ) -> None:
        """
        Initialize document service.

        Args:
            db: AsyncSession for document metadata
            s3_client: Storage client for the documents bucket
            max_upload_bytes: Largest accepted upload
        """
        self.db = db
        self._s3_client = s3_client
        self._max_upload_bytes = max_upload_bytes

    async def upload_document(
        self,
        user_id: str,
        filename: str,
        content_type: str | None,
        body: bytes,
        title: str | None = None,
    ) -> DocumentModel:
        """
        Store a PDF and create its PENDING document row.

        Args:
            user_id: Uploading user's ID
            filename: Original filename
            content_type: MIME type reported by the client
            body: File content
            title: Display title (defaults to the filename)

        Returns:
            DocumentModel: Created document

        Raises:
            InvalidUploadError: Not a PDF, empty, or larger than the limit
        """
        if content_type not in ALLOWED_CONTENT_TYPES:
            raise InvalidUploadError("Only PDF files are allowed", filename=filename)
        if not body:
            raise InvalidUploadError("Uploaded file is empty", filename=filename)
        if len(body) > self._max_upload_bytes:
            raise InvalidUploadError(
                f"File exceeds the maximum size of {self._max_upload_bytes // (1024 * 1024)}MB",
                filename=filename,
            )

        storage_key = S3DocumentClient.build_key(user_id, filename)
        await asyncio.to_thread(self._s3_client.upload, storage_key, body, content_type)

        try:
            document = await document_crud.create(
                self.db,
                title=(title or filename).strip()[:255],
                storage_key=storage_key,
                owner_id=user_id,
                status=IngestionStatus.PENDING,
            )
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            await self._delete_object(storage_key)
            raise

        logger.info(
            f"{__name__}:upload_document - Stored {filename}",
            extra={"document_id": str(document.id), "user_id": user_id},
        )
        return document

    async def list_documents(
        self,
        user_id: str,
        page: int = 1,
        limit: int = 10,
        status: IngestionStatus | None = None,
        newest_first: bool = True,
    ) -> DocumentListResponse:
        """
        List the caller's documents, one page at a time.

        Args:
            user_id: Owner's user ID
            page: 1-based page number
            limit: Page size
            status: Optional status filter
            newest_first: Sort by upload time descending when True

        Returns:
            DocumentListResponse: Documents and pagination metadata
        """
        documents = await document_crud.list_for_owner(
            self.db,
            user_id,
            status=status,
            newest_first=newest_first,
            limit=limit,
            offset=(page - 1) * limit,
        )
        total = await document_crud.count_for_owner(self.db, user_id, status=status)
        return DocumentListResponse(
            items=[DocumentResponse.model_validate(doc) for doc in documents],
            pagination=PaginationMeta.build(page=page, limit=limit, total=total),
        )

    async def get_document(self, document_id: UUID, user_id: str) -> DocumentModel:
        """
        Fetch one of the caller's documents.

        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
        """
        document = await document_crud.get_by_id(self.db, document_id)
        if document is None or document.owner_id != user_id:
            raise DocumentNotFoundError(document_id)
        return document

    async def delete_document(self, document_id: UUID, user_id: str) -> None:
        """
        Delete a document and its attempt logs, then remove the stored file.

        The rows go in one transaction; the S3 delete afterwards is best effort.

        Args:
            document_id: Document UUID
            user_id: Caller's user ID

        Raises:
            DocumentNotFoundError: Missing, or owned by someone else
        """
        document = await self.get_document(document_id, user_id)
        storage_key = document.storage_key
        try:
            await document_crud.delete_with_logs(self.db, document_id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self._delete_object(storage_key)
        logger.info(
            f"{__name__}:delete_document - Deleted document",
            extra={"document_id": str(document_id), "user_id": user_id},
        )

    async def _delete_object(self, storage_key: str) -> None:
        try:
            await asyncio.to_thread(self._s3_client.delete, storage_key)
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"{__name__}:_delete_object - Could not delete {storage_key}: {e}")
