"""
Ingestion orchestrator.

Owns every change to a document's ingestion status. Each change updates
the document row and appends one attempt log row in a single transaction,
with the document row locked so concurrent updates cannot interleave.

Dependencies: sqlalchemy, docingest.boundary.db, docingest.boundary.broker, boto3
System role: Ingestion state machine and read path
"""

import asyncio
import logging
from typing import Callable
from uuid import UUID

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.boundary.aws.s3_client import S3DocumentClient
from docingest.boundary.broker.publisher import EventPublisher
from docingest.boundary.db.CRUD.attempt_log_crud import attempt_log_crud
from docingest.boundary.db.CRUD.document_crud import document_crud
from docingest.boundary.db.models import AttemptLogModel, DocumentModel, IngestionStatus
from docingest.core.attempts import next_attempt_id
from docingest.core.exceptions import (
    AlreadyInProgressError,
    DocumentNotFoundError,
    ForbiddenError,
    IngestionServiceError,
    InvalidStateError,
    MalformedEventError,
    UpdateFailedError,
)
from docingest.models.common import PaginationMeta
from docingest.models.events import WorkEvent
from docingest.models.ingestion import (
    AttemptHistoryResponse,
    AttemptLogResponse,
    DocumentSnapshot,
)

logger = logging.getLogger(__name__)

START_DETAILS = "Document ingestion process started"

DocumentGuard = Callable[[DocumentModel], None]


def default_details(status: IngestionStatus) -> str:
    return f"Document status updated to {status.value}"


def parse_document_id(document_id: UUID | str) -> UUID:
    """
    Coerce a document ID, treating malformed IDs as unknown documents.

    Raises:
        DocumentNotFoundError: If the value is not a valid UUID
    """
    if isinstance(document_id, UUID):
        return document_id
    try:
        return UUID(str(document_id))
    except ValueError as e:
        raise DocumentNotFoundError(document_id) from e


def parse_status(status: IngestionStatus | str) -> IngestionStatus:
    """
    Coerce a reported status, case-insensitively.

    Raises:
        MalformedEventError: If the value is not a known ingestion status
    """
    if isinstance(status, IngestionStatus):
        return status
    try:
        return IngestionStatus(str(status).strip().lower())
    except ValueError as e:
        raise MalformedEventError(
            f"Unknown ingestion status: {status}",
            {"status": str(status), "allowed": [s.value for s in IngestionStatus]},
        ) from e


class IngestionService:
    """
    Ingestion orchestrator.

    Constructed per unit of work (HTTP request or consumed message) around
    one AsyncSession. The publisher and storage client are optional so the
    consumer path can run without them.
    """

    def __init__(
        self,
        db: AsyncSession,
        publisher: EventPublisher | None = None,
        s3_client: S3DocumentClient | None = None,
        presigned_url_expiry: int = 300,
    ) -> None:
        """
        Initialize ingestion service.

        Args:
            db: AsyncSession owning the transaction
            publisher: Event publisher for work events
            s3_client: Storage client for presigned read URLs
            presigned_url_expiry: Read URL lifetime in seconds
        """
        self.db = db
        self._publisher = publisher
        self._s3_client = s3_client
        self._presigned_url_expiry = presigned_url_expiry

    async def update_status(
        self,
        document_id: UUID | str,
        new_status: IngestionStatus | str,
        details: str | None = None,
        summary: str | None = None,
    ) -> AttemptLogModel:
        """
        Record a status change and append the matching attempt log.

        Steps (one transaction):
        1. Lock the document row
        2. Read the latest attempt log
        3. Compute the attempt number
        4. Update status (and summary when completing with a non-empty summary)
        5. Append the log row and commit

        Args:
            document_id: Document UUID
            new_status: Status reported for the document
            details: Log message (defaults to "Document status updated to <status>")
            summary: Document summary, applied only with COMPLETED

        Returns:
            AttemptLogModel: The appended log row

        Raises:
            DocumentNotFoundError: Document does not exist
            MalformedEventError: Status is not a known ingestion status
            UpdateFailedError: Any other failure; both writes are rolled back
        """
        _, log = await self._apply(document_id, parse_status(new_status), details, summary)
        return log

    async def start_ingestion(self, document_id: UUID | str, user_id: str) -> AttemptLogModel:
        """
        Start (or retry) ingestion of a document on behalf of its owner.

        Preconditions are checked against the locked row, inside the same
        transaction as the status change, so two concurrent starts cannot
        both succeed. Publishing the work event happens after commit; a
        publish failure is logged and the started attempt is still returned.

        Args:
            document_id: Document UUID
            user_id: Caller's user ID

        Returns:
            AttemptLogModel: The STARTED log row

        Raises:
            DocumentNotFoundError: Document does not exist
            ForbiddenError: Caller does not own the document
            InvalidStateError: Document already completed
            AlreadyInProgressError: An attempt is started or processing
            UpdateFailedError: The transaction failed
        """

        def ensure_startable(document: DocumentModel) -> None:
            if document.owner_id != user_id:
                raise ForbiddenError(
                    "You do not have permission to start ingestion for this document",
                    document_id=document.id,
                    user_id=user_id,
                )
            if document.status == IngestionStatus.COMPLETED:
                raise InvalidStateError(
                    "Document ingestion already completed",
                    document_id=document.id,
                    current_status=document.status.value,
                )
            if document.status in (IngestionStatus.STARTED, IngestionStatus.PROCESSING):
                raise AlreadyInProgressError(
                    "Document ingestion already in progress",
                    document_id=document.id,
                    current_status=document.status.value,
                )

        document, log = await self._apply(
            document_id,
            IngestionStatus.STARTED,
            START_DETAILS,
            guard=ensure_startable,
        )
        logger.info(
            f"{__name__}:start_ingestion - Attempt {log.attempt_id} started",
            extra={"document_id": str(document.id), "user_id": user_id},
        )

        await self._publish_work_event(
            WorkEvent(
                document_id=str(document.id),
                user_id=user_id,
                attempt_id=log.attempt_id,
                storage_key=document.storage_key,
            )
        )
        return log

    async def get_attempt_history(
        self,
        document_id: UUID | str,
        user_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> AttemptHistoryResponse:
        """
        Read a document's current state and one page of its attempt logs.

        Args:
            document_id: Document UUID
            user_id: Caller's user ID
            page: 1-based page number
            limit: Page size

        Returns:
            AttemptHistoryResponse: Snapshot, logs (newest attempt first), pagination

        Raises:
            DocumentNotFoundError: Document does not exist
            ForbiddenError: Caller does not own the document
        """
        doc_uuid = parse_document_id(document_id)
        document = await document_crud.get_by_id(self.db, doc_uuid)
        if document is None:
            raise DocumentNotFoundError(document_id)
        if document.owner_id != user_id:
            raise ForbiddenError(
                "You do not have permission to view this document's history",
                document_id=document.id,
                user_id=user_id,
            )

        skip = (page - 1) * limit
        logs = await attempt_log_crud.list_for_document(self.db, doc_uuid, limit=limit, offset=skip)
        total = await attempt_log_crud.count_for_document(self.db, doc_uuid)

        return AttemptHistoryResponse(
            document=DocumentSnapshot(
                id=document.id,
                title=document.title,
                status=document.status,
                summary=document.summary,
                storage_key=document.storage_key,
                file_url=await self._read_url(document.storage_key),
            ),
            logs=[AttemptLogResponse.model_validate(log) for log in logs],
            pagination=PaginationMeta.build(page=page, limit=limit, total=total),
        )

    async def _apply(
        self,
        document_id: UUID | str,
        status: IngestionStatus,
        details: str | None,
        summary: str | None = None,
        guard: DocumentGuard | None = None,
    ) -> tuple[DocumentModel, AttemptLogModel]:
        doc_uuid = parse_document_id(document_id)
        try:
            document = await document_crud.get_for_update(self.db, doc_uuid)
            if document is None:
                raise DocumentNotFoundError(document_id)
            if guard is not None:
                guard(document)

            latest = await attempt_log_crud.get_latest(self.db, doc_uuid)
            attempt_id = next_attempt_id(latest, status)

            completed_summary = (
                summary
                if status == IngestionStatus.COMPLETED and isinstance(summary, str) and summary
                else None
            )
            await document_crud.set_status(self.db, document, status, summary=completed_summary)
            log = await attempt_log_crud.append(
                self.db,
                document_id=doc_uuid,
                attempt_id=attempt_id,
                status=status,
                details=details or default_details(status),
            )
            await self.db.commit()
        except IngestionServiceError:
            await self.db.rollback()
            raise
        except Exception as e:
            await self.db.rollback()
            logger.error(
                f"{__name__}:_apply - Rolled back status update: {e}",
                exc_info=True,
                extra={"document_id": str(doc_uuid), "status": status.value},
            )
            raise UpdateFailedError(document_id, str(e)) from e

        logger.info(
            f"{__name__}:_apply - Document {doc_uuid} -> {status.value} (attempt {attempt_id})",
            extra={"document_id": str(doc_uuid), "attempt_id": attempt_id},
        )
        return document, log

    async def _publish_work_event(self, event: WorkEvent) -> None:
        if self._publisher is None:
            logger.warning(
                f"{__name__}:_publish_work_event - No publisher configured; work event not sent",
                extra={"document_id": event.document_id},
            )
            return
        try:
            await self._publisher.publish_document_ingestion_event(event)
        except Exception:  # pylint: disable=broad-except
            # The attempt stays STARTED; a later retry needs a FAILED update first.
            logger.exception(
                f"{__name__}:_publish_work_event - Failed to publish work event",
                extra={"document_id": event.document_id, "attempt_id": event.attempt_id},
            )

    async def _read_url(self, storage_key: str) -> str | None:
        if self._s3_client is None:
            return None
        try:
            url, _ = await asyncio.to_thread(
                self._s3_client.generate_presigned_download_url,
                storage_key,
                self._presigned_url_expiry,
            )
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"{__name__}:_read_url - Could not sign read URL: {e}")
            return None
        return url
