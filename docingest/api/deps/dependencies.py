"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: docingest.configs, docingest.application, docingest.boundary
System role: DI container for service injection
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docingest.application.services import DocumentService, IngestionService
from docingest.boundary.aws.s3_client import S3DocumentClient
from docingest.boundary.broker import BrokerConnection, EventPublisher
from docingest.boundary.db import get_async_db
from docingest.configs import get_settings


class ServiceCache:
    """Container for process-wide clients shared across requests."""

    def __init__(self):
        self._s3_client = None
        self._broker = None
        self._publisher = None

    @property
    def s3_client(self) -> S3DocumentClient:
        """Get cached S3 document client."""
        if self._s3_client is None:
            settings = get_settings()
            self._s3_client = S3DocumentClient(
                bucket=settings.s3_documents.bucket,
                region=settings.s3_documents.region,
            )
        return self._s3_client

    @property
    def broker(self) -> BrokerConnection:
        """Get cached broker connection (connected by the app lifespan)."""
        if self._broker is None:
            self._broker = BrokerConnection(get_settings().broker)
        return self._broker

    @property
    def publisher(self) -> EventPublisher:
        """Get cached event publisher."""
        if self._publisher is None:
            self._publisher = EventPublisher(self.broker)
        return self._publisher

    def clear(self) -> None:
        """Release the broker connection and drop all cached instances."""
        if self._broker is not None:
            self._broker.release()
        self._s3_client = None
        self._broker = None
        self._publisher = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


def get_s3_document_client() -> S3DocumentClient:
    """Get S3 document client from the service cache."""
    return get_service_cache().s3_client


def get_event_publisher() -> EventPublisher:
    """Get event publisher from the service cache."""
    return get_service_cache().publisher


def get_broker_connection() -> BrokerConnection:
    """Get broker connection from the service cache."""
    return get_service_cache().broker


def get_ingestion_service(
    db: AsyncSession = Depends(get_async_db),
    publisher: EventPublisher = Depends(get_event_publisher),
    s3_client: S3DocumentClient = Depends(get_s3_document_client),
) -> IngestionService:
    """
    Get ingestion service instance.

    Args:
        db: Async database session (injected via Depends)
        publisher: Work event publisher
        s3_client: Storage client for presigned read URLs

    Returns:
        IngestionService: Ingestion service instance
    """
    return IngestionService(
        db=db,
        publisher=publisher,
        s3_client=s3_client,
        presigned_url_expiry=get_settings().s3_documents.presigned_url_expiry,
    )


def get_document_service(
    db: AsyncSession = Depends(get_async_db),
    s3_client: S3DocumentClient = Depends(get_s3_document_client),
) -> DocumentService:
    """
    Get document service instance.

    Args:
        db: Async database session (injected via Depends)
        s3_client: Storage client for the documents bucket

    Returns:
        DocumentService: Document service instance
    """
    return DocumentService(
        db=db,
        s3_client=s3_client,
        max_upload_bytes=get_settings().s3_documents.max_upload_bytes,
    )
