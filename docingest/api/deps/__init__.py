"""FastAPI dependencies."""

from docingest.api.deps.dependencies import (
    ServiceCache,
    get_broker_connection,
    get_document_service,
    get_event_publisher,
    get_ingestion_service,
    get_s3_document_client,
    get_service_cache,
)

__all__ = [
    "ServiceCache",
    "get_broker_connection",
    "get_document_service",
    "get_event_publisher",
    "get_ingestion_service",
    "get_s3_document_client",
    "get_service_cache",
]
