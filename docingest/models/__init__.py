"""
Pydantic schemas for the HTTP API and the broker wire contracts.
"""

from docingest.models.common import ErrorResponse, PaginationMeta
from docingest.models.document import DocumentListResponse, DocumentResponse
from docingest.models.events import (
    DeadLetterMessage,
    StatusUpdateEvent,
    WorkEvent,
)
from docingest.models.ingestion import (
    AttemptHistoryResponse,
    AttemptLogResponse,
    DocumentSnapshot,
)

__all__ = [
    "ErrorResponse",
    "PaginationMeta",
    "DocumentListResponse",
    "DocumentResponse",
    "DeadLetterMessage",
    "StatusUpdateEvent",
    "WorkEvent",
    "AttemptHistoryResponse",
    "AttemptLogResponse",
    "DocumentSnapshot",
]
