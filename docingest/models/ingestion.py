"""
Ingestion API schemas.

Response models for starting ingestion and reading attempt history.

Dependencies: pydantic
System role: Ingestion API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docingest.boundary.db.models import IngestionStatus
from docingest.models.common import PaginationMeta


class AttemptLogResponse(BaseModel):
    """One attempt log row."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    document_id: uuid.UUID
    attempt_id: int
    status: IngestionStatus
    details: str
    created_at: datetime


class DocumentSnapshot(BaseModel):
    """Current document state shown above its history."""

    id: uuid.UUID
    title: str
    status: IngestionStatus
    summary: str | None = None
    storage_key: str
    file_url: str | None = Field(default=None, description="Presigned read URL")


class AttemptHistoryResponse(BaseModel):
    """Document snapshot with one page of its attempt logs."""

    document: DocumentSnapshot
    logs: list[AttemptLogResponse]
    pagination: PaginationMeta
