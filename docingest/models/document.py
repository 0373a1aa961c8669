"""
Document domain models and schemas.

Dependencies: pydantic
System role: Document API contracts
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict

from docingest.boundary.db.models import IngestionStatus
from docingest.models.common import PaginationMeta


class DocumentResponse(BaseModel):
    """Response schema for document metadata."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    storage_key: str
    summary: str | None = None
    owner_id: str
    status: IngestionStatus
    created_at: datetime
    updated_at: datetime


class DocumentListResponse(BaseModel):
    """Response schema for listing a user's documents."""

    items: list[DocumentResponse]
    pagination: PaginationMeta
