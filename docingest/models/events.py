"""
Broker event contracts.

Wire schemas for the messages exchanged with ingestion workers. Field
names on the wire are camelCase; Python code uses snake_case.

Dependencies: pydantic
System role: Data validation and contract definition for queue messages
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic.alias_generators import to_camel

from docingest.boundary.db.models import IngestionStatus


class StatusUpdateEvent(BaseModel):
    """Inbound status update reported by an ingestion worker."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "documentId": "550e8400-e29b-41d4-a716-446655440000",
                "status": "completed",
                "details": "Embedded 42 chunks",
                "summary": "A short summary of the document",
            }
        },
    )

    document_id: StrictStr = Field(..., description="Document ID")
    status: IngestionStatus = Field(..., description="New ingestion status")
    details: StrictStr | None = Field(default=None, description="Log message")
    summary: StrictStr | None = Field(default=None, description="Document summary")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value


class WorkEvent(BaseModel):
    """Outbound request asking a worker to ingest a document."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    document_id: str
    user_id: str
    attempt_id: int = Field(..., ge=1)
    storage_key: str

    def to_message(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class DeadLetterMessage(BaseModel):
    """Envelope for messages routed to the dead letter queue."""

    event: str
    data: Any = None
    error: str | None = None

    def to_message(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
