"""
Document ORM model.

Represents uploaded documents with their current ingestion status.
The status column is only written by the ingestion orchestrator, inside
the same transaction that appends the matching attempt log row.

Dependencies: sqlalchemy, docingest.boundary.db.base
System role: Document persistence for ingestion tracking
"""

import enum

from sqlalchemy import Enum, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from docingest.boundary.db.base import Base, TimestampMixin, UUIDMixin


class IngestionStatus(str, enum.Enum):
    """
    Document ingestion lifecycle states.

    PENDING: Uploaded, ingestion never started
    STARTED: Work event published, awaiting worker pickup
    PROCESSING: Worker reported progress
    COMPLETED: Ingestion finished; terminal
    FAILED: Ingestion failed; may be retried with a new attempt
    """

    PENDING = "pending"
    STARTED = "started"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (IngestionStatus.COMPLETED, IngestionStatus.FAILED)


class DocumentModel(Base, UUIDMixin, TimestampMixin):
    """
    Document ORM model tracking ingestion pipeline state.

    Attributes:
        id: UUID primary key (auto-generated)
        title: User-supplied title
        storage_key: S3 object key of the raw file
        summary: Worker-produced summary, set when ingestion completes
        owner_id: Identity-provider user ID of the uploader
        status: Current ingestion state (mirrors the latest attempt log)
        created_at: Upload timestamp (UTC)
        updated_at: Last status change timestamp (UTC)

    Deleting a document is an explicit application operation that removes
    its attempt logs in the same transaction (see DocumentCRUD).
    """

    __tablename__ = "documents"

    title: Mapped[str] = mapped_column(String(255), nullable=False)

    storage_key: Mapped[str] = mapped_column(
        String(1024),
        nullable=False,
        doc="S3 object key for the raw document",
    )

    summary: Mapped[str | None] = mapped_column(Text, nullable=True)

    owner_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    status: Mapped[IngestionStatus] = mapped_column(
        Enum(IngestionStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=IngestionStatus.PENDING,
    )
