"""
Attempt log ORM model.

Append-only record of every ingestion event applied to a document.
Rows are grouped into attempts by attempt_id and never updated.

Dependencies: sqlalchemy, docingest.boundary.db.base
System role: Ingestion history persistence
"""

import uuid

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from docingest.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docingest.boundary.db.models.document_model import IngestionStatus


class AttemptLogModel(Base, UUIDMixin, TimestampMixin):
    """
    One applied ingestion event.

    Attributes:
        id: UUID primary key (auto-generated)
        document_id: Owning document
        attempt_id: Ingestion run this event belongs to (starts at 1)
        status: Status snapshot recorded by this event
        details: Free-text description of the event
        created_at: Event timestamp (UTC), second sort key for display

    Display order is (attempt_id DESC, created_at DESC).
    """

    __tablename__ = "ingestion_logs"

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id"),
        nullable=False,
        index=True,
    )

    attempt_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)

    status: Mapped[IngestionStatus] = mapped_column(
        Enum(IngestionStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )

    details: Mapped[str] = mapped_column(String(2048), nullable=False)

    __table_args__ = (
        CheckConstraint("attempt_id >= 1", name="ingestion_logs_attempt_id_positive"),
    )
