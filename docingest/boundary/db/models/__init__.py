"""
Database models package.

Exports:
  - DocumentModel, IngestionStatus: Document ORM model and status enum
  - AttemptLogModel: Append-only ingestion event log

Dependencies: sqlalchemy, docingest.boundary.db.base
System role: Database model definitions for domain entities
"""

from docingest.boundary.db.models.document_model import DocumentModel, IngestionStatus
from docingest.boundary.db.models.attempt_log_model import AttemptLogModel

__all__ = [
    "DocumentModel",
    "IngestionStatus",
    "AttemptLogModel",
]
