"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - DocumentModel, AttemptLogModel, IngestionStatus: Domain entities
  - document_crud, attempt_log_crud: CRUD operation singletons

Dependencies: sqlalchemy, docingest.configs
System role: Database adapter for documents and their ingestion history
"""

from docingest.boundary.db.base import Base, TimestampMixin, UUIDMixin
from docingest.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from docingest.boundary.db.models import AttemptLogModel, DocumentModel, IngestionStatus
from docingest.boundary.db.CRUD import (
    AttemptLogCRUD,
    BaseCRUD,
    DocumentCRUD,
    attempt_log_crud,
    document_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "AttemptLogModel",
    "DocumentModel",
    "IngestionStatus",
    "BaseCRUD",
    "AttemptLogCRUD",
    "DocumentCRUD",
    "attempt_log_crud",
    "document_crud",
]
