"""
Application services.

Exports:
  - IngestionService: Status updates, start/retry, attempt history
  - DocumentService: Upload, list, lookup, delete
"""

from docingest.application.services.document_service import DocumentService
from docingest.application.services.ingestion_service import IngestionService

__all__ = ["DocumentService", "IngestionService"]
