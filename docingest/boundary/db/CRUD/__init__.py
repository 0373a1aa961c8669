"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from docingest.boundary.db.CRUD import document_crud, attempt_log_crud

    document = await document_crud.get_by_id(db, document_id)
"""

from docingest.boundary.db.CRUD.base_crud import BaseCRUD
from docingest.boundary.db.CRUD.attempt_log_crud import AttemptLogCRUD, attempt_log_crud
from docingest.boundary.db.CRUD.document_crud import DocumentCRUD, document_crud

__all__ = [
    "BaseCRUD",
    "AttemptLogCRUD",
    "attempt_log_crud",
    "DocumentCRUD",
    "document_crud",
]
