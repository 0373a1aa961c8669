"""API routers."""

from .documents import router as documents_router
from .health import router as health_router
from .ingestion import router as ingestion_router

__all__ = [
    "documents_router",
    "health_router",
    "ingestion_router",
]
