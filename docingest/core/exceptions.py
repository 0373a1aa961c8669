"""
Exception hierarchy for the ingestion backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class IngestionServiceError(Exception):
    """Base exception for all ingestion backend errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class DocumentNotFoundError(IngestionServiceError):
    """Raised when a document cannot be found."""

    def __init__(self, document_id: Any, details: dict[str, Any] | None = None) -> None:
        """
        Initialize document not found error.

        Args:
            document_id: ID of the missing document
            details: Additional context
        """
        details = details or {}
        details["document_id"] = str(document_id)
        super().__init__(f"Document not found: {document_id}", details)


class ForbiddenError(IngestionServiceError):
    """Raised when a user acts on a document they do not own."""

    def __init__(
        self,
        message: str,
        document_id: Any = None,
        user_id: str | None = None,
    ) -> None:
        details: dict[str, Any] = {}
        if document_id is not None:
            details["document_id"] = str(document_id)
        if user_id is not None:
            details["user_id"] = user_id
        super().__init__(message, details)


class InvalidStateError(IngestionServiceError):
    """Raised when a status transition is not allowed from the current state."""

    def __init__(self, message: str, document_id: Any, current_status: str) -> None:
        super().__init__(
            message,
            {"document_id": str(document_id), "current_status": current_status},
        )


class AlreadyInProgressError(InvalidStateError):
    """Raised when ingestion is started for a document with an attempt in flight."""


class MalformedEventError(IngestionServiceError):
    """Raised when a queue message does not match the status-update contract."""


class UpdateFailedError(IngestionServiceError):
    """Raised when the status/log transaction fails and is rolled back."""

    def __init__(self, document_id: Any, reason: str) -> None:
        """
        Initialize update failure.

        Args:
            document_id: Document whose update was rolled back
            reason: Description of the underlying failure
        """
        super().__init__(
            "Failed to update ingestion log",
            {"document_id": str(document_id), "reason": reason},
        )


class InvalidUploadError(IngestionServiceError):
    """Raised when an uploaded file is rejected."""

    def __init__(self, message: str, filename: str | None = None) -> None:
        details = {"filename": filename} if filename else {}
        super().__init__(message, details)


class BrokerUnavailableError(IngestionServiceError):
    """Raised when the message broker cannot be reached after retries."""
