"""
Ingestion error handling utilities.

Provides a decorator that maps domain exceptions to HTTP errors with a
uniform body for ingestion and document endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from docingest.core.exceptions import (
    DocumentNotFoundError,
    ForbiddenError,
    IngestionServiceError,
    InvalidStateError,
    InvalidUploadError,
)
from docingest.models.common import ErrorResponse

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])

STATUS_BY_ERROR: tuple[tuple[type[IngestionServiceError], int], ...] = (
    (DocumentNotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (InvalidUploadError, status.HTTP_400_BAD_REQUEST),
)


def error_detail(message: str, details: dict | None = None) -> dict:
    return ErrorResponse(error=message, details=details or {}).model_dump()


def handle_ingestion_errors(func: F) -> F:
    """
    Decorator to transform ingestion errors into HTTPExceptions.

    Client errors are logged at warning level with their context; anything
    else (including UpdateFailedError) is logged with its traceback and
    reported as 500.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except IngestionServiceError as e:
            for error_type, status_code in STATUS_BY_ERROR:
                if isinstance(e, error_type):
                    logger.warning(e.message, extra={"error_type": type(e).__name__, "error_details": e.details})
                    raise HTTPException(status_code=status_code, detail=error_detail(e.message, e.details))
            logger.error(e.message, exc_info=e, extra={"error_type": type(e).__name__})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=error_detail(e.message, e.details),
            )

        except HTTPException:
            raise

        except Exception as e:
            logger.exception("Unexpected failure in ingestion operation", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=error_detail("An internal error occurred"),
            )

    return wrapper  # type: ignore
