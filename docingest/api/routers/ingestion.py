"""
Ingestion API endpoints.

Routes:
- POST /ingestion/start/{document_id} - Start or retry ingestion
- GET /ingestion/logs/{document_id} - Document state and attempt history

Dependencies: docingest.application.services, docingest.models
System role: Ingestion HTTP API
"""

from fastapi import APIRouter, Depends, Query, status

from docingest.api.deps import get_ingestion_service
from docingest.api.error_handling import handle_ingestion_errors
from docingest.api.security import Principal, require_ingestion_roles
from docingest.application.services.ingestion_service import IngestionService
from docingest.models.ingestion import AttemptHistoryResponse, AttemptLogResponse

router = APIRouter(prefix="/ingestion", tags=["ingestion"])


@router.post(
    "/start/{document_id}",
    response_model=AttemptLogResponse,
    status_code=status.HTTP_201_CREATED,
)
@handle_ingestion_errors
async def start_ingestion(
    document_id: str,
    principal: Principal = Depends(require_ingestion_roles),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> AttemptLogResponse:
    """
    Start ingestion of a document, or retry it after a failure.

    The returned log row carries the attempt number. The work event is
    published after the status change commits.

    Args:
        document_id: Document UUID
        principal: Authenticated admin or editor
        ingestion_service: Injected IngestionService

    Returns:
        AttemptLogResponse: The STARTED log row

    Raises:
        HTTPException(404): Document not found
        HTTPException(403): Caller does not own the document
        HTTPException(409): Document completed or already in progress
    """
    log = await ingestion_service.start_ingestion(document_id, principal.user_id)
    return AttemptLogResponse.model_validate(log)


@router.get("/logs/{document_id}", response_model=AttemptHistoryResponse)
@handle_ingestion_errors
async def get_ingestion_logs(
    document_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(require_ingestion_roles),
    ingestion_service: IngestionService = Depends(get_ingestion_service),
) -> AttemptHistoryResponse:
    """
    Get a document's current state with one page of its attempt logs.

    Logs are ordered newest attempt first.

    Raises:
        HTTPException(404): Document not found
        HTTPException(403): Caller does not own the document
    """
    return await ingestion_service.get_attempt_history(
        document_id,
        principal.user_id,
        page=page,
        limit=limit,
    )
