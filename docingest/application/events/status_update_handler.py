"""
Status-update event handler.

Validates a status update reported by an ingestion worker and applies it
through the ingestion orchestrator in a fresh session. Anything that
cannot be applied is routed to the dead letter queue; the handler itself
never raises, so the consumer can always acknowledge the message.

Dependencies: pydantic, sqlalchemy, docingest.application.services, docingest.boundary.broker
System role: Inbound status-update processing
"""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from docingest.application.services.ingestion_service import IngestionService
from docingest.boundary.broker.events import DOCUMENT_STATUS_UPDATE
from docingest.boundary.broker.publisher import EventPublisher
from docingest.core.exceptions import MalformedEventError
from docingest.models.events import StatusUpdateEvent
from docingest.observability.log_utils import log_exception_with_context, log_with_context

logger = logging.getLogger(__name__)


def unwrap_envelope(payload: Any) -> Any:
    """Return the `data` of a {pattern, data} envelope, or the payload itself."""
    if isinstance(payload, dict) and "pattern" in payload and "data" in payload:
        return payload["data"]
    return payload


class StatusUpdateHandler:
    """Applies status-update events, dead-lettering the ones that fail."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        publisher: EventPublisher,
    ) -> None:
        """
        Initialize handler.

        Args:
            session_factory: Factory for one session per message
            publisher: Publisher used for DLQ routing
        """
        self._session_factory = session_factory
        self._publisher = publisher

    async def handle(self, payload: Any) -> None:
        """
        Process one decoded message.

        Args:
            payload: Parsed JSON body (or raw text if it was not JSON)
        """
        data = unwrap_envelope(payload)

        if not isinstance(data, dict):
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:handle - Status update is not a JSON object",
                payload=data,
            )
            await self.dead_letter(payload)
            return

        try:
            event = StatusUpdateEvent.model_validate(data)
        except ValidationError as e:
            error = MalformedEventError(
                "Invalid status update payload",
                {"errors": e.errors(include_url=False, include_context=False, include_input=False)},
            )
            log_with_context(
                logger,
                logging.WARNING,
                f"{__name__}:handle - {error.message}",
                payload=data,
                error_count=e.error_count(),
            )
            await self.dead_letter(payload, str(error))
            return

        try:
            async with self._session_factory() as session:
                await IngestionService(session).update_status(
                    event.document_id,
                    event.status,
                    details=event.details,
                    summary=event.summary,
                )
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:handle - Failed to apply status update",
                e,
                document_id=event.document_id,
                status=event.status.value,
            )
            await self.dead_letter(payload, str(e))

    async def dead_letter(self, payload: Any, error: str | None = None) -> None:
        """Route the inbound payload, envelope included, to the DLQ with its error."""
        try:
            await self._publisher.send_to_dlq(payload, DOCUMENT_STATUS_UPDATE, error)
        except Exception as e:  # pylint: disable=broad-except
            log_exception_with_context(
                logger,
                f"{__name__}:dead_letter - Could not route message to DLQ",
                e,
                payload=payload,
                error=error,
            )
