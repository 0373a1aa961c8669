"""
Event publisher and dead letter router.

Publishes JSON messages to the default exchange, routed by queue name,
with persistent delivery and the event name in the `pattern` header.
kombu is blocking, so every publish runs in a worker thread.

Dependencies: kombu, docingest.boundary.broker.connection
System role: Outbound work events and DLQ routing
"""

import asyncio
import logging
from typing import Any

from kombu import Queue
from kombu.pools import producers

from docingest.boundary.broker.connection import BrokerConnection
from docingest.boundary.broker.events import DOCUMENT_INGESTION, DOCUMENT_STATUS_UPDATE_DLQ
from docingest.models.events import DeadLetterMessage, WorkEvent

logger = logging.getLogger(__name__)

PUBLISH_RETRY_POLICY = {
    "interval_start": 0,
    "interval_step": 1,
    "interval_max": 5,
    "max_retries": 3,
}


class EventPublisher:
    """Fire-and-forget publisher for broker events."""

    def __init__(self, broker: BrokerConnection) -> None:
        """
        Initialize publisher.

        Args:
            broker: Shared broker connection (producers are pooled per connection)
        """
        self._broker = broker
        self._settings = broker.settings

    def _publish_blocking(self, queue_name: str, payload: Any, event: str | None) -> None:
        connection = self._broker.ensure_connected()
        queue = Queue(queue_name, durable=True)
        headers = {"pattern": event} if event else {}
        with producers[connection].acquire(block=True) as producer:
            producer.publish(
                payload,
                exchange="",
                routing_key=queue_name,
                serializer="json",
                delivery_mode="persistent",
                headers=headers,
                declare=[queue],
                retry=True,
                retry_policy=PUBLISH_RETRY_POLICY,
            )

    async def publish(self, queue_name: str, payload: Any, event: str | None = None) -> None:
        """
        Publish one JSON message to a durable queue.

        Args:
            queue_name: Destination queue (declared if missing)
            payload: JSON-serializable message body
            event: Event name for the `pattern` header

        Raises:
            BrokerUnavailableError: If no connection can be established
            kombu.exceptions.OperationalError: If publishing fails after retries
        """
        await asyncio.to_thread(self._publish_blocking, queue_name, payload, event)
        logger.debug(f"{__name__}:publish - Published {event or 'message'} to {queue_name}")

    async def publish_document_ingestion_event(self, event: WorkEvent) -> None:
        """Ask a worker to ingest a document."""
        await self.publish(
            self._settings.ingestion_queue,
            event.to_message(),
            event=DOCUMENT_INGESTION,
        )
        logger.info(
            f"{__name__}:publish_document_ingestion_event - Published work event",
            extra={"document_id": event.document_id, "attempt_id": event.attempt_id},
        )

    async def send_to_dlq(
        self,
        data: Any,
        event: str,
        error: str | None = None,
    ) -> None:
        """
        Route a message that could not be applied to the dead letter queue.

        Args:
            data: Original payload (parsed JSON or raw text)
            event: Name of the event the payload arrived as
            error: Reason the message was rejected
        """
        message = DeadLetterMessage(event=event, data=data, error=error)
        await self.publish(
            self._settings.dead_letter_queue,
            message.to_message(),
            event=DOCUMENT_STATUS_UPDATE_DLQ,
        )
        logger.warning(
            f"{__name__}:send_to_dlq - Routed {event} message to DLQ",
            extra={"error": error},
        )
