"""
Message broker boundary: connection, publisher and status-update consumer.

Usage:
    from docingest.boundary.broker import BrokerConnection, EventPublisher

    broker = BrokerConnection(settings.broker)
    broker.connect()
    await EventPublisher(broker).publish_document_ingestion_event(event)
"""

from docingest.boundary.broker.connection import BrokerConnection
from docingest.boundary.broker.consumer import (
    StatusUpdateConsumer,
    decode_body,
    make_loop_dispatcher,
)
from docingest.boundary.broker.events import (
    DOCUMENT_INGESTION,
    DOCUMENT_STATUS_UPDATE,
    DOCUMENT_STATUS_UPDATE_DLQ,
)
from docingest.boundary.broker.publisher import EventPublisher

__all__ = [
    "BrokerConnection",
    "EventPublisher",
    "StatusUpdateConsumer",
    "decode_body",
    "make_loop_dispatcher",
    "DOCUMENT_INGESTION",
    "DOCUMENT_STATUS_UPDATE",
    "DOCUMENT_STATUS_UPDATE_DLQ",
]
