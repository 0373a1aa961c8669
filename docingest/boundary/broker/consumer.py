"""
Status-update queue consumer.

Runs a kombu consume loop in a dedicated thread. Each message is decoded,
handed to a dispatcher and then acknowledged exactly once, whatever the
outcome; failed messages are dead-lettered by the handler, never requeued.

Dependencies: kombu, docingest.boundary.broker.connection, docingest.observability
System role: Inbound status updates from ingestion workers
"""

import asyncio
import json
import logging
import socket
import threading
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable

from kombu import Connection, Consumer, Queue
from kombu.message import Message

from docingest.boundary.broker.connection import RECOVERABLE_ERRORS, BrokerConnection
from docingest.core.exceptions import BrokerUnavailableError
from docingest.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Any], None]


def decode_body(body: Any) -> Any:
    """
    Decode a message body as JSON, falling back to the raw text.

    Args:
        body: Raw message body (bytes or str)

    Returns:
        Parsed JSON value, or the body as text when it is not JSON
    """
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    try:
        return json.loads(body)
    except (TypeError, ValueError):
        return body


def make_loop_dispatcher(handler, loop: asyncio.AbstractEventLoop, timeout: float) -> Dispatcher:
    """
    Build a dispatcher that runs `handler.handle` on the application loop.

    The consumer thread blocks until the coroutine finishes or the timeout
    expires, which keeps at most one message in flight per consumer. A
    message whose handler overruns is cancelled and routed through
    `handler.dead_letter` before the timeout is re-raised.

    Args:
        handler: Object with async handle(payload) and dead_letter(payload, error) methods
        loop: Running event loop owning the database engine
        timeout: Seconds to wait for one message

    Returns:
        Dispatcher: Blocking callable taking the decoded payload
    """

    async def handle_with_correlation(payload: Any, correlation_id: str) -> None:
        set_correlation_id(correlation_id)
        await handler.handle(payload)

    async def dead_letter_with_correlation(payload: Any, error: str, correlation_id: str) -> None:
        set_correlation_id(correlation_id)
        await handler.dead_letter(payload, error)

    def dispatch(payload: Any) -> None:
        correlation_id = get_correlation_id()
        future = asyncio.run_coroutine_threadsafe(
            handle_with_correlation(payload, correlation_id),
            loop,
        )
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            future.cancel()
            error = f"handler timed out after {timeout}s"
            try:
                asyncio.run_coroutine_threadsafe(
                    dead_letter_with_correlation(payload, error, correlation_id),
                    loop,
                ).result(timeout=timeout)
            except Exception:  # pylint: disable=broad-except
                logger.exception(f"{__name__}:dispatch - Could not dead-letter timed out message")
            raise

    return dispatch


class StatusUpdateConsumer:
    """Consumes the status-update queue with prefetch and manual ack."""

    def __init__(
        self,
        broker: BrokerConnection,
        dispatch: Dispatcher,
        poll_timeout: float = 1.0,
    ) -> None:
        """
        Initialize consumer.

        Args:
            broker: Broker connection owned by the application
            dispatch: Blocking callable that processes one decoded payload
            poll_timeout: Seconds between stop-flag checks while idle
        """
        self._broker = broker
        self._settings = broker.settings
        self._dispatch = dispatch
        self._poll_timeout = poll_timeout
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def queue(self) -> Queue:
        return Queue(self._settings.status_update_queue, durable=True)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the consume loop in a daemon thread."""
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name="status-update-consumer",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"{__name__}:start - Consuming {self._settings.status_update_queue}")

    def stop(self, timeout: float = 10.0) -> None:
        """Signal the loop to stop and wait for the thread to exit."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning(f"{__name__}:stop - Consumer thread did not exit in {timeout}s")
            self._thread = None

    def _run(self) -> None:
        while not self._stop_event.is_set():
            try:
                connection = self._broker.ensure_connected()
                self._consume(connection)
            except BrokerUnavailableError as e:
                logger.error(f"{__name__}:_run - {e}; retrying in {self._settings.connect_backoff_max}s")
                self._stop_event.wait(self._settings.connect_backoff_max)
            except RECOVERABLE_ERRORS as e:
                logger.warning(f"{__name__}:_run - Connection lost ({e}); reconnecting")
                self._broker.release()
                self._stop_event.wait(self._settings.connect_backoff_initial)
            except Exception:  # pylint: disable=broad-except
                logger.exception(f"{__name__}:_run - Consumer loop failed; restarting")
                self._broker.release()
                self._stop_event.wait(self._settings.connect_backoff_max)

    def _consume(self, connection: Connection) -> None:
        with connection.channel() as channel:
            consumer = Consumer(
                channel,
                queues=[self.queue],
                on_message=self._on_message,
                prefetch_count=self._settings.prefetch_count,
                no_ack=False,
            )
            with consumer:
                while not self._stop_event.is_set():
                    try:
                        connection.drain_events(timeout=self._poll_timeout)
                    except socket.timeout:
                        connection.heartbeat_check()

    def _on_message(self, message: Message) -> None:
        """
        Process one delivery and acknowledge it.

        Args:
            message: Raw kombu message (body not yet decoded)
        """
        set_correlation_id(message.properties.get("message_id"))
        try:
            payload = decode_body(message.body)
            self._dispatch(payload)
        except FutureTimeoutError:
            logger.error(
                f"{__name__}:_on_message - Handler exceeded "
                f"{self._settings.handler_timeout_seconds}s; message dead-lettered"
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception(f"{__name__}:_on_message - Dispatcher failed")
        finally:
            message.ack()
            clear_correlation_id()
