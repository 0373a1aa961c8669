"""
Message broker connection management.

Owns the long-lived kombu connection for the process. The FastAPI lifespan
creates it, connects it and releases it on shutdown; the publisher and the
status-update consumer receive it explicitly.

Dependencies: kombu, tenacity, docingest.configs
System role: Broker connection lifecycle and reconnect policy
"""

import logging
import threading

from kombu import Connection
from kombu.exceptions import OperationalError
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docingest.configs.broker import BrokerSettings
from docingest.core.exceptions import BrokerUnavailableError

logger = logging.getLogger(__name__)

RECOVERABLE_ERRORS = (OSError, OperationalError)


class BrokerConnection:
    """
    Long-lived kombu connection with explicit, bounded reconnects.

    Attributes:
        settings: Broker settings (URL, queue names, reconnect policy)
    """

    def __init__(self, settings: BrokerSettings, url: str | None = None) -> None:
        """
        Initialize without connecting.

        Args:
            settings: Broker configuration
            url: Override for settings.broker_url (tests pass memory://)
        """
        self.settings = settings
        self._url = url or settings.broker_url
        self._connection: Connection | None = None
        self._lock = threading.RLock()

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and bool(self._connection.connected)

    def _open(self) -> Connection:
        connection = Connection(self._url, connect_timeout=self.settings.connect_timeout)
        try:
            connection.connect()
        except Exception:
            connection.release()
            raise
        return connection

    def _log_retry(self, retry_state) -> None:
        logger.warning(
            f"{__name__}:connect - Attempt {retry_state.attempt_number}/"
            f"{self.settings.connect_max_attempts} failed: {retry_state.outcome.exception()}"
        )

    def connect(self) -> Connection:
        """
        Open the broker connection, retrying with exponential backoff.

        Returns:
            Connection: Connected kombu connection

        Raises:
            BrokerUnavailableError: When every attempt failed
        """
        with self._lock:
            if self.is_connected:
                return self._connection

            retrying = Retrying(
                retry=retry_if_exception_type(RECOVERABLE_ERRORS),
                stop=stop_after_attempt(self.settings.connect_max_attempts),
                wait=wait_exponential(
                    multiplier=self.settings.connect_backoff_initial,
                    max=self.settings.connect_backoff_max,
                ),
                before_sleep=self._log_retry,
                reraise=False,
            )
            try:
                self._connection = retrying(self._open)
            except RetryError as e:
                cause = e.last_attempt.exception()
                raise BrokerUnavailableError(
                    "Message broker unavailable",
                    {
                        "attempts": self.settings.connect_max_attempts,
                        "reason": str(cause),
                    },
                ) from cause

            logger.info(f"{__name__}:connect - Connected to {self._connection.as_uri()}")
            return self._connection

    def ensure_connected(self) -> Connection:
        """Return a live connection, reconnecting if the previous one dropped."""
        with self._lock:
            if not self.is_connected:
                self.release()
                return self.connect()
            return self._connection

    def reconnect(self) -> Connection:
        """Drop the current connection and open a fresh one."""
        with self._lock:
            self.release()
            return self.connect()

    def release(self) -> None:
        """Close the connection if open. Safe to call repeatedly."""
        with self._lock:
            if self._connection is None:
                return
            try:
                self._connection.release()
            except RECOVERABLE_ERRORS as e:
                logger.warning(f"{__name__}:release - Error closing connection: {e}")
            finally:
                self._connection = None
