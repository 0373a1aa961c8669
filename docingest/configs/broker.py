"""
Message broker configuration settings.

Manages RabbitMQ connection parameters, queue names and the
consumer/reconnect policy for ingestion events.

Dependencies: pydantic, pydantic_settings
System role: Broker configuration for ingestion work and status-update queues
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from docingest.configs.base import BaseSettings


class BrokerSettings(BaseSettings):
    """RabbitMQ configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RABBITMQ_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(
        default=None,
        description="Full AMQP URL; overrides the host/port/user fields when set",
    )
    host: str = Field(default="localhost", description="RabbitMQ host")
    port: int = Field(default=5672, description="RabbitMQ port")
    user: str = Field(default="guest", description="RabbitMQ user")
    password: str = Field(default="guest", description="RabbitMQ password")
    vhost: str = Field(default="/", description="RabbitMQ virtual host")

    ingestion_queue: str = Field(
        default="document_ingestion_queue",
        description="Outbound queue for start-ingestion work events",
    )
    status_update_queue: str = Field(
        default="document_status_queue",
        description="Inbound queue for status updates from ingestion workers",
    )
    dead_letter_queue: str = Field(
        default="document_status_dlq",
        description="Dead letter queue for invalid or failed status updates",
    )

    prefetch_count: int = Field(
        default=1,
        description="Unacknowledged status-update messages allowed in flight",
    )
    consumer_enabled: bool = Field(
        default=True,
        description="Start the status-update consumer with the API process",
    )
    handler_timeout_seconds: float = Field(
        default=60.0,
        description="Upper bound on handling one status-update message",
    )

    # Reconnect policy
    connect_max_attempts: int = Field(default=5, description="Connection attempts before giving up")
    connect_backoff_initial: float = Field(default=1.0, description="First retry delay in seconds")
    connect_backoff_max: float = Field(default=30.0, description="Maximum retry delay in seconds")
    connect_timeout: float = Field(default=10.0, description="Socket connect timeout in seconds")

    @property
    def broker_url(self) -> str:
        """
        Construct RabbitMQ broker URL.

        Returns:
            str: kombu-compatible AMQP URL
        """
        if self.url:
            return self.url
        vhost = self.vhost.lstrip("/")
        return (
            f"amqp://{self.user}:{self.password}"
            f"@{self.host}:{self.port}/{vhost}"
        )
