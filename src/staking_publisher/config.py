"""Queue connection configuration from environment variables."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from aiokafka.helpers import create_ssl_context

from staking_publisher.common.exceptions import ConfigurationError

SASL_PROTOCOLS = ("SASL_PLAINTEXT", "SASL_SSL")
SSL_PROTOCOLS = ("SSL", "SASL_SSL")


@dataclass
class QueueConfig:
    """Connection settings shared by the staking, unbonding and withdraw queues.

    Load from environment using QueueConfig.from_env().
    Queue names are fixed constants (see schemas.events) and are not part
    of this configuration.
    """

    # Connection
    url: str
    user: str = ""
    password: str = ""
    security_protocol: str = "PLAINTEXT"
    sasl_mechanism: str = "PLAIN"

    # Producer behaviour
    acks: str = "all"
    request_timeout_ms: int = 30000
    client_id: str = "staking-indexer"

    # Deadline applied to each publish; None waits for the broker indefinitely
    send_timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        if not self.url:
            raise ConfigurationError("url is required")
        if self.send_timeout_seconds is not None and self.send_timeout_seconds <= 0:
            raise ConfigurationError(
                f"send_timeout_seconds must be positive, got {self.send_timeout_seconds}"
            )

    @classmethod
    def from_env(cls) -> "QueueConfig":
        """Load configuration from environment variables.

        Required environment variables:
            QUEUE_URL: Broker addresses (comma-separated host:port)

        Optional environment variables (with defaults):
            QUEUE_USER: "" (default, no authentication)
            QUEUE_PASSWORD: "" (default)
            QUEUE_SECURITY_PROTOCOL: SASL_PLAINTEXT if QUEUE_USER is set,
                PLAINTEXT otherwise
            QUEUE_SASL_MECHANISM: PLAIN (default)
            QUEUE_ACKS: all (default)
            QUEUE_REQUEST_TIMEOUT_MS: 30000 (default)
            QUEUE_CLIENT_ID: staking-indexer (default)
            QUEUE_SEND_TIMEOUT_SECONDS: unset (default, no deadline)

        Raises:
            ConfigurationError: If required environment variables are missing or invalid
        """
        url = os.getenv("QUEUE_URL")
        if not url:
            raise ConfigurationError("QUEUE_URL environment variable is required")

        user = os.getenv("QUEUE_USER", "")
        default_protocol = "SASL_PLAINTEXT" if user else "PLAINTEXT"

        send_timeout_str = os.getenv("QUEUE_SEND_TIMEOUT_SECONDS", "").strip()
        send_timeout = float(send_timeout_str) if send_timeout_str else None

        return cls(
            url=url,
            user=user,
            password=os.getenv("QUEUE_PASSWORD", ""),
            security_protocol=os.getenv("QUEUE_SECURITY_PROTOCOL", default_protocol),
            sasl_mechanism=os.getenv("QUEUE_SASL_MECHANISM", "PLAIN"),
            acks=os.getenv("QUEUE_ACKS", "all"),
            request_timeout_ms=int(os.getenv("QUEUE_REQUEST_TIMEOUT_MS", "30000")),
            client_id=os.getenv("QUEUE_CLIENT_ID", "staking-indexer"),
            send_timeout_seconds=send_timeout,
        )

    def to_producer_kwargs(self) -> Dict[str, Any]:
        """Build keyword arguments for AIOKafkaProducer.

        SASL credentials are only included for SASL protocols, and an SSL
        context only for protocols that use TLS.
        """
        acks: Any = self.acks
        if acks != "all":
            acks = int(acks)

        kwargs: Dict[str, Any] = {
            "bootstrap_servers": self.url,
            "client_id": self.client_id,
            "security_protocol": self.security_protocol,
            "acks": acks,
            "request_timeout_ms": self.request_timeout_ms,
        }

        if self.security_protocol in SASL_PROTOCOLS:
            kwargs["sasl_mechanism"] = self.sasl_mechanism
            kwargs["sasl_plain_username"] = self.user
            kwargs["sasl_plain_password"] = self.password

        if self.security_protocol in SSL_PROTOCOLS:
            kwargs["ssl_context"] = create_ssl_context()

        return kwargs
