"""Common infrastructure shared across the publisher: errors and logging."""

from staking_publisher.common.exceptions import (
    ConfigurationError,
    ConstructionError,
    ErrorCategory,
    PublisherError,
    QueueClosedError,
    SendError,
    ShutdownError,
)

__all__ = [
    "ConfigurationError",
    "ConstructionError",
    "ErrorCategory",
    "PublisherError",
    "QueueClosedError",
    "SendError",
    "ShutdownError",
]
