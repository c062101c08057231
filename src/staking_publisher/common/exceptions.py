"""
Exception types and error classification for staking_publisher.

Provides:
- ErrorCategory enum so callers can decide whether to retry
- Typed exception hierarchy for publisher errors
- Error classification utilities

The publisher itself never retries. Retry policy belongs to the caller,
which can consult PublisherError.is_retryable.
"""

from enum import Enum
from typing import List, Optional


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may succeed on retry
                   (e.g., broker unreachable, request timeouts)
        AUTH: Authentication failures requiring credential changes
              (e.g., SASL handshake rejected)
        PERMANENT: Non-retriable failures that won't succeed on retry
                   (e.g., unknown topic, closed queue, bad configuration)
        UNKNOWN: Unclassified errors, may retry conservatively
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    UNKNOWN = "unknown"


class PublisherError(Exception):
    """
    Base exception for all publisher errors.

    Attributes:
        message: Human-readable error description
        category: Error classification for retry decisions
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        context: Optional[dict] = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        # Wrapping errors take the category of what they wrap
        if type(self).category == ErrorCategory.UNKNOWN and cause is not None:
            self.category = classify_exception(cause)
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Whether the caller may reasonably retry the operation."""
        return self.category in (
            ErrorCategory.TRANSIENT,
            ErrorCategory.AUTH,
            ErrorCategory.UNKNOWN,
        )

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


class ConstructionError(PublisherError):
    """A queue could not be opened while building the publisher."""

    pass


class SendError(PublisherError):
    """A message was not accepted by its queue."""

    pass


class ShutdownError(PublisherError):
    """Stopping one or more queues failed."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[Exception]] = None,
        context: Optional[dict] = None,
    ):
        self.errors = list(errors or [])
        cause = self.errors[0] if self.errors else None
        super().__init__(message, cause, context)

    def __str__(self) -> str:
        if len(self.errors) <= 1:
            return super().__str__()
        causes = "; ".join(str(e) for e in self.errors)
        return f"{self.message} | Caused by: {causes}"


class QueueClosedError(PublisherError):
    """A queue client was used before it was started or after it was stopped."""

    category = ErrorCategory.PERMANENT


class ConfigurationError(PublisherError, ValueError):
    """Invalid configuration."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# Error Classification Utilities
# =============================================================================


def classify_exception(exc: BaseException) -> ErrorCategory:
    """
    Classify an exception into error category.

    Args:
        exc: Exception to classify

    Returns:
        Appropriate ErrorCategory
    """
    # Already classified
    if isinstance(exc, PublisherError):
        return exc.category

    exc_type = type(exc).__name__.lower()
    exc_str = str(exc).lower()

    if isinstance(exc, (TimeoutError, ConnectionError)):
        return ErrorCategory.TRANSIENT

    auth_markers = (
        "authentication",
        "authorization",
        "unauthorized",
        "sasl",
        "access denied",
    )
    if any(m in exc_type or m in exc_str for m in auth_markers):
        return ErrorCategory.AUTH

    connection_markers = (
        "connection refused",
        "connection reset",
        "connection error",
        "unable to bootstrap",
        "kafkaconnectionerror",
        "kafkatimeouterror",
        "requesttimedouterror",
        "notleaderforpartition",
        "leadernotavailable",
        "timed out",
        "timeout",
        "unreachable",
    )
    if any(m in exc_type or m in exc_str for m in connection_markers):
        return ErrorCategory.TRANSIENT

    permanent_markers = (
        "unknowntopicorpartition",
        "unknown topic",
        "not found",
        "messagesizetoolarge",
        "invalid",
    )
    if any(m in exc_type or m in exc_str for m in permanent_markers):
        return ErrorCategory.PERMANENT

    if isinstance(exc, (ValueError, TypeError)):
        return ErrorCategory.PERMANENT

    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "PublisherError",
    "ConstructionError",
    "SendError",
    "ShutdownError",
    "QueueClosedError",
    "ConfigurationError",
    "classify_exception",
]
