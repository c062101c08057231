"""
Prometheus metrics for staking event publishing.

Provides instrumentation for:
- Publish rates and payload volume per queue
- Publish latency histograms
- Queue client errors by type
- Queue connection status
"""

from prometheus_client import Counter, Gauge, Histogram

events_published_total = Counter(
    "staking_events_published_total",
    "Total number of staking events published to queues",
    ["queue", "status"],  # status: success, error
)

events_published_bytes = Counter(
    "staking_events_published_bytes_total",
    "Total bytes of event payloads published to queues",
    ["queue"],
)

publish_duration_seconds = Histogram(
    "staking_event_publish_duration_seconds",
    "Time spent waiting for a queue to accept an event",
    ["queue"],
    buckets=(
        0.005,
        0.01,
        0.025,
        0.05,
        0.1,
        0.25,
        0.5,
        1.0,
        2.5,
        5.0,
        10.0,
        30.0,
    ),  # From 5ms to 30s
)

queue_errors_total = Counter(
    "staking_queue_errors_total",
    "Total number of queue client errors",
    ["queue", "error_type"],
)

queue_connection_status = Gauge(
    "staking_queue_connection_status",
    "Queue connection status (1=connected, 0=disconnected)",
    ["queue"],
)


def record_event_published(
    queue: str, message_bytes: int, duration_seconds: float, success: bool = True
) -> None:
    """
    Record a publish attempt.

    Args:
        queue: Destination queue name
        message_bytes: Size of the payload in bytes
        duration_seconds: Time spent in the send call
        success: Whether the queue accepted the payload
    """
    status = "success" if success else "error"
    events_published_total.labels(queue=queue, status=status).inc()
    publish_duration_seconds.labels(queue=queue).observe(duration_seconds)

    if success:
        events_published_bytes.labels(queue=queue).inc(message_bytes)


def record_queue_error(queue: str, error_type: str) -> None:
    """
    Record a queue client error.

    Args:
        queue: Queue name
        error_type: Exception class name
    """
    queue_errors_total.labels(queue=queue, error_type=error_type).inc()


def update_connection_status(queue: str, connected: bool) -> None:
    """
    Update queue connection status.

    Args:
        queue: Queue name
        connected: Whether the client is connected
    """
    queue_connection_status.labels(queue=queue).set(1 if connected else 0)


__all__ = [
    "events_published_total",
    "events_published_bytes",
    "publish_duration_seconds",
    "queue_errors_total",
    "queue_connection_status",
    "record_event_published",
    "record_queue_error",
    "update_connection_status",
]
