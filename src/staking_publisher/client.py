"""
Queue client capability.

The publisher depends only on the QueueClient protocol below. Any backend
that can send a text payload to a named queue and be stopped satisfies it.
Opening a queue is expressed as a QueueClientFactory coroutine.

Implementations:
    producer.KafkaQueueClient  - aiokafka transport (default)
    InMemoryQueueClient        - records payloads in memory, for tests and
                                 local runs without a broker
"""

import logging
from typing import Awaitable, Callable, List, Protocol, runtime_checkable

from staking_publisher.common.exceptions import QueueClosedError
from staking_publisher.config import QueueConfig

logger = logging.getLogger(__name__)


@runtime_checkable
class QueueClient(Protocol):
    """A named, stateful connection to one destination queue."""

    queue_name: str

    async def send_message(self, message: str) -> None:
        """Send a payload, returning once the queue has accepted it."""
        ...

    async def stop(self) -> None:
        """Close the connection. The client must not be used afterwards."""
        ...


QueueClientFactory = Callable[[QueueConfig, str], Awaitable[QueueClient]]


class InMemoryQueueClient:
    """
    Queue client that keeps sent payloads in a list.

    Usage:
        >>> client = await InMemoryQueueClient.connect(config, "active_staking_queue")
        >>> await client.send_message('{"event_type":1}')
        >>> client.messages
        ['{"event_type":1}']
    """

    def __init__(self, queue_name: str):
        self.queue_name = queue_name
        self.messages: List[str] = []
        self.stopped = False

    @classmethod
    async def connect(cls, config: QueueConfig, queue_name: str) -> "InMemoryQueueClient":
        """QueueClientFactory for in-memory queues. The config is not used."""
        return cls(queue_name)

    async def send_message(self, message: str) -> None:
        if self.stopped:
            raise QueueClosedError(
                f"queue {self.queue_name} is stopped",
                context={"queue": self.queue_name},
            )
        self.messages.append(message)

    async def stop(self) -> None:
        if self.stopped:
            logger.debug("In-memory queue already stopped", extra={"queue": self.queue_name})
            return
        self.stopped = True


__all__ = [
    "InMemoryQueueClient",
    "QueueClient",
    "QueueClientFactory",
]
