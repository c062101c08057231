"""
Kafka-backed queue client.

Each KafkaQueueClient owns one aiokafka producer bound to one queue; the
queue name is used as the Kafka topic. The publisher opens three of these,
so no connection state is shared between queues.
"""

import logging
from typing import Optional

from aiokafka import AIOKafkaProducer

from staking_publisher.common.exceptions import QueueClosedError
from staking_publisher.config import QueueConfig
from staking_publisher.metrics import record_queue_error, update_connection_status

logger = logging.getLogger(__name__)


class KafkaQueueClient:
    """
    Async Kafka producer for a single queue.

    Usage:
        >>> config = QueueConfig.from_env()
        >>> client = await KafkaQueueClient.connect(config, "active_staking_queue")
        >>> try:
        ...     await client.send_message(event.to_message())
        ... finally:
        ...     await client.stop()
    """

    def __init__(self, config: QueueConfig, queue_name: str):
        """
        Initialize the client without connecting.

        Args:
            config: Queue connection configuration
            queue_name: Destination queue (Kafka topic)
        """
        self.config = config
        self.queue_name = queue_name
        self._producer: Optional[AIOKafkaProducer] = None
        self._started = False

    @classmethod
    async def connect(cls, config: QueueConfig, queue_name: str) -> "KafkaQueueClient":
        """Create a client and connect it. Default QueueClientFactory."""
        client = cls(config, queue_name)
        await client.start()
        return client

    async def start(self) -> None:
        """
        Start the producer and establish the broker connection.

        Raises:
            Exception: If the producer fails to start or connect
        """
        if self._started:
            logger.warning(
                "Queue client already started, ignoring duplicate start call",
                extra={"queue": self.queue_name},
            )
            return

        logger.info(
            "Starting queue client",
            extra={
                "queue": self.queue_name,
                "bootstrap_servers": self.config.url,
                "security_protocol": self.config.security_protocol,
            },
        )

        producer = AIOKafkaProducer(**self.config.to_producer_kwargs())
        try:
            await producer.start()
        except Exception as e:
            record_queue_error(self.queue_name, type(e).__name__)
            # aiokafka leaves background tasks behind when start() fails
            await self._discard(producer)
            raise
        except BaseException:
            await self._discard(producer)
            raise

        self._producer = producer
        self._started = True
        update_connection_status(self.queue_name, connected=True)

        logger.info(
            "Queue client started successfully",
            extra={"queue": self.queue_name, "acks": self.config.acks},
        )

    async def send_message(self, message: str) -> None:
        """
        Send a payload and wait for the broker to acknowledge it.

        Args:
            message: Serialized event

        Raises:
            QueueClosedError: If the client is not started or already stopped
            Exception: If the broker rejects or fails to accept the message
        """
        if not self._started or self._producer is None:
            raise QueueClosedError(
                f"queue {self.queue_name} is not started",
                context={"queue": self.queue_name},
            )

        value = message.encode("utf-8")

        try:
            metadata = await self._producer.send_and_wait(self.queue_name, value=value)
        except Exception as e:
            record_queue_error(self.queue_name, type(e).__name__)
            logger.error(
                "Failed to send message",
                extra={
                    "queue": self.queue_name,
                    "payload_bytes": len(value),
                    "error_message": str(e),
                },
                exc_info=True,
            )
            raise

        logger.debug(
            "Message sent successfully",
            extra={
                "queue": self.queue_name,
                "partition": metadata.partition,
                "offset": metadata.offset,
            },
        )

    async def stop(self) -> None:
        """
        Flush pending messages and close the connection.

        Calling stop on a client that is not running logs and returns.
        """
        if not self._started or self._producer is None:
            logger.debug(
                "Queue client not started or already stopped",
                extra={"queue": self.queue_name},
            )
            return

        logger.info("Stopping queue client", extra={"queue": self.queue_name})

        try:
            await self._producer.flush()
            await self._producer.stop()
            logger.info("Queue client stopped successfully", extra={"queue": self.queue_name})
        except Exception as e:
            record_queue_error(self.queue_name, type(e).__name__)
            logger.error(
                "Error stopping queue client",
                extra={"queue": self.queue_name, "error_message": str(e)},
                exc_info=True,
            )
            raise
        finally:
            update_connection_status(self.queue_name, connected=False)
            self._producer = None
            self._started = False

    async def _discard(self, producer: AIOKafkaProducer) -> None:
        """Stop a producer that never finished starting."""
        try:
            await producer.stop()
        except Exception:
            logger.debug(
                "Error cleaning up producer after failed start",
                extra={"queue": self.queue_name},
                exc_info=True,
            )

    @property
    def is_started(self) -> bool:
        """Check if the client is connected and ready to send."""
        return self._started and self._producer is not None


__all__ = [
    "KafkaQueueClient",
]
