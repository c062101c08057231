"""
Event publisher for the staking indexer.

Publishes ActiveStakingEvent, UnbondingStakingEvent and WithdrawStakingEvent
to their own queues. Each push is a single synchronous publish attempt on
the caller's task:

    serialize -> log -> send (optional deadline) -> log

Failures are raised to the caller. There is no buffering, no retry and no
deduplication; whether a failed push should be retried is decided by the
indexer (see PublisherError.is_retryable).
"""

import asyncio
import logging
import time
from typing import List, Optional, Tuple

from staking_publisher.client import QueueClient, QueueClientFactory
from staking_publisher.common.exceptions import (
    ConstructionError,
    QueueClosedError,
    SendError,
    ShutdownError,
)
from staking_publisher.common.logging import get_logger, log_exception, log_with_context
from staking_publisher.config import QueueConfig
from staking_publisher.metrics import record_event_published
from staking_publisher.producer import KafkaQueueClient
from staking_publisher.schemas.events import (
    ACTIVE_STAKING_QUEUE_NAME,
    UNBONDING_STAKING_QUEUE_NAME,
    WITHDRAW_STAKING_QUEUE_NAME,
    ActiveStakingEvent,
    StakingEvent,
    UnbondingStakingEvent,
    WithdrawStakingEvent,
)

logger = get_logger(__name__)

# Open and stop order
QUEUE_NAMES: Tuple[Tuple[str, str], ...] = (
    ("staking", ACTIVE_STAKING_QUEUE_NAME),
    ("unbonding", UNBONDING_STAKING_QUEUE_NAME),
    ("withdraw", WITHDRAW_STAKING_QUEUE_NAME),
)


class EventPublisher:
    """
    Publishes staking events to the staking, unbonding and withdraw queues.

    The publisher owns its three queue clients exclusively. Build it with
    EventPublisher.create() to open the queues from configuration, or pass
    already-open clients to the constructor.

    Usage:
        >>> config = QueueConfig.from_env()
        >>> async with await EventPublisher.create(config) as publisher:
        ...     await publisher.push_staking_event(event)
    """

    def __init__(
        self,
        staking_queue: QueueClient,
        unbonding_queue: QueueClient,
        withdraw_queue: QueueClient,
        send_timeout: Optional[float] = None,
    ):
        """
        Args:
            staking_queue: Open client for active staking events
            unbonding_queue: Open client for unbonding events
            withdraw_queue: Open client for withdraw events
            send_timeout: Default deadline in seconds for each push.
                None waits for the queue indefinitely.
        """
        self.staking_queue = staking_queue
        self.unbonding_queue = unbonding_queue
        self.withdraw_queue = withdraw_queue
        self.send_timeout = send_timeout
        self._running = True

    @classmethod
    async def create(
        cls,
        config: QueueConfig,
        client_factory: Optional[QueueClientFactory] = None,
    ) -> "EventPublisher":
        """
        Open the three queues and return a publisher ready to push.

        Queues are opened in order: staking, unbonding, withdraw. If any
        open fails, the queues opened so far are stopped and the failure is
        raised; no publisher is returned.

        Args:
            config: Connection settings shared by all three queues
            client_factory: Coroutine opening one queue
                (default: KafkaQueueClient.connect)

        Raises:
            ConstructionError: If a queue could not be opened
        """
        factory = client_factory or KafkaQueueClient.connect
        opened: List[QueueClient] = []

        for kind, queue_name in QUEUE_NAMES:
            try:
                client = await factory(config, queue_name)
            except Exception as e:
                await cls._stop_opened(opened)
                raise ConstructionError(
                    f"failed to create {kind} queue",
                    cause=e,
                    context={"queue": queue_name},
                ) from e
            except BaseException:
                # Cancelled mid-open: release what is already connected
                await cls._stop_opened(opened)
                raise
            opened.append(client)

        staking_queue, unbonding_queue, withdraw_queue = opened
        logger.info(
            "Event publisher created",
            extra={"bootstrap_servers": config.url},
        )
        return cls(
            staking_queue,
            unbonding_queue,
            withdraw_queue,
            send_timeout=config.send_timeout_seconds,
        )

    async def start(self) -> None:
        """
        Lifecycle hook for the host service.

        Queues are connected by create(), so there is nothing left to do
        for a running publisher.

        Raises:
            QueueClosedError: If the publisher has already been stopped
        """
        if not self._running:
            raise QueueClosedError("event publisher is stopped")

    @staticmethod
    async def _stop_opened(opened: List[QueueClient]) -> None:
        """Stop clients opened before a failed construction, newest first."""
        for client in reversed(opened):
            try:
                await client.stop()
            except Exception as e:
                log_exception(
                    logger,
                    e,
                    "Failed to stop queue after construction error",
                    level=logging.WARNING,
                    queue=client.queue_name,
                )

    async def push_staking_event(
        self, event: ActiveStakingEvent, timeout: Optional[float] = None
    ) -> None:
        """
        Publish an active staking event to the staking queue.

        Args:
            event: Event to publish
            timeout: Deadline in seconds for this push (overrides send_timeout)

        Raises:
            SendError: If the queue did not accept the event
        """
        if not isinstance(event, ActiveStakingEvent):
            raise TypeError(f"expected ActiveStakingEvent, got {type(event).__name__}")
        await self._push(self.staking_queue, "staking", event, timeout)

    async def push_unbonding_event(
        self, event: UnbondingStakingEvent, timeout: Optional[float] = None
    ) -> None:
        """Publish an unbonding event to the unbonding queue."""
        if not isinstance(event, UnbondingStakingEvent):
            raise TypeError(f"expected UnbondingStakingEvent, got {type(event).__name__}")
        await self._push(self.unbonding_queue, "unbonding", event, timeout)

    async def push_withdraw_event(
        self, event: WithdrawStakingEvent, timeout: Optional[float] = None
    ) -> None:
        """Publish a withdraw event to the withdraw queue."""
        if not isinstance(event, WithdrawStakingEvent):
            raise TypeError(f"expected WithdrawStakingEvent, got {type(event).__name__}")
        await self._push(self.withdraw_queue, "withdraw", event, timeout)

    async def _push(
        self,
        queue: QueueClient,
        kind: str,
        event: StakingEvent,
        timeout: Optional[float],
    ) -> None:
        if not self._running:
            raise SendError(
                f"failed to push {kind} event",
                cause=QueueClosedError("event publisher is stopped"),
                context={"queue": queue.queue_name, "tx_hash": event.tx_hash},
            )

        # Encoding errors propagate unwrapped
        message = event.to_message()
        payload_bytes = len(message.encode("utf-8"))

        if timeout is None:
            timeout = self.send_timeout

        log_with_context(
            logger,
            logging.INFO,
            f"Pushing {kind} event",
            queue=queue.queue_name,
            event_kind=kind,
            tx_hash=event.tx_hash,
        )

        start_time = time.perf_counter()
        try:
            await asyncio.wait_for(queue.send_message(message), timeout=timeout)
        except Exception as e:
            record_event_published(
                queue.queue_name, payload_bytes, time.perf_counter() - start_time, success=False
            )
            cause: Exception = e
            if isinstance(e, asyncio.TimeoutError) and timeout is not None:
                cause = TimeoutError(
                    f"queue {queue.queue_name} did not accept the event within {timeout}s"
                )
            raise SendError(
                f"failed to push {kind} event",
                cause=cause,
                context={"queue": queue.queue_name, "tx_hash": event.tx_hash},
            ) from e

        duration = time.perf_counter() - start_time
        record_event_published(queue.queue_name, payload_bytes, duration, success=True)

        log_with_context(
            logger,
            logging.INFO,
            f"Successfully pushed {kind} event",
            queue=queue.queue_name,
            event_kind=kind,
            tx_hash=event.tx_hash,
            duration_ms=round(duration * 1000, 2),
        )

    async def stop(self, close_all: bool = False) -> None:
        """
        Stop the staking, unbonding and withdraw queues, in that order.

        By default the first failure is raised immediately and the queues
        after it are left open. With close_all=True every queue is stopped
        and all failures are raised together afterwards.

        Calling stop twice is a caller error; the outcome depends on the
        queue clients.

        Args:
            close_all: Keep stopping the remaining queues after a failure

        Raises:
            ShutdownError: If stopping any queue failed
        """
        logger.info("Stopping event publisher", extra={"close_all": close_all})
        self._running = False

        failed: List[str] = []
        errors: List[Exception] = []
        for (kind, _), queue in zip(QUEUE_NAMES, self._queues()):
            try:
                await queue.stop()
            except Exception as e:
                if not close_all:
                    raise ShutdownError(
                        f"failed to stop {kind} queue",
                        errors=[e],
                        context={"queue": queue.queue_name},
                    ) from e
                log_exception(
                    logger,
                    e,
                    f"Failed to stop {kind} queue",
                    level=logging.WARNING,
                    queue=queue.queue_name,
                )
                failed.append(kind)
                errors.append(e)

        if errors:
            raise ShutdownError(
                f"failed to stop {', '.join(failed)} queues",
                errors=errors,
                context={"queues": failed},
            ) from errors[0]

        logger.info("Event publisher stopped")

    def _queues(self) -> Tuple[QueueClient, QueueClient, QueueClient]:
        return (self.staking_queue, self.unbonding_queue, self.withdraw_queue)

    @property
    def is_running(self) -> bool:
        """False once stop() has been called; pushes are rejected from then on."""
        return self._running

    async def __aenter__(self) -> "EventPublisher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()


__all__ = [
    "EventPublisher",
    "QUEUE_NAMES",
]
