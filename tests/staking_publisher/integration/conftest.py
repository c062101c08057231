"""
Pytest fixtures for publisher integration tests.

Provides fixtures for:
- Docker-based Kafka test container
- Queue configuration pointing at the container
- A message reader for the staking queues
"""

from typing import Any, Callable, Generator, List

import pytest
from aiokafka import AIOKafkaConsumer

from staking_publisher.config import QueueConfig


@pytest.fixture(scope="session")
def kafka_container() -> Generator[Any, None, None]:
    """
    Provide a Kafka container for integration tests.

    The container runs for the entire test session and is shared across
    tests. Tests are skipped when Docker is not available.

    Yields:
        KafkaContainer: Started Kafka container instance
    """
    kafka_module = pytest.importorskip("testcontainers.kafka")
    kafka = kafka_module.KafkaContainer()
    try:
        kafka.start()
    except Exception as e:
        pytest.skip(f"Kafka container unavailable: {e}")

    yield kafka

    kafka.stop()


@pytest.fixture
def kafka_queue_config(kafka_container) -> QueueConfig:
    """Queue configuration for the test container (no authentication)."""
    return QueueConfig(
        url=kafka_container.get_bootstrap_server(),
        security_protocol="PLAINTEXT",
        send_timeout_seconds=30.0,
    )


@pytest.fixture
def read_queue(kafka_queue_config: QueueConfig) -> Callable:
    """
    Provide a coroutine reading every message currently on a queue.

    Returns:
        callable: async (queue_name, expected) -> list of decoded payloads
    """

    async def read(queue_name: str, expected: int, timeout_ms: int = 10000) -> List[str]:
        consumer = AIOKafkaConsumer(
            queue_name,
            bootstrap_servers=kafka_queue_config.url,
            auto_offset_reset="earliest",
            enable_auto_commit=False,
            group_id=None,
        )
        await consumer.start()
        try:
            messages: List[str] = []
            while len(messages) < expected:
                batch = await consumer.getmany(timeout_ms=timeout_ms)
                if not batch:
                    break
                for records in batch.values():
                    messages.extend(r.value.decode("utf-8") for r in records)
            return messages
        finally:
            await consumer.stop()

    return read
