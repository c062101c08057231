"""
Staking event publisher.

Publishes staking, unbonding and withdraw events produced by the staking
indexer to their own outbound queues.

Modules:
    publisher.py  - EventPublisher (construction, push, shutdown)
    client.py     - QueueClient protocol and in-memory client
    producer.py   - Kafka-backed queue client
    config.py     - QueueConfig loaded from environment variables
    schemas/      - Event models and queue names
    common/       - Exceptions and logging helpers
    metrics.py    - Prometheus instruments
"""

from staking_publisher.client import InMemoryQueueClient, QueueClient, QueueClientFactory
from staking_publisher.config import QueueConfig
from staking_publisher.producer import KafkaQueueClient
from staking_publisher.publisher import EventPublisher

__version__ = "0.1.0"

__all__ = [
    "EventPublisher",
    "InMemoryQueueClient",
    "KafkaQueueClient",
    "QueueClient",
    "QueueClientFactory",
    "QueueConfig",
]
