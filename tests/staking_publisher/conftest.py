"""
Pytest fixtures for staking_publisher unit tests.

Provides fixtures for:
- Queue configuration
- Sample events of each kind
- In-memory queue clients and a publisher wired to them
"""

import pytest

from staking_publisher.client import InMemoryQueueClient
from staking_publisher.config import QueueConfig
from staking_publisher.publisher import EventPublisher
from staking_publisher.schemas.events import (
    ACTIVE_STAKING_QUEUE_NAME,
    UNBONDING_STAKING_QUEUE_NAME,
    WITHDRAW_STAKING_QUEUE_NAME,
    ActiveStakingEvent,
    UnbondingStakingEvent,
    WithdrawStakingEvent,
)


@pytest.fixture
def queue_config() -> QueueConfig:
    """Create test queue configuration."""
    return QueueConfig(
        url="localhost:9092",
        user="indexer",
        password="secret",
        security_protocol="SASL_PLAINTEXT",
    )


@pytest.fixture
def staking_event() -> ActiveStakingEvent:
    """Create sample ActiveStakingEvent."""
    return ActiveStakingEvent(
        staking_tx_hash_hex="a1b2c3",
        staker_pk_hex="02f3a1",
        finality_provider_pk_hex="03b4c5",
        staking_value=100000,
        staking_start_height=840000,
        staking_start_timestamp=1713571200,
        staking_timelock=64000,
        staking_output_index=0,
        staking_tx_hex="0200000001a1b2c3",
    )


@pytest.fixture
def unbonding_event() -> UnbondingStakingEvent:
    """Create sample UnbondingStakingEvent."""
    return UnbondingStakingEvent(
        staking_tx_hash_hex="a1b2c3",
        unbonding_start_height=840100,
        unbonding_start_timestamp=1713631200,
        unbonding_timelock=1008,
        unbonding_output_index=0,
        unbonding_tx_hex="0200000001ff",
        unbonding_tx_hash_hex="d4e5f6",
    )


@pytest.fixture
def withdraw_event() -> WithdrawStakingEvent:
    """Create sample WithdrawStakingEvent."""
    return WithdrawStakingEvent(staking_tx_hash_hex="a1b2c3")


@pytest.fixture
def staking_queue() -> InMemoryQueueClient:
    return InMemoryQueueClient(ACTIVE_STAKING_QUEUE_NAME)


@pytest.fixture
def unbonding_queue() -> InMemoryQueueClient:
    return InMemoryQueueClient(UNBONDING_STAKING_QUEUE_NAME)


@pytest.fixture
def withdraw_queue() -> InMemoryQueueClient:
    return InMemoryQueueClient(WITHDRAW_STAKING_QUEUE_NAME)


@pytest.fixture
def publisher(staking_queue, unbonding_queue, withdraw_queue) -> EventPublisher:
    """Create EventPublisher backed by in-memory queues."""
    return EventPublisher(staking_queue, unbonding_queue, withdraw_queue)
