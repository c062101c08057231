"""
Staking event message schemas.

Pydantic models for every message the publisher puts on a queue.

Schemas:
    events.py   - ActiveStakingEvent, UnbondingStakingEvent, WithdrawStakingEvent

Design Decisions:
    - Pydantic for validation and JSON serialization
    - Frozen models (events never change after the indexer creates them)
    - Hex fields stored lowercase without a 0x prefix
    - Backward-compatible evolution (additive changes only)
"""

from staking_publisher.schemas.events import (
    ACTIVE_STAKING_QUEUE_NAME,
    UNBONDING_STAKING_QUEUE_NAME,
    WITHDRAW_STAKING_QUEUE_NAME,
    ActiveStakingEvent,
    EventType,
    StakingEvent,
    UnbondingStakingEvent,
    WithdrawStakingEvent,
)

__all__ = [
    "ACTIVE_STAKING_QUEUE_NAME",
    "UNBONDING_STAKING_QUEUE_NAME",
    "WITHDRAW_STAKING_QUEUE_NAME",
    "ActiveStakingEvent",
    "EventType",
    "StakingEvent",
    "UnbondingStakingEvent",
    "WithdrawStakingEvent",
]
