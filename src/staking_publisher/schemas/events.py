"""
Staking event message schemas.

Contains Pydantic models for the events the indexer publishes to the
staking, unbonding and withdraw queues.
"""

import re
from enum import IntEnum
from typing import Any, ClassVar

from pydantic import BaseModel, Field, field_validator, model_validator

# Queue names are shared with the consumer side. Renaming any of them
# requires a coordinated migration of every consumer.
ACTIVE_STAKING_QUEUE_NAME = "active_staking_queue"
UNBONDING_STAKING_QUEUE_NAME = "unbonding_staking_queue"
WITHDRAW_STAKING_QUEUE_NAME = "withdraw_staking_queue"

_HEX_RE = re.compile(r"^[0-9a-f]+$")


class EventType(IntEnum):
    """Kind of staking event, serialized as its integer value."""

    ACTIVE_STAKING = 1
    UNBONDING_STAKING = 2
    WITHDRAW_STAKING = 3


def normalize_hex(value: str) -> str:
    """Lowercase a hex string and drop any 0x prefix."""
    if not isinstance(value, str):
        raise ValueError("hex value must be a string")
    v = value.strip().lower()
    if v.startswith("0x"):
        v = v[2:]
    if not v:
        raise ValueError("hex value cannot be empty")
    if not _HEX_RE.match(v):
        raise ValueError(f"invalid hex value: {value!r}")
    return v


class StakingEvent(BaseModel):
    """Fields and behaviour shared by every staking event.

    Events are immutable once created and serialize to a compact JSON
    document whose keys are the field names. No envelope is added: the
    JSON document is the message body.
    """

    EVENT_TYPE: ClassVar[EventType]

    event_type: EventType
    staking_tx_hash_hex: str = Field(
        ...,
        description="Hash of the originating staking transaction (hex)",
    )

    model_config = {
        "frozen": True,
        "extra": "forbid",
    }

    @model_validator(mode="before")
    @classmethod
    def default_event_type(cls, data: Any) -> Any:
        """Fill in event_type from the model when it is not supplied."""
        if isinstance(data, dict) and "event_type" not in data:
            data = {**data, "event_type": cls.EVENT_TYPE}
        return data

    @field_validator("event_type")
    @classmethod
    def validate_event_type(cls, v: EventType) -> EventType:
        """Only the event type matching the model is accepted."""
        if v != cls.EVENT_TYPE:
            raise ValueError(
                f"event_type must be {int(cls.EVENT_TYPE)} for {cls.__name__}, got {int(v)}"
            )
        return v

    @field_validator("staking_tx_hash_hex")
    @classmethod
    def validate_staking_tx_hash(cls, v: str) -> str:
        return normalize_hex(v)

    @property
    def tx_hash(self) -> str:
        """Primary transaction identifier used to tag log records."""
        return self.staking_tx_hash_hex

    def to_message(self) -> str:
        """Serialize the event to its wire payload.

        Encoding errors are raised as-is.
        """
        return self.model_dump_json()


class ActiveStakingEvent(StakingEvent):
    """A newly observed staking transaction.

    Example:
        >>> event = ActiveStakingEvent(
        ...     staking_tx_hash_hex="a1b2c3",
        ...     staker_pk_hex="02aa",
        ...     finality_provider_pk_hex="03bb",
        ...     staking_value=100000,
        ...     staking_start_height=840000,
        ...     staking_start_timestamp=1713571200,
        ...     staking_timelock=64000,
        ...     staking_output_index=0,
        ...     staking_tx_hex="0200000001",
        ... )
    """

    EVENT_TYPE: ClassVar[EventType] = EventType.ACTIVE_STAKING

    staker_pk_hex: str
    finality_provider_pk_hex: str
    staking_value: int = Field(..., ge=0, description="Staked amount in satoshis")
    staking_start_height: int = Field(..., ge=0)
    staking_start_timestamp: int = Field(..., description="Unix seconds")
    staking_timelock: int = Field(..., ge=0, description="Lock duration in blocks")
    staking_output_index: int = Field(..., ge=0)
    staking_tx_hex: str = Field(..., description="Full staking transaction (hex)")
    is_overflow: bool = False

    @field_validator("staker_pk_hex", "finality_provider_pk_hex", "staking_tx_hex")
    @classmethod
    def validate_hex_fields(cls, v: str) -> str:
        return normalize_hex(v)

    @property
    def tx_hash(self) -> str:
        """Staking events are tagged with the full staking transaction."""
        return self.staking_tx_hex


class UnbondingStakingEvent(StakingEvent):
    """An unbonding request for an active stake."""

    EVENT_TYPE: ClassVar[EventType] = EventType.UNBONDING_STAKING

    unbonding_start_height: int = Field(..., ge=0)
    unbonding_start_timestamp: int = Field(..., description="Unix seconds")
    unbonding_timelock: int = Field(..., ge=0)
    unbonding_output_index: int = Field(..., ge=0)
    unbonding_tx_hex: str
    unbonding_tx_hash_hex: str

    @field_validator("unbonding_tx_hex", "unbonding_tx_hash_hex")
    @classmethod
    def validate_hex_fields(cls, v: str) -> str:
        return normalize_hex(v)


class WithdrawStakingEvent(StakingEvent):
    """A completed withdrawal of staked funds."""

    EVENT_TYPE: ClassVar[EventType] = EventType.WITHDRAW_STAKING
