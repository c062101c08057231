"""
Tests for staking event schemas.

Validates Pydantic model behavior, JSON serialization, and field validation.
"""

import json

import pytest
from pydantic import ValidationError

from staking_publisher.schemas.events import (
    ACTIVE_STAKING_QUEUE_NAME,
    UNBONDING_STAKING_QUEUE_NAME,
    WITHDRAW_STAKING_QUEUE_NAME,
    ActiveStakingEvent,
    EventType,
    UnbondingStakingEvent,
    WithdrawStakingEvent,
    normalize_hex,
)


def _staking_fields(**overrides):
    fields = {
        "staking_tx_hash_hex": "a1b2c3",
        "staker_pk_hex": "02f3a1",
        "finality_provider_pk_hex": "03b4c5",
        "staking_value": 100000,
        "staking_start_height": 840000,
        "staking_start_timestamp": 1713571200,
        "staking_timelock": 64000,
        "staking_output_index": 1,
        "staking_tx_hex": "a1b2c3",
    }
    fields.update(overrides)
    return fields


class TestQueueNames:
    """Queue names are a contract with consumers."""

    def test_queue_names(self):
        assert ACTIVE_STAKING_QUEUE_NAME == "active_staking_queue"
        assert UNBONDING_STAKING_QUEUE_NAME == "unbonding_staking_queue"
        assert WITHDRAW_STAKING_QUEUE_NAME == "withdraw_staking_queue"


class TestActiveStakingEventCreation:
    """Test ActiveStakingEvent instantiation with valid data."""

    def test_create_with_all_fields(self):
        event = ActiveStakingEvent(**_staking_fields(is_overflow=True))

        assert event.event_type == EventType.ACTIVE_STAKING
        assert event.staking_tx_hash_hex == "a1b2c3"
        assert event.staking_value == 100000
        assert event.staking_timelock == 64000
        assert event.staking_output_index == 1
        assert event.is_overflow is True

    def test_is_overflow_defaults_to_false(self):
        event = ActiveStakingEvent(**_staking_fields())

        assert event.is_overflow is False

    def test_tx_hash_is_staking_tx(self):
        event = ActiveStakingEvent(
            **_staking_fields(staking_tx_hash_hex="ABCDEF", staking_tx_hex="0x0200FF")
        )

        assert event.tx_hash == "0200ff"

    def test_other_kinds_tagged_with_staking_tx_hash(self):
        withdraw = WithdrawStakingEvent(staking_tx_hash_hex="ABCDEF")

        assert withdraw.tx_hash == "abcdef"

    def test_event_is_immutable(self):
        event = ActiveStakingEvent(**_staking_fields())

        with pytest.raises(ValidationError):
            event.staking_value = 1


class TestHexNormalization:
    """Hex fields are stored lowercase without a 0x prefix."""

    def test_uppercase_is_lowered(self):
        assert normalize_hex("A1B2C3") == "a1b2c3"

    def test_prefix_is_removed(self):
        assert normalize_hex("0xA1b2") == "a1b2"
        assert normalize_hex("0Xff") == "ff"

    def test_model_fields_are_normalized(self):
        event = ActiveStakingEvent(
            **_staking_fields(staker_pk_hex="0x02F3A1", staking_tx_hex="0XA1B2C3")
        )

        assert event.staker_pk_hex == "02f3a1"
        assert event.staking_tx_hex == "a1b2c3"

    @pytest.mark.parametrize("value", ["", "0x", "xyz", "a1 b2", "0xg1"])
    def test_invalid_hex_rejected(self, value):
        with pytest.raises(ValidationError):
            ActiveStakingEvent(**_staking_fields(staking_tx_hash_hex=value))

    def test_unbonding_hex_fields_validated(self):
        with pytest.raises(ValidationError):
            UnbondingStakingEvent(
                staking_tx_hash_hex="a1",
                unbonding_start_height=1,
                unbonding_start_timestamp=1,
                unbonding_timelock=1,
                unbonding_output_index=0,
                unbonding_tx_hex="not-hex",
                unbonding_tx_hash_hex="b2",
            )


class TestEventValidation:
    """Test field validation rules."""

    def test_missing_required_field_raises_error(self):
        fields = _staking_fields()
        del fields["staking_value"]

        with pytest.raises(ValidationError) as exc_info:
            ActiveStakingEvent(**fields)

        assert "staking_value" in str(exc_info.value)

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            ActiveStakingEvent(**_staking_fields(staking_value=-1))

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            WithdrawStakingEvent(staking_tx_hash_hex="a1", withdraw_tx_hex="b2")

    def test_mismatched_event_type_rejected(self):
        with pytest.raises(ValidationError, match="event_type"):
            WithdrawStakingEvent(
                staking_tx_hash_hex="a1", event_type=EventType.ACTIVE_STAKING
            )

    def test_event_type_defaults_per_kind(self):
        withdraw = WithdrawStakingEvent(staking_tx_hash_hex="a1")

        assert withdraw.event_type == EventType.WITHDRAW_STAKING


class TestEventSerialization:
    """Test JSON wire payloads."""

    def test_staking_payload_fields(self):
        event = ActiveStakingEvent(**_staking_fields())

        message = event.to_message()
        data = json.loads(message)

        assert '"staking_tx_hex":"a1b2c3"' in message
        assert '"staking_value":100000' in message
        assert data == {
            "event_type": 1,
            "staking_tx_hash_hex": "a1b2c3",
            "staker_pk_hex": "02f3a1",
            "finality_provider_pk_hex": "03b4c5",
            "staking_value": 100000,
            "staking_start_height": 840000,
            "staking_start_timestamp": 1713571200,
            "staking_timelock": 64000,
            "staking_output_index": 1,
            "staking_tx_hex": "a1b2c3",
            "is_overflow": False,
        }

    def test_serialization_is_deterministic(self):
        first = ActiveStakingEvent(**_staking_fields()).to_message()
        second = ActiveStakingEvent(**_staking_fields()).to_message()

        assert first == second

    def test_withdraw_payload_has_no_envelope(self):
        event = WithdrawStakingEvent(staking_tx_hash_hex="0xFF00")

        assert json.loads(event.to_message()) == {
            "event_type": 3,
            "staking_tx_hash_hex": "ff00",
        }

    def test_staking_round_trip(self):
        event = ActiveStakingEvent(**_staking_fields(is_overflow=True))

        assert ActiveStakingEvent.model_validate_json(event.to_message()) == event

    def test_unbonding_round_trip(self, unbonding_event):
        decoded = UnbondingStakingEvent.model_validate_json(unbonding_event.to_message())

        assert decoded == unbonding_event
        assert decoded.event_type == EventType.UNBONDING_STAKING

    def test_withdraw_round_trip(self, withdraw_event):
        assert (
            WithdrawStakingEvent.model_validate_json(withdraw_event.to_message())
            == withdraw_event
        )

    def test_decoding_wrong_kind_fails(self, withdraw_event):
        with pytest.raises(ValidationError):
            ActiveStakingEvent.model_validate_json(withdraw_event.to_message())
