"""
Test Donation Models

Tests payload coercion, default substitution and record normalization.
"""

import pytest
from pydantic import ValidationError

from donation_relay.models.donations import (
    ANONYMOUS_DONATOR,
    DonationPollResponse,
    DonationRecord,
    DonationWebhookPayload,
    generate_donation_id,
)


def test_defaults_substituted_for_missing_fields():
    """Test that {amount_raw: 5000} gets a generated id and default text."""
    record = DonationWebhookPayload.model_validate({"amount_raw": 5000}).to_record()

    assert record.id
    assert record.donator_name == ANONYMOUS_DONATOR == "Anonymous"
    assert record.message == ""
    assert record.amount_raw == 5000
    assert isinstance(record.timestamp, int)
    assert record.timestamp > 0


def test_full_saweria_payload(saweria_payload):
    record = DonationWebhookPayload.model_validate(saweria_payload).to_record(
        timestamp=1_700_000_000_000
    )

    assert record.model_dump() == {
        "id": "d6b6d5a4-5c3e-4e1f-9b0a-0c4d2d7a1f10",
        "donator_name": "Siti",
        "amount_raw": 25000,
        "message": "Semangat!",
        "timestamp": 1_700_000_000_000,
    }


@pytest.mark.parametrize(
    "payload",
    [
        {"amount_raw": 5000, "id": ""},
        {"amount_raw": 5000, "id": None},
        {"amount_raw": 5000, "donator_name": "", "message": ""},
        {"amount_raw": 5000, "donator_name": None, "message": None},
    ],
)
def test_empty_values_fall_back_to_defaults(payload):
    record = DonationWebhookPayload.model_validate(payload).to_record()

    assert record.id
    assert record.donator_name == "Anonymous"
    assert record.message == ""


@pytest.mark.parametrize(
    "raw,expected",
    [
        (5000, 5000),
        (5000.0, 5000),
        (12.5, 12.5),
        ("5000", 5000),
        (" 7500 ", 7500),
        ("10.25", 10.25),
    ],
)
def test_amount_coercion(raw, expected):
    payload = DonationWebhookPayload.model_validate({"amount_raw": raw})

    assert payload.amount_raw == expected
    assert type(payload.amount_raw) is type(expected)


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"donator_name": "x"},
        {"amount_raw": None},
        {"amount_raw": 0},
        {"amount_raw": "0"},
        {"amount_raw": -100},
        {"amount_raw": ""},
        {"amount_raw": "abc"},
        {"amount_raw": "nan"},
        {"amount_raw": "inf"},
        {"amount_raw": True},
        {"amount_raw": [5000]},
        {"amount_raw": {"value": 5000}},
    ],
)
def test_invalid_amount_rejected(payload):
    with pytest.raises(ValidationError):
        DonationWebhookPayload.model_validate(payload)


def test_numeric_id_normalized_to_text():
    payload = DonationWebhookPayload.model_validate({"amount_raw": 1, "id": 12345})
    assert payload.id == "12345"

    payload = DonationWebhookPayload.model_validate({"amount_raw": 1, "id": 12345.0})
    assert payload.id == "12345"


@pytest.mark.parametrize(
    "field,value",
    [
        ("id", {"nested": 1}),
        ("donator_name", ["Siti"]),
        ("message", {"t": 1}),
    ],
)
def test_structured_text_values_fall_back_to_defaults(field, value):
    """Test a valid amount is accepted even when text fields are objects"""
    record = DonationWebhookPayload.model_validate(
        {"amount_raw": 5000, field: value}
    ).to_record()

    assert record.id
    assert record.donator_name == "Anonymous"
    assert record.message == ""
    assert record.id_is_numeric is False


@pytest.mark.parametrize(
    "raw_id,expected",
    [
        (12345, True),
        (12.5, True),
        ("12345", False),
        (True, False),
        (None, False),
    ],
)
def test_numeric_id_flag(raw_id, expected):
    record = DonationWebhookPayload.model_validate(
        {"amount_raw": 1, "id": raw_id}
    ).to_record()

    assert record.id_is_numeric is expected


def test_numeric_id_flag_not_serialized():
    record = DonationWebhookPayload.model_validate(
        {"amount_raw": 1, "id": 7}
    ).to_record(timestamp=1)

    assert "id_is_numeric" not in record.model_dump()
    assert "id_is_numeric" not in record.model_dump_json()


def test_generated_ids_are_unique():
    ids = {generate_donation_id() for _ in range(500)}
    assert len(ids) == 500


def test_record_is_immutable():
    record = DonationRecord(id="A", amount_raw=1, timestamp=1)

    with pytest.raises(ValidationError):
        record.id = "B"


def test_poll_response_defaults():
    response = DonationPollResponse()

    assert response.model_dump() == {
        "success": True,
        "donations": [],
        "latest_id": None,
    }
