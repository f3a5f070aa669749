"""
Pytest Configuration and Fixtures

Provides common fixtures and test utilities for relay tests.
"""

from types import SimpleNamespace
from typing import Any, Callable, Dict, Optional

import pytest
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from donation_relay.main import app
from donation_relay.models.donations import DonationRecord
from donation_relay.services.donation_buffer import DonationBuffer, get_donation_buffer


@pytest.fixture
def donation_buffer():
    """Fresh buffer with the production capacity"""
    return DonationBuffer(max_size=100)


@pytest.fixture
def override_buffer(donation_buffer):
    """Route every request in the test to the fixture buffer"""
    app.dependency_overrides[get_donation_buffer] = lambda: donation_buffer
    yield donation_buffer
    app.dependency_overrides.pop(get_donation_buffer, None)


@pytest.fixture
def test_client(override_buffer):
    """FastAPI test client"""
    return TestClient(app)


@pytest.fixture
async def async_client(override_buffer):
    """Async HTTP client for testing"""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest.fixture
def make_record() -> Callable[..., DonationRecord]:
    """Factory for buffered donation records"""

    def _record(
        donation_id: str,
        donator_name: str = "Budi",
        amount_raw: int = 5000,
        message: str = "",
        timestamp: Optional[int] = None,
        id_is_numeric: bool = False,
    ) -> DonationRecord:
        return DonationRecord(
            id=donation_id,
            id_is_numeric=id_is_numeric,
            donator_name=donator_name,
            amount_raw=amount_raw,
            message=message,
            timestamp=timestamp if timestamp is not None else 1_700_000_000_000,
        )

    return _record


@pytest.fixture
def filled_buffer(donation_buffer, make_record):
    """Buffer holding records A, B, C in that order"""
    for donation_id in ("A", "B", "C"):
        donation_buffer.append(make_record(donation_id))
    return donation_buffer


@pytest.fixture
def saweria_payload() -> Dict[str, Any]:
    """Donation notification as Saweria posts it"""
    return {
        "version": "2022.01",
        "created_at": "2024-11-15T10:30:00+07:00",
        "id": "d6b6d5a4-5c3e-4e1f-9b0a-0c4d2d7a1f10",
        "type": "donation",
        "amount_raw": 25000,
        "cut": 1250,
        "donator_name": "Siti",
        "donator_email": "siti@example.com",
        "donator_is_user": False,
        "message": "Semangat!",
        "etc": {"amount_to_display": 25000},
    }


@pytest.fixture
def lambda_context():
    """Minimal AWS Lambda context"""
    return SimpleNamespace(
        aws_request_id="req-test-123",
        function_name="donation-relay",
        memory_limit_in_mb=128,
    )
