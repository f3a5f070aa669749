"""
Donation Models

Pydantic models for the Saweria webhook payload, the buffered donation
record and the polling response served to the game client.
"""

import math
import time
import uuid
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ANONYMOUS_DONATOR = "Anonymous"

Amount = Union[int, float]


def now_ms() -> int:
    """Current time in epoch milliseconds"""
    return int(time.time() * 1000)


def generate_donation_id() -> str:
    """
    Synthesize an id for a donation that arrived without one.

    The millisecond timestamp keeps generated ids roughly sortable; the random
    suffix keeps two notifications within the same millisecond distinct.
    """
    return f"{now_ms()}-{uuid.uuid4().hex[:8]}"


def _number_to_text(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _coerce_text(value: Any) -> Optional[str]:
    """
    Coerce a loosely typed scalar to text.

    None, "" and structured values (objects, arrays) mean absent, so the
    field falls back to its default instead of failing the notification.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return _number_to_text(value)
    if isinstance(value, str):
        return value or None
    return None


class DonationWebhookPayload(BaseModel):
    """
    Donation notification as posted by Saweria.

    Only amount_raw is required. Missing optional fields stay None here and
    are replaced by their defaults in to_record().
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, description="Provider donation ID")
    donator_name: Optional[str] = Field(None, description="Display name of the donor")
    amount_raw: Amount = Field(description="Donation amount, must be positive")
    message: Optional[str] = Field(None, description="Donor message")
    id_is_numeric: bool = Field(
        False, description="Provider sent id as a JSON number", exclude=True
    )

    @model_validator(mode="before")
    @classmethod
    def flag_numeric_id(cls, data: Any) -> Any:
        if isinstance(data, dict):
            raw_id = data.get("id")
            data = {
                **data,
                "id_is_numeric": isinstance(raw_id, (int, float))
                and not isinstance(raw_id, bool),
            }
        return data

    @field_validator("id", "donator_name", "message", mode="before")
    @classmethod
    def coerce_optional_text(cls, v: Any) -> Optional[str]:
        return _coerce_text(v)

    @field_validator("amount_raw", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> Amount:
        """Accept numbers and numeric strings; reject anything not positive"""
        if v is None or isinstance(v, bool):
            raise ValueError("amount_raw must be a number")

        if isinstance(v, str):
            try:
                amount = float(v.strip())
            except ValueError:
                raise ValueError("amount_raw must be numeric")
        elif isinstance(v, (int, float)):
            amount = v
        else:
            raise ValueError("amount_raw must be a number")

        if isinstance(amount, float):
            if not math.isfinite(amount):
                raise ValueError("amount_raw must be finite")
            if amount.is_integer():
                amount = int(amount)

        if amount <= 0:
            raise ValueError("amount_raw must be positive")
        return amount

    def to_record(self, timestamp: Optional[int] = None) -> "DonationRecord":
        """Normalize into a buffered record, filling in defaults"""
        return DonationRecord(
            id=self.id or generate_donation_id(),
            id_is_numeric=self.id_is_numeric and self.id is not None,
            donator_name=self.donator_name or ANONYMOUS_DONATOR,
            amount_raw=self.amount_raw,
            message=self.message or "",
            timestamp=now_ms() if timestamp is None else timestamp,
        )


class DonationRecord(BaseModel):
    """A donation as held in the buffer and served to the client"""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Donation ID, provider-supplied or generated")
    donator_name: str = Field(default=ANONYMOUS_DONATOR)
    amount_raw: Amount
    message: str = Field(default="")
    timestamp: int = Field(description="Ingestion time in epoch milliseconds")
    id_is_numeric: bool = Field(
        default=False,
        description="Id arrived as a number; cursors match it numerically",
        exclude=True,
    )


class DonationPollResponse(BaseModel):
    """Response for GET /get-donation/atasatap"""

    success: bool = True
    donations: List[DonationRecord] = Field(default_factory=list)
    latest_id: Optional[str] = None
