"""
Donation Polling Endpoint

Serves buffered donations to the Roblox client. The client sends the id of
the last donation it processed and receives everything newer:

GET /get-donation/atasatap?after_id=...
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from donation_relay.models.donations import DonationPollResponse
from donation_relay.services.donation_buffer import DonationBuffer, get_donation_buffer
from donation_relay.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/get-donation", tags=["donations"])

# Each poll must see the live buffer, never a cached copy
NO_STORE = "no-store, no-cache, must-revalidate, proxy-revalidate"


@router.get("/atasatap", response_model=DonationPollResponse)
async def poll_donations(
    response: Response,
    after_id: Optional[str] = Query(
        default=None, description="Id of the last donation the client processed"
    ),
    buffer: DonationBuffer = Depends(get_donation_buffer),
) -> DonationPollResponse:
    """
    Return donations newer than after_id.

    An unknown after_id (server restarted, or the id aged out of the buffer)
    returns the whole buffer so the client never gets stuck on a stale id.
    latest_id never goes back to null while the buffer holds donations.
    """
    response.headers["Cache-Control"] = NO_STORE

    donations, latest_id = buffer.read_since(after_id)

    return DonationPollResponse(
        success=True,
        donations=donations,
        latest_id=latest_id,
    )
