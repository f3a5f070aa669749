"""
Saweria Webhook Endpoint

Receives donation notifications, normalizes them and appends them to the
in-memory donation buffer.

Set the Saweria webhook URL to: https://<host>/webhook
"""

import json

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError

from donation_relay.models.donations import DonationWebhookPayload
from donation_relay.services.donation_buffer import DonationBuffer, get_donation_buffer
from donation_relay.utils.exceptions import PayloadValidationException
from donation_relay.utils.logging_config import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["webhook"])


async def parse_payload(request: Request) -> DonationWebhookPayload:
    """
    Read and validate the webhook body.

    Raises:
        PayloadValidationException: body is empty, not a JSON object, or has
            no positive numeric amount_raw
    """
    body = await request.body()
    if not body.strip():
        raise PayloadValidationException(details={"reason": "empty body"})

    try:
        data = json.loads(body)
    except ValueError as e:
        raise PayloadValidationException(details={"reason": f"malformed JSON: {e}"})

    logger.info("Received webhook", extra={"payload": data})

    if not isinstance(data, dict):
        raise PayloadValidationException(
            details={"reason": "payload must be a JSON object"}
        )

    try:
        return DonationWebhookPayload.model_validate(data)
    except ValidationError as e:
        raise PayloadValidationException(
            details={
                "errors": [
                    {"field": ".".join(str(loc) for loc in err["loc"]), "msg": err["msg"]}
                    for err in e.errors()
                ]
            }
        )


@router.post("/webhook", response_class=PlainTextResponse)
async def saweria_webhook(
    request: Request,
    buffer: DonationBuffer = Depends(get_donation_buffer),
):
    """
    Saweria webhook endpoint.

    Appends one donation per call. Redelivered notifications are appended
    again; the client de-duplicates.
    """
    payload = await parse_payload(request)
    record = payload.to_record()

    buffer.append(record)

    logger.info(
        "Donation received",
        extra={
            "donation_id": record.id,
            "donator_name": record.donator_name,
            "amount_raw": record.amount_raw,
        },
    )

    return PlainTextResponse("OK", status_code=200)
