"""
Health Check Endpoints

Liveness probes plus a summary of the donation buffer.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from donation_relay.config import settings
from donation_relay.services.donation_buffer import DonationBuffer, get_donation_buffer

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(buffer: DonationBuffer = Depends(get_donation_buffer)):
    """
    Basic health check endpoint.
    Returns 200 with the current buffer size and newest donation id.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app_version,
            "buffer": buffer.get_stats(),
        },
    )


@router.get("/health/live")
async def liveness_check():
    """
    Liveness check endpoint.
    Returns 200 if application is alive.
    """
    return JSONResponse(
        status_code=200,
        content={
            "status": "alive",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    )
