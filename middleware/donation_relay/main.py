"""
FastAPI Donation Relay Application

Main application entry point. Receives Saweria donation webhooks and serves
them to the polling game client from an in-memory buffer.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from donation_relay.config import settings
from donation_relay.routes import donations, health, webhook
from donation_relay.utils.exceptions import PayloadValidationException, RelayException
from donation_relay.utils.logging_config import (
    get_logger,
    set_correlation_id,
    setup_logging,
)

# Setup logging
setup_logging(log_level=settings.log_level, service=settings.app_name)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.
    Handles startup and shutdown events.
    """
    logger.info(
        f"Starting {settings.app_name} v{settings.app_version}",
        extra={
            "environment": settings.environment,
            "port": settings.port,
            "buffer_max_size": settings.buffer_max_size,
            "lambda": settings.is_lambda,
        },
    )

    yield

    # Buffered donations are not persisted
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Relays Saweria donation webhooks to a polling game client",
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


# Correlation ID middleware
@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """Add correlation ID to all requests for tracing"""
    correlation_id = set_correlation_id(request.headers.get("X-Correlation-ID"))

    response = await call_next(request)

    response.headers["X-Correlation-ID"] = correlation_id

    return response


# Exception handlers
@app.exception_handler(PayloadValidationException)
async def payload_validation_exception_handler(
    request: Request, exc: PayloadValidationException
):
    """Reject malformed webhook payloads without touching the buffer"""
    logger.warning(
        f"Rejected webhook payload: {exc.message}",
        extra={"error": exc.to_dict()},
    )

    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RelayException)
async def relay_exception_handler(request: Request, exc: RelayException):
    """Handle custom relay exceptions"""
    logger.error(
        f"Relay exception: {exc.message}",
        extra={"error": exc.to_dict()},
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions"""
    logger.error(
        f"Unexpected exception: {exc}",
        extra={"error": str(exc), "type": type(exc).__name__},
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
        },
    )


# Include routers
app.include_router(webhook.router)
app.include_router(donations.router)
app.include_router(health.router)


# Root endpoint
@app.get("/", response_class=PlainTextResponse)
async def root():
    """Liveness message"""
    return PlainTextResponse(settings.liveness_message)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "donation_relay.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
