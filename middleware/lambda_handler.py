"""
AWS Lambda Handler for the Donation Relay

This module provides the Lambda entry point using the Mangum adapter to run
the FastAPI application per request behind API Gateway.

The donation buffer lives as long as the warm Lambda container; a cold start
begins with an empty buffer and clients resync through the unknown-cursor path.
"""

from mangum import Mangum

from donation_relay.main import app
from donation_relay.utils.logging_config import get_logger

logger = get_logger(__name__)


# api_gateway_base_path is "/" to let Mangum handle stage prefixes automatically
handler = Mangum(app, lifespan="off", api_gateway_base_path="/")


def lambda_handler(event, context):
    """
    AWS Lambda handler function with invocation logging.

    Args:
        event: API Gateway event containing HTTP request details
        context: Lambda context with runtime information

    Returns:
        API Gateway response format
    """
    request_context = event.get("requestContext", {})

    logger.info(
        "Lambda invocation started",
        extra={
            "request_id": context.aws_request_id,
            "function_name": context.function_name,
            "http_method": request_context.get("http", {}).get("method")
            or event.get("httpMethod"),
            "path": event.get("rawPath") or event.get("path"),
        },
    )

    try:
        response = handler(event, context)

        logger.info(
            "Lambda invocation completed",
            extra={
                "request_id": context.aws_request_id,
                "status_code": response.get("statusCode"),
            },
        )

        return response

    except Exception as e:
        logger.error(
            f"Lambda invocation failed: {e}",
            extra={
                "request_id": context.aws_request_id,
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        raise


__all__ = ["handler", "lambda_handler"]
