"""AWS Lambda handler for API Gateway requests.

API Gateway events are passed to the FastAPI application through the Mangum
ASGI adapter. The application and its menu cache are built once per
container and reused while the container stays warm.
"""

import logging
import os
from typing import Any

from mangum import Mangum

from lambda_dependencies import get_fastapi_app, initialize_lambda_environment

# Initialize during cold start (skip in test mode)
if os.getenv("ENVIRONMENT") != "test":
    initialize_lambda_environment()

logger = logging.getLogger(__name__)

if os.getenv("ENVIRONMENT") != "test":
    mangum_handler = Mangum(get_fastapi_app(), lifespan="off")
else:
    mangum_handler = None  # type: ignore


def is_api_gateway_event(event: dict[str, Any]) -> bool:
    """Determine if the event is an API Gateway (REST or HTTP API) request.

    Args:
        event: The Lambda event payload

    Returns:
        True if this is an API Gateway request, False otherwise
    """
    return "requestContext" in event and ("httpMethod" in event or "rawPath" in event)


def lambda_handler(event: dict[str, Any], context: Any) -> dict[str, Any]:
    """Lambda entry point routing API Gateway requests to FastAPI.

    Args:
        event: The Lambda event payload
        context: The Lambda context object

    Returns:
        Response dict with statusCode and body
    """
    logger.info(f"Received Lambda invocation, request_id: {context.aws_request_id}")

    if not is_api_gateway_event(event):
        logger.warning("Unsupported Lambda event received")
        return {"statusCode": 400, "body": "Unsupported event type"}

    try:
        result: dict[str, Any] = mangum_handler(event, context)
        return result
    except Exception as e:
        logger.exception(f"Unhandled error in Lambda handler: {e}")
        return {
            "statusCode": 500,
            "body": "Internal server error",
        }
