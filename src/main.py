"""Uvicorn entry point for the site menu service.

Builds the menu API from environment configuration. Run directly for local
development, or point uvicorn at ``main:app``.
"""

import logging
import os

from fastapi import FastAPI

from site_menu_service.factory import (
    create_menu_service,
    get_admin_api_keys,
    get_dynamodb_resource,
)
from site_menu_service.handlers.api_handler import create_app
from site_menu_service.observability import configure_logging, setup_observability

logger = logging.getLogger(__name__)


def create_application() -> FastAPI:
    """Build the menu API with its store, cache and observability wiring.

    Steps:
    1. Configures logging
    2. Creates the DynamoDB resource and repositories
    3. Creates the menu cache and service
    4. Creates the FastAPI app with public and admin endpoints
    5. Sets up observability when OTEL_ENABLED is true

    Returns:
        FastAPI app serving the public and admin menu routes
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing site menu service...")

    menu_service = create_menu_service(get_dynamodb_resource())
    app = create_app(menu_service=menu_service, api_keys=get_admin_api_keys())

    if os.getenv("OTEL_ENABLED", "false").lower() == "true":
        setup_observability(app)

    logger.info("Site menu service initialized successfully")
    return app


# Only build the real application outside of tests so test collection
# does not need AWS configuration.
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    app = FastAPI()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Serving site menu API on {host}:{port}")
    logger.info(f"OpenAPI docs at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
