"""Shared dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across warm
invocations. The menu cache lives inside the cached MenuService, so each
container keeps its own cache for as long as it stays warm.
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
from site_menu_service.observability import configure_logging
from site_menu_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_menu_service: MenuService | None = None
_fastapi_app: FastAPI | None = None


def get_menu_service() -> MenuService:
    """Create or retrieve the cached menu service.

    Returns:
        Configured MenuService instance
    """
    global _menu_service

    if _menu_service is not None:
        return _menu_service

    _menu_service = create_menu_service(get_dynamodb_resource())

    logger.info("Menu service initialized")
    return _menu_service


def get_fastapi_app() -> FastAPI:
    """Create or retrieve the cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(menu_service=get_menu_service(), api_keys=get_admin_api_keys())

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize logging for the Lambda container.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
