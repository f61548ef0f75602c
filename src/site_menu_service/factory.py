"""Environment-driven construction of the service's collaborators.

Shared by the uvicorn entry point (main.py) and the Lambda entry point
(lambda_dependencies.py).
"""

import logging
import os
from typing import Any

import boto3

from site_menu_service.repositories.menu_repositories import MenuItemRepository, MenuRepository
from site_menu_service.services.menu_cache import DEFAULT_TTL_SECONDS, MenuCache
from site_menu_service.services.menu_service import MenuService

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # Local DynamoDB - credentials from environment
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    return boto3.resource("dynamodb", region_name=region)


def get_admin_api_keys() -> list[str]:
    """Read admin API keys from ADMIN_API_KEY (comma-separated).

    Returns:
        List of configured keys, or a development key if none is set
    """
    api_keys_str = os.getenv("ADMIN_API_KEY", "")
    api_keys = [key.strip() for key in api_keys_str.split(",") if key.strip()]

    if not api_keys:
        logger.warning("No ADMIN_API_KEY configured - using development key")
        api_keys = ["dummy-key-for-development"]

    return api_keys


def create_menu_service(dynamodb_resource: Any) -> MenuService:
    """Wire repositories and a fresh process-wide cache into a MenuService.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource

    Returns:
        Configured MenuService instance
    """
    menus_table = os.getenv("DYNAMODB_MENUS_TABLE", "site-menus")
    items_table = os.getenv("DYNAMODB_MENU_ITEMS_TABLE", "site-menu-items")
    ttl_seconds = float(os.getenv("MENU_CACHE_TTL_SECONDS", str(DEFAULT_TTL_SECONDS)))

    menu_repository = MenuRepository(dynamodb_resource=dynamodb_resource, table_name=menus_table)
    item_repository = MenuItemRepository(
        dynamodb_resource=dynamodb_resource, table_name=items_table
    )

    logger.info(f"Repositories configured - menus: {menus_table}, items: {items_table}")
    logger.info(f"Menu cache TTL: {ttl_seconds}s")

    return MenuService(
        menu_repository=menu_repository,
        item_repository=item_repository,
        cache=MenuCache(ttl_seconds=ttl_seconds),
    )
