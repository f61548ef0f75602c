"""FastAPI application for the public menu and admin menu endpoints."""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI, Header, HTTPException, Path, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from site_menu_service.auth.api_dependencies import get_api_key_from_header
from site_menu_service.auth.api_key_validator import APIKeyValidator
from site_menu_service.models.menu_models import (
    MAX_LOCATION_LENGTH,
    DisplayMenuItem,
    Menu,
    MenuCreate,
    MenuItem,
    MenuItemCreate,
    MenuItemIssue,
    MenuItemUpdate,
    ReorderRequest,
)
from site_menu_service.repositories.menu_repositories import MenuStoreError
from site_menu_service.services.menu_service import InvalidMenuItemError, MenuService

logger = logging.getLogger(__name__)

LocationPath = Annotated[str, Path(min_length=1, max_length=MAX_LOCATION_LENGTH)]


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MessageResponse(BaseModel):
    """Plain acknowledgement response."""

    message: str


class ValidationReport(BaseModel):
    """Result of validating the items of one location."""

    location: str
    valid: bool
    issues: list[MenuItemIssue]


class CacheStatusResponse(BaseModel):
    """Locations currently held in the menu cache."""

    locations: list[str]


def create_app(menu_service: MenuService, api_keys: list[str]) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for reading and editing menus
        api_keys: Valid API keys for the admin endpoints

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Site Menu Service",
        description="Navigation menus for directory pages, with admin editing endpoints",
        version="1.0.0",
    )

    app.state.menu_service = menu_service
    app.state.api_key_validator = APIKeyValidator(api_keys=api_keys)

    @app.exception_handler(MenuStoreError)
    async def handle_store_error(_request: Request, exc: MenuStoreError) -> JSONResponse:
        logger.error(f"Menu store unavailable: {exc}")
        return JSONResponse(status_code=503, content={"detail": "Menu store unavailable"})

    def validate_api_key(x_api_key: str | None = Header(None)) -> str:
        """Dependency to validate API key."""
        return get_api_key_from_header(x_api_key=x_api_key, validator=app.state.api_key_validator)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    @app.get("/menus/{location}", response_model=list[DisplayMenuItem], tags=["Menus"])
    async def get_menu(location: LocationPath) -> list[DisplayMenuItem]:
        """Get the hierarchical menu for a location.

        Unknown locations return an empty list.
        """
        items: list[DisplayMenuItem] = await app.state.menu_service.get_menu_items_for_location(
            location
        )
        return items

    @app.get("/admin/menus", response_model=list[Menu], tags=["Admin Menus"])
    async def list_menus(_api_key: str = Depends(validate_api_key)) -> list[Menu]:
        """List every menu sorted by name."""
        menus: list[Menu] = await app.state.menu_service.list_menus()
        return menus

    @app.post("/admin/menus", response_model=Menu, status_code=201, tags=["Admin Menus"])
    async def create_menu(
        body: MenuCreate,
        _api_key: str = Depends(validate_api_key),
    ) -> Menu:
        """Create a menu for a new location.

        Raises:
            HTTPException: 409 if the location already has a menu
        """
        menu: Menu | None = await app.state.menu_service.create_menu(
            name=body.name, location=body.location
        )
        if menu is None:
            raise HTTPException(
                status_code=409, detail=f"Menu location '{body.location}' already exists."
            )
        return menu

    @app.post("/admin/menus/reorder", response_model=MessageResponse, tags=["Admin Menus"])
    async def reorder_menu(
        body: ReorderRequest,
        _api_key: str = Depends(validate_api_key),
    ) -> MessageResponse:
        """Set the order of several items of one location.

        Raises:
            HTTPException: 400 if the location or any item id is unknown
        """
        try:
            await app.state.menu_service.reorder_items(body.location, body.items)
        except InvalidMenuItemError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        return MessageResponse(message=f"{body.location} menu reordered successfully.")

    @app.get(
        "/admin/menus/{location}/items", response_model=list[MenuItem], tags=["Admin Menu Items"]
    )
    async def list_menu_items(
        location: LocationPath,
        _api_key: str = Depends(validate_api_key),
    ) -> list[MenuItem]:
        """List the flat items of a location, creating its menu if needed."""
        items: list[MenuItem] = await app.state.menu_service.list_items_for_location(location)
        return items

    @app.post(
        "/admin/menus/{location}/items",
        response_model=MenuItem,
        status_code=201,
        tags=["Admin Menu Items"],
    )
    async def create_menu_item(
        location: LocationPath,
        body: MenuItemCreate,
        _api_key: str = Depends(validate_api_key),
    ) -> MenuItem:
        """Create a menu item at a location.

        Raises:
            HTTPException: 400 if the parent is not in the same menu
        """
        try:
            item: MenuItem = await app.state.menu_service.create_item(location, body)
        except InvalidMenuItemError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        return item

    @app.put("/admin/menus/items/{item_id}", response_model=MenuItem, tags=["Admin Menu Items"])
    async def update_menu_item(
        item_id: str,
        body: MenuItemUpdate,
        _api_key: str = Depends(validate_api_key),
    ) -> MenuItem:
        """Partially update a menu item.

        Raises:
            HTTPException: 400 for empty or structurally invalid updates,
                404 if the item does not exist
        """
        try:
            item: MenuItem | None = await app.state.menu_service.update_item(item_id, body)
        except InvalidMenuItemError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e

        if item is None:
            raise HTTPException(status_code=404, detail=f"Menu item with ID {item_id} not found.")
        return item

    @app.delete("/admin/menus/items/{item_id}", status_code=204, tags=["Admin Menu Items"])
    async def delete_menu_item(
        item_id: str,
        _api_key: str = Depends(validate_api_key),
    ) -> Response:
        """Delete a menu item and its descendants.

        Raises:
            HTTPException: 404 if the item does not exist
        """
        deleted: bool = await app.state.menu_service.delete_item(item_id)
        if not deleted:
            raise HTTPException(status_code=404, detail=f"Menu item with ID {item_id} not found.")
        return Response(status_code=204)

    @app.get(
        "/admin/menus/{location}/validation",
        response_model=ValidationReport,
        tags=["Admin Menus"],
    )
    async def validate_menu(
        location: LocationPath,
        _api_key: str = Depends(validate_api_key),
    ) -> ValidationReport:
        """Report orphaned, self-parented and cyclic items of a location."""
        issues: list[MenuItemIssue] = await app.state.menu_service.validate_location(location)
        return ValidationReport(location=location, valid=not issues, issues=issues)

    @app.get("/admin/cache", response_model=CacheStatusResponse, tags=["Admin Cache"])
    async def cache_status(_api_key: str = Depends(validate_api_key)) -> CacheStatusResponse:
        """List the locations currently cached."""
        return CacheStatusResponse(locations=app.state.menu_service.cached_locations())

    @app.delete("/admin/cache/{location}", response_model=MessageResponse, tags=["Admin Cache"])
    async def invalidate_location_cache(
        location: LocationPath,
        _api_key: str = Depends(validate_api_key),
    ) -> MessageResponse:
        """Drop the cached menu of one location."""
        app.state.menu_service.invalidate_cache_for_location(location)
        return MessageResponse(message=f"Cache cleared for menu location: {location}")

    @app.delete("/admin/cache", response_model=MessageResponse, tags=["Admin Cache"])
    async def invalidate_all_caches(
        _api_key: str = Depends(validate_api_key),
    ) -> MessageResponse:
        """Drop every cached menu."""
        app.state.menu_service.invalidate_all_caches()
        return MessageResponse(message="All menu caches cleared")

    return app
