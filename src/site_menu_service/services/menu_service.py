"""Menu service: cached read path and cache-invalidating mutators."""

import logging
import time

from site_menu_service.models.menu_models import (
    DisplayMenuItem,
    Menu,
    MenuItem,
    MenuItemCreate,
    MenuItemIssue,
    MenuItemUpdate,
    ReorderEntry,
)
from site_menu_service.observability.decorators import traced
from site_menu_service.observability.metrics import record_tree_build_duration
from site_menu_service.repositories.menu_repositories import (
    MenuItemRepository,
    MenuRepository,
    MenuStoreError,
)
from site_menu_service.services.menu_cache import MenuCache
from site_menu_service.services.menu_tree import build_tree, collect_descendants, validate_items

logger = logging.getLogger(__name__)


class InvalidMenuItemError(ValueError):
    """Raised when a mutation would break the menu structure."""


class MenuService:
    """Service for reading and editing site navigation menus.

    Reads go through the injected MenuCache. Every successful write calls
    invalidate for the affected location before returning, which is the only
    consistency mechanism between writes and cached reads.
    """

    def __init__(
        self,
        menu_repository: MenuRepository,
        item_repository: MenuItemRepository,
        cache: MenuCache,
    ) -> None:
        """Initialize the MenuService.

        Args:
            menu_repository: Repository for menu records
            item_repository: Repository for menu item records
            cache: Shared cache of assembled menus
        """
        self.menu_repository = menu_repository
        self.item_repository = item_repository
        self.cache = cache

    @traced("get_menu_items_for_location", service_name="menu-svc", location_arg="location")
    async def get_menu_items_for_location(self, location: str) -> list[DisplayMenuItem]:
        """Get the hierarchical menu for a location.

        Serves from cache when possible. On a miss the menu and its items are
        read from the store, assembled and cached. A menu without items is
        cached as an empty list. A location without a menu returns an empty
        list and is not cached, so unknown locations never occupy the cache.

        Args:
            location: Location key (e.g., 'header')

        Returns:
            List of root DisplayMenuItem nodes

        Raises:
            MenuStoreError: If the store fails; nothing is cached in that case
        """
        cached = self.cache.get(location)
        if cached is not None:
            return cached

        menu = self.menu_repository.find_menu_by_location(location)
        if menu is None:
            return []

        items = self.item_repository.find_items_for_menu(menu.id)

        started = time.perf_counter()
        forest = build_tree(items)
        record_tree_build_duration(location, time.perf_counter() - started)

        self.cache.put(location, forest)
        return forest

    async def get_menu(self, location: str) -> Menu | None:
        """Get the menu for a location without creating it.

        Args:
            location: Location key

        Returns:
            Menu if one exists, None otherwise
        """
        return self.menu_repository.find_menu_by_location(location)

    async def get_or_create_menu(self, location: str) -> Menu:
        """Get the menu for a location, creating a default one if absent.

        Only admin call sites use this; the public read path never creates.

        Args:
            location: Location key

        Returns:
            The existing or newly created Menu, or the one stored by a
            concurrent request that won the conditional create

        Raises:
            MenuStoreError: If the store fails
        """
        menu = self.menu_repository.find_menu_by_location(location)
        if menu is not None:
            return menu

        name = f"{location[:1].upper()}{location[1:]} Menu"
        created = self.menu_repository.create_menu(name=name, location=location)
        if created is not None:
            self.invalidate_cache_for_location(location)
            return created

        # Lost a concurrent create; use the winner.
        menu = self.menu_repository.find_menu_by_location(location)
        if menu is None:
            raise MenuStoreError(f"Menu for location {location} could not be created or read")
        return menu

    async def list_menus(self) -> list[Menu]:
        """List all menus sorted by name."""
        return self.menu_repository.list_menus()

    async def create_menu(self, name: str, location: str) -> Menu | None:
        """Create a menu for an unused location.

        Args:
            name: Menu display name
            location: Location key

        Returns:
            The new Menu, or None if the location already has a menu
        """
        if self.menu_repository.find_menu_by_location(location) is not None:
            logger.warning(f"Menu location '{location}' already exists")
            return None

        menu = self.menu_repository.create_menu(name=name, location=location)
        if menu is None:
            return None

        self.invalidate_cache_for_location(location)
        return menu

    async def list_items_for_location(self, location: str) -> list[MenuItem]:
        """List the flat items of a location for the admin editor.

        Creates the location's menu if it does not exist yet.

        Args:
            location: Location key

        Returns:
            Flat MenuItem list ordered by order
        """
        menu = await self.get_or_create_menu(location)
        return self.item_repository.find_items_for_menu(menu.id)

    @traced("create_menu_item", service_name="menu-svc", location_arg="location")
    async def create_item(self, location: str, data: MenuItemCreate) -> MenuItem:
        """Create a menu item at a location.

        Args:
            location: Location key; the menu is created if needed
            data: Validated item fields

        Returns:
            The stored MenuItem

        Raises:
            InvalidMenuItemError: If the parent is not an item of the same menu
        """
        menu = await self.get_or_create_menu(location)

        if data.parent_id:
            parent = self.item_repository.get_item(data.parent_id)
            if parent is None or parent.menu_id != menu.id:
                raise InvalidMenuItemError(
                    f"Parent item {data.parent_id} does not exist in menu '{location}'"
                )

        item = self.item_repository.create_item(
            menu_id=menu.id,
            location=menu.location,
            label=data.label,
            url=data.url,
            order=data.order,
            target=data.target,
            parent_id=data.parent_id,
        )

        logger.info(f"Created menu item {item.id} in location {location}")
        self.invalidate_cache_for_location(location)
        return item

    @traced("update_menu_item", service_name="menu-svc")
    async def update_item(self, item_id: str, data: MenuItemUpdate) -> MenuItem | None:
        """Apply a partial update to a menu item.

        Args:
            item_id: Item identifier
            data: Fields to change; only explicitly set fields are applied

        Returns:
            The updated MenuItem, or None if the item does not exist

        Raises:
            InvalidMenuItemError: If nothing is being changed, or the new parent
                is the item itself, one of its descendants, or in another menu
        """
        changes = data.changes()
        if not changes:
            raise InvalidMenuItemError("No update data provided")

        item = self.item_repository.get_item(item_id)
        if item is None:
            return None

        parent_id = changes.get("parent_id")
        if parent_id is not None:
            self._check_new_parent(item, parent_id)

        updated = self.item_repository.update_item(item_id, changes)
        if updated is None:
            return None

        logger.info(f"Updated menu item {item_id} fields: {', '.join(sorted(changes))}")
        self.invalidate_cache_for_location(item.location)
        return updated

    @traced("delete_menu_item", service_name="menu-svc")
    async def delete_item(self, item_id: str) -> bool:
        """Delete a menu item together with all of its descendants.

        Args:
            item_id: Item identifier

        Returns:
            True if the item was deleted, False if it does not exist
        """
        item = self.item_repository.get_item(item_id)
        if item is None:
            return False

        siblings = self.item_repository.find_items_for_menu(item.menu_id)
        descendants = collect_descendants(item_id, siblings)

        # Deepest descendants first, the item itself last.
        try:
            for descendant_id in reversed(descendants):
                self.item_repository.delete_item(descendant_id)
            deleted = self.item_repository.delete_item(item_id)
        finally:
            self.invalidate_cache_for_location(item.location)

        logger.info(f"Deleted menu item {item_id} and {len(descendants)} descendants")
        return deleted

    async def reorder_items(self, location: str, entries: list[ReorderEntry]) -> list[MenuItem]:
        """Set the order of several items of one location.

        Args:
            location: Location key
            entries: New order value per item id

        Returns:
            The updated MenuItems in request order

        Raises:
            InvalidMenuItemError: If the location has no menu or an id does not
                belong to it
        """
        menu = self.menu_repository.find_menu_by_location(location)
        if menu is None:
            raise InvalidMenuItemError(f"Menu location '{location}' does not exist")

        known_ids = {item.id for item in self.item_repository.find_items_for_menu(menu.id)}
        unknown = [entry.id for entry in entries if entry.id not in known_ids]
        if unknown:
            raise InvalidMenuItemError(
                f"Items not found in menu '{location}': {', '.join(unknown)}"
            )

        updated: list[MenuItem] = []
        try:
            for entry in entries:
                item = self.item_repository.update_item(entry.id, {"order": entry.order})
                if item is not None:
                    updated.append(item)
        finally:
            if updated:
                self.invalidate_cache_for_location(location)

        logger.info(f"Reordered {len(updated)} items in menu location {location}")
        return updated

    async def validate_location(self, location: str) -> list[MenuItemIssue]:
        """Report orphaned, self-parented and cyclic items of a location.

        Args:
            location: Location key

        Returns:
            List of issues, empty if the menu is clean or missing
        """
        menu = self.menu_repository.find_menu_by_location(location)
        if menu is None:
            return []
        return validate_items(self.item_repository.find_items_for_menu(menu.id))

    def invalidate_cache_for_location(self, location: str) -> None:
        """Drop the cached menu of one location."""
        self.cache.invalidate(location)

    def invalidate_all_caches(self) -> None:
        """Drop every cached menu."""
        self.cache.invalidate_all()

    def cached_locations(self) -> list[str]:
        """List the locations currently held in the cache."""
        return self.cache.locations()

    def _check_new_parent(self, item: MenuItem, parent_id: str) -> None:
        if parent_id == item.id:
            raise InvalidMenuItemError(f"Item {item.id} cannot be its own parent")

        parent = self.item_repository.get_item(parent_id)
        if parent is None or parent.menu_id != item.menu_id:
            raise InvalidMenuItemError(
                f"Parent item {parent_id} does not exist in the same menu as {item.id}"
            )

        siblings = self.item_repository.find_items_for_menu(item.menu_id)
        if parent_id in collect_descendants(item.id, siblings):
            raise InvalidMenuItemError(
                f"Item {parent_id} is a descendant of {item.id} and cannot be its parent"
            )
