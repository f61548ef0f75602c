"""DynamoDB repository classes for menus and menu items.

These repositories are the row store behind the menu service. Unlike a plain
lookup miss (which returns None/False), a DynamoDB failure is logged and raised
as MenuStoreError so callers of the read path see the failure instead of an
empty menu.
"""

import logging
import uuid
from datetime import UTC, datetime
from typing import Any

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from site_menu_service.models.menu_models import Menu, MenuItem

logger = logging.getLogger(__name__)


class MenuStoreError(Exception):
    """Raised when the underlying store rejects or fails an operation."""


class MenuRepository:
    """Repository for menu records.

    Manages menus in DynamoDB with location as partition key.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def find_menu_by_location(self, location: str) -> Menu | None:
        """Retrieve the menu for a location.

        Args:
            location: Location key (e.g., 'header')

        Returns:
            Menu if found, None otherwise

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        try:
            response = self.table.get_item(Key={"location": location})
        except ClientError as e:
            logger.error(f"Failed to get menu for location {location}: {e}")
            raise MenuStoreError(f"Failed to get menu for location {location}") from e

        if "Item" not in response:
            return None

        return Menu.from_dynamodb_item(response["Item"])

    def create_menu(self, name: str, location: str) -> Menu | None:
        """Create a menu for a location.

        The write is conditional on the location being unused.

        Args:
            name: Menu display name
            location: Location key

        Returns:
            Menu: The stored menu, or None if the location already has one

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        now = datetime.now(UTC)
        menu = Menu(
            id=f"menu_{uuid.uuid4().hex[:12]}",
            name=name,
            location=location,
            created_at=now,
            updated_at=now,
        )

        try:
            self.table.put_item(
                Item=menu.to_dynamodb_item(),
                ConditionExpression=Attr("location").not_exists(),
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                logger.warning(f"Menu location {location} already exists")
                return None
            logger.error(f"Failed to create menu for location {location}: {e}")
            raise MenuStoreError(f"Failed to create menu for location {location}") from e

        logger.info(f"Created menu {menu.id} for location {location}")
        return menu

    def list_menus(self) -> list[Menu]:
        """List all menus sorted by name.

        Returns:
            list: List of Menu objects (empty list if none found)

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        items: list[dict[str, Any]] = []
        scan_kwargs: dict[str, Any] = {}

        try:
            while True:
                response = self.table.scan(**scan_kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    break
                scan_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except ClientError as e:
            logger.error(f"Failed to list menus: {e}")
            raise MenuStoreError("Failed to list menus") from e

        menus = [Menu.from_dynamodb_item(item) for item in items]
        return sorted(menus, key=lambda m: m.name)


class MenuItemRepository:
    """Repository for menu item records.

    Manages menu items in DynamoDB with id as partition key. Items of one menu
    are fetched through a Global Secondary Index on menu_id.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def find_items_for_menu(self, menu_id: str) -> list[MenuItem]:
        """List every item of a menu ordered by order ascending.

        Args:
            menu_id: Menu identifier

        Returns:
            list: List of MenuItem objects (empty list if none found)

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        items: list[dict[str, Any]] = []
        query_kwargs: dict[str, Any] = {
            "IndexName": "menu_id-index",
            "KeyConditionExpression": Key("menu_id").eq(menu_id),
        }

        try:
            while True:
                response = self.table.query(**query_kwargs)
                items.extend(response.get("Items", []))
                if "LastEvaluatedKey" not in response:
                    break
                query_kwargs["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        except ClientError as e:
            logger.error(f"Failed to list items for menu {menu_id}: {e}")
            raise MenuStoreError(f"Failed to list items for menu {menu_id}") from e

        menu_items = [MenuItem.from_dynamodb_item(item) for item in items]
        return sorted(menu_items, key=lambda i: i.sort_key)

    def get_item(self, item_id: str) -> MenuItem | None:
        """Retrieve a menu item by id.

        Args:
            item_id: Item identifier

        Returns:
            MenuItem if found, None otherwise

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        try:
            response = self.table.get_item(Key={"id": item_id})
        except ClientError as e:
            logger.error(f"Failed to get menu item {item_id}: {e}")
            raise MenuStoreError(f"Failed to get menu item {item_id}") from e

        if "Item" not in response:
            return None

        return MenuItem.from_dynamodb_item(response["Item"])

    def create_item(
        self,
        menu_id: str,
        location: str,
        label: str,
        url: str,
        order: int,
        target: str | None = None,
        parent_id: str | None = None,
    ) -> MenuItem:
        """Create a menu item.

        Args:
            menu_id: Owning menu identifier
            location: Location of the owning menu
            label: Display text
            url: Link href
            order: Sibling sort position
            target: Optional link target
            parent_id: Optional parent item id

        Returns:
            MenuItem: The stored item

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        now = datetime.now(UTC)
        item = MenuItem(
            id=f"item_{uuid.uuid4().hex[:12]}",
            menu_id=menu_id,
            location=location,
            parent_id=parent_id or None,
            label=label,
            url=url,
            target=target or None,
            order=order,
            created_at=now,
            updated_at=now,
        )

        try:
            self.table.put_item(Item=item.to_dynamodb_item())
        except ClientError as e:
            logger.error(f"Failed to create menu item in menu {menu_id}: {e}")
            raise MenuStoreError(f"Failed to create menu item in menu {menu_id}") from e

        return item

    def update_item(self, item_id: str, fields: dict[str, Any]) -> MenuItem | None:
        """Apply a partial update to a menu item.

        Fields set to None are removed from the stored item.

        Args:
            item_id: Item identifier
            fields: Attribute names mapped to new values

        Returns:
            MenuItem with the new values, None if the item does not exist

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        names: dict[str, str] = {}
        values: dict[str, Any] = {":updated_at": datetime.now(UTC).isoformat()}
        set_clauses = ["#updated_at = :updated_at"]
        remove_clauses: list[str] = []
        names["#updated_at"] = "updated_at"

        for field, value in fields.items():
            names[f"#{field}"] = field
            if value is None:
                remove_clauses.append(f"#{field}")
            else:
                set_clauses.append(f"#{field} = :{field}")
                values[f":{field}"] = value

        expression = "SET " + ", ".join(set_clauses)
        if remove_clauses:
            expression += " REMOVE " + ", ".join(remove_clauses)

        try:
            response = self.table.update_item(
                Key={"id": item_id},
                UpdateExpression=expression,
                ConditionExpression=Attr("id").exists(),
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW",
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return None
            logger.error(f"Failed to update menu item {item_id}: {e}")
            raise MenuStoreError(f"Failed to update menu item {item_id}") from e

        return MenuItem.from_dynamodb_item(response["Attributes"])

    def delete_item(self, item_id: str) -> bool:
        """Delete a menu item.

        Args:
            item_id: Item identifier

        Returns:
            bool: True if an item was deleted, False if it did not exist

        Raises:
            MenuStoreError: If DynamoDB fails
        """
        try:
            self.table.delete_item(
                Key={"id": item_id},
                ConditionExpression=Attr("id").exists(),
            )
        except ClientError as e:
            if e.response["Error"]["Code"] == "ConditionalCheckFailedException":
                return False
            logger.error(f"Failed to delete menu item {item_id}: {e}")
            raise MenuStoreError(f"Failed to delete menu item {item_id}") from e

        return True
