"""Menu data models.

These models represent navigation menus, their flat stored items, and the
hierarchical display form served to page renderers. Stored models convert
to and from DynamoDB items; display models carry ISO-8601 timestamps.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

MAX_LOCATION_LENGTH = 128


class Menu(BaseModel):
    """Named menu owning the items shown at one location.

    Stored in DynamoDB with location as partition key.
    """

    id: str = Field(..., description="Unique identifier for the menu")
    name: str = Field(..., description="Human readable menu name")
    location: str = Field(..., description="Location key (e.g., 'header', 'footer')")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        return {
            "location": self.location,
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Menu":
        """Create Menu from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Menu: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            location=item["location"],
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class MenuItem(BaseModel):
    """Flat menu item as stored.

    Stored in DynamoDB with id as partition key and a GSI on menu_id.
    """

    id: str = Field(..., description="Unique identifier for the menu item")
    menu_id: str = Field(..., description="Menu this item belongs to")
    location: str = Field(..., description="Location of the owning menu")
    parent_id: str | None = Field(None, description="Parent item id, None for root items")
    label: str = Field(..., description="Display text")
    url: str = Field(..., description="Link target href, '#' for placeholders")
    target: str | None = Field(None, description="Link target (e.g., '_self', '_blank')")
    order: int | None = Field(None, description="Sibling sort position, missing counts as 0")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @property
    def sort_key(self) -> tuple[int, str]:
        """Sibling ordering key: order (missing as 0), then id."""
        return (self.order or 0, self.id)

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Optional attributes are omitted rather than stored as nulls.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "id": self.id,
            "menu_id": self.menu_id,
            "location": self.location,
            "label": self.label,
            "url": self.url,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.parent_id is not None:
            item["parent_id"] = self.parent_id

        if self.target is not None:
            item["target"] = self.target

        if self.order is not None:
            item["order"] = self.order

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        DynamoDB returns numbers as Decimal, so order is coerced back to int.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "menu_id": item["menu_id"],
            "location": item["location"],
            "label": item["label"],
            "url": item["url"],
            "created_at": datetime.fromisoformat(item["created_at"]),
            "updated_at": datetime.fromisoformat(item["updated_at"]),
        }

        if item.get("parent_id"):
            data["parent_id"] = item["parent_id"]

        if item.get("target"):
            data["target"] = item["target"]

        if item.get("order") is not None:
            data["order"] = int(item["order"])

        return cls(**data)


class DisplayMenuItem(BaseModel):
    """Hierarchical menu node served to page renderers.

    Carries every stored field except the relational keys, with timestamps
    serialized as ISO-8601 strings.
    """

    id: str
    label: str
    url: str
    target: str | None = None
    order: int | None = None
    created_at: str
    updated_at: str
    children: list["DisplayMenuItem"] = Field(default_factory=list)

    @classmethod
    def from_menu_item(cls, item: MenuItem) -> "DisplayMenuItem":
        """Build a childless display node from a stored item.

        Args:
            item: Stored menu item

        Returns:
            DisplayMenuItem: Node with an empty children list
        """
        return cls(
            id=item.id,
            label=item.label,
            url=item.url,
            target=item.target,
            order=item.order,
            created_at=item.created_at.isoformat(),
            updated_at=item.updated_at.isoformat(),
        )

    @property
    def sort_key(self) -> tuple[int, str]:
        """Sibling ordering key: order (missing as 0), then id."""
        return (self.order or 0, self.id)


class MenuCreate(BaseModel):
    """Request body for creating a menu."""

    name: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1, max_length=MAX_LOCATION_LENGTH)


class MenuItemCreate(BaseModel):
    """Request body for creating a menu item."""

    label: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    order: int
    target: str | None = None
    parent_id: str | None = None


class MenuItemUpdate(BaseModel):
    """Partial update for a menu item.

    Only fields explicitly present in the request are applied, so
    ``parent_id=None`` detaches an item while an absent parent_id leaves it.
    An empty string clears target or parent_id.
    """

    label: str | None = Field(None, min_length=1)
    url: str | None = Field(None, min_length=1)
    order: int | None = None
    target: str | None = None
    parent_id: str | None = None

    def changes(self) -> dict[str, Any]:
        """Return the explicitly provided fields as store attribute changes.

        Nulls are dropped for required fields and kept for target and
        parent_id, where None means remove.
        """
        data = {
            field: value
            for field, value in self.model_dump(exclude_unset=True).items()
            if value is not None or field in ("target", "parent_id")
        }
        for field in ("target", "parent_id"):
            if data.get(field) == "":
                data[field] = None
        return data


class ReorderEntry(BaseModel):
    """Single id/order pair in a bulk reorder request."""

    id: str = Field(..., min_length=1)
    order: int


class ReorderRequest(BaseModel):
    """Request body for bulk reordering the items of one location."""

    location: str = Field(..., min_length=1, max_length=MAX_LOCATION_LENGTH)
    items: list[ReorderEntry]


class MenuItemIssue(BaseModel):
    """Problem found by the menu validation pass."""

    item_id: str
    issue: str = Field(..., description="orphan, self_parent, cycle or duplicate_id")
    message: str
