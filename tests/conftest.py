"""Shared pytest fixtures and configuration for all tests."""

import os
from collections.abc import Callable
from datetime import UTC, datetime

import pytest

# main.py and lambda_handler.py skip building the real application in test mode
os.environ.setdefault("ENVIRONMENT", "test")

from site_menu_service.models.menu_models import Menu, MenuItem  # noqa: E402

CREATED_AT = datetime(2024, 1, 15, 10, 30, tzinfo=UTC)


@pytest.fixture
def footer_menu() -> Menu:
    """Fixture providing the footer menu record."""
    return Menu(
        id="menu_footer",
        name="Footer Menu",
        location="footer",
        created_at=CREATED_AT,
        updated_at=CREATED_AT,
    )


@pytest.fixture
def make_item() -> Callable[..., MenuItem]:
    """Fixture providing a factory for footer menu items."""

    def _make_item(
        item_id: str,
        label: str | None = None,
        parent_id: str | None = None,
        order: int | None = 0,
        **overrides: object,
    ) -> MenuItem:
        data: dict[str, object] = {
            "id": item_id,
            "menu_id": "menu_footer",
            "location": "footer",
            "parent_id": parent_id,
            "label": label or f"Item {item_id}",
            "url": f"/{item_id}",
            "order": order,
            "created_at": CREATED_AT,
            "updated_at": CREATED_AT,
        }
        data.update(overrides)
        return MenuItem(**data)

    return _make_item


@pytest.fixture
def footer_items(make_item: Callable[..., MenuItem]) -> list[MenuItem]:
    """Fixture providing Home (with child About) and Contact footer items."""
    return [
        make_item("1", label="Home", parent_id=None, order=0),
        make_item("2", label="About", parent_id="1", order=0),
        make_item("3", label="Contact", parent_id=None, order=1),
    ]


@pytest.fixture
def mock_menu_dynamodb_item() -> dict:
    """Fixture providing a stored menu as DynamoDB returns it."""
    return {
        "location": "footer",
        "id": "menu_footer",
        "name": "Footer Menu",
        "created_at": CREATED_AT.isoformat(),
        "updated_at": CREATED_AT.isoformat(),
    }
