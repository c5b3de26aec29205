"""Shared pytest fixtures and configuration for all tests."""

import os
from datetime import UTC, datetime

import pytest

# Keep src.main and src.lambda_handler from building the real app on import
os.environ.setdefault("ENVIRONMENT", "test")

from digital_menu.models.customer_models import Customer  # noqa: E402
from digital_menu.models.menu_models import MenuItem  # noqa: E402


@pytest.fixture
def mock_restaurant_id() -> str:
    """Fixture providing a standard test restaurant ID."""
    return "6874cff2a880250859286de6"


def _make_menu_item(
    item_id: str,
    name: str,
    collection: str,
    is_veg: bool = False,
    description: str = "",
    price: float | str = 100.0,
) -> MenuItem:
    """Build a MenuItem with sensible defaults."""
    return MenuItem(
        id=item_id,
        name=name,
        description=description,
        price=price,
        category=collection,
        is_veg=is_veg,
        image_url=f"https://example.com/{item_id}.jpg",
    )


def _make_customer(customer_id: str, phone: str, created_at: datetime, name: str = "Guest") -> Customer:
    """Build a Customer with sensible defaults."""
    return Customer(
        id=customer_id,
        name=name,
        phone=phone,
        created_at=created_at,
        updated_at=created_at,
    )


@pytest.fixture
def mock_menu_items() -> list[MenuItem]:
    """Fixture providing sample menu items in storage order."""
    return [
        _make_menu_item("item_1", "Zeta", "nibbles", is_veg=False),
        _make_menu_item("item_2", "Apple", "nibbles", is_veg=True),
        _make_menu_item("item_3", "Mango", "nibbles", is_veg=True),
    ]


@pytest.fixture
def mock_menu_dynamodb_item() -> dict:
    """Fixture providing a raw menu item as stored in DynamoDB."""
    return {
        "collection": "red-wines",
        "id": "wine_1",
        "name": "Sula Shiraz",
        "description": "Medium-bodied Nashik red",
        "price": "850",
        "category": "red-wines",
        "is_veg": True,
        "available": True,
        "image_url": "https://example.com/sula.jpg",
        "restaurant_id": "6874cff2a880250859286de6",
        "created_at": "2024-03-15T10:30:00+00:00",
        "updated_at": "2024-03-15T10:30:00+00:00",
    }


@pytest.fixture
def mock_customers() -> list[Customer]:
    """Fixture providing 25 customers, one per minute from 2024-03-15 10:00 UTC."""
    return [
        _make_customer(f"cust_{i}", f"98200000{i:02d}", datetime(2024, 3, 15, 10, i, tzinfo=UTC))
        for i in range(25)
    ]


@pytest.fixture
def menu_item_factory():
    """Fixture providing the MenuItem builder."""
    return _make_menu_item


@pytest.fixture
def customer_factory():
    """Fixture providing the Customer builder."""
    return _make_customer
