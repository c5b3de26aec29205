"""Unit tests for menu, cart and customer models."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError

from digital_menu.models.catalog import CATEGORY_CATALOG
from digital_menu.models.customer_models import (
    Customer,
    CustomerCreate,
    CustomerExportRow,
    User,
)
from digital_menu.models.menu_models import CartItem, CartItemCreate, MenuItem, MenuItemCreate


@pytest.mark.unit
class TestCategoryCatalog:
    """Tests for the category catalog."""

    def test_catalog_order_and_size(self) -> None:
        """Test the catalog's fixed bounds."""
        assert len(CATEGORY_CATALOG) == 47
        assert CATEGORY_CATALOG[0] == "nibbles"
        assert CATEGORY_CATALOG[-1] == "signature-shots"

    def test_catalog_has_no_duplicates(self) -> None:
        """Test that every label appears once."""
        assert len(set(CATEGORY_CATALOG)) == len(CATEGORY_CATALOG)


@pytest.mark.unit
class TestMenuItem:
    """Tests for MenuItem."""

    def test_serializes_with_camel_case_names(self, menu_item_factory) -> None:
        """Test API field names."""
        data = menu_item_factory("i1", "Dal Makhani", "curries", is_veg=True).model_dump(
            by_alias=True
        )

        assert data["isVeg"] is True
        assert data["imageUrl"] == "https://example.com/i1.jpg"
        assert "is_veg" not in data

    def test_dynamodb_round_trip_keeps_string_price(self, mock_menu_dynamodb_item: dict) -> None:
        """Test that a numeric-string price survives storage unchanged."""
        item = MenuItem.from_dynamodb_item(mock_menu_dynamodb_item)

        assert item.price == "850"
        assert item.to_dynamodb_item()["price"] == "850"

    def test_decimal_price_becomes_float(self, mock_menu_dynamodb_item: dict) -> None:
        """Test that DynamoDB numbers are read back as floats."""
        stored = {**mock_menu_dynamodb_item, "price": Decimal("12.50")}

        assert MenuItem.from_dynamodb_item(stored).price == 12.5

    def test_to_dynamodb_item_uses_category_as_collection(self, menu_item_factory) -> None:
        """Test that the partition key is the category."""
        item = menu_item_factory("i1", "Mojito", "mocktails", price=9.5)

        stored = item.to_dynamodb_item()

        assert stored["collection"] == "mocktails"
        assert stored["price"] == Decimal("9.5")
        assert "created_at" not in stored

    def test_missing_category_falls_back_to_collection(self) -> None:
        """Test items stored without a category field."""
        item = MenuItem.from_dynamodb_item({"collection": "gin", "id": "g1", "name": "Tanqueray"})

        assert item.category == "gin"
        assert item.description == ""
        assert item.is_veg is False

    def test_in_collection_returns_relabelled_copy(self, menu_item_factory) -> None:
        """Test that relabelling leaves the original untouched."""
        item = menu_item_factory("i1", "Bao", "bao-&-dim-sum")

        copy = item.in_collection("bao & dim sum")

        assert copy.category == "bao & dim sum"
        assert item.category == "bao-&-dim-sum"


@pytest.mark.unit
class TestMenuItemCreate:
    """Tests for MenuItemCreate validation."""

    VALID = {
        "name": "Paneer Tikka",
        "description": "Charcoal grilled cottage cheese",
        "price": 320,
        "category": "charcoal",
        "isVeg": True,
        "imageUrl": "https://example.com/paneer.jpg",
    }

    def test_accepts_valid_payload(self) -> None:
        """Test that a complete payload is accepted with available defaulted."""
        payload = MenuItemCreate(**self.VALID)

        assert payload.available is True
        assert payload.price == 320

    def test_keeps_numeric_string_price(self) -> None:
        """Test that a string price stays a string."""
        payload = MenuItemCreate(**{**self.VALID, "price": " 320.50 "})

        assert payload.price == "320.50"

    @pytest.mark.parametrize("price", [0, -5, "", "abc", "NaN", True, None, [1]])
    def test_rejects_invalid_price(self, price: object) -> None:
        """Test that non-positive or non-numeric prices are rejected."""
        with pytest.raises(ValidationError):
            MenuItemCreate(**{**self.VALID, "price": price})

    @pytest.mark.parametrize("field", ["name", "description", "category", "imageUrl"])
    def test_rejects_blank_required_text(self, field: str) -> None:
        """Test that required text fields cannot be blank."""
        with pytest.raises(ValidationError):
            MenuItemCreate(**{**self.VALID, field: "   "})

    def test_requires_veg_flag(self) -> None:
        """Test that isVeg must be supplied."""
        payload = {k: v for k, v in self.VALID.items() if k != "isVeg"}

        with pytest.raises(ValidationError):
            MenuItemCreate(**payload)


@pytest.mark.unit
class TestCartModels:
    """Tests for cart models."""

    def test_cart_item_create_defaults_quantity(self) -> None:
        """Test that quantity defaults to one."""
        assert CartItemCreate(menuItemId="item_1").quantity == 1

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_cart_item_create_rejects_non_positive_quantity(self, quantity: int) -> None:
        """Test that quantities must be positive."""
        with pytest.raises(ValidationError):
            CartItemCreate(menuItemId="item_1", quantity=quantity)

    def test_cart_item_from_dynamodb_item(self) -> None:
        """Test parsing a stored cart row."""
        item = CartItem.from_dynamodb_item(
            {
                "id": "c1",
                "menu_item_id": "item_1",
                "quantity": Decimal("4"),
                "created_at": "2024-03-15T11:00:00+00:00",
                "updated_at": "2024-03-15T11:05:00+00:00",
            }
        )

        assert item.quantity == 4
        assert item.model_dump(by_alias=True)["menuItemId"] == "item_1"


@pytest.mark.unit
class TestCustomerModels:
    """Tests for customer and user models."""

    def test_customer_create_strips_and_drops_blank_email(self) -> None:
        """Test input normalisation."""
        payload = CustomerCreate(name="  Asha ", phone=" 9820000001 ", email="  ")

        assert payload.name == "Asha"
        assert payload.phone == "9820000001"
        assert payload.email is None

    def test_customer_create_requires_phone(self) -> None:
        """Test that phone is mandatory."""
        with pytest.raises(ValidationError):
            CustomerCreate(name="Asha")

    def test_customer_dynamodb_item_omits_missing_email(self) -> None:
        """Test that email is only stored when present."""
        now = datetime(2024, 3, 15, 10, 0, tzinfo=UTC)
        customer = Customer(id="c1", name="Asha", phone="1", created_at=now, updated_at=now)

        stored = customer.to_dynamodb_item()

        assert "email" not in stored
        assert Customer.from_dynamodb_item(stored) == customer

    def test_export_row_uses_column_headers(self) -> None:
        """Test spreadsheet column names on output."""
        row = CustomerExportRow(name="Asha", phone="1", created_at="2024-03-15 10:00:00")

        assert row.model_dump(by_alias=True) == {
            "Name": "Asha",
            "Phone": "1",
            "Created At": "2024-03-15 10:00:00",
        }

    def test_user_dynamodb_item(self) -> None:
        """Test the stored user row."""
        now = datetime(2024, 3, 15, 10, 0, tzinfo=UTC)
        user = User(username="admin", password="pw", created_at=now, updated_at=now)

        assert user.to_dynamodb_item()["created_at"] == "2024-03-15T10:00:00+00:00"
