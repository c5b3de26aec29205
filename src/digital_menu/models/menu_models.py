"""Menu and cart data models.

These models represent menu items and cart items as returned by the API, plus
the validated payloads used to create them. Conversion helpers map each model
to and from its DynamoDB item representation.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from digital_menu.models.base import CamelModel


def _price_from_dynamodb(value: Any) -> float | str:
    """DynamoDB returns numbers as Decimal; numeric-string prices stay strings."""
    if isinstance(value, Decimal):
        return float(value)
    return value  # type: ignore[no-any-return]


class MenuItem(CamelModel):
    """Menu item model."""

    id: str = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Item name")
    description: str = Field(default="", description="Item description")
    price: float | str = Field(..., description="Item price, numeric or numeric string")
    category: str = Field(..., description="Collection the item was read from")
    is_veg: bool = Field(default=False, description="Vegetarian flag")
    image_url: str | None = Field(None, description="URL to item image")
    available: bool = Field(default=True, description="Whether item is currently available")
    restaurant_id: str | None = Field(None, description="Restaurant this item belongs to")
    created_at: datetime | None = Field(None, description="Creation timestamp")
    updated_at: datetime | None = Field(None, description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        The item's category doubles as its collection (partition key).

        Returns:
            dict: DynamoDB-compatible representation
        """
        price: Any = self.price
        if not isinstance(price, str):
            # boto3 rejects floats
            price = Decimal(str(price))

        item: dict[str, Any] = {
            "collection": self.category,
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": price,
            "category": self.category,
            "is_veg": self.is_veg,
            "available": self.available,
        }

        if self.image_url is not None:
            item["image_url"] = self.image_url

        if self.restaurant_id is not None:
            item["restaurant_id"] = self.restaurant_id

        if self.created_at is not None:
            item["created_at"] = self.created_at.isoformat()

        if self.updated_at is not None:
            item["updated_at"] = self.updated_at.isoformat()

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "MenuItem":
        """Create MenuItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            MenuItem: Parsed model instance
        """
        data: dict[str, Any] = {
            "id": item["id"],
            "name": item.get("name", ""),
            "description": item.get("description", ""),
            "price": _price_from_dynamodb(item.get("price", 0)),
            "category": item.get("category", item["collection"]),
            "is_veg": bool(item.get("is_veg", False)),
            "available": bool(item.get("available", True)),
            "image_url": item.get("image_url"),
            "restaurant_id": item.get("restaurant_id"),
        }

        if "created_at" in item:
            data["created_at"] = datetime.fromisoformat(item["created_at"])

        if "updated_at" in item:
            data["updated_at"] = datetime.fromisoformat(item["updated_at"])

        return cls(**data)

    def in_collection(self, collection: str) -> "MenuItem":
        """Return a copy of this item labelled with the collection it was found in."""
        return self.model_copy(update={"category": collection})


class MenuItemCreate(CamelModel):
    """Payload for inserting a menu item.

    The category is not checked against the catalog; any name creates or
    reuses a collection of that name.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    price: float | str
    category: str = Field(..., min_length=1)
    is_veg: bool
    image_url: str = Field(..., min_length=1)
    available: bool = True

    @field_validator("price", mode="before")
    @classmethod
    def validate_price(cls, v: Any) -> Any:
        """Accept a positive number or a non-empty string holding one."""
        if isinstance(v, bool) or not isinstance(v, (int, float, Decimal, str)):
            raise ValueError("price must be a positive number or numeric string")

        text = v.strip() if isinstance(v, str) else str(v)
        try:
            parsed = Decimal(text)
        except InvalidOperation:
            raise ValueError("price must be a positive number or numeric string") from None

        if not parsed.is_finite() or parsed <= 0:
            raise ValueError("price must be positive")

        return text if isinstance(v, str) else v


class CartItem(CamelModel):
    """Cart line referencing a single menu item."""

    id: str = Field(..., description="Cart item identifier")
    menu_item_id: str = Field(..., description="Referenced menu item")
    quantity: int = Field(..., description="Number of units", gt=0)
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "CartItem":
        """Create CartItem from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            CartItem: Parsed model instance
        """
        return cls(
            id=item["id"],
            menu_item_id=item["menu_item_id"],
            quantity=int(item["quantity"]),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class CartItemCreate(CamelModel):
    """Payload for adding a menu item to the cart."""

    menu_item_id: str = Field(..., min_length=1)
    quantity: int = Field(default=1, gt=0)
