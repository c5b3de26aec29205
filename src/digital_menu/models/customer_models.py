"""Customer and admin user models.

Customers are captured from the welcome page and deduplicated on phone number.
Users are bookkeeping rows written on successful dashboard login.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from digital_menu.models.base import CamelModel


class Customer(CamelModel):
    """Captured customer contact record.

    Stored in DynamoDB with phone as partition key.
    """

    id: str = Field(..., description="Customer identifier")
    name: str = Field(..., description="Customer name")
    phone: str = Field(..., description="Phone number, unique per customer")
    email: str | None = Field(None, description="Optional email address")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format.

        Returns:
            dict: DynamoDB-compatible representation
        """
        item: dict[str, Any] = {
            "phone": self.phone,
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

        if self.email is not None:
            item["email"] = self.email

        return item

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "Customer":
        """Create Customer from DynamoDB item.

        Args:
            item: DynamoDB item dictionary

        Returns:
            Customer: Parsed model instance
        """
        return cls(
            id=item["id"],
            name=item["name"],
            phone=item["phone"],
            email=item.get("email"),
            created_at=datetime.fromisoformat(item["created_at"]),
            updated_at=datetime.fromisoformat(item["updated_at"]),
        )


class CustomerCreate(CamelModel):
    """Payload for registering a customer."""

    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    email: str | None = None

    @field_validator("email")
    @classmethod
    def blank_email_is_none(cls, v: str | None) -> str | None:
        """Treat an empty email as not provided."""
        return v or None


class CustomerPage(BaseModel):
    """One page of customers plus the total number of matching records."""

    customers: list[Customer]
    total: int = Field(..., ge=0)


class CustomerExportRow(BaseModel):
    """Export-shaped customer row, keyed by spreadsheet column headers."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., alias="Name")
    phone: str = Field(..., alias="Phone")
    created_at: str = Field(..., alias="Created At")


class User(BaseModel):
    """Admin login bookkeeping row, keyed by username."""

    username: str
    password: str
    created_at: datetime
    updated_at: datetime

    def to_dynamodb_item(self) -> dict[str, Any]:
        """Convert to DynamoDB item format."""
        return {
            "username": self.username,
            "password": self.password,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }
