"""Record store: data-access façade used by the API layer.

Methods are synchronous because boto3 is; the API routes are plain functions
so FastAPI runs them in its threadpool and requests proceed concurrently.
"""

import logging
import uuid
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from digital_menu.models.catalog import CATEGORY_CATALOG
from digital_menu.models.customer_models import (
    Customer,
    CustomerCreate,
    CustomerExportRow,
    CustomerPage,
    User,
)
from digital_menu.models.menu_models import CartItem, CartItemCreate, MenuItem, MenuItemCreate
from digital_menu.observability import traced
from digital_menu.observability.metrics import record_cart_addition, record_customer_registration
from digital_menu.repositories.customer_repositories import CustomerRepository, UserRepository
from digital_menu.repositories.menu_repositories import CartRepository, MenuItemRepository
from digital_menu.services.category_resolver import CategoryResolver, sort_menu_items

logger = logging.getLogger(__name__)

EXPORT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _matches_date(
    created_at: datetime, year: int | None, month: int | None, day: int | None
) -> bool:
    """Whether a timestamp falls on the given calendar parts (UTC).

    Each part is optional; omitted parts match anything.
    """
    moment = created_at.astimezone(UTC)
    return (
        (year is None or moment.year == year)
        and (month is None or moment.month == month)
        and (day is None or moment.day == day)
    )


class RecordStore:
    """CRUD façade over the menu, cart, customer and user repositories.

    Storage failures propagate as StorageError, except category lookups,
    which report them as an empty result.
    """

    def __init__(
        self,
        menu_repository: MenuItemRepository,
        cart_repository: CartRepository,
        customer_repository: CustomerRepository,
        user_repository: UserRepository,
        restaurant_id: str,
        catalog: tuple[str, ...] = CATEGORY_CATALOG,
    ) -> None:
        """Initialize the RecordStore.

        Args:
            menu_repository: Repository for menu collections
            cart_repository: Repository for cart items
            customer_repository: Repository for customers
            user_repository: Repository for admin login bookkeeping
            restaurant_id: Identifier stamped on inserted menu items
            catalog: Ordered category labels
        """
        self.menu_repository = menu_repository
        self.cart_repository = cart_repository
        self.customer_repository = customer_repository
        self.user_repository = user_repository
        self.restaurant_id = restaurant_id
        self.catalog = catalog
        self.resolver = CategoryResolver(menu_repository)

    def check_connection(self) -> None:
        """Verify every backing table is reachable.

        Raises:
            StorageError: If any table cannot be described
        """
        for repository in (
            self.menu_repository,
            self.cart_repository,
            self.customer_repository,
            self.user_repository,
        ):
            repository.check_connection()
        logger.info("All DynamoDB tables reachable")

    # Menu

    @traced("list_all_menu_items")
    def list_all_menu_items(self) -> list[MenuItem]:
        """Items from every catalog collection, sorted.

        Only the literal catalog names are read; no resolution fallback.
        """
        items: list[MenuItem] = []
        for category in self.catalog:
            items.extend(self.menu_repository.list_items(category))
        return sort_menu_items(items)

    @traced("get_menu_items_by_category")
    def get_menu_items_by_category(self, token: str) -> list[MenuItem]:
        """Items for a category token, resolved with fallbacks. Never raises."""
        return self.resolver.resolve(token)

    def get_menu_item_by_id(self, item_id: str) -> MenuItem | None:
        """First item with this id, scanning catalog collections in order."""
        for category in self.catalog:
            item = self.menu_repository.get_item(category, item_id)
            if item is not None:
                return item
        return None

    def list_categories(self) -> tuple[str, ...]:
        return self.catalog

    @traced("add_menu_item")
    def add_menu_item(self, fields: MenuItemCreate | Mapping[str, Any]) -> MenuItem:
        """Validate and insert a menu item into the collection named by its category.

        Args:
            fields: Item fields

        Returns:
            MenuItem: The stored item

        Raises:
            pydantic.ValidationError: If required fields are missing or malformed
        """
        payload = (
            fields if isinstance(fields, MenuItemCreate) else MenuItemCreate.model_validate(fields)
        )
        now = datetime.now(UTC)
        item = MenuItem(
            id=uuid.uuid4().hex,
            restaurant_id=self.restaurant_id,
            created_at=now,
            updated_at=now,
            **payload.model_dump(),
        )
        self.menu_repository.save_item(item)
        logger.info(f"Added menu item {item.id} to collection {item.category!r}")
        return item

    @traced("clear_all_menu_data")
    def clear_all_menu_data(self) -> int:
        """Delete every item in every catalog collection. Irreversible.

        Returns:
            int: Number of items deleted
        """
        deleted = sum(self.menu_repository.delete_collection(c) for c in self.catalog)
        logger.warning(f"Cleared all menu data: {deleted} items deleted")
        return deleted

    def fix_veg_classification(self) -> dict[str, Any]:
        """Maintenance hook for veg/non-veg fixes; currently changes nothing."""
        return {"updated": 0, "details": []}

    # Cart

    def list_cart_items(self) -> list[CartItem]:
        return self.cart_repository.list_items()

    @traced("add_to_cart")
    def add_to_cart(self, menu_item_id: str, quantity: int = 1) -> CartItem:
        """Add a menu item to the cart, incrementing its row if already present.

        Args:
            menu_item_id: Menu item to add
            quantity: Positive number of units

        Returns:
            CartItem: The cart row after the update

        Raises:
            pydantic.ValidationError: If the id is empty or quantity is not positive
        """
        request = CartItemCreate(menu_item_id=menu_item_id, quantity=quantity)
        cart_item = self.cart_repository.add_quantity(
            request.menu_item_id, request.quantity, datetime.now(UTC)
        )
        record_cart_addition(request.quantity)
        return cart_item

    def remove_from_cart(self, cart_item_id: str) -> None:
        self.cart_repository.delete_item(cart_item_id)

    def clear_cart(self) -> None:
        deleted = self.cart_repository.delete_all()
        logger.info(f"Cart cleared: {deleted} items removed")

    # Customers

    def _filtered_customers(
        self, year: int | None, month: int | None, day: int | None
    ) -> list[Customer]:
        customers = [
            c
            for c in self.customer_repository.list_all()
            if _matches_date(c.created_at, year, month, day)
        ]
        customers.sort(key=lambda c: c.created_at, reverse=True)
        return customers

    @traced("list_customers")
    def list_customers(
        self,
        page: int = 1,
        limit: int = 50,
        year: int | None = None,
        month: int | None = None,
        day: int | None = None,
    ) -> CustomerPage:
        """One page of customers, newest first, optionally filtered by creation date.

        Args:
            page: 1-based page number
            limit: Page size
            year: Optional creation year
            month: Optional creation month
            day: Optional creation day of month

        Returns:
            CustomerPage: The page and the total number of matching customers

        Raises:
            ValueError: If page or limit is not positive
        """
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive integers")

        customers = self._filtered_customers(year, month, day)
        start = (page - 1) * limit
        return CustomerPage(customers=customers[start : start + limit], total=len(customers))

    def export_customers(
        self, year: int | None = None, month: int | None = None, day: int | None = None
    ) -> list[CustomerExportRow]:
        """All matching customers as export rows, without pagination."""
        return [
            CustomerExportRow(
                name=c.name,
                phone=c.phone,
                created_at=c.created_at.astimezone(UTC).strftime(EXPORT_TIMESTAMP_FORMAT),
            )
            for c in self._filtered_customers(year, month, day)
        ]

    def find_customer_by_phone(self, phone: str) -> Customer | None:
        return self.customer_repository.get_by_phone(phone)

    @traced("create_customer")
    def create_customer(self, fields: CustomerCreate | Mapping[str, Any]) -> Customer:
        """Register a customer, or return the stored one if the phone is known.

        Args:
            fields: Customer fields

        Returns:
            Customer: The newly stored or already existing customer

        Raises:
            pydantic.ValidationError: If name or phone is missing
        """
        payload = (
            fields if isinstance(fields, CustomerCreate) else CustomerCreate.model_validate(fields)
        )
        now = datetime.now(UTC)
        customer, created = self.customer_repository.create_if_absent(
            Customer(
                id=uuid.uuid4().hex,
                name=payload.name,
                phone=payload.phone,
                email=payload.email,
                created_at=now,
                updated_at=now,
            )
        )
        record_customer_registration(created)
        if created:
            logger.info(f"Registered customer {customer.id}")
        return customer

    # Users

    def ensure_user(self, username: str, password: str) -> bool:
        """Write the login bookkeeping row for a user if it does not exist yet.

        Returns:
            bool: True if the row was created by this call
        """
        now = datetime.now(UTC)
        created = self.user_repository.create_if_absent(
            User(username=username, password=password, created_at=now, updated_at=now)
        )
        if created:
            logger.info(f"Created user record for {username}")
        return created
