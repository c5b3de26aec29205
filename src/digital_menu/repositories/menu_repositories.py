"""DynamoDB repository classes for menu items and the cart.

Menu items live in a single table partitioned by collection name, so every
category collection (and any ad-hoc collection created by an insert) is a
partition. A collection exists exactly when it holds at least one item.

Lookups that can legitimately miss return None or an empty list; DynamoDB
failures are logged and raised as StorageError so callers can report them.
"""

import logging
import uuid
from datetime import datetime
from typing import Any

from digital_menu.models.menu_models import CartItem, MenuItem
from digital_menu.repositories.base import DynamoDBRepository
from digital_menu.repositories.errors import DYNAMODB_ERRORS, StorageError

logger = logging.getLogger(__name__)

# Namespace for deriving cart item ids from menu item ids
CART_ITEM_NAMESPACE = uuid.UUID("6c1f6f0e-3f5e-4a7b-9a55-3d1b1f6f2c11")


def cart_item_id_for(menu_item_id: str) -> str:
    """Derive the cart item id for a menu item.

    The id is deterministic, so all additions of one menu item target the
    same row and the cart can hold at most one row per menu item.
    """
    return str(uuid.uuid5(CART_ITEM_NAMESPACE, menu_item_id))


def _labelled_menu_item(item: dict[str, Any]) -> MenuItem:
    """Parse a scanned item and label it with the partition it lives in."""
    return MenuItem.from_dynamodb_item(item).in_collection(item["collection"])


class MenuItemRepository(DynamoDBRepository):
    """Repository for menu items.

    Manages menu item records in DynamoDB with composite key (collection, id).
    """

    def list_collection_names(self) -> list[str]:
        """List every collection that currently holds at least one item.

        Returns:
            list: Collection names in first-seen scan order, without duplicates
        """
        try:
            items = self._collect(
                self.table.scan,
                ProjectionExpression="#collection",
                ExpressionAttributeNames={"#collection": "collection"},
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to list menu collections: {e}")
            raise StorageError("Failed to list menu collections") from e

        return list(dict.fromkeys(item["collection"] for item in items))

    def list_items(self, collection: str) -> list[MenuItem]:
        """List all items in a collection.

        Args:
            collection: Collection name

        Returns:
            list: MenuItem objects (empty list if the collection does not exist)
        """
        try:
            items = self._collect(
                self.table.query,
                KeyConditionExpression="#collection = :collection",
                ExpressionAttributeNames={"#collection": "collection"},
                ExpressionAttributeValues={":collection": collection},
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to read menu collection {collection}: {e}")
            raise StorageError(f"Failed to read menu collection {collection}") from e

        return self._parse_items(MenuItem.from_dynamodb_item, items)

    def list_all_items(self) -> list[MenuItem]:
        """List items across every collection in the table.

        Returns:
            list: MenuItem objects labelled with their own collection
        """
        try:
            items = self._collect(self.table.scan)
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to scan menu items: {e}")
            raise StorageError("Failed to scan menu items") from e

        return self._parse_items(_labelled_menu_item, items)

    def get_item(self, collection: str, item_id: str) -> MenuItem | None:
        """Retrieve a menu item by collection and id.

        Args:
            collection: Collection name
            item_id: Menu item identifier

        Returns:
            MenuItem if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"collection": collection, "id": item_id})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to get menu item {item_id} from {collection}: {e}")
            raise StorageError(f"Failed to get menu item {item_id}") from e

        if "Item" not in response:
            return None

        return self._parse_item(MenuItem.from_dynamodb_item, response["Item"])

    def save_item(self, item: MenuItem) -> None:
        """Insert a menu item into the collection named by its category.

        Args:
            item: MenuItem to save
        """
        try:
            self.table.put_item(Item=item.to_dynamodb_item())
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to save menu item {item.id}: {e}")
            raise StorageError(f"Failed to save menu item {item.id}") from e

    def delete_collection(self, collection: str) -> int:
        """Delete every item in a collection.

        Args:
            collection: Collection name

        Returns:
            int: Number of items deleted
        """
        try:
            keys = self._collect(
                self.table.query,
                KeyConditionExpression="#collection = :collection",
                ProjectionExpression="#collection, #id",
                ExpressionAttributeNames={"#collection": "collection", "#id": "id"},
                ExpressionAttributeValues={":collection": collection},
            )
            with self.table.batch_writer() as batch:
                for key in keys:
                    batch.delete_item(Key={"collection": key["collection"], "id": key["id"]})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to clear menu collection {collection}: {e}")
            raise StorageError(f"Failed to clear menu collection {collection}") from e

        return len(keys)


class CartRepository(DynamoDBRepository):
    """Repository for cart items.

    Manages cart records in DynamoDB with id as partition key, where id is
    derived from the referenced menu item.
    """

    def list_items(self) -> list[CartItem]:
        """List every cart item.

        Returns:
            list: CartItem objects (empty list if the cart is empty)
        """
        try:
            items = self._collect(self.table.scan)
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to list cart items: {e}")
            raise StorageError("Failed to list cart items") from e

        return self._parse_items(CartItem.from_dynamodb_item, items)

    def add_quantity(self, menu_item_id: str, quantity: int, now: datetime) -> CartItem:
        """Increment the cart row for a menu item, creating it if absent.

        A single UpdateItem call with ADD, so concurrent additions of the same
        menu item accumulate on one row.

        Args:
            menu_item_id: Referenced menu item
            quantity: Amount to add
            now: Timestamp for updated_at (and created_at on first insert)

        Returns:
            CartItem: The row after the update
        """
        cart_item_id = cart_item_id_for(menu_item_id)
        try:
            response = self.table.update_item(
                Key={"id": cart_item_id},
                UpdateExpression=(
                    "SET menu_item_id = :menu_item_id, updated_at = :now, "
                    "created_at = if_not_exists(created_at, :now) "
                    "ADD quantity :quantity"
                ),
                ExpressionAttributeValues={
                    ":menu_item_id": menu_item_id,
                    ":now": now.isoformat(),
                    ":quantity": quantity,
                },
                ReturnValues="ALL_NEW",
            )
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to add menu item {menu_item_id} to cart: {e}")
            raise StorageError(f"Failed to add menu item {menu_item_id} to cart") from e

        return self._parse_item(CartItem.from_dynamodb_item, response["Attributes"])

    def delete_item(self, cart_item_id: str) -> None:
        """Delete a cart item. Deleting a missing id is not an error.

        Args:
            cart_item_id: Cart item identifier
        """
        try:
            self.table.delete_item(Key={"id": cart_item_id})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to delete cart item {cart_item_id}: {e}")
            raise StorageError(f"Failed to delete cart item {cart_item_id}") from e

    def delete_all(self) -> int:
        """Delete every cart item.

        Returns:
            int: Number of items deleted
        """
        try:
            keys = self._collect(
                self.table.scan,
                ProjectionExpression="#id",
                ExpressionAttributeNames={"#id": "id"},
            )
            with self.table.batch_writer() as batch:
                for key in keys:
                    batch.delete_item(Key={"id": key["id"]})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to clear cart: {e}")
            raise StorageError("Failed to clear cart") from e

        return len(keys)
