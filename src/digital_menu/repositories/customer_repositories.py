"""DynamoDB repository classes for customers and admin users.

Both tables are keyed on their natural identifier (phone, username) so
find-or-create is a single conditional PutItem.
"""

import logging

from digital_menu.models.customer_models import Customer, User
from digital_menu.repositories.base import DynamoDBRepository
from digital_menu.repositories.errors import (
    DYNAMODB_ERRORS,
    StorageError,
    is_conditional_check_failure,
)

logger = logging.getLogger(__name__)


class CustomerRepository(DynamoDBRepository):
    """Repository for customer records.

    Manages customer records in DynamoDB with phone as partition key.
    """

    def get_by_phone(self, phone: str) -> Customer | None:
        """Retrieve a customer by phone number.

        Args:
            phone: Exact phone number

        Returns:
            Customer if found, None otherwise
        """
        try:
            response = self.table.get_item(Key={"phone": phone})
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to get customer by phone: {e}")
            raise StorageError("Failed to get customer by phone") from e

        if "Item" not in response:
            return None

        return self._parse_item(Customer.from_dynamodb_item, response["Item"])

    def create_if_absent(self, customer: Customer) -> tuple[Customer, bool]:
        """Insert a customer unless one with the same phone already exists.

        Args:
            customer: Customer to insert

        Returns:
            tuple: (stored customer, True if it was created by this call)
        """
        try:
            self.table.put_item(
                Item=customer.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(phone)",
            )
            return customer, True
        except DYNAMODB_ERRORS as e:
            if not is_conditional_check_failure(e):
                logger.error(f"Failed to save customer {customer.id}: {e}")
                raise StorageError(f"Failed to save customer {customer.id}") from e

        existing = self.get_by_phone(customer.phone)
        if existing is None:
            # Conflicting row was deleted between the put and the read
            raise StorageError("Customer disappeared during create")
        return existing, False

    def list_all(self) -> list[Customer]:
        """List every customer.

        Returns:
            list: Customer objects (empty list if none)
        """
        try:
            items = self._collect(self.table.scan)
        except DYNAMODB_ERRORS as e:
            logger.error(f"Failed to list customers: {e}")
            raise StorageError("Failed to list customers") from e

        return self._parse_items(Customer.from_dynamodb_item, items)


class UserRepository(DynamoDBRepository):
    """Repository for admin login bookkeeping rows.

    Manages user records in DynamoDB with username as partition key.
    """

    def create_if_absent(self, user: User) -> bool:
        """Insert a user row unless the username is already present.

        Args:
            user: User to insert

        Returns:
            bool: True if the row was created, False if it already existed
        """
        try:
            self.table.put_item(
                Item=user.to_dynamodb_item(),
                ConditionExpression="attribute_not_exists(username)",
            )
            return True
        except DYNAMODB_ERRORS as e:
            if is_conditional_check_failure(e):
                return False
            logger.error(f"Failed to save user {user.username}: {e}")
            raise StorageError(f"Failed to save user {user.username}") from e
