"""Common plumbing for DynamoDB-backed repositories."""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from digital_menu.repositories.errors import DYNAMODB_ERRORS, MALFORMED_ITEM_ERRORS, StorageError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DynamoDBRepository:
    """Base class holding the table handle for a single DynamoDB table."""

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def check_connection(self) -> None:
        """Verify the table exists and is reachable.

        Raises:
            StorageError: If DescribeTable fails
        """
        try:
            self.table.load()
        except DYNAMODB_ERRORS as e:
            logger.error(f"DynamoDB table {self.table_name} is not reachable: {e}")
            raise StorageError(f"DynamoDB table {self.table_name} is not reachable") from e

    def _collect(self, operation: Callable[..., Any], **kwargs: Any) -> list[dict[str, Any]]:
        """Run a Scan or Query to completion, following LastEvaluatedKey.

        Args:
            operation: Bound ``table.scan`` or ``table.query``
            **kwargs: Request parameters passed through on every page

        Returns:
            list: All items across pages
        """
        items: list[dict[str, Any]] = []
        while True:
            response = operation(**kwargs)
            items.extend(response.get("Items", []))

            last_key = response.get("LastEvaluatedKey")
            if not last_key:
                return items
            kwargs["ExclusiveStartKey"] = last_key

    def _parse_item(self, parse: Callable[[dict[str, Any]], T], item: dict[str, Any]) -> T:
        """Convert one stored row into a model.

        Args:
            parse: Model constructor for a single DynamoDB item
            item: Raw DynamoDB item

        Returns:
            The parsed model

        Raises:
            StorageError: If the row is missing attributes or holds invalid values
        """
        try:
            return parse(item)
        except MALFORMED_ITEM_ERRORS as e:
            logger.error(f"Malformed item in DynamoDB table {self.table_name}: {e}")
            raise StorageError(f"Malformed item in DynamoDB table {self.table_name}") from e

    def _parse_items(
        self, parse: Callable[[dict[str, Any]], T], items: list[dict[str, Any]]
    ) -> list[T]:
        return [self._parse_item(parse, item) for item in items]
