"""Storage error types shared by the DynamoDB repositories."""

from botocore.exceptions import BotoCoreError, ClientError

# Failures raised by boto3 for a DynamoDB call: service-side errors and
# client-side transport/configuration errors.
DYNAMODB_ERRORS = (ClientError, BotoCoreError)


class StorageError(Exception):
    """Raised when a DynamoDB operation fails.

    The message is safe to log but is never returned to API clients.
    """


def is_conditional_check_failure(error: Exception) -> bool:
    """Return True if a DynamoDB write was rejected by its condition expression."""
    if not isinstance(error, ClientError):
        return False
    return bool(error.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException")

# Raised while converting a stored row into a model: missing attributes,
# wrong types, or values the model rejects (pydantic.ValidationError is a
# ValueError).
MALFORMED_ITEM_ERRORS = (KeyError, TypeError, ValueError)
