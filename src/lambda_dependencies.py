"""Shared dependency factory for the Lambda handler.

Dependencies are created once and reused across invocations within the same
Lambda container.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from digital_menu.auth.credential_validator import AdminCredentialValidator
from digital_menu.handlers.api_handler import create_app
from digital_menu.observability import configure_logging, setup_observability
from digital_menu.repositories.customer_repositories import CustomerRepository, UserRepository
from digital_menu.repositories.menu_repositories import CartRepository, MenuItemRepository
from digital_menu.services.record_store import RecordStore

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_record_store: RecordStore | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def get_record_store() -> RecordStore:
    """Create or retrieve cached record store.

    The first call verifies the tables are reachable, so a misconfigured
    container fails its cold start instead of serving 500s.

    Returns:
        Configured RecordStore instance

    Raises:
        ValueError: If RESTAURANT_ID is not set
        StorageError: If DynamoDB is not reachable
    """
    global _record_store

    if _record_store is not None:
        return _record_store

    restaurant_id = os.getenv("RESTAURANT_ID")
    if not restaurant_id:
        raise ValueError("RESTAURANT_ID must be set in environment")

    dynamodb_resource = get_dynamodb_resource()
    store = RecordStore(
        menu_repository=MenuItemRepository(
            dynamodb_resource, os.getenv("MENU_ITEMS_TABLE", "digital-menu-items")
        ),
        cart_repository=CartRepository(dynamodb_resource, os.getenv("CART_TABLE", "digital-menu-cart")),
        customer_repository=CustomerRepository(
            dynamodb_resource, os.getenv("CUSTOMERS_TABLE", "digital-menu-customers")
        ),
        user_repository=UserRepository(dynamodb_resource, os.getenv("USERS_TABLE", "digital-menu-users")),
        restaurant_id=restaurant_id,
    )
    store.check_connection()

    _record_store = store
    logger.info("Record store initialized")
    return _record_store


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If ADMIN_USERNAME or ADMIN_PASSWORD is not set
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    username = os.getenv("ADMIN_USERNAME")
    password = os.getenv("ADMIN_PASSWORD")
    if not username or not password:
        raise ValueError("ADMIN_USERNAME and ADMIN_PASSWORD must be set in environment")

    _fastapi_app = create_app(
        record_store=get_record_store(),
        credential_validator=AdminCredentialValidator(username=username, password=password),
    )
    setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
