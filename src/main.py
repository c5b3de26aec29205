"""Main application entry point for the digital menu service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
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


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "us-east-1")

    if endpoint_url:
        # DynamoDB Local accepts any credentials
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID", "dummy"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY", "dummy"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Production - boto3 will use default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def create_record_store(dynamodb_resource: Any) -> RecordStore:
    """Build the record store and its repositories from environment configuration.

    Args:
        dynamodb_resource: Boto3 DynamoDB resource

    Returns:
        Configured RecordStore

    Raises:
        ValueError: If RESTAURANT_ID is not set
    """
    restaurant_id = os.getenv("RESTAURANT_ID")
    if not restaurant_id:
        raise ValueError("RESTAURANT_ID must be set in environment")

    menu_table = os.getenv("MENU_ITEMS_TABLE", "digital-menu-items")
    cart_table = os.getenv("CART_TABLE", "digital-menu-cart")
    customers_table = os.getenv("CUSTOMERS_TABLE", "digital-menu-customers")
    users_table = os.getenv("USERS_TABLE", "digital-menu-users")

    logger.info(
        f"Repositories configured - menu: {menu_table}, cart: {cart_table}, "
        f"customers: {customers_table}, users: {users_table}"
    )

    return RecordStore(
        menu_repository=MenuItemRepository(dynamodb_resource, menu_table),
        cart_repository=CartRepository(dynamodb_resource, cart_table),
        customer_repository=CustomerRepository(dynamodb_resource, customers_table),
        user_repository=UserRepository(dynamodb_resource, users_table),
        restaurant_id=restaurant_id,
    )


def create_credential_validator() -> AdminCredentialValidator:
    """Build the dashboard credential validator from environment configuration.

    Raises:
        ValueError: If ADMIN_USERNAME or ADMIN_PASSWORD is not set
    """
    username = os.getenv("ADMIN_USERNAME")
    password = os.getenv("ADMIN_PASSWORD")

    if not username or not password:
        raise ValueError("ADMIN_USERNAME and ADMIN_PASSWORD must be set in environment")

    return AdminCredentialValidator(username=username, password=password)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Configures logging
    2. Creates the DynamoDB resource and record store
    3. Verifies every table is reachable (fatal if not)
    4. Creates the FastAPI app
    5. Sets up observability

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If required configuration is missing
        StorageError: If DynamoDB is not reachable
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing digital menu service...")

    record_store = create_record_store(get_dynamodb_resource())
    credential_validator = create_credential_validator()

    # Refuse to serve requests without storage
    record_store.check_connection()

    app = create_app(record_store=record_store, credential_validator=credential_validator)
    setup_observability(app)

    logger.info("Digital menu service initialized successfully")

    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
