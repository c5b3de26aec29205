"""Unit tests for main application entry point."""

import os
from unittest.mock import MagicMock, Mock, patch

import pytest
from fastapi import FastAPI

from digital_menu.repositories.errors import StorageError
from src.main import (
    create_application,
    create_credential_validator,
    create_record_store,
    get_dynamodb_resource,
)

APP_ENV = {
    "LOG_LEVEL": "DEBUG",
    "RESTAURANT_ID": "6874cff2a880250859286de6",
    "ADMIN_USERNAME": "admin@example.com",
    "ADMIN_PASSWORD": "s3cret",
}


@pytest.mark.unit
class TestGetDynamoDBResource:
    """Tests for get_dynamodb_resource function."""

    @patch.dict(os.environ, {"DYNAMODB_ENDPOINT": "", "AWS_REGION": "ap-south-1"}, clear=True)
    @patch("src.main.boto3.resource")
    def test_creates_aws_resource_when_no_endpoint(self, mock_boto3_resource: Mock) -> None:
        """Test that AWS DynamoDB resource is created when no local endpoint configured."""
        mock_resource = MagicMock()
        mock_boto3_resource.return_value = mock_resource

        result = get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with("dynamodb", region_name="ap-south-1")
        assert result == mock_resource

    @patch.dict(
        os.environ,
        {"DYNAMODB_ENDPOINT": "http://localhost:8000", "AWS_REGION": "us-east-1"},
        clear=True,
    )
    @patch("src.main.boto3.resource")
    def test_creates_local_resource_with_dummy_credentials(self, mock_boto3_resource: Mock) -> None:
        """Test that DynamoDB Local gets placeholder credentials when none are set."""
        get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with(
            "dynamodb",
            endpoint_url="http://localhost:8000",
            region_name="us-east-1",
            aws_access_key_id="dummy",
            aws_secret_access_key="dummy",
        )

    @patch.dict(os.environ, {}, clear=True)
    @patch("src.main.boto3.resource")
    def test_uses_default_region_when_not_specified(self, mock_boto3_resource: Mock) -> None:
        """Test that default region us-east-1 is used when AWS_REGION not set."""
        get_dynamodb_resource()

        mock_boto3_resource.assert_called_once_with("dynamodb", region_name="us-east-1")


@pytest.mark.unit
class TestCreateRecordStore:
    """Tests for create_record_store function."""

    @patch.dict(os.environ, {"RESTAURANT_ID": "rest_1"}, clear=True)
    def test_uses_default_table_names(self) -> None:
        """Test that each repository gets its default table."""
        mock_dynamodb = MagicMock()

        store = create_record_store(mock_dynamodb)

        assert store.restaurant_id == "rest_1"
        tables = [call.args[0] for call in mock_dynamodb.Table.call_args_list]
        assert tables == [
            "digital-menu-items",
            "digital-menu-cart",
            "digital-menu-customers",
            "digital-menu-users",
        ]

    @patch.dict(
        os.environ,
        {
            "RESTAURANT_ID": "rest_1",
            "MENU_ITEMS_TABLE": "menu",
            "CART_TABLE": "cart",
            "CUSTOMERS_TABLE": "customers",
            "USERS_TABLE": "users",
        },
        clear=True,
    )
    def test_uses_configured_table_names(self) -> None:
        """Test that table names come from the environment."""
        mock_dynamodb = MagicMock()

        create_record_store(mock_dynamodb)

        tables = [call.args[0] for call in mock_dynamodb.Table.call_args_list]
        assert tables == ["menu", "cart", "customers", "users"]

    @patch.dict(os.environ, {}, clear=True)
    def test_raises_error_when_restaurant_id_missing(self) -> None:
        """Test that ValueError is raised when RESTAURANT_ID not set."""
        with pytest.raises(ValueError, match="RESTAURANT_ID must be set"):
            create_record_store(MagicMock())


@pytest.mark.unit
class TestCreateCredentialValidator:
    """Tests for create_credential_validator function."""

    @patch.dict(os.environ, {"ADMIN_USERNAME": "admin", "ADMIN_PASSWORD": "pw"}, clear=True)
    def test_builds_validator_from_environment(self) -> None:
        """Test that configured credentials are accepted."""
        validator = create_credential_validator()

        assert validator.validate("admin", "pw") is True

    @pytest.mark.parametrize(
        "env",
        [{"ADMIN_USERNAME": "admin"}, {"ADMIN_PASSWORD": "pw"}, {}],
    )
    def test_raises_error_when_credentials_missing(self, env: dict) -> None:
        """Test that a missing username or password is a startup error."""
        with patch.dict(os.environ, env, clear=True), pytest.raises(
            ValueError, match="ADMIN_USERNAME and ADMIN_PASSWORD must be set"
        ):
            create_credential_validator()


@pytest.mark.unit
class TestCreateApplication:
    """Tests for create_application function."""

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.get_dynamodb_resource")
    @patch("src.main.create_record_store")
    @patch("src.main.create_app")
    @patch.dict(os.environ, APP_ENV, clear=True)
    def test_creates_application_with_all_dependencies(
        self,
        mock_create_app: Mock,
        mock_create_store: Mock,
        mock_get_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that application is created with all dependencies properly wired."""
        mock_dynamodb = MagicMock()
        mock_get_dynamodb.return_value = mock_dynamodb
        mock_store = MagicMock()
        mock_create_store.return_value = mock_store
        mock_app = MagicMock(spec=FastAPI)
        mock_create_app.return_value = mock_app

        result = create_application()

        mock_configure_logging.assert_called_once_with("DEBUG")
        mock_create_store.assert_called_once_with(mock_dynamodb)
        mock_store.check_connection.assert_called_once()

        call = mock_create_app.call_args.kwargs
        assert call["record_store"] is mock_store
        assert call["credential_validator"].validate("admin@example.com", "s3cret") is True

        mock_setup_observability.assert_called_once_with(mock_app)
        assert result == mock_app

    @patch("src.main.setup_observability")
    @patch("src.main.configure_logging")
    @patch("src.main.get_dynamodb_resource")
    @patch("src.main.create_record_store")
    @patch("src.main.create_app")
    @patch.dict(os.environ, APP_ENV, clear=True)
    def test_startup_fails_when_storage_unreachable(
        self,
        mock_create_app: Mock,
        mock_create_store: Mock,
        mock_get_dynamodb: Mock,
        mock_configure_logging: Mock,
        mock_setup_observability: Mock,
    ) -> None:
        """Test that an unreachable database aborts startup before the app exists."""
        mock_create_store.return_value.check_connection.side_effect = StorageError(
            "cannot reach table"
        )

        with pytest.raises(StorageError):
            create_application()

        mock_create_app.assert_not_called()

    @patch("src.main.configure_logging")
    @patch("src.main.get_dynamodb_resource")
    @patch.dict(os.environ, {"RESTAURANT_ID": "rest_1"}, clear=True)
    def test_raises_error_when_admin_credentials_missing(
        self,
        mock_get_dynamodb: Mock,
        mock_configure_logging: Mock,
    ) -> None:
        """Test that ValueError is raised when admin credentials are not set."""
        mock_get_dynamodb.return_value = MagicMock()

        with pytest.raises(ValueError, match="ADMIN_USERNAME and ADMIN_PASSWORD must be set"):
            create_application()
