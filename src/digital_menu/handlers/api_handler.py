"""FastAPI application for the digital menu API."""

import logging
from typing import Any

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from digital_menu.auth.credential_validator import AdminCredentialValidator
from digital_menu.models.customer_models import (
    Customer,
    CustomerCreate,
    CustomerExportRow,
    CustomerPage,
)
from digital_menu.models.menu_models import CartItem, CartItemCreate, MenuItem
from digital_menu.repositories.errors import StorageError
from digital_menu.services.record_store import RecordStore

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class MessageResponse(BaseModel):
    """Plain message response, also used for every error body."""

    message: str


class LoginRequest(BaseModel):
    """Dashboard login request."""

    username: str
    password: str


class FixVegResponse(BaseModel):
    """Response model for the veg classification maintenance hook."""

    message: str
    updated: int
    details: list[str]


def _describe_validation_errors(errors: list[Any]) -> str:
    """Flatten pydantic error entries into one readable message."""
    parts = []
    for error in errors:
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def create_app(
    record_store: RecordStore,
    credential_validator: AdminCredentialValidator,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        record_store: Data-access façade for menu, cart and customer records
        credential_validator: Validator for dashboard logins

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Digital Menu API",
        description="Menu browsing, cart and customer capture for the restaurant digital menu",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Store services in app state for access in route handlers
    app.state.record_store = record_store
    app.state.credential_validator = credential_validator

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": _describe_validation_errors(list(exc.errors()))},
        )

    @app.exception_handler(ValidationError)
    async def model_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"message": _describe_validation_errors(list(exc.errors()))},
        )

    @app.exception_handler(StorageError)
    async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
        # Detail was logged by the repository; clients get a generic message
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=exc.headers,
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    # Menu

    @app.get("/api/menu-items", response_model=list[MenuItem], tags=["Menu"])
    def list_menu_items(category: str | None = None) -> list[MenuItem]:
        """All menu items, or the items for ``?category=`` resolved with fallbacks."""
        store: RecordStore = app.state.record_store
        if category:
            logger.info(f"Fetching menu items for category: {category}")
            return store.get_menu_items_by_category(category)
        return store.list_all_menu_items()

    @app.get(
        "/api/menu-items/category/{category}", response_model=list[MenuItem], tags=["Menu"]
    )
    def list_menu_items_for_category(category: str) -> list[MenuItem]:
        """Items for a category, resolved with fallbacks."""
        items: list[MenuItem] = app.state.record_store.get_menu_items_by_category(category)
        return items

    @app.get("/api/categories", response_model=list[str], tags=["Menu"])
    def list_categories() -> list[str]:
        """The fixed category catalog in menu order."""
        return list(app.state.record_store.list_categories())

    @app.post("/api/fix-veg-classification", response_model=FixVegResponse, tags=["Menu"])
    def fix_veg_classification() -> FixVegResponse:
        """Maintenance hook for veg/non-veg classification."""
        result = app.state.record_store.fix_veg_classification()
        return FixVegResponse(
            message=f"Fixed {result['updated']} items",
            updated=result["updated"],
            details=result["details"],
        )

    # Cart

    @app.get("/api/cart", response_model=list[CartItem], tags=["Cart"])
    def list_cart() -> list[CartItem]:
        """Every item in the cart."""
        items: list[CartItem] = app.state.record_store.list_cart_items()
        return items

    @app.post("/api/cart", response_model=CartItem, tags=["Cart"])
    def add_to_cart(request: CartItemCreate) -> CartItem:
        """Add a menu item to the cart or increment its quantity."""
        cart_item: CartItem = app.state.record_store.add_to_cart(
            request.menu_item_id, request.quantity
        )
        return cart_item

    @app.delete("/api/cart/{cart_item_id}", response_model=MessageResponse, tags=["Cart"])
    def remove_from_cart(cart_item_id: str) -> MessageResponse:
        """Remove one cart item. Unknown ids are not an error."""
        app.state.record_store.remove_from_cart(cart_item_id)
        return MessageResponse(message="Item removed from cart")

    @app.delete("/api/cart", response_model=MessageResponse, tags=["Cart"])
    def clear_cart() -> MessageResponse:
        """Remove every cart item."""
        app.state.record_store.clear_cart()
        return MessageResponse(message="Cart cleared")

    # Admin

    @app.post(
        "/api/login",
        response_model=MessageResponse,
        responses={401: {"model": MessageResponse}},
        tags=["Admin"],
    )
    def login(request: LoginRequest) -> MessageResponse | JSONResponse:
        """Check dashboard credentials and record the user on first login."""
        if not app.state.credential_validator.validate(request.username, request.password):
            logger.warning("Rejected dashboard login")
            return JSONResponse(status_code=401, content={"message": "Invalid credentials"})

        app.state.record_store.ensure_user(request.username, request.password)
        return MessageResponse(message="Login successful")

    # Customers

    @app.get("/api/customers", response_model=CustomerPage, tags=["Customers"])
    def list_customers(
        page: int = Query(1, ge=1),
        limit: int = Query(50, ge=1),
        year: int | None = Query(None, ge=1),
        month: int | None = Query(None, ge=1, le=12),
        day: int | None = Query(None, ge=1, le=31),
    ) -> CustomerPage:
        """A page of customers, optionally filtered by creation date."""
        result: CustomerPage = app.state.record_store.list_customers(
            page=page, limit=limit, year=year, month=month, day=day
        )
        return result

    @app.get(
        "/api/customers/export", response_model=list[CustomerExportRow], tags=["Customers"]
    )
    def export_customers(
        year: int | None = Query(None, ge=1),
        month: int | None = Query(None, ge=1, le=12),
        day: int | None = Query(None, ge=1, le=31),
    ) -> list[CustomerExportRow]:
        """Every matching customer as an export row."""
        rows: list[CustomerExportRow] = app.state.record_store.export_customers(
            year=year, month=month, day=day
        )
        return rows

    @app.post("/api/customers", response_model=Customer, tags=["Customers"])
    def create_customer(request: CustomerCreate) -> Customer:
        """Register a customer, returning the existing record for a known phone."""
        customer: Customer = app.state.record_store.create_customer(request)
        return customer

    return app
