"""Custom metrics for the digital menu service."""

from opentelemetry import metrics

# Get meter for the menu service
meter = metrics.get_meter("digital-menu")

# Which resolution tier answered a category lookup
category_resolution_counter = meter.create_counter(
    name="category_resolution_total",
    description="Category lookups by the resolution tier that produced the result",
    unit="1",
)

cart_additions_counter = meter.create_counter(
    name="cart_additions_total",
    description="Total quantity of menu items added to the cart",
    unit="1",
)

customer_registrations_counter = meter.create_counter(
    name="customer_registrations_total",
    description="Customer registrations, split by new and returning phone numbers",
    unit="1",
)


def record_category_resolution(tier: str) -> None:
    """Record the outcome of a category lookup.

    Args:
        tier: One of "exact", "variant", "text", "none" or "error"
    """
    category_resolution_counter.add(1, {"tier": tier})


def record_cart_addition(quantity: int) -> None:
    """Record menu items added to the cart.

    Args:
        quantity: Quantity added by the request
    """
    cart_additions_counter.add(quantity)


def record_customer_registration(created: bool) -> None:
    """Record a customer registration.

    Args:
        created: True if a new customer row was written, False if the phone was known
    """
    customer_registrations_counter.add(1, {"outcome": "created" if created else "existing"})
