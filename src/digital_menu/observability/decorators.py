"""Span decorator for store and service operations."""

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, Tracer

F = TypeVar("F", bound=Callable[..., Any])


@contextmanager
def _operation_span(tracer: Tracer, name: str, service_name: str) -> Iterator[Span]:
    """Open a span that records whether the wrapped block raised."""
    with tracer.start_as_current_span(name, record_exception=False) as span:
        span.set_attribute("service.name", service_name)
        try:
            yield span
        except Exception as e:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise
        span.set_attribute("success", True)


def traced(span_name: str | None = None, service_name: str = "digital-menu") -> Callable[[F], F]:
    """Run each call of the decorated function inside its own span.

    Exceptions are recorded on the span and re-raised unchanged; only the
    exception type is copied into span attributes because storage errors may
    name tables.

    Args:
        span_name: Span name, defaulting to the function's qualified name
        service_name: Value of the span's ``service.name`` attribute

    Example:
        @traced("get_menu_items_by_category")
        def get_menu_items_by_category(self, token: str) -> list[MenuItem]:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__qualname__
        tracer = trace.get_tracer(service_name)

        @functools.wraps(func)
        def run(*args: Any, **kwargs: Any) -> Any:
            with _operation_span(tracer, name, service_name):
                return func(*args, **kwargs)

        return run  # type: ignore[return-value]

    return decorator
