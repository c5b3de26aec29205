"""OpenTelemetry instrumentation and observability utilities."""

from digital_menu.observability.config import configure_logging, setup_observability
from digital_menu.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
