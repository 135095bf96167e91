"""OpenTelemetry instrumentation, structured logging and metrics."""

from cafe_storefront.observability.config import configure_logging, setup_observability
from cafe_storefront.observability.decorators import traced

__all__ = ["setup_observability", "configure_logging", "traced"]
