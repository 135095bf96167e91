"""Custom metrics for the storefront menu and ordering-time services."""

from opentelemetry import metrics

meter = metrics.get_meter("storefront-svc")

catalog_pages_counter = meter.create_counter(
    name="catalog_pages_fetched_total",
    description="Catalog API pages fetched, by operation",
    unit="1",
)

catalog_fetch_failure_counter = meter.create_counter(
    name="catalog_fetch_failure_total",
    description="Failed catalog fetches, by object type",
    unit="1",
)

menu_compose_histogram = meter.create_histogram(
    name="menu_compose_duration_seconds",
    description="Time to fetch and compose the menu",
    unit="s",
)

menu_items_hidden_counter = meter.create_counter(
    name="menu_items_hidden_total",
    description="Menu items removed by visibility overrides, by reason",
    unit="1",
)

availability_checks_counter = meter.create_counter(
    name="ordering_availability_checks_total",
    description="Ordering availability checks, by item type and outcome",
    unit="1",
)


def record_catalog_page(operation: str) -> None:
    """Record one fetched catalog page.

    Args:
        operation: "search" or "list"
    """
    catalog_pages_counter.add(1, {"operation": operation})


def record_catalog_fetch_failure(object_type: str, status_code: int) -> None:
    """Record a catalog fetch that failed.

    Args:
        object_type: Object type(s) being fetched
        status_code: Upstream status code
    """
    catalog_fetch_failure_counter.add(1, {"object_type": object_type, "status_code": status_code})


def record_menu_compose(duration_seconds: float, success: bool) -> None:
    """Record the duration of a menu composition."""
    menu_compose_histogram.record(duration_seconds, {"success": success})


def record_hidden_items(reason: str, count: int) -> None:
    """Record menu items hidden by an override.

    Args:
        reason: "item" or "category"
        count: Number of items removed
    """
    if count:
        menu_items_hidden_counter.add(count, {"reason": reason})


def record_availability_check(item_type: str, is_available: bool) -> None:
    """Record an ordering availability decision."""
    availability_checks_counter.add(1, {"item_type": item_type, "available": is_available})
