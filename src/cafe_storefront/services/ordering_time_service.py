"""Ordering availability service backed by the cafe settings store.

Store failures fail open: the storefront keeps taking orders rather than
locking customers out because settings could not be read.
"""

import logging
from datetime import datetime
from typing import Any

from cafe_storefront.models.ordering_models import (
    DEFAULT_TIMEZONE,
    AvailabilityResult,
    ItemType,
    OrderingHoursRecord,
)
from cafe_storefront.observability import traced
from cafe_storefront.observability.metrics import record_availability_check
from cafe_storefront.repositories.settings_repository import CafeSettingsRepository
from cafe_storefront.services.ordering_time import (
    check_items_orderable,
    check_ordering_availability_by_type,
)

logger = logging.getLogger(__name__)

FAIL_OPEN_MESSAGE = "Ordering is available."
DISPLAYED_TYPES = (ItemType.FOOD, ItemType.DRINKS)


def _availability_fields(result: AvailabilityResult) -> dict[str, Any]:
    return {
        "isOrderingAvailable": result.is_available,
        "message": result.message,
        "currentDayHours": result.current_day_hours,
    }


def _hours_document(hours: OrderingHoursRecord) -> dict[str, dict[str, str | None]]:
    return {item_type.value: hours.hours_for_type(item_type) for item_type in DISPLAYED_TYPES}


class OrderingTimeService:
    """Builds the ordering-time documents served to the storefront."""

    def __init__(
        self,
        settings_repository: CafeSettingsRepository,
        default_timezone: str = DEFAULT_TIMEZONE,
    ) -> None:
        """Initialize the OrderingTimeService.

        Args:
            settings_repository: Store holding ordering hours and timezone
            default_timezone: Timezone used when the settings row has none
        """
        self.settings_repository = settings_repository
        self.default_timezone = default_timezone

    @traced("ordering_time.availability")
    def get_availability(self, item_type: str | None = None, now: datetime | None = None) -> dict[str, Any]:
        """Return ordering availability for one item type, or food and drinks together.

        Args:
            item_type: "food" or "drinks"; anything else returns the combined document
            now: Instant to check; defaults to the current time

        Returns:
            JSON-ready ordering-time document
        """
        try:
            return self._build_document(item_type, now)
        except Exception as e:
            logger.error(f"Error checking ordering availability, failing open: {e}")
            return {
                "hours": {"food": {}, "drinks": {}},
                "isOrderingAvailable": True,
                "message": FAIL_OPEN_MESSAGE,
            }

    def check_cart(self, categories: list[str], now: datetime | None = None) -> dict[str, Any]:
        """Check whether every item type in a cart can be ordered now.

        Args:
            categories: Menu category of each cart item
            now: Instant to check; defaults to the current time

        Returns:
            ``{"isOrderingAvailable", "blocked": [{itemType, message, currentDayHours}]}``
        """
        try:
            settings = self.settings_repository.get_settings()
            if settings is None:
                return {"isOrderingAvailable": True, "blocked": []}

            timezone = settings.timezone or self.default_timezone
            results = check_items_orderable(categories, settings.ordering_hours, timezone, now)
        except Exception as e:
            logger.error(f"Error checking cart availability, failing open: {e}")
            return {"isOrderingAvailable": True, "blocked": []}

        blocked = [
            {"itemType": item_type.value, **_availability_fields(result)}
            for item_type, result in results.items()
            if not result.is_available
        ]
        for item_type, result in results.items():
            record_availability_check(item_type.value, result.is_available)
        return {"isOrderingAvailable": not blocked, "blocked": blocked}

    def _build_document(self, item_type: str | None, now: datetime | None) -> dict[str, Any]:
        settings = self.settings_repository.get_settings()
        if settings is None:
            logger.info("No cafe settings found, ordering is available")
            return {
                "hours": _hours_document(OrderingHoursRecord()),
                "isOrderingAvailable": True,
                "message": FAIL_OPEN_MESSAGE,
            }

        timezone = settings.timezone or self.default_timezone
        hours = settings.ordering_hours

        if item_type in {t.value for t in DISPLAYED_TYPES}:
            result = check_ordering_availability_by_type(hours, item_type, timezone, now)
            record_availability_check(item_type, result.is_available)
            return {
                "hours": _hours_document(hours),
                **_availability_fields(result),
                "itemType": item_type,
                "timezone": timezone,
            }

        document: dict[str, Any] = {"hours": _hours_document(hours)}
        for displayed in DISPLAYED_TYPES:
            result = check_ordering_availability_by_type(hours, displayed, timezone, now)
            record_availability_check(displayed.value, result.is_available)
            document[displayed.value] = _availability_fields(result)
        document["timezone"] = timezone
        return document
