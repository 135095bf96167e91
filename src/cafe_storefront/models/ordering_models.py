"""Ordering hours and availability models.

Ordering hours are free-text strings stored per weekday and item type, for
example ``"7am - 5pm"``, ``"19:00 - 02:00"`` or ``"Closed"``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DAY_NAMES = ["sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"]
DEFAULT_TIMEZONE = "Australia/Sydney"


class ItemType(str, Enum):
    """Item types with their own ordering hours."""

    FOOD = "food"
    DRINKS = "drinks"
    COMBO = "combo"


def hours_field(day_name: str, item_type: ItemType | str) -> str:
    """Return the ordering hours field name for a weekday and item type."""
    value = item_type.value if isinstance(item_type, ItemType) else item_type
    return f"{day_name}_{value}_ordering_hours"


class OrderingHoursRecord(BaseModel):
    """Weekly ordering hours for food, drinks and combo items."""

    model_config = ConfigDict(extra="ignore")

    monday_food_ordering_hours: str | None = None
    tuesday_food_ordering_hours: str | None = None
    wednesday_food_ordering_hours: str | None = None
    thursday_food_ordering_hours: str | None = None
    friday_food_ordering_hours: str | None = None
    saturday_food_ordering_hours: str | None = None
    sunday_food_ordering_hours: str | None = None
    monday_drinks_ordering_hours: str | None = None
    tuesday_drinks_ordering_hours: str | None = None
    wednesday_drinks_ordering_hours: str | None = None
    thursday_drinks_ordering_hours: str | None = None
    friday_drinks_ordering_hours: str | None = None
    saturday_drinks_ordering_hours: str | None = None
    sunday_drinks_ordering_hours: str | None = None
    monday_combo_ordering_hours: str | None = None
    tuesday_combo_ordering_hours: str | None = None
    wednesday_combo_ordering_hours: str | None = None
    thursday_combo_ordering_hours: str | None = None
    friday_combo_ordering_hours: str | None = None
    saturday_combo_ordering_hours: str | None = None
    sunday_combo_ordering_hours: str | None = None

    def get_hours(self, day_name: str, item_type: ItemType | str) -> str | None:
        """Return the raw hours string for a weekday and item type."""
        value: str | None = getattr(self, hours_field(day_name, item_type), None)
        return value or None

    def hours_for_type(self, item_type: ItemType | str) -> dict[str, str | None]:
        """Return the seven weekday fields for one item type, Monday first."""
        week = DAY_NAMES[1:] + DAY_NAMES[:1]
        return {
            hours_field(day, item_type): self.get_hours(day, item_type) for day in week
        }


class CafeSettings(BaseModel):
    """Store settings relevant to ordering."""

    ordering_hours: OrderingHoursRecord = Field(default_factory=OrderingHoursRecord)
    timezone: str | None = Field(default=None, description="IANA business timezone, None to use the service default")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "CafeSettings":
        """Create from DynamoDB item format.

        The settings row stores the 21 ordering hours fields flat alongside
        the timezone.

        Args:
            item: DynamoDB item dictionary

        Returns:
            CafeSettings instance
        """
        return cls(
            ordering_hours=OrderingHoursRecord(**item),
            timezone=item.get("timezone") or None,
        )


@dataclass(frozen=True)
class TimeRange:
    """An ordering window in minutes since midnight.

    Attributes:
        start: Opening minute, 0 to 1439
        end: Closing minute, 0 to 1439; less than start for overnight windows
    """

    start: int
    end: int


@dataclass(frozen=True)
class AvailabilityResult:
    """Outcome of an ordering availability check.

    Attributes:
        is_available: Whether ordering is open right now
        message: Human-readable status for the storefront
        current_day_hours: Raw hours string for today, if any
    """

    is_available: bool
    message: str
    current_day_hours: str | None = None
