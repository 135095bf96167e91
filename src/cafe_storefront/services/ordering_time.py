"""Parse weekly ordering hours and decide whether ordering is open.

Hours are stored as free text per weekday and item type, for example
``"7am - 5pm"``, ``"7:30am - 2:15pm"``, ``"19:00 - 02:00"`` or ``"Closed"``.
A window whose end is before its start runs past midnight.

A malformed hours string never raises: it is logged and treated as closed.
"""

import logging
import re
from collections.abc import Mapping
from datetime import UTC, datetime
from zoneinfo import ZoneInfo

from cafe_storefront.models.ordering_models import (
    DAY_NAMES,
    DEFAULT_TIMEZONE,
    AvailabilityResult,
    ItemType,
    OrderingHoursRecord,
    TimeRange,
    hours_field,
)

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
OPEN_MESSAGE = "Ordering is currently available."

# "7pm", "7:30pm", "12am"
_TWELVE_HOUR = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)$", re.IGNORECASE)
# "19:00", "07:30"
_TWENTY_FOUR_HOUR = re.compile(r"^(\d{1,2}):(\d{2})$")

HoursSource = OrderingHoursRecord | Mapping[str, str | None]


def parse_time(value: str | None) -> int | None:
    """Parse a single time of day into minutes since midnight.

    Args:
        value: Time such as "7am", "7:30pm" or "19:00"

    Returns:
        Minutes since midnight, or None if the token matches neither grammar
    """
    if not value or not isinstance(value, str):
        return None
    token = value.strip().lower()
    if not token or token == "closed":
        return None

    match = _TWELVE_HOUR.match(token)
    if match:
        hours = int(match.group(1))
        minutes = int(match.group(2) or 0)
        if not 1 <= hours <= 12 or minutes > 59:
            return None
        if match.group(3) == "pm" and hours < 12:
            hours += 12
        elif match.group(3) == "am" and hours == 12:
            hours = 0
        return hours * 60 + minutes

    match = _TWENTY_FOUR_HOUR.match(token)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if hours > 23 or minutes > 59:
            return None
        return hours * 60 + minutes

    logger.warning(f"No time pattern matched for {value!r}")
    return None


def parse_time_range(value: str | None) -> TimeRange | None:
    """Parse an hours string such as "7am - 5pm".

    Args:
        value: Hours string, "Closed", empty or None

    Returns:
        TimeRange, or None when closed or malformed
    """
    if not value or value.strip().lower() == "closed":
        return None

    parts = [part.strip() for part in value.split("-")]
    if len(parts) != 2:
        logger.warning(f"Ordering hours {value!r} are not a single 'start - end' range")
        return None

    start, end = parse_time(parts[0]), parse_time(parts[1])
    if start is None or end is None:
        logger.warning(f"Ordering hours {value!r} contain an unparseable time")
        return None
    return TimeRange(start=start, end=end)


def is_within_range(minutes: int, time_range: TimeRange) -> bool:
    """Check whether a minute of the day falls inside a window, both ends inclusive."""
    if time_range.end >= time_range.start:
        return time_range.start <= minutes <= time_range.end
    # Overnight window
    return minutes >= time_range.start or minutes <= time_range.end


def format_minutes(minutes: int) -> str:
    """Format minutes since midnight as "7am" or "7:30pm"."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        logger.error(f"Invalid minutes value: {minutes}")
        return "Invalid"
    hours, mins = divmod(minutes, 60)
    period = "pm" if hours >= 12 else "am"
    display_hours = hours - 12 if hours > 12 else (12 if hours == 0 else hours)
    return f"{display_hours}:{mins:02d}{period}" if mins else f"{display_hours}{period}"


def _item_type_value(item_type: ItemType | str) -> str:
    return item_type.value if isinstance(item_type, ItemType) else str(item_type)


def get_ordering_hours_for_day(hours: HoursSource, day_of_week: int, item_type: ItemType | str) -> str | None:
    """Return the raw hours string for a weekday (0 = Sunday) and item type."""
    field = hours_field(DAY_NAMES[day_of_week], item_type)
    if isinstance(hours, OrderingHoursRecord):
        value = getattr(hours, field, None)
    else:
        value = hours.get(field)
    return value or None


def check_ordering_availability_by_type(
    hours: HoursSource,
    item_type: ItemType | str,
    timezone: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> AvailabilityResult:
    """Check whether ordering for one item type is open at a given instant.

    Args:
        hours: Weekly ordering hours
        item_type: "food", "drinks" or "combo"
        timezone: IANA timezone of the business
        now: Instant to check; defaults to the current time. Naive values are UTC.

    Returns:
        AvailabilityResult with the decision, a display message and today's hours
    """
    instant = now or datetime.now(UTC)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    zoned = instant.astimezone(ZoneInfo(timezone))

    # datetime.weekday() is Monday = 0; hours are keyed Sunday = 0
    day_of_week = (zoned.weekday() + 1) % 7
    current_minutes = zoned.hour * 60 + zoned.minute

    label = _item_type_value(item_type).capitalize()
    day_hours = get_ordering_hours_for_day(hours, day_of_week, item_type)
    time_range = parse_time_range(day_hours)

    if time_range is None:
        return AvailabilityResult(
            is_available=False,
            message=f"{label} ordering is closed on {DAY_NAMES[day_of_week].capitalize()}.",
            current_day_hours=day_hours,
        )

    if is_within_range(current_minutes, time_range):
        return AvailabilityResult(is_available=True, message=OPEN_MESSAGE, current_day_hours=day_hours)

    hours_display = f"{format_minutes(time_range.start)} - {format_minutes(time_range.end)}"
    return AvailabilityResult(
        is_available=False,
        message=f"{label} ordering is currently closed. Ordering hours: {hours_display}.",
        current_day_hours=day_hours,
    )


def check_ordering_availability(
    hours: HoursSource,
    timezone: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> AvailabilityResult:
    """Check food ordering availability."""
    return check_ordering_availability_by_type(hours, ItemType.FOOD, timezone, now)


def get_ordering_hours_display(hours: HoursSource, item_type: ItemType | str = ItemType.FOOD) -> dict[str, str]:
    """Return ``{"Monday": "7am - 5pm", ...}`` with unset days shown as "Closed"."""
    week = list(range(1, 7)) + [0]
    return {
        DAY_NAMES[day].capitalize(): get_ordering_hours_for_day(hours, day, item_type) or "Closed"
        for day in week
    }


DRINKS_CATEGORIES = (
    "Coffee",
    "Tea",
    "Beverages",
    "Drinks",
    "Juice",
    "Smoothie",
    "Cold Drinks",
    "Hot Drinks",
    "Iced Drinks",
)


def is_drinks_category(category: str | None) -> bool:
    """Check whether a menu category holds drinks (case-insensitive substring match)."""
    if not category:
        return False
    lowered = category.lower()
    return any(name.lower() in lowered for name in DRINKS_CATEGORIES)


def get_item_type(category: str | None) -> ItemType:
    """Classify a menu category as drinks or food."""
    return ItemType.DRINKS if is_drinks_category(category) else ItemType.FOOD


def check_items_orderable(
    categories: list[str],
    hours: HoursSource,
    timezone: str = DEFAULT_TIMEZONE,
    now: datetime | None = None,
) -> dict[ItemType, AvailabilityResult]:
    """Check ordering availability for every item type present in a cart.

    Args:
        categories: Menu category of each cart item
        hours: Weekly ordering hours
        timezone: IANA timezone of the business
        now: Instant to check; defaults to the current time

    Returns:
        One AvailabilityResult per distinct item type in the cart
    """
    item_types = dict.fromkeys(get_item_type(category) for category in categories)
    return {
        item_type: check_ordering_availability_by_type(hours, item_type, timezone, now)
        for item_type in item_types
    }
