"""Apply store-side visibility overrides to normalized menu items."""

import logging

from cafe_storefront.models.menu_models import MenuItem
from cafe_storefront.observability.metrics import record_hidden_items

logger = logging.getLogger(__name__)


def filter_visible_items(
    items: list[MenuItem],
    disabled_item_ids: set[str],
    disabled_category_names: set[str],
) -> list[MenuItem]:
    """Remove items hidden by item-level or category-level overrides.

    Item overrides are applied first, then category overrides. The result is
    the same in either order; the two passes are only logged separately.

    Args:
        items: Normalized menu items
        disabled_item_ids: Source ids of hidden items
        disabled_category_names: Trimmed names of hidden categories

    Returns:
        Items that are neither hidden directly nor by their category
    """
    after_items = [item for item in items if item.source_id not in disabled_item_ids]
    hidden_by_item = len(items) - len(after_items)
    if hidden_by_item:
        logger.info(f"Hid {hidden_by_item} disabled item(s)")

    category_names = {name.strip() for name in disabled_category_names}
    visible = [item for item in after_items if item.category.strip() not in category_names]
    hidden_by_category = len(after_items) - len(visible)
    if hidden_by_category:
        logger.info(f"Hid {hidden_by_category} item(s) in disabled categories: {sorted(category_names)}")

    record_hidden_items("item", hidden_by_item)
    record_hidden_items("category", hidden_by_category)
    return visible
