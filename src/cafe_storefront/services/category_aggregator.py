"""Derive the storefront category list from visible menu items."""

from cafe_storefront.models.menu_models import UNCATEGORIZED, MenuItem


def category_sort_key(name: str) -> tuple[bool, str, str]:
    """Sort key: Uncategorized last, then case-insensitive alphabetical."""
    return (name == UNCATEGORIZED, name.casefold(), name)


def aggregate_categories(filtered_items: list[MenuItem], disabled_category_names: set[str]) -> list[str]:
    """Return the distinct, sorted categories of the visible items.

    Categories are taken only from items that survived filtering, so a
    category with no visible items never appears.

    Args:
        filtered_items: Items after visibility filtering
        disabled_category_names: Hidden category names, excluded again here

    Returns:
        Sorted category names with "Uncategorized" last
    """
    disabled = {name.strip() for name in disabled_category_names}
    names = {item.category.strip() for item in filtered_items if item.category}
    return sorted((n for n in names if n and n not in disabled), key=category_sort_key)
