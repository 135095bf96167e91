"""Normalize raw catalog items into menu items.

Each ITEM object is resolved against the lookup tables in a CatalogIndex:
category ids to names, the first variation to a price, modifier list
references to full modifier lists, and image ids to URLs.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from cafe_storefront.models.catalog_models import CatalogObject, to_decimal
from cafe_storefront.models.menu_models import UNCATEGORIZED, MenuItem, ModifierList, SelectionType
from cafe_storefront.services.catalog_indexer import CatalogIndex, field_value, first_extracted

logger = logging.getLogger(__name__)

UNKNOWN_ITEM_NAME = "Unknown"


@dataclass(frozen=True)
class ModifierListInfo:
    """Item-level settings for one attached modifier list.

    Attributes:
        modifier_list_id: Id of the attached modifier list
        enabled: Whether the list is enabled for this item (defaults to True)
        min_selected: Minimum selections override, None when unset
        max_selected: Maximum selections override, None when unset
    """

    modifier_list_id: str
    enabled: bool = True
    min_selected: int | None = None
    max_selected: int | None = None


def is_modifier_list_required(info: ModifierListInfo | None, selection_type: SelectionType) -> bool:
    """Decide whether a customer must pick from a modifier list.

    A list is required when the item demands at least one selection, or when
    it is enabled and single-choice. The second clause also marks optional
    single-choice lists as required.
    """
    if info is None:
        return False
    return (info.min_selected or 0) > 0 or (info.enabled and selection_type == SelectionType.SINGLE)


def _optional_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def parse_modifier_list_info(entry: Any) -> ModifierListInfo | None:
    """Parse one modifier list reference (a bare id or an info object)."""
    if isinstance(entry, str):
        return ModifierListInfo(modifier_list_id=entry)
    if not isinstance(entry, Mapping):
        return None

    list_id = field_value(entry, "modifier_list_id", "modifierListId", "id")
    if not list_id:
        return None
    return ModifierListInfo(
        modifier_list_id=str(list_id),
        enabled=field_value(entry, "enabled") is not False,
        min_selected=_optional_int(field_value(entry, "min_selected_modifiers", "minSelectedModifiers")),
        max_selected=_optional_int(field_value(entry, "max_selected_modifiers", "maxSelectedModifiers")),
    )


def _info_wrapped_in_object(item_data: Mapping[str, Any]) -> list[Any] | None:
    info = field_value(item_data, "modifier_list_info", "modifierListInfo")
    if isinstance(info, Mapping):
        lists = field_value(info, "modifier_lists", "modifierLists")
        return lists if isinstance(lists, list) else None
    return None


def _info_as_array(item_data: Mapping[str, Any]) -> list[Any] | None:
    info = field_value(item_data, "modifier_list_info", "modifierListInfo")
    return info if isinstance(info, list) else None


def _info_as_modifier_lists(item_data: Mapping[str, Any]) -> list[Any] | None:
    lists = field_value(item_data, "modifier_lists", "modifierLists")
    return lists if isinstance(lists, list) else None


def extract_modifier_list_info(item_data: Mapping[str, Any]) -> dict[str, ModifierListInfo]:
    """Normalize an item's modifier list references into ``{id: info}``.

    The references arrive in one of three shapes: an object wrapping a
    ``modifier_lists`` array, a bare ``modifier_list_info`` array, or a
    ``modifier_lists`` array on the item itself. Insertion order follows the
    source order.
    """
    entries = first_extracted(
        lambda: _info_wrapped_in_object(item_data),
        lambda: _info_as_array(item_data),
        lambda: _info_as_modifier_lists(item_data),
    )
    parsed = (parse_modifier_list_info(entry) for entry in entries)
    return {info.modifier_list_id: info for info in parsed if info is not None}


def _category_reference_ids(refs: Any) -> list[str]:
    if not isinstance(refs, list):
        return []
    ids = [ref.get("id") if isinstance(ref, Mapping) else ref for ref in refs]
    return [i for i in ids if isinstance(i, str) and i]


def _variation_category_id(variation: Mapping[str, Any]) -> str | None:
    data = field_value(variation, "item_variation_data", "itemVariationData") or {}
    value = field_value(data, "category_id", "categoryId")
    return value if isinstance(value, str) and value else None


def extract_category_ids(item: CatalogObject, item_variations: tuple[CatalogObject, ...] = ()) -> list[str]:
    """Collect the category ids attached to an item.

    Sources, in order of preference: the item's ``categories`` array, its
    legacy ``category_id``, the first embedded variation carrying a category,
    then standalone variation objects belonging to the item.
    """
    data = item.data
    raw_variations = data.get("variations")
    variations = [v for v in raw_variations if isinstance(v, Mapping)] if isinstance(raw_variations, list) else []

    def from_categories() -> list[str] | None:
        return _category_reference_ids(data.get("categories")) or None

    def from_category_id() -> list[str] | None:
        value = field_value(data, "category_id", "categoryId")
        return [value] if isinstance(value, str) and value else None

    def from_embedded_variations() -> list[str] | None:
        found = (_variation_category_id(v) for v in variations)
        first = next((c for c in found if c), None)
        return [first] if first else None

    def from_standalone_variations() -> list[str] | None:
        own = (
            v for v in item_variations
            if field_value(v.data, "item_id", "itemId") == item.id
        )
        found = (_variation_category_id({"item_variation_data": v.data}) for v in own)
        first = next((c for c in found if c), None)
        return [first] if first else None

    ids = first_extracted(
        from_categories,
        from_category_id,
        from_embedded_variations,
        from_standalone_variations,
    )
    # Keep first occurrence order, drop repeats
    return list(dict.fromkeys(ids))


def resolve_category(item_name: str, category_ids: list[str], category_map: Mapping[str, str]) -> str:
    """Return the display category: first resolvable name, else Uncategorized."""
    names = [category_map[cid].strip() for cid in category_ids if cid in category_map]
    names = [n for n in names if n]
    if names:
        return names[0]
    if category_ids:
        logger.warning(
            f"Item \"{item_name}\" references categories {category_ids} but none are in the catalog, "
            f"using {UNCATEGORIZED}"
        )
    return UNCATEGORIZED


def _first_variation_data(item_data: Mapping[str, Any]) -> Mapping[str, Any] | None:
    variations = item_data.get("variations")
    if not isinstance(variations, list) or not variations or not isinstance(variations[0], Mapping):
        return None
    return field_value(variations[0], "item_variation_data", "itemVariationData") or {}


def resolve_price(item_name: str, item_id: str, variation_data: Mapping[str, Any] | None) -> Decimal:
    """Return the first variation's price in dollars, 0 when it has none."""
    if variation_data is None:
        logger.warning(f"Item \"{item_name}\" ({item_id}) has no variations, showing price 0")
        return Decimal("0")

    price_money = field_value(variation_data, "price_money", "priceMoney")
    if not isinstance(price_money, Mapping) or price_money.get("amount") is None:
        logger.warning(f"Item \"{item_name}\" ({item_id}) has no price on its first variation, showing price 0")
        return Decimal("0")
    return to_decimal(price_money["amount"])


def resolve_modifier_lists(
    item_name: str,
    infos: dict[str, ModifierListInfo],
    modifier_list_map: Mapping[str, ModifierList],
) -> list[ModifierList] | None:
    """Copy each referenced modifier list with its item-level required flag.

    Returns None, not an empty list, when nothing resolves.
    """
    resolved = []
    for list_id, info in infos.items():
        modifier_list = modifier_list_map.get(list_id)
        if modifier_list is None:
            logger.warning(f"Item \"{item_name}\" references unknown modifier list {list_id}")
            continue
        resolved.append(
            modifier_list.model_copy(
                update={"required": is_modifier_list_required(info, modifier_list.selection_type)}
            )
        )
    return resolved or None


def resolve_image_url(
    item_data: Mapping[str, Any],
    variation_data: Mapping[str, Any] | None,
    image_map: Mapping[str, str],
) -> str | None:
    """Resolve the item's first image id, falling back to its first variation's."""
    image_ids = field_value(item_data, "image_ids", "imageIds")
    if not image_ids and variation_data:
        image_ids = field_value(variation_data, "image_ids", "imageIds")
    if not isinstance(image_ids, list) or not image_ids:
        return None
    return image_map.get(image_ids[0])


def normalize_item(item: CatalogObject, index: CatalogIndex) -> MenuItem:
    """Build a MenuItem from a raw ITEM object.

    Items are never dropped here: a missing price shows as 0 so staff can
    notice and fix it upstream, and deleted items come back with
    ``available=False``.

    Args:
        item: ITEM catalog object
        index: Lookup tables from the same catalog fetch

    Returns:
        Normalized MenuItem
    """
    data = item.data
    name = data.get("name") or UNKNOWN_ITEM_NAME
    # Log messages name the item by id when it has no name
    label = data.get("name") or item.id
    variation_data = _first_variation_data(data)

    category_ids = extract_category_ids(item, index.item_variations)
    modifier_lists = resolve_modifier_lists(
        label, extract_modifier_list_info(data), index.modifier_list_map
    )

    return MenuItem(
        id=item.id,
        name=name,
        description=data.get("description") or None,
        price=resolve_price(label, item.id, variation_data),
        category=resolve_category(label, category_ids, index.category_map),
        category_id=category_ids[0] if category_ids else None,
        category_ids=category_ids,
        image_url=resolve_image_url(data, variation_data, index.image_map),
        available=not item.is_deleted,
        source_id=item.id,
        modifier_lists=modifier_lists,
    )


def normalize_items(index: CatalogIndex) -> list[MenuItem]:
    """Normalize every item in the index, in catalog order."""
    items = [normalize_item(item, index) for item in index.items]
    logger.info(
        f"Normalized {len(items)} items: "
        f"{sum(1 for i in items if i.price == 0)} without price, "
        f"{sum(1 for i in items if i.modifier_lists)} with modifiers, "
        f"{sum(1 for i in items if not i.available)} deleted"
    )
    return items
