"""Index the flat catalog object list into lookup tables.

The catalog object graph references objects by id rather than embedding
them. Indexing builds one immutable lookup table per reference kind so that
items can be resolved in a single pass afterwards. Malformed entries are
skipped with a warning and never raise.
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeVar

from cafe_storefront.models.catalog_models import CatalogObject, CatalogObjectType, to_decimal
from cafe_storefront.models.menu_models import Modifier, ModifierList, SelectionType

logger = logging.getLogger(__name__)

T = TypeVar("T")


def field_value(data: Mapping[str, Any], *names: str) -> Any:
    """Return the first present value among snake_case / camelCase spellings."""
    for name in names:
        value = data.get(name)
        if value is not None:
            return value
    return None


def first_extracted(*extractors: Callable[[], list[T] | None]) -> list[T]:
    """Run extractors in order and return the first non-empty result.

    Each extractor tries one interpretation of a payload and returns None
    when that interpretation does not apply.
    """
    for extract in extractors:
        result = extract()
        if result:
            return result
    return []


def _frozen(entries: Iterable[tuple[str, T]]) -> Mapping[str, T]:
    return MappingProxyType(dict(entries))


@dataclass(frozen=True)
class CatalogIndex:
    """Lookup tables built from one catalog fetch.

    Attributes:
        category_map: category id -> trimmed category name
        modifier_map: modifier id -> Modifier
        image_map: image id -> image URL
        modifier_list_map: modifier list id -> ModifierList (required=False)
        items: ITEM objects in catalog order
        item_variations: standalone ITEM_VARIATION objects
    """

    category_map: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    modifier_map: Mapping[str, Modifier] = field(default_factory=lambda: MappingProxyType({}))
    image_map: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    modifier_list_map: Mapping[str, ModifierList] = field(default_factory=lambda: MappingProxyType({}))
    items: tuple[CatalogObject, ...] = ()
    item_variations: tuple[CatalogObject, ...] = ()


def index_catalog(objects: list[CatalogObject]) -> CatalogIndex:
    """Build all lookup tables from a flat catalog object list.

    Modifiers are indexed before modifier lists because lists resolve their
    modifier references against the modifier table.

    Args:
        objects: Catalog objects of any type, in any order

    Returns:
        CatalogIndex with immutable lookup tables
    """
    by_type: dict[str, list[CatalogObject]] = {t.value: [] for t in CatalogObjectType}
    for obj in objects:
        by_type.setdefault(obj.type, []).append(obj)

    modifier_map = build_modifier_map(by_type[CatalogObjectType.MODIFIER.value])
    index = CatalogIndex(
        category_map=build_category_map(by_type[CatalogObjectType.CATEGORY.value]),
        modifier_map=modifier_map,
        image_map=build_image_map(by_type[CatalogObjectType.IMAGE.value]),
        modifier_list_map=build_modifier_list_map(
            by_type[CatalogObjectType.MODIFIER_LIST.value], modifier_map
        ),
        items=tuple(by_type[CatalogObjectType.ITEM.value]),
        item_variations=tuple(by_type[CatalogObjectType.ITEM_VARIATION.value]),
    )

    logger.info(
        f"Indexed catalog: {len(index.items)} items, {len(index.category_map)} categories, "
        f"{len(index.modifier_list_map)} modifier lists, {len(index.modifier_map)} modifiers, "
        f"{len(index.image_map)} images"
    )
    return index


def build_category_map(categories: list[CatalogObject]) -> Mapping[str, str]:
    """Map category id -> trimmed category name."""

    def entry(category: CatalogObject) -> tuple[str, str] | None:
        name = category.data.get("name")
        if not isinstance(name, str) or not name.strip():
            logger.warning(f"Category {category.id} has no name, skipping")
            return None
        return category.id, name.strip()

    return _frozen(e for e in map(entry, categories) if e is not None)


def build_image_map(images: list[CatalogObject]) -> Mapping[str, str]:
    """Map image id -> URL."""

    def entry(image: CatalogObject) -> tuple[str, str] | None:
        url = image.data.get("url") or getattr(image, "url", None)
        if not url:
            logger.warning(f"Image {image.id} has no URL, skipping")
            return None
        return image.id, str(url)

    return _frozen(e for e in map(entry, images) if e is not None)


def parse_modifier(raw: Mapping[str, Any]) -> Modifier | None:
    """Build a Modifier from a MODIFIER object or an embedded modifier dict.

    Args:
        raw: Either a full catalog object (with ``modifier_data``) or the bare data

    Returns:
        Modifier, or None when the payload has no name or id
    """
    data = field_value(raw, "modifier_data", "modifierData") or raw
    name = data.get("name")
    modifier_id = field_value(raw, "id", "modifier_id", "modifierId") or data.get("id")
    if not name or not modifier_id:
        return None

    price_money = field_value(data, "price_money", "priceMoney")
    if not isinstance(price_money, Mapping):
        price_money = {}
    return Modifier(id=str(modifier_id), name=str(name), price=to_decimal(price_money.get("amount")))


def build_modifier_map(modifiers: list[CatalogObject]) -> Mapping[str, Modifier]:
    """Map modifier id -> Modifier, converting each price once."""

    def entry(obj: CatalogObject) -> tuple[str, Modifier] | None:
        modifier = parse_modifier({"id": obj.id, "modifier_data": obj.data})
        if modifier is None:
            logger.warning(f"Modifier {obj.id} has no name, skipping")
            return None
        return modifier.id, modifier

    return _frozen(e for e in map(entry, modifiers) if e is not None)


def modifier_reference_id(ref: Any) -> str | None:
    """Return the modifier id from a bare id string or a ``{modifier_id}`` wrapper."""
    if isinstance(ref, str):
        return ref
    if isinstance(ref, Mapping):
        value = field_value(ref, "modifier_id", "modifierId", "id")
        return str(value) if value else None
    return None


def modifiers_from_references(refs: list[Any], modifier_map: Mapping[str, Modifier]) -> list[Modifier] | None:
    """Resolve modifier references through the modifier table."""
    ids = [ref_id for ref_id in map(modifier_reference_id, refs) if ref_id]
    found = [modifier_map[ref_id] for ref_id in ids if ref_id in modifier_map]
    return found or None


def modifiers_from_embedded(refs: list[Any]) -> list[Modifier] | None:
    """Extract modifiers embedded directly in the list payload."""
    embedded = [
        parse_modifier(ref)
        for ref in refs
        if isinstance(ref, Mapping) and (field_value(ref, "modifier_data", "modifierData") or ref.get("name"))
    ]
    found = [m for m in embedded if m is not None]
    return found or None


def parse_selection_type(value: Any, list_id: str) -> SelectionType:
    """Parse a selection type, defaulting to SINGLE."""
    if value is None:
        return SelectionType.SINGLE
    try:
        return SelectionType(str(value).upper())
    except ValueError:
        logger.warning(f"Modifier list {list_id} has unknown selection type {value!r}, using SINGLE")
        return SelectionType.SINGLE


def build_modifier_list_map(
    modifier_lists: list[CatalogObject], modifier_map: Mapping[str, Modifier]
) -> Mapping[str, ModifierList]:
    """Map modifier list id -> ModifierList with its modifiers resolved.

    Modifier references are tried as ids against ``modifier_map`` first and
    fall back to embedded modifier objects when the id lookup finds nothing.
    """

    def entry(obj: CatalogObject) -> tuple[str, ModifierList] | None:
        data = obj.data
        name = data.get("name")
        if not name:
            logger.warning(f"Modifier list {obj.id} has no name, skipping")
            return None

        refs = data.get("modifiers") or []
        if not isinstance(refs, list):
            logger.warning(f"Modifier list {obj.id} has malformed modifiers, ignoring them")
            refs = []

        modifiers = first_extracted(
            lambda: modifiers_from_references(refs, modifier_map),
            lambda: modifiers_from_embedded(refs),
        )
        if refs and not modifiers:
            logger.warning(f"Modifier list \"{name}\" ({obj.id}) references {len(refs)} modifier(s), none resolved")

        return obj.id, ModifierList(
            id=obj.id,
            name=str(name),
            selection_type=parse_selection_type(field_value(data, "selection_type", "selectionType"), obj.id),
            required=False,
            modifiers=modifiers,
        )

    return _frozen(e for e in map(entry, modifier_lists) if e is not None)
