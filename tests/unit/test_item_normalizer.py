"""Unit tests for the item normalizer."""

from decimal import Decimal

import pytest

from cafe_storefront.models.catalog_models import CatalogObject
from cafe_storefront.models.menu_models import UNCATEGORIZED, SelectionType
from cafe_storefront.services.catalog_indexer import CatalogIndex, index_catalog
from cafe_storefront.services.item_normalizer import (
    UNKNOWN_ITEM_NAME,
    ModifierListInfo,
    extract_category_ids,
    extract_modifier_list_info,
    is_modifier_list_required,
    normalize_item,
    normalize_items,
)
from tests.factories import catalog_object, variation


@pytest.mark.unit
class TestRequiredHeuristic:
    """Test suite for is_modifier_list_required."""

    @pytest.mark.parametrize(
        "info,selection_type,expected",
        [
            (ModifierListInfo("ml", enabled=True, min_selected=1), SelectionType.MULTIPLE, True),
            (ModifierListInfo("ml", enabled=True), SelectionType.SINGLE, True),
            (ModifierListInfo("ml", enabled=False), SelectionType.SINGLE, False),
            (ModifierListInfo("ml", enabled=True, min_selected=0), SelectionType.MULTIPLE, False),
            (ModifierListInfo("ml", enabled=False, min_selected=2), SelectionType.MULTIPLE, True),
            (None, SelectionType.SINGLE, False),
        ],
    )
    def test_required(
        self, info: ModifierListInfo | None, selection_type: SelectionType, expected: bool
    ) -> None:
        """Test each branch of the required rule."""
        assert is_modifier_list_required(info, selection_type) is expected


@pytest.mark.unit
class TestExtractModifierListInfo:
    """Test suite for the three modifier list info shapes."""

    def test_object_wrapping_modifier_lists(self) -> None:
        """Test the {modifier_list_info: {modifier_lists: [...]}} shape."""
        item_data = {
            "modifier_list_info": {
                "modifier_lists": [{"modifier_list_id": "ml_1", "min_selected_modifiers": 1}]
            }
        }

        infos = extract_modifier_list_info(item_data)

        assert infos == {"ml_1": ModifierListInfo("ml_1", enabled=True, min_selected=1)}

    def test_bare_array(self) -> None:
        """Test the {modifier_list_info: [...]} shape, with enabled defaulting to true."""
        item_data = {
            "modifier_list_info": [
                {"modifier_list_id": "ml_1"},
                {"modifier_list_id": "ml_2", "enabled": False},
            ]
        }

        infos = extract_modifier_list_info(item_data)

        assert list(infos) == ["ml_1", "ml_2"]
        assert infos["ml_1"].enabled is True
        assert infos["ml_2"].enabled is False

    def test_modifier_lists_on_item(self) -> None:
        """Test the {modifier_lists: [...]} shape, including bare ids."""
        infos = extract_modifier_list_info({"modifier_lists": ["ml_1", {"id": "ml_2"}]})

        assert list(infos) == ["ml_1", "ml_2"]

    def test_no_modifier_lists(self) -> None:
        """Test that an item without modifier info yields nothing."""
        assert extract_modifier_list_info({"name": "Toast"}) == {}


@pytest.mark.unit
class TestExtractCategoryIds:
    """Test suite for extract_category_ids."""

    def test_categories_array_takes_precedence(self) -> None:
        """Test that the categories array wins over legacy fields."""
        item = CatalogObject(
            **catalog_object("ITEM", "i1", categories=[{"id": "c1"}, "c2", {"id": "c1"}], category_id="c9")
        )

        assert extract_category_ids(item) == ["c1", "c2"]

    def test_legacy_category_id(self) -> None:
        """Test the item-level category_id fallback."""
        item = CatalogObject(**catalog_object("ITEM", "i1", category_id="c1"))

        assert extract_category_ids(item) == ["c1"]

    def test_embedded_variation_category(self) -> None:
        """Test the first embedded variation with a category."""
        item = CatalogObject(
            **catalog_object(
                "ITEM",
                "i1",
                variations=[variation("v1", 100), variation("v2", 100, category_id="c2")],
            )
        )

        assert extract_category_ids(item) == ["c2"]

    def test_standalone_variation_category(self) -> None:
        """Test separate ITEM_VARIATION objects belonging to the item."""
        item = CatalogObject(**catalog_object("ITEM", "i1"))
        variations = (
            CatalogObject(**catalog_object("ITEM_VARIATION", "v_other", item_id="i2", category_id="c_other")),
            CatalogObject(**catalog_object("ITEM_VARIATION", "v1", item_id="i1", category_id="c1")),
        )

        assert extract_category_ids(item, variations) == ["c1"]

    def test_no_category(self) -> None:
        """Test that an item with no category source yields an empty list."""
        assert extract_category_ids(CatalogObject(**catalog_object("ITEM", "i1"))) == []


@pytest.mark.unit
class TestNormalizeItem:
    """Test suite for normalize_item."""

    @pytest.fixture
    def index(self, catalog_objects: list[CatalogObject]) -> CatalogIndex:
        """Index the sample catalog."""
        return index_catalog(catalog_objects)

    def test_fully_resolved_item(self, index: CatalogIndex) -> None:
        """Test an item with category, price, image and modifier lists."""
        item = normalize_item(index.items[0], index)

        assert item.id == "item_flat_white"
        assert item.source_id == "item_flat_white"
        assert item.category == "Coffee"
        assert item.category_id == "cat_coffee"
        assert item.price == Decimal("4.50")
        assert item.image_url == "https://images.example.com/flat-white.jpg"
        assert item.available is True
        assert item.modifier_lists is not None
        milk, extras = item.modifier_lists
        assert (milk.id, milk.required) == ("ml_milk", True)
        assert (extras.id, extras.required) == ("ml_extras", False)

    def test_required_flag_does_not_leak_into_index(self, index: CatalogIndex) -> None:
        """Test that applying the required flag leaves the shared list untouched."""
        normalize_item(index.items[0], index)

        assert index.modifier_list_map["ml_milk"].required is False

    def test_item_without_modifiers_has_none(self, index: CatalogIndex) -> None:
        """Test that modifier_lists is None rather than an empty list."""
        item = normalize_item(index.items[1], index)

        assert item.modifier_lists is None
        assert item.category == "Bakery"

    def test_item_without_price_is_kept_with_zero(self, index: CatalogIndex) -> None:
        """Test that a price-less item is kept with price 0."""
        item = normalize_item(index.items[2], index)

        assert item.price == Decimal("0")
        assert item.category == UNCATEGORIZED
        assert item.image_url == "https://images.example.com/muffin.jpg"

    def test_unknown_category_id_is_uncategorized(self) -> None:
        """Test that a dangling category reference falls back to Uncategorized."""
        index = index_catalog(
            [CatalogObject(**catalog_object("ITEM", "i1", name="Scone", category_id="gone"))]
        )

        item = normalize_item(index.items[0], index)

        assert item.category == UNCATEGORIZED
        assert item.category_ids == ["gone"]
        assert item.price == Decimal("0")

    def test_deleted_item_is_unavailable(self) -> None:
        """Test that is_deleted maps to available=False."""
        index = index_catalog(
            [CatalogObject(**catalog_object("ITEM", "i1", name="Old Cake", is_deleted=True))]
        )

        assert normalize_item(index.items[0], index).available is False

    def test_missing_name_shows_unknown(self) -> None:
        """Test that a nameless item is displayed as Unknown but keeps its id."""
        index = index_catalog([CatalogObject(**catalog_object("ITEM", "i1"))])

        item = normalize_item(index.items[0], index)

        assert item.name == UNKNOWN_ITEM_NAME == "Unknown"
        assert item.id == "i1"
        assert item.source_id == "i1"

    def test_normalize_items_keeps_catalog_order(self, index: CatalogIndex) -> None:
        """Test that every item is normalized, in order."""
        items = normalize_items(index)

        assert [i.id for i in items] == [
            "item_flat_white",
            "item_banana_bread",
            "item_muffin",
            "item_seasonal",
        ]
