"""Shared pytest fixtures and configuration for all tests."""

import os

# Keep main.py and lambda_handler.py from building the real app on import
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from cafe_storefront.models.catalog_models import CatalogObject  # noqa: E402
from tests.factories import catalog_object, variation  # noqa: E402


@pytest.fixture
def raw_catalog() -> dict[str, list[dict[str, Any]]]:
    """Fixture providing a small cafe catalog split the way the API returns it."""
    return {
        "primary": [
            catalog_object("CATEGORY", "cat_coffee", name="  Coffee "),
            catalog_object("CATEGORY", "cat_bakery", name="Bakery"),
            catalog_object("CATEGORY", "cat_specials", name="Specials"),
            catalog_object(
                "ITEM",
                "item_flat_white",
                name="Flat White",
                description="Double shot with textured milk",
                categories=[{"id": "cat_coffee"}],
                variations=[variation("var_fw", 450)],
                image_ids=["img_fw"],
                modifier_list_info=[
                    {"modifier_list_id": "ml_milk", "enabled": True},
                    {"modifier_list_id": "ml_extras", "min_selected_modifiers": 0},
                ],
            ),
            catalog_object(
                "ITEM",
                "item_banana_bread",
                name="Banana Bread",
                category_id="cat_bakery",
                variations=[variation("var_bb", 550)],
            ),
            catalog_object(
                "ITEM",
                "item_muffin",
                name="Blueberry Muffin",
                variations=[variation("var_muffin", None, image_ids=["img_muffin"])],
            ),
            catalog_object(
                "ITEM",
                "item_seasonal",
                name="Seasonal Tart",
                categories=["cat_specials"],
                variations=[variation("var_tart", 700)],
            ),
        ],
        "modifier_lists": [
            catalog_object(
                "MODIFIER_LIST",
                "ml_milk",
                name="Milk",
                selection_type="SINGLE",
                modifiers=[{"modifier_id": "mod_oat"}, "mod_soy"],
            ),
            catalog_object(
                "MODIFIER_LIST",
                "ml_extras",
                name="Extras",
                selection_type="MULTIPLE",
                modifiers=[
                    {"id": "mod_shot", "modifier_data": {"name": "Extra shot", "price_money": {"amount": 80}}},
                ],
            ),
        ],
        "modifiers": [
            catalog_object("MODIFIER", "mod_oat", name="Oat", price_money={"amount": 70, "currency": "AUD"}),
            catalog_object("MODIFIER", "mod_soy", name="Soy", price_money={"amount": 50, "currency": "AUD"}),
        ],
        "images": [
            catalog_object("IMAGE", "img_fw", url="https://images.example.com/flat-white.jpg"),
            catalog_object("IMAGE", "img_muffin", url="https://images.example.com/muffin.jpg"),
        ],
    }


@pytest.fixture
def catalog_objects(raw_catalog: dict[str, list[dict[str, Any]]]) -> list[CatalogObject]:
    """Fixture providing the sample catalog as one flat list of CatalogObject."""
    return [CatalogObject(**raw) for group in raw_catalog.values() for raw in group]


@pytest.fixture
def weekday_hours() -> dict[str, str | None]:
    """Fixture providing a settings row with weekday food and drinks hours."""
    row: dict[str, str | None] = {"settings_id": "default", "timezone": "Australia/Sydney"}
    for day in ("monday", "tuesday", "wednesday", "thursday"):
        row[f"{day}_food_ordering_hours"] = "7am - 5pm"
        row[f"{day}_drinks_ordering_hours"] = "6:30am - 3pm"
    row["friday_food_ordering_hours"] = "Closed"
    row["friday_drinks_ordering_hours"] = "6:30am - 3pm"
    row["saturday_food_ordering_hours"] = "19:00 - 02:00"
    return row
