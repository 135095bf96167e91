"""Menu data models.

These models represent the denormalized menu that the storefront renders:
menu items with resolved category names, prices, images and nested modifier
choices. They are built fresh for every request from the catalog object graph.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Prices are held as Decimal but always serialized to JSON as numbers.
Money = Annotated[
    Decimal,
    Field(ge=0),
    PlainSerializer(float, return_type=float, when_used="json"),
]

UNCATEGORIZED = "Uncategorized"


class SelectionType(str, Enum):
    """Selection cardinality of a modifier list."""

    SINGLE = "SINGLE"
    MULTIPLE = "MULTIPLE"


class Modifier(BaseModel):
    """A single add-on choice inside a modifier list."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Catalog identifier of the modifier")
    name: str = Field(..., description="Modifier name")
    price: Money = Field(default=Decimal("0"), description="Additional price in dollars")


class ModifierList(BaseModel):
    """A named group of add-ons, e.g. "Milk type"."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Catalog identifier of the modifier list")
    name: str = Field(..., description="Modifier list name")
    selection_type: SelectionType = Field(default=SelectionType.SINGLE)
    required: bool = Field(default=False, description="Whether a choice must be made")
    modifiers: list[Modifier] = Field(default_factory=list)


class MenuItem(BaseModel):
    """Menu item model."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique identifier for the menu item")
    name: str = Field(..., description="Item name")
    description: str | None = Field(None, description="Item description")
    price: Money = Field(..., description="Item price in dollars")
    category: str = Field(default=UNCATEGORIZED, min_length=1, description="Display category name")
    category_id: str | None = Field(None, description="First category id attached to the item")
    category_ids: list[str] = Field(default_factory=list, description="All attached category ids")
    image_url: str | None = Field(None, description="URL to item image")
    available: bool = Field(default=True, description="Whether item is currently available")
    source_id: str = Field(..., description="Catalog identifier the item was derived from")
    modifier_lists: list[ModifierList] | None = Field(
        None, description="Attached modifier lists, None when the item has none"
    )


class MenuResponse(BaseModel):
    """Menu document returned to the storefront."""

    items: list[MenuItem] = Field(default_factory=list)
    categories: list[str] = Field(default_factory=list)
    source: str = "catalog"
    count: int = Field(default=0, ge=0)
    warning: str | None = None
    error: bool | None = None
    message: str | None = None
    errors: list[dict[str, Any]] | None = None

    def to_document(self) -> dict[str, Any]:
        """Serialize for the storefront.

        Unset top-level fields and absent ``modifier_lists`` are omitted;
        other item fields keep explicit nulls.
        """
        document = self.model_dump(mode="json")
        for item in document["items"]:
            if item.get("modifier_lists") is None:
                item.pop("modifier_lists", None)
        return {key: value for key, value in document.items() if value is not None}
