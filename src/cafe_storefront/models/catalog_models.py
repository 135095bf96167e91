"""Catalog object models.

These models represent the raw objects returned by the point-of-sale catalog
API. Each object carries a ``type`` discriminator and exactly one populated
``*_data`` block matching that type. The data blocks are kept as plain
dictionaries because their inner shapes vary between API versions.
"""

import logging
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class CatalogObjectType(str, Enum):
    """Catalog object types consumed by the menu pipeline."""

    ITEM = "ITEM"
    CATEGORY = "CATEGORY"
    ITEM_VARIATION = "ITEM_VARIATION"
    MODIFIER_LIST = "MODIFIER_LIST"
    MODIFIER = "MODIFIER"
    IMAGE = "IMAGE"


class CatalogObject(BaseModel):
    """A single object from the catalog object graph."""

    model_config = ConfigDict(extra="allow")

    type: str = Field(..., description="Catalog object type discriminator")
    id: str = Field(..., description="Stable catalog object identifier")
    is_deleted: bool = Field(default=False, description="Whether the object is deleted upstream")
    item_data: dict[str, Any] | None = None
    category_data: dict[str, Any] | None = None
    item_variation_data: dict[str, Any] | None = None
    modifier_list_data: dict[str, Any] | None = None
    modifier_data: dict[str, Any] | None = None
    image_data: dict[str, Any] | None = None

    @property
    def data(self) -> dict[str, Any]:
        """Return the data block matching this object's type, or an empty dict."""
        block = {
            CatalogObjectType.ITEM.value: self.item_data,
            CatalogObjectType.CATEGORY.value: self.category_data,
            CatalogObjectType.ITEM_VARIATION.value: self.item_variation_data,
            CatalogObjectType.MODIFIER_LIST.value: self.modifier_list_data,
            CatalogObjectType.MODIFIER.value: self.modifier_data,
            CatalogObjectType.IMAGE.value: self.image_data,
        }.get(self.type)
        return block or {}


class CatalogPage(BaseModel):
    """One page of results from a catalog search or list call."""

    objects: list[CatalogObject] = Field(default_factory=list)
    related_objects: list[CatalogObject] = Field(default_factory=list)
    cursor: str | None = None


def to_decimal(amount: Any) -> Decimal:
    """Convert an integer minor-unit money amount to a decimal major-unit value.

    This is the single conversion boundary for catalog money. It accepts the
    integer (or integer-like string) the catalog API returns and must be
    called exactly once per raw value.

    Args:
        amount: Amount in cents as returned by the catalog API

    Returns:
        Decimal amount in dollars, Decimal("0") for missing or malformed input
    """
    if amount is None or isinstance(amount, bool):
        return Decimal("0")
    try:
        cents = int(amount)
    except (TypeError, ValueError):
        logger.warning(f"Malformed money amount {amount!r}, using 0")
        return Decimal("0")
    if cents < 0:
        return Decimal("0")
    return Decimal(cents) / Decimal(100)
