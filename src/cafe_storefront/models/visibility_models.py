"""Visibility override models.

Admin-controlled exclusions stored in DynamoDB. They hide catalog entries from
the storefront without deleting them upstream.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


class DisabledItem(BaseModel):
    """A catalog item hidden from the menu."""

    source_id: str = Field(..., description="Catalog identifier of the hidden item")

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "DisabledItem":
        """Create from DynamoDB item format.

        Args:
            item: DynamoDB item dictionary

        Returns:
            DisabledItem instance
        """
        return cls(source_id=item["source_id"])


class DisabledCategory(BaseModel):
    """A category hidden from the menu, matched by name."""

    category_name: str = Field(..., min_length=1, description="Category name to hide")

    @field_validator("category_name", mode="before")
    @classmethod
    def strip_category_name(cls, v: Any) -> Any:
        """Category names are compared trimmed."""
        return v.strip() if isinstance(v, str) else v

    @classmethod
    def from_dynamodb_item(cls, item: dict[str, Any]) -> "DisabledCategory":
        """Create from DynamoDB item format."""
        return cls(category_name=item["category_name"])
