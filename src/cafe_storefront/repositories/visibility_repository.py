"""DynamoDB repository for storefront visibility overrides.

Overrides are read once per menu request. A table that has not been created
yet reads as empty so a fresh environment still serves the full menu.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table
from pydantic import ValidationError

from cafe_storefront.exceptions import UpstreamFetchError
from cafe_storefront.models.visibility_models import DisabledCategory, DisabledItem

logger = logging.getLogger(__name__)

T = TypeVar("T")

MISSING_TABLE_ERROR = "ResourceNotFoundException"


class VisibilityOverrideRepository:
    """Read-only access to disabled items and disabled categories."""

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        items_table_name: str,
        categories_table_name: str,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            items_table_name: Table holding disabled item rows
            categories_table_name: Table holding disabled category rows
        """
        self.dynamodb = dynamodb_resource
        self.items_table: Table = dynamodb_resource.Table(items_table_name)
        self.categories_table: Table = dynamodb_resource.Table(categories_table_name)

    def list_disabled_items(self) -> list[DisabledItem]:
        """List catalog items hidden from the menu.

        Returns:
            list: DisabledItem rows (empty if the table does not exist)

        Raises:
            UpstreamFetchError: If the table exists but cannot be read
        """
        return self._scan(self.items_table, DisabledItem.from_dynamodb_item)

    def list_disabled_categories(self) -> list[DisabledCategory]:
        """List categories hidden from the menu.

        Returns:
            list: DisabledCategory rows (empty if the table does not exist)

        Raises:
            UpstreamFetchError: If the table exists but cannot be read
        """
        return self._scan(self.categories_table, DisabledCategory.from_dynamodb_item)

    def _scan(self, table: Table, parse: Callable[[dict[str, Any]], T]) -> list[T]:
        rows: list[dict[str, Any]] = []
        scan_kwargs: dict[str, Any] = {}
        try:
            while True:
                response = table.scan(**scan_kwargs)
                rows.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                scan_kwargs["ExclusiveStartKey"] = last_key

        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code == MISSING_TABLE_ERROR:
                logger.warning(f"Override table {table.name} does not exist, treating as empty")
                return []
            logger.error(f"Failed to read override table {table.name}: {e}")
            raise UpstreamFetchError(f"Failed to read visibility overrides from {table.name}") from e

        parsed = []
        for row in rows:
            try:
                parsed.append(parse(row))
            except (KeyError, ValidationError) as e:
                logger.warning(f"Skipping malformed override row in {table.name}: {e}")
        return parsed
