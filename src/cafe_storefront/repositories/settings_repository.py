"""DynamoDB repository for cafe settings."""

import logging

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table

from cafe_storefront.models.ordering_models import CafeSettings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_ID = "default"


class CafeSettingsRepository:
    """Repository for the single cafe settings row.

    The row is keyed by ``settings_id`` and stores the 21 ordering hours
    fields flat alongside the business timezone.
    """

    def __init__(
        self,
        dynamodb_resource: DynamoDBServiceResource,
        table_name: str,
        settings_id: str = DEFAULT_SETTINGS_ID,
    ) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
            settings_id: Key of the settings row
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.settings_id = settings_id
        self.table: Table = dynamodb_resource.Table(table_name)

    def get_settings(self) -> CafeSettings | None:
        """Retrieve the cafe settings.

        Returns:
            CafeSettings if found, None if missing or unreadable
        """
        try:
            response = self.table.get_item(Key={"settings_id": self.settings_id})
        except ClientError as e:
            logger.error(f"Failed to get cafe settings: {e}")
            return None

        if "Item" not in response:
            logger.info(f"No settings row {self.settings_id!r} in {self.table_name}")
            return None

        return CafeSettings.from_dynamodb_item(response["Item"])
