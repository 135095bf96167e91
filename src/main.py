"""Main application entry point for the cafe storefront service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from cafe_storefront.handlers.api_handler import create_app
from cafe_storefront.models.ordering_models import DEFAULT_TIMEZONE
from cafe_storefront.observability import configure_logging, setup_observability
from cafe_storefront.repositories.settings_repository import CafeSettingsRepository
from cafe_storefront.repositories.visibility_repository import VisibilityOverrideRepository
from cafe_storefront.services.catalog_client import DEFAULT_API_VERSION, SquareCatalogClient, detect_environment
from cafe_storefront.services.catalog_fetcher import DEFAULT_MAX_PAGES, CatalogFetcher
from cafe_storefront.services.menu_service import MenuService
from cafe_storefront.services.ordering_time_service import OrderingTimeService

logger = logging.getLogger(__name__)


def get_dynamodb_resource() -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "ap-southeast-2")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {region}")
    # Default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=region)


def create_catalog_fetcher() -> CatalogFetcher | None:
    """Create the catalog fetcher from environment variables.

    Returns:
        CatalogFetcher, or None when SQUARE_ACCESS_TOKEN or SQUARE_LOCATION_ID is missing
    """
    access_token = os.getenv("SQUARE_ACCESS_TOKEN")
    location_id = os.getenv("SQUARE_LOCATION_ID")

    if not access_token or not location_id:
        logger.warning("SQUARE_ACCESS_TOKEN and SQUARE_LOCATION_ID not set, menu endpoint will return 503")
        return None

    environment = detect_environment(access_token, os.getenv("SQUARE_ENVIRONMENT"))
    client = SquareCatalogClient(
        access_token=access_token,
        environment=environment,
        api_version=os.getenv("SQUARE_API_VERSION", DEFAULT_API_VERSION),
        timeout_seconds=float(os.getenv("SQUARE_TIMEOUT_SECONDS", "10")),
    )
    max_pages = int(os.getenv("CATALOG_MAX_PAGES", str(DEFAULT_MAX_PAGES)))

    logger.info(f"Catalog client configured - environment: {environment}, location: {location_id}")
    return CatalogFetcher(client=client, max_pages=max_pages)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    Returns:
        Configured FastAPI application instance
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Initializing cafe storefront service...")

    dynamodb_resource = get_dynamodb_resource()

    items_table = os.getenv("DYNAMODB_DISABLED_ITEMS_TABLE", "cafe-disabled-items")
    categories_table = os.getenv("DYNAMODB_DISABLED_CATEGORIES_TABLE", "cafe-disabled-categories")
    settings_table = os.getenv("DYNAMODB_SETTINGS_TABLE", "cafe-settings")

    visibility_repository = VisibilityOverrideRepository(
        dynamodb_resource=dynamodb_resource,
        items_table_name=items_table,
        categories_table_name=categories_table,
    )
    settings_repository = CafeSettingsRepository(
        dynamodb_resource=dynamodb_resource, table_name=settings_table
    )

    logger.info(
        f"Repositories configured - disabled items: {items_table}, "
        f"disabled categories: {categories_table}, settings: {settings_table}"
    )

    menu_service = MenuService(
        fetcher=create_catalog_fetcher(),
        visibility_repository=visibility_repository,
    )
    ordering_time_service = OrderingTimeService(
        settings_repository=settings_repository,
        default_timezone=os.getenv("DEFAULT_TIMEZONE", DEFAULT_TIMEZONE),
    )

    app = create_app(menu_service=menu_service, ordering_time_service=ordering_time_service)
    setup_observability(app)

    logger.info("Cafe storefront service initialized successfully")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8000"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
