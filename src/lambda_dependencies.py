"""Cached dependency factory for the Lambda handler.

Dependencies are created once per Lambda container and reused across
invocations.
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

# Module-level caches for Lambda container reuse
_dynamodb_resource: Any | None = None
_menu_service: MenuService | None = None
_ordering_time_service: OrderingTimeService | None = None
_fastapi_app: FastAPI | None = None


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    endpoint_url = os.getenv("DYNAMODB_ENDPOINT")
    region = os.getenv("AWS_REGION", "ap-southeast-2")

    if endpoint_url:
        logger.info(f"Using local DynamoDB at {endpoint_url}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=endpoint_url,
            region_name=region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=region)

    return _dynamodb_resource


def get_menu_service() -> MenuService:
    """Create or retrieve cached menu service.

    A missing SQUARE_ACCESS_TOKEN or SQUARE_LOCATION_ID leaves the service
    without a fetcher, so menu requests answer 503.

    Returns:
        Configured MenuService instance
    """
    global _menu_service

    if _menu_service is not None:
        return _menu_service

    visibility_repository = VisibilityOverrideRepository(
        dynamodb_resource=get_dynamodb_resource(),
        items_table_name=os.getenv("DYNAMODB_DISABLED_ITEMS_TABLE", "cafe-disabled-items"),
        categories_table_name=os.getenv("DYNAMODB_DISABLED_CATEGORIES_TABLE", "cafe-disabled-categories"),
    )

    fetcher: CatalogFetcher | None = None
    access_token = os.getenv("SQUARE_ACCESS_TOKEN")
    if access_token and os.getenv("SQUARE_LOCATION_ID"):
        client = SquareCatalogClient(
            access_token=access_token,
            environment=detect_environment(access_token, os.getenv("SQUARE_ENVIRONMENT")),
            api_version=os.getenv("SQUARE_API_VERSION", DEFAULT_API_VERSION),
            timeout_seconds=float(os.getenv("SQUARE_TIMEOUT_SECONDS", "10")),
        )
        fetcher = CatalogFetcher(
            client=client,
            max_pages=int(os.getenv("CATALOG_MAX_PAGES", str(DEFAULT_MAX_PAGES))),
        )
    else:
        logger.warning("Catalog credentials not configured, menu endpoint will return 503")

    _menu_service = MenuService(fetcher=fetcher, visibility_repository=visibility_repository)

    logger.info("Menu service initialized")
    return _menu_service


def get_ordering_time_service() -> OrderingTimeService:
    """Create or retrieve cached ordering-time service.

    Returns:
        Configured OrderingTimeService instance
    """
    global _ordering_time_service

    if _ordering_time_service is not None:
        return _ordering_time_service

    settings_repository = CafeSettingsRepository(
        dynamodb_resource=get_dynamodb_resource(),
        table_name=os.getenv("DYNAMODB_SETTINGS_TABLE", "cafe-settings"),
    )
    _ordering_time_service = OrderingTimeService(
        settings_repository=settings_repository,
        default_timezone=os.getenv("DEFAULT_TIMEZONE", DEFAULT_TIMEZONE),
    )

    logger.info("Ordering time service initialized")
    return _ordering_time_service


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(
        menu_service=get_menu_service(),
        ordering_time_service=get_ordering_time_service(),
    )
    setup_observability(_fastapi_app)

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging.

    Should be called once during Lambda cold start.
    """
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    logger.info("Lambda environment initialized")
