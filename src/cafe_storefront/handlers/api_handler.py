"""FastAPI application for the storefront menu and ordering-time endpoints."""

import logging
from typing import Any

from fastapi import FastAPI, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from cafe_storefront.services.menu_service import MenuService
from cafe_storefront.services.ordering_time_service import OrderingTimeService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class CartCheckRequest(BaseModel):
    """Request model for checking a cart against ordering hours."""

    categories: list[str] = Field(default_factory=list, description="Menu category of each cart item")


def create_app(menu_service: MenuService, ordering_time_service: OrderingTimeService) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service composing the menu
        ordering_time_service: Service answering ordering availability

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Cafe Storefront API",
        description="Menu and ordering availability for the cafe storefront",
        version="1.0.0",
    )

    # Store services in app state for access in route handlers
    app.state.menu_service = menu_service
    app.state.ordering_time_service = ordering_time_service

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status indicating service is running
        """
        return HealthResponse(status="healthy")

    @app.get("/api/menu", tags=["Menu"])
    async def get_menu(
        category: str | None = Query(None, description="Category name, or 'all'"),
    ) -> JSONResponse:
        """Get the storefront menu.

        Args:
            category: Optional category filter

        Returns:
            Menu document with items, categories and count
        """
        response, status_code = await app.state.menu_service.get_menu(category)
        return JSONResponse(content=response.to_document(), status_code=status_code)

    @app.get("/api/ordering-time", tags=["Ordering Time"])
    async def get_ordering_time(
        item_type: str | None = Query(None, alias="type", description="'food' or 'drinks'"),
    ) -> dict[str, Any]:
        """Check whether ordering is currently open.

        Args:
            item_type: Item type to check; omitted returns food and drinks together

        Returns:
            Ordering-time document
        """
        document: dict[str, Any] = app.state.ordering_time_service.get_availability(item_type)
        return document

    @app.post("/api/ordering-time/check", tags=["Ordering Time"])
    async def check_cart(request: CartCheckRequest) -> dict[str, Any]:
        """Check whether every item type in a cart can be ordered now.

        Returns:
            Overall decision plus the item types that are closed
        """
        result: dict[str, Any] = app.state.ordering_time_service.check_cart(request.categories)
        if not result["isOrderingAvailable"]:
            logger.info(f"Cart blocked by ordering hours: {[b['itemType'] for b in result['blocked']]}")
        return result

    return app
