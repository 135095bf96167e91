"""Menu composition service.

Runs the menu pipeline for one request: fetch the catalog object graph, index
it, normalize items, apply visibility overrides and derive the category list.
Nothing is cached between requests.
"""

import logging
import time

from cafe_storefront.exceptions import ConfigurationError, UpstreamFetchError
from cafe_storefront.models.menu_models import MenuItem, MenuResponse
from cafe_storefront.observability import traced
from cafe_storefront.observability.metrics import record_menu_compose
from cafe_storefront.repositories.visibility_repository import VisibilityOverrideRepository
from cafe_storefront.services.catalog_fetcher import CatalogFetcher
from cafe_storefront.services.catalog_indexer import index_catalog
from cafe_storefront.services.category_aggregator import aggregate_categories
from cafe_storefront.services.item_normalizer import normalize_items
from cafe_storefront.services.visibility_filter import filter_visible_items

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"
EMPTY_CATALOG_WARNING = "Catalog is empty or has no ITEM type objects"
MENU_FAILURE_MESSAGE = "Failed to fetch menu items"


def filter_by_category(items: list[MenuItem], category: str | None) -> list[MenuItem]:
    """Keep items whose category equals the requested one, trimmed.

    ``None``, an empty string or ``"all"`` return every item.
    """
    if not category or category == ALL_CATEGORIES:
        return items
    wanted = category.strip()
    filtered = [item for item in items if item.category.strip() == wanted]
    logger.info(f"Filtered items by category \"{wanted}\": {len(filtered)} items")
    return filtered


class MenuService:
    """Composes the storefront menu from the catalog and visibility overrides."""

    def __init__(
        self,
        fetcher: CatalogFetcher | None,
        visibility_repository: VisibilityOverrideRepository,
    ) -> None:
        """Initialize the MenuService.

        Args:
            fetcher: Catalog fetcher, None when catalog credentials are missing
            visibility_repository: Store of disabled items and categories
        """
        self.fetcher = fetcher
        self.visibility_repository = visibility_repository

    async def get_menu(self, category: str | None = None) -> tuple[MenuResponse, int]:
        """Return the menu document and its HTTP status.

        Failures are turned into the error document rather than raised.

        Args:
            category: Optional category filter

        Returns:
            Tuple of (MenuResponse, status_code)
        """
        started = time.perf_counter()
        try:
            response = await self.compose_menu(category)
        except ConfigurationError as e:
            logger.error(f"Menu requested but {e.message.lower()}")
            record_menu_compose(time.perf_counter() - started, success=False)
            return self._error_response(e.message), e.status_code
        except UpstreamFetchError as e:
            logger.error(f"Failed to compose menu: {e.message} (status {e.status_code}, errors {e.errors})")
            record_menu_compose(time.perf_counter() - started, success=False)
            return self._error_response(e.message, e.errors), e.status_code
        except Exception as e:
            logger.exception(f"Unexpected error composing menu: {e}")
            record_menu_compose(time.perf_counter() - started, success=False)
            return self._error_response(MENU_FAILURE_MESSAGE), 500

        record_menu_compose(time.perf_counter() - started, success=True)
        return response, 200

    @traced("menu.compose")
    async def compose_menu(self, category: str | None = None) -> MenuResponse:
        """Run the menu pipeline.

        Args:
            category: Optional category filter; omitted or "all" means no filter

        Returns:
            MenuResponse with visible items and their categories

        Raises:
            ConfigurationError: If no catalog fetcher is configured
            UpstreamFetchError: If the catalog or the override store cannot be read
        """
        if self.fetcher is None:
            raise ConfigurationError()

        catalog = await self.fetcher.fetch_menu_objects()
        index = index_catalog(catalog.all_objects())

        if not index.items:
            logger.warning("Catalog returned no items")
            return MenuResponse(items=[], categories=[], count=0, warning=EMPTY_CATALOG_WARNING)

        items = normalize_items(index)

        disabled_item_ids = {d.source_id for d in self.visibility_repository.list_disabled_items()}
        disabled_categories = {d.category_name for d in self.visibility_repository.list_disabled_categories()}

        visible = filter_visible_items(items, disabled_item_ids, disabled_categories)
        categories = aggregate_categories(visible, disabled_categories)

        filtered = filter_by_category(visible, category)

        logger.info(f"Composed menu: {len(filtered)} items in {len(categories)} categories")
        return MenuResponse(items=filtered, categories=categories, count=len(filtered))

    def _error_response(self, message: str, errors: list | None = None) -> MenuResponse:
        return MenuResponse(items=[], count=0, error=True, message=message, errors=errors or None)
