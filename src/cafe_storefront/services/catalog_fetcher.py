"""Paginated fetching of the catalog object graph."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from cafe_storefront.exceptions import UpstreamFetchError
from cafe_storefront.models.catalog_models import CatalogObject, CatalogObjectType, CatalogPage
from cafe_storefront.observability import traced
from cafe_storefront.observability.metrics import record_catalog_fetch_failure, record_catalog_page
from cafe_storefront.services.catalog_client import SquareCatalogClient

logger = logging.getLogger(__name__)

DEFAULT_MAX_PAGES = 100

# Fetched with one search call so related variations come back alongside items
PRIMARY_TYPES = (
    CatalogObjectType.ITEM,
    CatalogObjectType.CATEGORY,
    CatalogObjectType.ITEM_VARIATION,
)

# Independent of each other and of the item listing
AUXILIARY_TYPES = (
    CatalogObjectType.MODIFIER_LIST,
    CatalogObjectType.MODIFIER,
    CatalogObjectType.IMAGE,
)


@dataclass
class MenuCatalogObjects:
    """Everything the menu pipeline needs from one catalog fetch.

    Attributes:
        primary: Items, categories and item variations
        modifier_lists: MODIFIER_LIST objects, empty if their fetch failed
        modifiers: MODIFIER objects, empty if their fetch failed
        images: IMAGE objects, empty if their fetch failed
    """

    primary: list[CatalogObject]
    modifier_lists: list[CatalogObject] = field(default_factory=list)
    modifiers: list[CatalogObject] = field(default_factory=list)
    images: list[CatalogObject] = field(default_factory=list)

    def all_objects(self) -> list[CatalogObject]:
        """Flatten into a single object list for indexing."""
        return [*self.primary, *self.modifier_lists, *self.modifiers, *self.images]


class CatalogFetcher:
    """Accumulates catalog pages from the catalog client.

    Pages are fetched strictly one after another because each request needs
    the cursor returned by the previous one. Paging stops when no cursor is
    returned or after ``max_pages`` pages, whichever comes first.
    """

    def __init__(self, client: SquareCatalogClient, max_pages: int = DEFAULT_MAX_PAGES) -> None:
        """Initialize the fetcher.

        Args:
            client: Catalog client used for search and list calls
            max_pages: Hard cap on pages fetched per call
        """
        self.client = client
        self.max_pages = max_pages

    async def fetch_all(self, object_types: set[str] | list[str]) -> list[CatalogObject]:
        """Fetch all objects of the given types using catalog search.

        Related objects returned alongside each page are included.

        Args:
            object_types: Catalog object types to fetch

        Returns:
            All collected catalog objects

        Raises:
            UpstreamFetchError: If the first page fails
        """
        types = sorted(str(getattr(t, "value", t)) for t in object_types)
        label = ",".join(types)

        async def fetch_page(cursor: str | None) -> CatalogPage:
            return await self.client.search_catalog(types, cursor=cursor, include_related=True)

        return await self._paginate(label, "search", fetch_page)

    async def fetch_type(self, object_type: str) -> list[CatalogObject]:
        """Fetch all objects of a single type using the catalog list operation.

        Args:
            object_type: Catalog object type to fetch

        Returns:
            All collected catalog objects

        Raises:
            UpstreamFetchError: If the first page fails
        """
        object_type = str(getattr(object_type, "value", object_type))

        async def fetch_page(cursor: str | None) -> CatalogPage:
            return await self.client.list_catalog(object_type, cursor=cursor)

        return await self._paginate(object_type, "list", fetch_page)

    @traced("catalog.fetch_menu_objects")
    async def fetch_menu_objects(self) -> MenuCatalogObjects:
        """Fetch the full object graph needed to compose the menu.

        Items, categories and variations are fetched first. Modifier lists,
        modifiers and images are then fetched concurrently; a failure in any
        one of them yields an empty list for that type only.

        Returns:
            MenuCatalogObjects for indexing

        Raises:
            UpstreamFetchError: If the item/category/variation fetch fails
        """
        primary = await self.fetch_all({t.value for t in PRIMARY_TYPES})

        modifier_lists, modifiers, images = await asyncio.gather(
            *(self._fetch_optional(t.value) for t in AUXILIARY_TYPES)
        )

        logger.info(
            f"Fetched catalog: {len(primary)} primary objects, "
            f"{len(modifier_lists)} modifier lists, {len(modifiers)} modifiers, {len(images)} images"
        )
        return MenuCatalogObjects(
            primary=primary,
            modifier_lists=modifier_lists,
            modifiers=modifiers,
            images=images,
        )

    async def _fetch_optional(self, object_type: str) -> list[CatalogObject]:
        """Fetch an auxiliary type, treating any upstream failure as empty."""
        try:
            return await self.fetch_type(object_type)
        except UpstreamFetchError as e:
            logger.warning(f"Optional catalog fetch for {object_type} failed, continuing without it: {e}")
            return []

    async def _paginate(
        self,
        label: str,
        operation: str,
        fetch_page: Callable[[str | None], Awaitable[CatalogPage]],
    ) -> list[CatalogObject]:
        """Drive a cursor loop until exhaustion or the page cap.

        A failure on the first page is raised. A failure on a later page ends
        the loop and returns the partial result.
        """
        collected: list[CatalogObject] = []
        seen_ids: set[str] = set()
        cursor: str | None = None
        page_count = 0

        while True:
            if page_count >= self.max_pages:
                logger.warning(
                    f"Reached max pages ({self.max_pages}) for {label}, stopping pagination "
                    f"with {len(collected)} objects"
                )
                break

            try:
                page = await fetch_page(cursor)
            except UpstreamFetchError as e:
                record_catalog_fetch_failure(label, e.status_code)
                if page_count == 0:
                    raise
                logger.error(
                    f"Catalog {operation} for {label} failed on page {page_count + 1}, "
                    f"keeping {len(collected)} objects from earlier pages: {e}"
                )
                break

            page_count += 1
            record_catalog_page(operation)
            for obj in [*page.objects, *page.related_objects]:
                # Related objects repeat across pages
                if obj.id not in seen_ids:
                    seen_ids.add(obj.id)
                    collected.append(obj)
            logger.debug(
                f"Page {page_count} for {label}: {len(page.objects)} objects, "
                f"{len(page.related_objects)} related (total: {len(collected)})"
            )

            cursor = page.cursor
            if not cursor:
                break

        logger.info(f"Finished fetching {label}: {len(collected)} objects across {page_count} page(s)")
        return collected
