"""Unit tests for MenuService."""

from decimal import Decimal
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from cafe_storefront.exceptions import UpstreamFetchError
from cafe_storefront.models.catalog_models import CatalogObject
from cafe_storefront.models.visibility_models import DisabledCategory, DisabledItem
from cafe_storefront.repositories.visibility_repository import VisibilityOverrideRepository
from cafe_storefront.services.catalog_fetcher import CatalogFetcher, MenuCatalogObjects
from cafe_storefront.services.menu_service import MENU_FAILURE_MESSAGE, MenuService, filter_by_category


def menu_catalog(raw_catalog: dict[str, list[dict[str, Any]]]) -> MenuCatalogObjects:
    """Parse the raw catalog fixture into what the fetcher returns."""
    parsed = {key: [CatalogObject(**raw) for raw in group] for key, group in raw_catalog.items()}
    return MenuCatalogObjects(**parsed)


@pytest.mark.unit
class TestMenuService:
    """Test suite for MenuService."""

    @pytest.fixture
    def mock_fetcher(self, raw_catalog: dict[str, list[dict[str, Any]]]) -> MagicMock:
        """Create a mock fetcher returning the sample catalog."""
        fetcher = MagicMock(spec=CatalogFetcher)
        fetcher.fetch_menu_objects = AsyncMock(return_value=menu_catalog(raw_catalog))
        return fetcher

    @pytest.fixture
    def mock_visibility_repository(self) -> MagicMock:
        """Create a mock override store with no overrides."""
        repository = MagicMock(spec=VisibilityOverrideRepository)
        repository.list_disabled_items.return_value = []
        repository.list_disabled_categories.return_value = []
        return repository

    @pytest.fixture
    def service(self, mock_fetcher: MagicMock, mock_visibility_repository: MagicMock) -> MenuService:
        """Create a MenuService with mocked collaborators."""
        return MenuService(fetcher=mock_fetcher, visibility_repository=mock_visibility_repository)

    @pytest.mark.asyncio
    async def test_get_menu_success(self, service: MenuService) -> None:
        """Test composing the full menu."""
        response, status_code = await service.get_menu()

        assert status_code == 200
        assert response.count == 4
        assert response.source == "catalog"
        assert response.categories == ["Bakery", "Coffee", "Specials", "Uncategorized"]
        assert response.error is None
        flat_white = response.items[0]
        assert flat_white.price == Decimal("4.50")
        assert flat_white.modifier_lists is not None

    @pytest.mark.asyncio
    async def test_overrides_hide_items_and_categories(
        self, service: MenuService, mock_visibility_repository: MagicMock
    ) -> None:
        """Test that disabled items and categories disappear, along with empty categories."""
        mock_visibility_repository.list_disabled_items.return_value = [DisabledItem(source_id="item_banana_bread")]
        mock_visibility_repository.list_disabled_categories.return_value = [
            DisabledCategory(category_name="Specials")
        ]

        response, _ = await service.get_menu()

        assert [i.id for i in response.items] == ["item_flat_white", "item_muffin"]
        assert response.categories == ["Coffee", "Uncategorized"]
        assert response.count == 2

    @pytest.mark.asyncio
    async def test_category_filter(self, service: MenuService) -> None:
        """Test that a category query keeps the full category list."""
        response, _ = await service.get_menu(category=" Coffee ")

        assert [i.id for i in response.items] == ["item_flat_white"]
        assert response.count == 1
        assert "Bakery" in response.categories

    @pytest.mark.asyncio
    async def test_category_all_means_no_filter(self, service: MenuService) -> None:
        """Test that 'all' returns every item."""
        response, _ = await service.get_menu(category="all")

        assert response.count == 4

    @pytest.mark.asyncio
    async def test_not_configured_returns_503(self, mock_visibility_repository: MagicMock) -> None:
        """Test that a missing fetcher short-circuits with 503."""
        service = MenuService(fetcher=None, visibility_repository=mock_visibility_repository)

        response, status_code = await service.get_menu()

        assert status_code == 503
        assert response.error is True
        assert response.items == []
        assert response.count == 0
        mock_visibility_repository.list_disabled_items.assert_not_called()

    @pytest.mark.asyncio
    async def test_upstream_failure_uses_upstream_status(
        self, service: MenuService, mock_fetcher: MagicMock
    ) -> None:
        """Test that a fetch failure is reported with the upstream status."""
        mock_fetcher.fetch_menu_objects.side_effect = UpstreamFetchError(
            "Token expired", status_code=401, errors=[{"code": "UNAUTHORIZED"}]
        )

        response, status_code = await service.get_menu()

        assert status_code == 401
        assert response.error is True
        assert response.message == "Token expired"
        assert response.errors == [{"code": "UNAUTHORIZED"}]

    @pytest.mark.asyncio
    async def test_override_store_failure_is_an_error(
        self, service: MenuService, mock_visibility_repository: MagicMock
    ) -> None:
        """Test that an unreadable override store fails the request with 500."""
        mock_visibility_repository.list_disabled_items.side_effect = UpstreamFetchError("Access denied")

        response, status_code = await service.get_menu()

        assert status_code == 500
        assert response.error is True

    @pytest.mark.asyncio
    async def test_empty_catalog_returns_warning(
        self, service: MenuService, mock_fetcher: MagicMock, mock_visibility_repository: MagicMock
    ) -> None:
        """Test that a catalog without items answers 200 with a warning and no categories."""
        mock_fetcher.fetch_menu_objects.return_value = MenuCatalogObjects(
            primary=[
                CatalogObject(type="CATEGORY", id="cat_1", category_data={"name": "Coffee"}),
                CatalogObject(type="CATEGORY", id="cat_2", category_data={"name": "Specials"}),
            ]
        )
        mock_visibility_repository.list_disabled_categories.return_value = [
            DisabledCategory(category_name="Specials")
        ]

        response, status_code = await service.get_menu()

        assert status_code == 200
        assert response.items == []
        assert response.categories == []
        assert response.count == 0
        assert response.warning is not None

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_error_document(
        self, service: MenuService, mock_fetcher: MagicMock
    ) -> None:
        """Test that a non-upstream failure still yields a well-formed 500 document."""
        mock_fetcher.fetch_menu_objects.side_effect = ValueError("Expecting value: line 1 column 1")

        response, status_code = await service.get_menu()

        assert status_code == 500
        assert response.error is True
        assert response.message == MENU_FAILURE_MESSAGE
        assert response.items == []
        assert response.count == 0


@pytest.mark.unit
class TestMenuResponseDocument:
    """Test suite for the JSON document built from a menu."""

    @pytest.mark.asyncio
    async def test_document_omits_unset_fields(self, raw_catalog: dict[str, list[dict[str, Any]]]) -> None:
        """Test that prices are numbers and absent modifier lists are omitted."""
        fetcher = MagicMock(spec=CatalogFetcher)
        fetcher.fetch_menu_objects = AsyncMock(return_value=menu_catalog(raw_catalog))
        repository = MagicMock(spec=VisibilityOverrideRepository)
        repository.list_disabled_items.return_value = []
        repository.list_disabled_categories.return_value = []

        response, _ = await MenuService(fetcher, repository).get_menu()
        document = response.to_document()

        assert set(document) == {"items", "categories", "source", "count"}
        flat_white, banana_bread = document["items"][:2]
        assert flat_white["price"] == 4.5
        assert flat_white["modifier_lists"][0]["modifiers"][0] == {"id": "mod_oat", "name": "Oat", "price": 0.7}
        assert "modifier_lists" not in banana_bread
        assert banana_bread["image_url"] is None


@pytest.mark.unit
def test_filter_by_category_without_category_returns_same_list() -> None:
    """Test that no category returns the input list unchanged."""
    items: list = []

    assert filter_by_category(items, None) is items
    assert filter_by_category(items, "") is items
