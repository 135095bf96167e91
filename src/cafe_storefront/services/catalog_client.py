"""Client for interacting with the Square Catalog API."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from cafe_storefront.exceptions import UpstreamFetchError
from cafe_storefront.models.catalog_models import CatalogObject, CatalogPage

logger = logging.getLogger(__name__)

PRODUCTION_BASE_URL = "https://connect.squareup.com"
SANDBOX_BASE_URL = "https://connect.squareupsandbox.com"
DEFAULT_API_VERSION = "2024-01-18"


def detect_environment(access_token: str, explicit: str | None = None) -> str:
    """Work out which Square environment an access token belongs to.

    Args:
        access_token: Square access token
        explicit: Value of SQUARE_ENVIRONMENT, if set

    Returns:
        "production" or "sandbox"
    """
    if explicit:
        return "production" if explicit.lower() == "production" else "sandbox"

    # Sandbox tokens start with "EAAAl" (lowercase L) or "sandbox-"
    if access_token.startswith("sandbox-") or access_token.startswith("EAAAl"):
        return "sandbox"
    if access_token.startswith("sq0at-") or access_token.startswith("EAAA"):
        return "production"
    return "sandbox"


class SquareCatalogClient:
    """HTTP client for reading catalog objects from the Square Catalog API.

    This client exposes the two catalog read operations the menu pipeline
    needs: a typed search that can include related objects, and a per-type
    list. Both return one page at a time; paging is driven by the caller.
    """

    def __init__(
        self,
        access_token: str,
        environment: str = "sandbox",
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 10.0,
    ) -> None:
        """Initialize the catalog client.

        Args:
            access_token: Square access token used as a bearer token
            environment: API environment ('sandbox' or 'production')
            api_version: Value sent in the Square-Version header
            timeout_seconds: Per-request timeout
        """
        self.access_token = access_token
        self.environment = environment
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds

        if environment == "production":
            self.base_url = PRODUCTION_BASE_URL
        else:
            self.base_url = SANDBOX_BASE_URL

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Square-Version": self.api_version,
            "Content-Type": "application/json",
        }

    async def search_catalog(
        self,
        object_types: list[str],
        cursor: str | None = None,
        include_related: bool = True,
    ) -> CatalogPage:
        """Search catalog objects of the given types.

        Args:
            object_types: Catalog object types to return (e.g. ["ITEM", "CATEGORY"])
            cursor: Pagination cursor from the previous page
            include_related: Whether to ask for related objects as well

        Returns:
            CatalogPage with objects, related objects and the next cursor

        Raises:
            UpstreamFetchError: If the API call fails
        """
        body: dict[str, Any] = {
            "object_types": object_types,
            "include_related_objects": include_related,
        }
        if cursor:
            body["cursor"] = cursor

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.post(
                    f"{self.base_url}/v2/catalog/search",
                    json=body,
                    headers=self._headers(),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise self._upstream_error(e.response, f"Catalog search failed: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Catalog search request failed: {e}")
            raise UpstreamFetchError(f"Catalog search request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Catalog search returned a body that is not JSON: {e}")
            raise UpstreamFetchError(f"Catalog search returned an invalid response: {e}") from e

        return self._parse_page(data)

    async def list_catalog(self, object_type: str, cursor: str | None = None) -> CatalogPage:
        """List catalog objects of a single type.

        Args:
            object_type: Catalog object type (e.g. "MODIFIER_LIST")
            cursor: Pagination cursor from the previous page

        Returns:
            CatalogPage with objects and the next cursor

        Raises:
            UpstreamFetchError: If the API call fails
        """
        params = {"types": object_type}
        if cursor:
            params["cursor"] = cursor

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(
                    f"{self.base_url}/v2/catalog/list",
                    params=params,
                    headers=self._headers(),
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise self._upstream_error(e.response, f"Catalog list failed for {object_type}: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"Catalog list request failed for {object_type}: {e}")
            raise UpstreamFetchError(f"Catalog list request failed: {e}") from e
        except ValueError as e:
            logger.error(f"Catalog list for {object_type} returned a body that is not JSON: {e}")
            raise UpstreamFetchError(f"Catalog list returned an invalid response: {e}") from e

        return self._parse_page(data)

    def _upstream_error(self, response: httpx.Response, message: str) -> UpstreamFetchError:
        """Build an UpstreamFetchError carrying the API's status and error list."""
        errors: list[dict[str, Any]] = []
        try:
            payload = response.json()
            if isinstance(payload, dict):
                errors = payload.get("errors") or []
        except ValueError:
            logger.debug(f"Catalog error response had no JSON body (status {response.status_code})")

        if errors and isinstance(errors[0], dict) and errors[0].get("detail"):
            message = str(errors[0]["detail"])

        logger.error(f"{message} (status {response.status_code})")
        return UpstreamFetchError(message, status_code=response.status_code, errors=errors)

    def _parse_page(self, data: Any) -> CatalogPage:
        """Convert a raw API response body into a CatalogPage.

        Objects that fail validation are skipped with a warning.

        Raises:
            UpstreamFetchError: If the body is not a JSON object
        """
        if not isinstance(data, dict):
            logger.error(f"Catalog response body is a {type(data).__name__}, expected an object")
            raise UpstreamFetchError("Catalog returned an unexpected response body")
        return CatalogPage(
            objects=self._parse_objects(data.get("objects") or []),
            related_objects=self._parse_objects(data.get("related_objects") or []),
            cursor=data.get("cursor") or None,
        )

    def _parse_objects(self, raw_objects: list[Any]) -> list[CatalogObject]:
        objects = []
        for raw in raw_objects:
            try:
                objects.append(CatalogObject(**raw))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Skipping malformed catalog object: {e}")
        return objects
