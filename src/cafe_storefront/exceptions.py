"""Exceptions raised by the storefront services.

Parse problems in catalog data or ordering hours are never raised; they are
logged and resolved to safe defaults where they occur.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for storefront errors."""


class ConfigurationError(StorefrontError):
    """The catalog collaborator is not configured."""

    status_code = 503

    def __init__(self, message: str = "Catalog service is not configured") -> None:
        super().__init__(message)
        self.message = message


class UpstreamFetchError(StorefrontError):
    """A catalog or override store call failed.

    Attributes:
        status_code: HTTP status reported by the upstream, 500 when unknown
        message: Human-readable failure description
        errors: Structured error details returned by the upstream
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or 500
        self.errors = errors or []
