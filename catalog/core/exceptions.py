"""Catalog error taxonomy; each error carries the HTTP status it maps to."""

from typing import Optional


class CatalogError(Exception):
    """Base for errors surfaced to API callers as a failure envelope."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(CatalogError):
    """Bad input shape, identifier or upload type."""

    status_code = 400
    default_message = "Invalid request"


class NotFoundError(CatalogError):
    """Entity, or the parent it references, does not exist."""

    status_code = 404
    default_message = "Not found"


class AuthorizationError(CatalogError):
    """Missing or invalid credential (401) or insufficient rights (403)."""

    status_code = 401
    default_message = "Not authenticated"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class StorageUnavailableError(CatalogError):
    """Database or media backend failed or is unreachable."""

    status_code = 500
    default_message = "Storage unavailable"
