"""
Custom exception hierarchy for the SKU resolver backend.

All exceptions inherit from ResolverError so callers and the HTTP layer can
catch one type and read a suggested status code from it.

Exception Hierarchy:
    ResolverError (base)
    ├── ValidationError
    ├── ExternalServiceError
    │   └── SourceAdapterError
    └── CacheStoreError

Usage:
    from exceptions import ValidationError

    raise ValidationError("Query too short (minimum 4 characters)")
    raise ValidationError("Invalid input", detail={"field": "query"})

"No match found" is not an exception: it is a normal response with
success=False. SourceAdapterError never leaves an adapter; the execution
wrapper turns it into an empty result.
"""

from typing import Optional, Dict, Any


class ResolverError(Exception):
    """
    Base exception for all resolver application errors.

    Attributes:
        message: Human-readable error message
        detail: Optional dict with additional error context
        status_code: Suggested HTTP status code (for API errors)
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.detail = detail
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for JSON serialization."""
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.detail:
            result["detail"] = self.detail
        return result


class ValidationError(ResolverError):
    """
    Raised when a query is malformed, too short, too long or has bad characters.

    Never retried and never cached.
    """

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, status_code=400)


class ExternalServiceError(ResolverError):
    """Base exception for upstream data source failures."""

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        service_name: Optional[str] = None,
    ):
        if service_name and detail is None:
            detail = {"service": service_name}
        elif service_name and detail:
            detail["service"] = service_name

        super().__init__(message, detail=detail, status_code=502)


class SourceAdapterError(ExternalServiceError):
    """
    Raised inside a source adapter (bad status, malformed payload, missing key).

    Examples:
        raise SourceAdapterError("KicksDB returned 503", adapter="kicksdb")
    """

    def __init__(
        self,
        message: str,
        *,
        detail: Optional[Dict[str, Any]] = None,
        adapter: Optional[str] = None,
    ):
        if adapter and detail is None:
            detail = {"adapter": adapter}
        elif adapter and detail:
            detail["adapter"] = adapter

        super().__init__(message, detail=detail, service_name="source_adapter")


class CacheStoreError(ResolverError):
    """Raised when the cache backend cannot be read or written."""

    def __init__(self, message: str, *, detail: Optional[Dict[str, Any]] = None):
        super().__init__(message, detail=detail, status_code=500)
