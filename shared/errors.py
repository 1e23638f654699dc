"""
Shared error handling for skue services.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class SimpleMessage(BaseModel):
    """Standard status envelope written for errors and body-less successes."""

    Status: int
    Message: str


class SkueException(Exception):
    """Base exception for skue services."""

    status_code: int = 500

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> SimpleMessage:
        """Convert to the status envelope."""
        return SimpleMessage(Status=self.status_code, Message=self.message)


class DecodeError(SkueException):
    """Malformed request body."""

    status_code = 400

    def __init__(self, message: str = "Failed reading from request", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class UnauthorizedError(SkueException):
    """Missing or wrong API key."""

    status_code = 401

    def __init__(
        self,
        message: str = "You are not authorized to access this resource.",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__("UNAUTHORIZED", message, details)


class NotFoundError(SkueException):
    """No document matches the requested id."""

    status_code = 404

    def __init__(self, message: str = "Item not found", details: Optional[Dict[str, Any]] = None):
        super().__init__("NOT_FOUND", message, details)


class MethodNotAllowedError(SkueException):
    """Verb not mapped on a registered route."""

    status_code = 405

    def __init__(self, message: str = "Method Not Allowed", details: Optional[Dict[str, Any]] = None):
        super().__init__("METHOD_NOT_ALLOWED", message, details)


class NotAcceptableError(SkueException):
    """The client does not accept the producer's MIME type."""

    status_code = 406

    def __init__(self, mime_type: str, accept: str, details: Optional[Dict[str, Any]] = None):
        self.mime_type = mime_type
        super().__init__("NOT_ACCEPTABLE", f"Unable to produce {mime_type} for Accept: {accept}", details)


class UnsupportedMediaTypeError(SkueException):
    """The request body is declared in a type no consumer reads."""

    status_code = 415

    def __init__(self, content_type: str, details: Optional[Dict[str, Any]] = None):
        super().__init__("UNSUPPORTED_MEDIA_TYPE", f"Unable to unmarshal content of type: {content_type}", details)


class StoreError(SkueException):
    """Backing-store connectivity or driver failure."""

    status_code = 500

    def __init__(self, message: str = "Store error", details: Optional[Dict[str, Any]] = None):
        super().__init__("STORE_ERROR", message, details)


class ConflictError(StoreError):
    """Insert rejected because the id already exists."""

    def __init__(self, message: str = "Duplicate key", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, details)
        self.code = "CONFLICT"


class CacheError(SkueException):
    """Cache failure. Logged by the cache-aside accessor, never returned to clients."""

    def __init__(self, message: str = "Cache error", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_ERROR", message, details)


class StartupError(SkueException):
    """A dependency could not be reached while the service was starting."""

    def __init__(self, service: str, message: str = "Failed to start", details: Optional[Dict[str, Any]] = None):
        super().__init__("STARTUP_ERROR", f"{service}: {message}", details)
