"""
Error taxonomy for the Rivet API.

Non-2xx responses are decoded by status code into one of a fixed set of
typed errors carrying the structured error body. Anything that cannot be
decoded falls back to the generic APIError with the raw status and body.
"""

import json
from dataclasses import dataclass
from typing import Any


class RivetError(Exception):
    """Base error class for SDK errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result: dict[str, Any] = {"error": self.message}
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(RivetError):
    """Validation error for local input/data issues (not API errors)."""


class APIError(RivetError):
    """Generic API error with the raw status code and response body."""

    def __init__(
        self,
        message: str,
        status: int = 0,
        body: str = "",
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.status = status
        self.body = body

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict for JSON output."""
        result = super().to_dict()
        if self.status:
            result["status"] = self.status
        return result


# =============================================================================
# Structured error body
# =============================================================================


@dataclass
class ErrorBody:
    """Structured error payload returned by the API."""

    code: str = ""
    message: str = ""
    ray_id: str = ""
    documentation: str | None = None
    metadata: Any = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorBody":
        """Create from API response dict."""
        for key in ("code", "message", "ray_id", "documentation"):
            value = data.get(key)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"Error body field {key!r} is not a string", details={key: value})
        return cls(
            code=data.get("code") or "",
            message=data.get("message") or "",
            ray_id=data.get("ray_id") or "",
            documentation=data.get("documentation"),
            metadata=data.get("metadata"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, omitting unset optional fields."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "ray_id": self.ray_id,
        }
        if self.documentation is not None:
            result["documentation"] = self.documentation
        if self.metadata is not None:
            result["metadata"] = self.metadata
        return result


# =============================================================================
# Typed API errors
# =============================================================================


class StructuredAPIError(APIError):
    """API error whose body decoded into an ErrorBody."""

    status_code: int = 0

    def __init__(self, error_body: ErrorBody, status: int | None = None, body: str = ""):
        status = status or self.status_code
        super().__init__(
            error_body.message or _status_message(status, body),
            status=status,
            body=body,
            details=error_body.to_dict(),
        )
        self.error_body = error_body

    @property
    def code(self) -> str:
        return self.error_body.code

    @property
    def ray_id(self) -> str:
        return self.error_body.ray_id

    @property
    def documentation(self) -> str | None:
        return self.error_body.documentation

    @property
    def metadata(self) -> Any:
        return self.error_body.metadata


class InternalError(StructuredAPIError):
    """The server failed to handle the request."""

    status_code = 500


class RateLimitError(StructuredAPIError):
    """Too many requests."""

    status_code = 429


class ForbiddenError(StructuredAPIError):
    """The caller is not allowed to perform this action."""

    status_code = 403


class UnauthorizedError(StructuredAPIError):
    """The request is not authenticated."""

    status_code = 408


class NotFoundError(StructuredAPIError):
    """The requested resource does not exist."""

    status_code = 404


class BadRequestError(StructuredAPIError):
    """The request was malformed."""

    status_code = 400


ERROR_TYPES: dict[int, type[StructuredAPIError]] = {
    cls.status_code: cls
    for cls in (
        InternalError,
        RateLimitError,
        ForbiddenError,
        UnauthorizedError,
        NotFoundError,
        BadRequestError,
    )
}


def _status_message(status: int, body: str) -> str:
    text = body.strip()
    if text:
        return f"HTTP {status}: {text}"
    return f"HTTP {status}"


def decode_error(
    status: int,
    body: str,
    error_types: dict[int, type[StructuredAPIError]] | None = None,
) -> APIError:
    """
    Map a non-2xx response to an error.

    Args:
        status: HTTP status code
        body: Raw response body text
        error_types: Status to error class table (defaults to ERROR_TYPES)

    Returns:
        The typed error for the status when the body holds a JSON object,
        otherwise a generic APIError carrying the raw status and body

    """
    table = ERROR_TYPES if error_types is None else error_types
    generic = APIError(_status_message(status, body), status=status, body=body)

    error_cls = table.get(status)
    if error_cls is None:
        return generic

    try:
        data = json.loads(body)
    except json.JSONDecodeError:
        return generic
    if data is None:
        data = {}
    if not isinstance(data, dict):
        return generic

    try:
        error_body = ErrorBody.from_dict(data)
    except ValidationError:
        return generic
    return error_cls(error_body, status=status, body=body)
