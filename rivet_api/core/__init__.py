"""
Core layer - Raw types, errors and HTTP client.

This layer provides:
- Typed dataclasses and enums matching the API definition
- Typed errors decoded from non-2xx responses
- Low-level HTTP client with auth and error handling
"""

from rivet_api.core.client import APIClient, ClientOptions
from rivet_api.core.errors import (
    ERROR_TYPES,
    APIError,
    BadRequestError,
    ErrorBody,
    ForbiddenError,
    InternalError,
    NotFoundError,
    RateLimitError,
    RivetError,
    StructuredAPIError,
    UnauthorizedError,
    ValidationError,
    decode_error,
)
from rivet_api.core.types import (
    CompleteStatus,
    GroupPublicity,
    IdentityStatus,
    LogStream,
    WatchResponse,
)

__all__ = [
    "APIClient",
    "APIError",
    "BadRequestError",
    "ClientOptions",
    "CompleteStatus",
    "ERROR_TYPES",
    "ErrorBody",
    "ForbiddenError",
    "GroupPublicity",
    "IdentityStatus",
    "InternalError",
    "LogStream",
    "NotFoundError",
    "RateLimitError",
    "RivetError",
    "StructuredAPIError",
    "UnauthorizedError",
    "ValidationError",
    "WatchResponse",
    "decode_error",
]
