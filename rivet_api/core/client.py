"""
Core HTTP client for the Rivet API.

Handles configuration, request/response, and error decoding.
"""

import http.client
import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
import uuid
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

import structlog

from rivet_api.core.errors import APIError, ValidationError, decode_error

# Configuration
DEFAULT_BASE_URL = "https://api.rivet.gg"
DEFAULT_TIMEOUT = 60

T = TypeVar("T")

log = structlog.wrap_logger(logging.getLogger(__name__))


@dataclass(frozen=True)
class ClientOptions:
    """
    Immutable client configuration shared by every resource client.

    Attributes:
        base_url: API base URL
        token: Bearer token sent as the Authorization header
        headers: Extra default headers, applied last
        timeout: Request timeout in seconds
        opener: Transport handle with the urllib.request.urlopen signature

    """

    base_url: str = DEFAULT_BASE_URL
    token: str | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    opener: Callable[..., Any] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))

    @classmethod
    def from_env(
        cls,
        token: str | None = None,
        base_url: str | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        opener: Callable[..., Any] | None = None,
    ) -> "ClientOptions":
        """
        Build options, falling back to environment variables.

        Args:
            token: API token (or RIVET_TOKEN env var)
            base_url: API base URL (or RIVET_API_URL env var)
            headers: Extra default headers
            timeout: Request timeout in seconds
            opener: Transport override

        """
        return cls(
            base_url=base_url or os.environ.get("RIVET_API_URL") or DEFAULT_BASE_URL,
            token=token or os.environ.get("RIVET_TOKEN"),
            headers=headers or {},
            timeout=timeout,
            opener=opener,
        )

    def to_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        headers.update(self.headers)
        return headers


# =============================================================================
# URL helpers
# =============================================================================


def path_param(value: str | uuid.UUID) -> str:
    """Quote a path identifier for interpolation into a path template."""
    return urllib.parse.quote(str(value), safe="")


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float):
        return format(value, "g")
    if isinstance(value, (list, tuple)):
        return ",".join(_query_value(item) for item in value)
    return str(value)


def encode_query(params: Mapping[str, Any] | None) -> str:
    """URL-encode query params, dropping None values."""
    if not params:
        return ""
    pairs = [(key, _query_value(value)) for key, value in params.items() if value is not None]
    return urllib.parse.urlencode(pairs)


class APIClient:
    """
    Low-level HTTP client for the Rivet API.

    Handles:
    - URL composition from the base URL and a path template
    - Default headers and bearer auth
    - JSON request/response bodies
    - Decoding non-2xx responses into typed errors
    """

    def __init__(self, options: ClientOptions):
        self.options = options
        self._opener = options.opener or urllib.request.urlopen

    @property
    def base_url(self) -> str:
        """Get the configured API base URL."""
        return self.options.base_url

    def build_url(self, path: str, params: Mapping[str, Any] | None = None) -> str:
        """Build full URL from path and optional query params."""
        url = f"{self.options.base_url}/{path.lstrip('/')}"
        query_string = encode_query(params)
        if query_string:
            url = f"{url}?{query_string}"
        return url

    def request(
        self,
        method: str,
        path: str,
        params: Mapping[str, Any] | None = None,
        data: Any = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
    ) -> Any:
        """
        Make an HTTP request to the API.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH, DELETE)
            path: API path relative to the base URL (e.g., group/groups)
            params: Query parameters, None values are dropped
            data: Request body, serialized as JSON when not None
            parser: Optional function building a typed response from the JSON object

        Returns:
            Parsed response (via parser if provided), or None for an empty body

        Raises:
            APIError: On transport failures and non-2xx responses
            ValidationError: When the response does not match the expected shape

        """
        url = self.build_url(path, params)
        body = json.dumps(data).encode("utf-8") if data is not None else None
        req = urllib.request.Request(url, data=body, headers=self.options.to_headers(), method=method)

        log.debug("request.sent", method=method, url=url)
        try:
            with self._opener(req, timeout=self.options.timeout) as response:
                status = response.status
                raw = response.read()

        except urllib.error.HTTPError as e:
            log.debug("response.received", method=method, url=url, status=e.code)
            try:
                error_body = e.read().decode("utf-8", errors="replace")
            except (OSError, http.client.HTTPException) as read_error:
                raise APIError(f"Failed to read error response: {read_error}", status=e.code)
            raise decode_error(e.code, error_body)

        except urllib.error.URLError as e:
            raise APIError(f"Connection error: {e.reason}")

        except TimeoutError:
            raise APIError(f"Request timed out after {self.options.timeout} seconds")

        except (OSError, http.client.HTTPException) as e:
            raise APIError(f"Transport error: {e}")

        log.debug("response.received", method=method, url=url, status=status)

        try:
            response_data = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            body_text = raw.decode("utf-8", errors="replace")
            raise APIError(f"Response is not valid UTF-8: {e}", status=status, body=body_text)

        result = None
        if response_data.strip():
            try:
                result = json.loads(response_data)
            except json.JSONDecodeError as e:
                raise APIError(f"Invalid JSON response: {e}", status=status, body=response_data)

        if parser is None:
            return result
        if not isinstance(result, dict):
            raise APIError("Expected a JSON object response", status=status, body=response_data)
        try:
            return parser(result)
        except (KeyError, TypeError, AttributeError) as e:
            raise ValidationError(f"Unexpected response shape: {e}", details={"url": url})

    # =========================================================================
    # HTTP Methods
    # =========================================================================

    def get(
        self,
        path: str,
        params: Mapping[str, Any] | None = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
    ) -> Any:
        """Make a GET request."""
        return self.request("GET", path, params=params, parser=parser)

    def post(
        self,
        path: str,
        data: Any = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
    ) -> Any:
        """Make a POST request."""
        return self.request("POST", path, data=data, parser=parser)

    def put(
        self,
        path: str,
        data: Any = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
    ) -> Any:
        """Make a PUT request."""
        return self.request("PUT", path, data=data, parser=parser)

    def patch(
        self,
        path: str,
        data: Any = None,
        parser: Callable[[dict[str, Any]], T] | None = None,
    ) -> Any:
        """Make a PATCH request."""
        return self.request("PATCH", path, data=data, parser=parser)

    def delete(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        """Make a DELETE request."""
        return self.request("DELETE", path, params=params)
