"""Pytest configuration - loads .env and provides a fake transport."""

import io
import json
import urllib.error
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from rivet_api import RivetClient

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

BASE_URL = "https://api.test.rivet.gg"


@dataclass
class RecordedRequest:
    """A request seen by the fake transport."""

    method: str
    url: str
    headers: dict[str, str]
    body: Any
    timeout: float | None


class FakeResponse:
    def __init__(self, status: int, body: bytes):
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, *exc: Any) -> bool:
        return False


@dataclass
class FakeTransport:
    """
    Stand-in for urllib.request.urlopen.

    Queue responses with reply() or fail(); each call pops the next one.
    """

    requests: list[RecordedRequest] = field(default_factory=list)
    _queue: list[tuple[int, Any]] = field(default_factory=list)

    def reply(self, status: int = 200, body: Any = None) -> None:
        self._queue.append((status, body))

    def fail(self, error: BaseException) -> None:
        self._queue.append((0, error))

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]

    def __call__(self, request, timeout=None):
        self.requests.append(
            RecordedRequest(
                method=request.get_method(),
                url=request.full_url,
                headers={k.lower(): v for k, v in request.header_items()},
                body=json.loads(request.data) if request.data else None,
                timeout=timeout,
            )
        )
        status, payload = self._queue.pop(0)
        if isinstance(payload, BaseException):
            raise payload

        if payload is None:
            raw = b""
        elif isinstance(payload, bytes):
            raw = payload
        elif isinstance(payload, str):
            raw = payload.encode("utf-8")
        else:
            raw = json.dumps(payload).encode("utf-8")

        if status >= 400:
            raise urllib.error.HTTPError(request.full_url, status, "error", None, io.BytesIO(raw))
        return FakeResponse(status, raw)


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def client(transport: FakeTransport) -> RivetClient:
    return RivetClient(token="test-token", base_url=BASE_URL, opener=transport)
