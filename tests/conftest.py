import json
import sys
from email.message import Message
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import pytest

# Ensure the project root is available on the Python path when running the tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mtgsdk.client import CatalogClient  # noqa: E402

BASE_URL = "https://catalog.example.com/v1/"


def make_headers(values: Optional[Mapping[str, Union[str, List[str]]]] = None) -> Message:
    message = Message()
    for name, value in (values or {}).items():
        for item in value if isinstance(value, list) else [value]:
            message[name] = item
    return message


class FakeResponse:
    def __init__(
        self,
        payload: Any = None,
        *,
        body: Optional[bytes] = None,
        status: int = 200,
        reason: str = "OK",
        headers: Optional[Mapping[str, Union[str, List[str]]]] = None,
    ) -> None:
        self._body = body if body is not None else json.dumps(payload).encode("utf-8")
        self.status = status
        self.reason = reason
        self.headers = make_headers(headers)
        self.closed = False

    def __enter__(self) -> "FakeResponse":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.closed = True

    def read(self) -> bytes:
        return self._body


class FakeServer:
    """Stands in for ``urlopen``; answers registered URLs and records requests."""

    def __init__(self) -> None:
        self.routes: Dict[str, Any] = {}
        self.requested: List[str] = []
        self.timeouts: List[float] = []

    def add(self, url: str, response: Any) -> Any:
        self.routes[url] = response
        return response

    def __call__(self, request, timeout=30):  # noqa: ANN001 - signature mirrors stdlib
        url = request.full_url
        self.requested.append(url)
        self.timeouts.append(timeout)
        if url not in self.routes:
            raise AssertionError(f"Unexpected request to {url}")
        response = self.routes[url]
        if isinstance(response, BaseException):
            raise response
        return response


@pytest.fixture
def fake_server(monkeypatch) -> FakeServer:
    server = FakeServer()
    monkeypatch.setattr("mtgsdk.client.urlopen", server)
    return server


@pytest.fixture
def client() -> CatalogClient:
    return CatalogClient(base_url=BASE_URL, timeout=5)
