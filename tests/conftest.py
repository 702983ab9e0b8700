"""Shared fixtures: a scripted stand-in for the Crisma backend."""

import json
import os
import sys
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple
from urllib.parse import urlparse

import pytest
import requests

# Make ``import crisma`` work when running ``pytest`` from a plain checkout.
ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from crisma.api_client import ApiClient  # noqa: E402
from crisma.config import Settings  # noqa: E402

BASE_URL = "http://backend.test"


def make_response(status: int, body: Any = None, text: Optional[str] = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.reason = ""
    resp.encoding = "utf-8"
    if body is not None:
        resp._content = json.dumps(body).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    elif text is not None:
        resp._content = text.encode("utf-8")
        resp.headers["Content-Type"] = "text/plain"
    else:
        resp._content = b""
    return resp


Handler = Callable[[Dict[str, Any]], requests.Response]


class FakeBackend(requests.Session):
    """``requests.Session`` whose transport is a table of scripted routes.

    Each call is recorded as ``(method, path, kwargs)`` in ``calls``.
    """

    def __init__(self) -> None:
        super().__init__()
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []
        self._lock = threading.Lock()

    def route(
        self,
        method: str,
        path: str,
        status: int = 200,
        json: Any = None,
        text: Optional[str] = None,
        raises: Optional[Exception] = None,
        handler: Optional[Handler] = None,
    ) -> None:
        def _default(_: Dict[str, Any]) -> requests.Response:
            if raises is not None:
                raise raises
            return make_response(status, json, text)

        self.routes[(method.upper(), path)] = handler or _default

    def request(self, method, url, **kwargs):  # type: ignore[override]
        path = urlparse(url).path
        with self._lock:
            self.calls.append((method.upper(), path, kwargs))
        handler = self.routes.get((method.upper(), path))
        if handler is None:
            return make_response(404, text=f"no route for {method} {path}")
        return handler(kwargs)

    def calls_to(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [kw for m, p, kw in self.calls if m == method.upper() and p == path]


def confirmand(pid: int, name: str, **extra: Any) -> Dict[str, Any]:
    row = {
        "id": pid,
        "full_name": name,
        "email": f"{name.split()[0].lower()}@example.org",
        "phone_number": "555-0100",
        "birth_date": "2005-04-12",
        "address": "1 Church Street",
        "marital_status": "Single",
        "creation_date": "2025-01-10T09:00:00Z",
        "current_group_id": None,
        "current_group_module": None,
        "current_group_start_date": None,
    }
    row.update(extra)
    return row


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def api(backend: FakeBackend) -> ApiClient:
    return ApiClient(BASE_URL, session=backend)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url=BASE_URL, import_close_delay=0.0)


@pytest.fixture
def roster() -> List[Dict[str, Any]]:
    return [
        confirmand(1, "Maria Silva"),
        confirmand(2, "Ana Costa"),
        confirmand(3, "Pedro Alves", current_group_id=7, current_group_module=2,
                   current_group_start_date="2025-08-03"),
    ]
