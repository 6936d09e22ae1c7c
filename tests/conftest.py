from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest
import requests


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", payload: Any = None, url: str = "") -> None:
        self.status_code = status_code
        self.url = url
        self._payload = payload
        self.text = text if payload is None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self) -> Any:
        if self._payload is not None:
            return self._payload
        return json.loads(self.text)

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} Error for url: {self.url}", response=self)


Handler = Union[FakeResponse, Exception, Callable[..., FakeResponse]]


class FakeSession:
    """Records calls and answers from a (method, url) -> response table."""

    def __init__(self, routes: Optional[Dict[Tuple[str, str], Handler]] = None) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = dict(routes or {})
        self.calls: List[Tuple[str, str, Dict[str, Any]]] = []

    def _dispatch(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        handler = self.routes.get((method, url))
        if handler is None:
            raise requests.ConnectionError(f"no route for {method} {url}")
        if isinstance(handler, Exception):
            raise handler
        if callable(handler):
            return handler(**kwargs)
        handler.url = url
        return handler

    def get(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("GET", url, **kwargs)

    def post(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("POST", url, **kwargs)

    def patch(self, url: str, **kwargs: Any) -> FakeResponse:
        return self._dispatch("PATCH", url, **kwargs)

    def calls_for(self, method: str) -> List[Tuple[str, str, Dict[str, Any]]]:
        return [c for c in self.calls if c[0] == method]


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def make_response() -> Callable[..., FakeResponse]:
    return FakeResponse
