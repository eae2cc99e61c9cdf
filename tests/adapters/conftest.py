from __future__ import annotations

import json
from typing import Any

import pytest
import requests


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(
        self, status_code: int = 200, body: Any = None, text: str | None = None
    ):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    def json(self, **kwargs: Any) -> Any:
        return json.loads(self.text, **kwargs)


class FakeHttp:
    """Records GET calls and replays queued responses or exceptions."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self._queue: list[FakeResponse | Exception] = []

    def respond(
        self, status_code: int = 200, body: Any = None, text: str | None = None
    ) -> None:
        self._queue.append(FakeResponse(status_code, body, text))

    def fail(self, exc: Exception) -> None:
        self._queue.append(exc)

    def get(self, url: str, params=None, headers=None, timeout=None):
        self.calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout}
        )
        if not self._queue:
            raise AssertionError(f"unexpected GET {url}")
        outcome = self._queue.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def http(monkeypatch):
    fake = FakeHttp()
    monkeypatch.setattr(requests, "get", fake.get)
    return fake
