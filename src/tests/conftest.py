from __future__ import annotations

import json
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from wallabag_notes.datamodels import Settings


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text or (json.dumps(payload) if payload is not None else "")

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def entry(n: int, **overrides: Any) -> Dict[str, Any]:
    item = {
        "id": n,
        "title": f"Article {n}",
        "url": f"https://example.com/articles/{n}",
        "created_at": "2024-01-01T10:00:00+0000",
        "content": f"<p>Body of article {n}</p>",
        "tags": [{"id": 1, "label": "read later"}],
    }
    item.update(overrides)
    return item


def page(items: List[Dict[str, Any]], next_url: Optional[str] = None) -> FakeResponse:
    links: Dict[str, Any] = {"self": {"href": "https://wallabag.example/api/entries"}}
    if next_url:
        links["next"] = {"href": next_url}
    return FakeResponse(200, {"_embedded": {"items": items}, "_links": links})


def token_response(expires_in: int = 3600) -> FakeResponse:
    return FakeResponse(
        200,
        {
            "access_token": "access-1",
            "refresh_token": "refresh-1",
            "expires_in": expires_in,
            "token_type": "bearer",
        },
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings():
    return Settings(
        instance_url="https://wallabag.example",
        client_id="client",
        client_secret="secret",
        username="alice",
        password="hunter2",
    )


@pytest.fixture
def saved():
    """Records every settings save as a plain snapshot."""
    snapshots: List[Dict[str, Any]] = []

    def save(s: Settings) -> None:
        snapshots.append(dict(vars(s)))

    save.snapshots = snapshots
    return save


@pytest.fixture
def session():
    return MagicMock()


@pytest.fixture
def helpers():
    class Helpers:
        response = FakeResponse
        entry = staticmethod(entry)
        page = staticmethod(page)
        token_response = staticmethod(token_response)

    return Helpers
