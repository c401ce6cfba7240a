"""
Pytest configuration and fixtures for sfxprovider tests.
"""

from __future__ import annotations

import itertools
import json
import logging
import os
import time
from typing import Any, Dict, Generator, List, Optional

import httpx
import pytest

from sfxprovider.client import ClientContext
from sfxprovider.config import ProviderConfig


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def clean_sfx_env(monkeypatch, tmp_path) -> Generator[None, None, None]:
    """Keep SFX_* variables and any local .env file out of every test."""
    for key in list(os.environ):
        if key.startswith("SFX_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    yield
    # CLI runs attach a stdout handler bound to the runner's stream
    package_logger = logging.getLogger("sfxprovider")
    for handler in list(package_logger.handlers):
        if getattr(handler, "_sfxprovider", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)


# ============================================================================
# Fake SignalFx API
# ============================================================================


class FakeSignalFx:
    """
    In-memory stand-in for the SignalFx REST API.

    Mirrors the behavior that matters for reconciliation: a muting rule whose
    requested start time is already past gets ``startTime`` moved to "now".
    """

    def __init__(self) -> None:
        self.rules: Dict[str, Dict[str, Any]] = {}
        self.groups: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.fail_with: Optional[int] = None
        self._ids = itertools.count(1)

    @staticmethod
    def now_ms() -> int:
        return int(time.time()) * 1000

    def bodies(self, method: str) -> List[Dict[str, Any]]:
        """Decoded JSON bodies of all requests sent with ``method``."""
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == method and r.content
        ]

    def _not_found(self) -> httpx.Response:
        return httpx.Response(404, json={"code": 404, "message": "Not found"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "boom"})

        parts = request.url.path.strip("/").split("/")
        kind = parts[1]
        entity_id = parts[2] if len(parts) > 2 else None
        store = self.rules if kind == "alertmuting" else self.groups
        body = json.loads(request.content) if request.content else {}

        if request.method == "POST":
            entity_id = f"{kind[:2].upper()}{next(self._ids):04d}"
            store[entity_id] = self._stored(kind, entity_id, body)
            return httpx.Response(200, json=store[entity_id])

        if entity_id not in store:
            return self._not_found()

        if request.method == "GET":
            return httpx.Response(200, json=store[entity_id])
        if request.method == "PUT":
            store[entity_id] = self._stored(kind, entity_id, body)
            return httpx.Response(200, json=store[entity_id])
        if request.method == "DELETE":
            del store[entity_id]
            return httpx.Response(204)
        return httpx.Response(405)

    def _stored(self, kind: str, entity_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        entity = dict(body, id=entity_id)
        if kind == "alertmuting":
            entity["startTime"] = max(body["startTime"], self.now_ms())
            entity["creator"] = "tester"
        else:
            entity.setdefault("dashboards", [])
        return entity


@pytest.fixture
def fake_api() -> FakeSignalFx:
    return FakeSignalFx()


@pytest.fixture
def config() -> ProviderConfig:
    return ProviderConfig(auth_token="test-token", api_url="https://api.test.signalfx.com/")


@pytest.fixture
def transport(fake_api) -> httpx.MockTransport:
    return httpx.MockTransport(fake_api.handler)


@pytest.fixture
def client_ctx(config, transport) -> Generator[ClientContext, None, None]:
    with ClientContext.from_config(config, transport=transport) as ctx:
        yield ctx


# ============================================================================
# Model Fixtures
# ============================================================================


@pytest.fixture
def future_start() -> int:
    return int(time.time()) + 3600


@pytest.fixture
def muting_rule_attrs(future_start) -> dict:
    """Declared attributes for a muting rule starting in the future."""
    return {
        "description": "Weekly maintenance",
        "detectors": ["det-1"],
        "filter": [{"property": "env", "property_value": "prod", "negated": False}],
        "start_time": future_start,
        "stop_time": future_start + 7200,
    }
