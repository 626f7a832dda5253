"""Shared fixtures for Maps Gateway tests."""

from __future__ import annotations

import json
from typing import Any, Callable
from unittest import mock

import pytest
import requests

from app import create_app

TEST_API_KEY = "test-maps-key"


@pytest.fixture
def test_config() -> dict[str, Any]:
    """Explicit settings value with fake credentials."""
    return {
        "ENVIRONMENT": "testing",
        "TESTING": True,
        "GOOGLE_MAPS_API_KEY": TEST_API_KEY,
        "ALLOWED_ORIGIN_DOMAIN": "afi.dev",
        "UPSTREAM_TIMEOUT": None,
        "SENTRY_DSN": None,
    }


@pytest.fixture
def app(test_config):
    return create_app(test_config)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def upstream_response() -> Callable[..., requests.Response]:
    """Factory for real `requests.Response` objects carrying a JSON body."""

    def _make(payload: Any, status_code: int = 200) -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response._content = json.dumps(payload).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
        response.url = "https://upstream.example/"
        response.reason = "OK" if status_code < 400 else "Error"
        return response

    return _make


@pytest.fixture
def mock_get():
    with mock.patch("gateway.upstream.requests.get") as patched:
        yield patched


@pytest.fixture
def mock_post():
    with mock.patch("gateway.upstream.requests.post") as patched:
        yield patched
