"""Shared fixtures: API test client and fresh in-memory repositories per test."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from townhall.api.main import app
from townhall.storage.repository import reset_repositories


@pytest.fixture(autouse=True)
def _fresh_repositories() -> Iterator[None]:
    reset_repositories()
    yield
    reset_repositories()


@pytest.fixture
def client() -> TestClient:
    return TestClient(app)


@pytest.fixture
def client_no_raise() -> TestClient:
    return TestClient(app, raise_server_exceptions=False)

