"""Shared fixtures.

The app is exercised in-process over httpx's ASGI transport. Lifespan
events do not run, so no OpenFGA server is contacted unless a test does so
explicitly; tests patch the authz functions they rely on.
"""

import asyncio
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from openfga_demo.authz import client as fga_client
from openfga_demo.main import app


@pytest_asyncio.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture(autouse=True)
def reset_openfga_client(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test without a cached OpenFGA client, store or model."""
    monkeypatch.setattr(fga_client, "_client", None)
    monkeypatch.setattr(fga_client, "_store_id", None)
    monkeypatch.setattr(fga_client, "_model_id", None)
    monkeypatch.setattr(fga_client, "_init_lock", asyncio.Lock())


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": "alice"}
