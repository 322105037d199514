"""Tests for X-User-Id authentication."""

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

RESOURCE_URL = "/api/resource/my-service/web/org-1/my-resource"


@pytest.mark.asyncio
async def test_missing_user_header_returns_401(client: AsyncClient) -> None:
    response = await client.get(RESOURCE_URL)
    assert response.status_code == 401
    assert response.json()["detail"] == {
        "error": "Missing authentication",
        "message": "X-User-Id header is required",
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["", "   "])
async def test_blank_user_header_returns_400(client: AsyncClient, value: str) -> None:
    response = await client.get(RESOURCE_URL, headers={"X-User-Id": value})
    assert response.status_code == 400
    assert response.json()["detail"] == {
        "error": "Invalid user ID",
        "message": "X-User-Id header cannot be empty",
    }


@pytest.mark.asyncio
async def test_non_utf8_user_header_returns_400(client: AsyncClient) -> None:
    response = await client.get(RESOURCE_URL, headers={"X-User-Id": b"\xff\xfe"})
    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "Invalid header format"


@pytest.mark.asyncio
async def test_missing_header_rejected_before_body_validation(client: AsyncClient) -> None:
    response = await client.post(RESOURCE_URL)
    assert response.status_code == 401


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["POST", "PUT"])
async def test_missing_header_rejected_before_malformed_body(client: AsyncClient, method: str) -> None:
    response = await client.request(method, RESOURCE_URL, content=b"{not json")
    assert response.status_code == 401
    assert response.json()["detail"]["error"] == "Missing authentication"


@pytest.mark.asyncio
async def test_user_id_passed_through(client: AsyncClient) -> None:
    check = AsyncMock(return_value=True)
    with patch("openfga_demo.services.resources.check_permission", check):
        response = await client.get(RESOURCE_URL, headers={"X-User-Id": "bob"})
    assert response.status_code == 200
    check.assert_awaited_once_with(
        "bob", "viewer", "resource:my-service/web/org-1/my-resource"
    )


@pytest.mark.asyncio
async def test_listing_routes_require_user(client: AsyncClient) -> None:
    assert (await client.get("/api/list-objects")).status_code == 401
    assert (await client.get("/api/shared-resources")).status_code == 401
