"""
Tests for the role lookup and ambient endpoints.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_known_user_role(client: AsyncClient, admin_user):
    response = await client.get("/api/v1/users/role", params={"email": "admin@example.com"})
    assert response.status_code == 200
    assert response.json() == {"email": "admin@example.com", "role": "admin"}


@pytest.mark.asyncio
async def test_unknown_user_defaults_to_customer(client: AsyncClient):
    response = await client.get("/api/v1/users/role", params={"email": "nobody@example.com"})
    assert response.status_code == 200
    assert response.json()["role"] == "customer"


@pytest.mark.asyncio
async def test_role_requires_email(client: AsyncClient):
    response = await client.get("/api/v1/users/role")
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_health_and_request_id(client: AsyncClient):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.headers["X-Request-ID"] == "abc123"


@pytest.mark.asyncio
async def test_metrics_exposes_booking_counters(client: AsyncClient):
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_attempts_total" in response.text
