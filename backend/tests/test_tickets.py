"""
Tests for ticket catalog endpoints and moderation.
"""

from datetime import datetime, timezone, timedelta

import pytest
from httpx import AsyncClient

from bookmyseat.domain.state_machine import TicketStatus


def _ticket_body(**overrides) -> dict:
    body = {
        "title": "Dhaka to Sylhet Night Coach",
        "from_location": "Dhaka",
        "to_location": "Sylhet",
        "transport_type": "bus",
        "price": "850.00",
        "quantity": 40,
        "departure": (datetime.now(timezone.utc) + timedelta(days=3)).isoformat(),
    }
    body.update(overrides)
    return body


@pytest.mark.asyncio
async def test_vendor_creates_pending_ticket(client: AsyncClient, vendor_headers):
    response = await client.post("/api/v1/tickets/", json=_ticket_body(), headers=vendor_headers)
    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["quantity"] == 40
    assert data["approved_quantity"] == 40
    assert data["vendor_email"] == "vendor@example.com"


@pytest.mark.asyncio
async def test_customer_cannot_create_ticket(client: AsyncClient, customer_headers):
    response = await client.post("/api/v1/tickets/", json=_ticket_body(), headers=customer_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_ticket_past_departure(client: AsyncClient, vendor_headers):
    past = (datetime.now(timezone.utc) - timedelta(hours=1)).isoformat()
    response = await client.post(
        "/api/v1/tickets/", json=_ticket_body(departure=past), headers=vendor_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [{"quantity": 0}, {"price": "-1"}, {"title": ""}])
async def test_create_ticket_invalid_fields(client: AsyncClient, vendor_headers, overrides):
    response = await client.post(
        "/api/v1/tickets/", json=_ticket_body(**overrides), headers=vendor_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_ticket_not_found(client: AsyncClient):
    response = await client.get("/api/v1/tickets/does-not-exist")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_listing_lifecycle(client: AsyncClient, vendor_headers, admin_headers, customer_headers):
    ticket_id = (
        await client.post("/api/v1/tickets/", json=_ticket_body(quantity=4), headers=vendor_headers)
    ).json()["id"]
    status_url = f"/api/v1/tickets/{ticket_id}/status"

    # Not bookable until approved
    response = await client.post(
        "/api/v1/bookings/", json={"ticketId": ticket_id, "quantity": 1}, headers=customer_headers
    )
    assert response.status_code == 409

    # Only admins moderate
    response = await client.patch(status_url, json={"status": "approved"}, headers=vendor_headers)
    assert response.status_code == 403

    response = await client.patch(status_url, json={"status": "approved"}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "approved"

    response = await client.post(
        "/api/v1/bookings/", json={"ticketId": ticket_id, "quantity": 3}, headers=customer_headers
    )
    assert response.status_code == 201

    response = await client.patch(status_url, json={"status": "hidden"}, headers=admin_headers)
    assert response.status_code == 200
    response = await client.post(
        "/api/v1/bookings/", json={"ticketId": ticket_id, "quantity": 1}, headers=customer_headers
    )
    assert response.status_code == 409
    assert response.json()["code"] == "NOT_BOOKABLE"

    # Re-approval keeps the baseline reconciled with the active booking
    response = await client.patch(status_url, json={"status": "approved"}, headers=admin_headers)
    data = response.json()
    assert data["quantity"] == 1
    assert data["approved_quantity"] == 4


@pytest.mark.asyncio
async def test_invalid_ticket_moderation(client: AsyncClient, admin_headers, make_ticket):
    ticket = await make_ticket(status=TicketStatus.PENDING)
    status_url = f"/api/v1/tickets/{ticket.id}/status"

    response = await client.patch(status_url, json={"status": "hidden"}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "INVALID_STATE_TRANSITION"

    response = await client.patch(status_url, json={"status": "pending"}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["code"] == "ALREADY_IN_STATE"


@pytest.mark.asyncio
async def test_delete_ticket(client: AsyncClient, admin_headers, make_ticket):
    ticket = await make_ticket()
    response = await client.delete(f"/api/v1/tickets/{ticket.id}", headers=admin_headers)
    assert response.status_code == 200
    assert (await client.get(f"/api/v1/tickets/{ticket.id}")).status_code == 404


@pytest.mark.asyncio
async def test_delete_booked_ticket_is_refused(client: AsyncClient, admin_headers, customer_headers, approved_ticket):
    booking_id = (
        await client.post(
            "/api/v1/bookings/",
            json={"ticketId": approved_ticket.id, "quantity": 1},
            headers=customer_headers,
        )
    ).json()["id"]
    await client.delete(f"/api/v1/bookings/{booking_id}", headers=customer_headers)

    response = await client.delete(f"/api/v1/tickets/{approved_ticket.id}", headers=admin_headers)
    assert response.status_code == 409
    assert (await client.get(f"/api/v1/tickets/{approved_ticket.id}")).status_code == 200
