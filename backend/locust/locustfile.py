"""
Locust load tests

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Oversell check
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests

Tokens are minted here with the shared SECRET_KEY, standing in for the
identity provider.
"""

import os
import random
from datetime import datetime, timezone, timedelta

from jose import jwt
from locust import HttpUser, task, between, tag

SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key-change-in-production")
CONCURRENCY_QUANTITY = int(os.getenv("CONCURRENCY_QUANTITY", "10"))

CONCURRENCY_TICKET_ID = None


def bearer(email: str, role: str = "customer") -> dict:
    token = jwt.encode(
        {"sub": email, "role": role, "exp": datetime.now(timezone.utc) + timedelta(hours=2)},
        SECRET_KEY,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


def random_email() -> str:
    return f"load_{random.randint(10000, 99999)}@test.com"


class ConcurrencyUser(HttpUser):
    """
    Many customers -> one ticket with CONCURRENCY_QUANTITY units.

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    Afterwards verify:
      SELECT SUM(quantity) FROM bookings WHERE ticket_id = X AND status <> 'cancelled';
    must equal approved_quantity - quantity, and quantity must be >= 0.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = bearer(random_email())
        if CONCURRENCY_TICKET_ID:
            return

        departure = (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()
        resp = self.client.post(
            "/api/v1/tickets/",
            json={
                "title": "Concurrency Test Ticket",
                "transport_type": "bus",
                "price": "500.00",
                "quantity": CONCURRENCY_QUANTITY,
                "departure": departure,
            },
            headers=bearer("load-vendor@test.com", "vendor"),
        )
        if resp.status_code != 201:
            return
        ticket_id = resp.json()["id"]
        self.client.patch(
            f"/api/v1/tickets/{ticket_id}/status",
            json={"status": "approved"},
            headers=bearer("load-admin@test.com", "admin"),
        )
        globals()["CONCURRENCY_TICKET_ID"] = ticket_id
        print(f"\nCreated ticket {ticket_id} with {CONCURRENCY_QUANTITY} units\n")

    @tag("concurrency")
    @task
    def book_limited_ticket(self):
        if not CONCURRENCY_TICKET_ID:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json={"ticketId": CONCURRENCY_TICKET_ID, "quantity": 1},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: sold out
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class EdgeCaseUser(HttpUser):
    """
    Bad input must produce clean 4xx responses.

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s
    """
    wait_time = between(0.5, 1.5)

    def on_start(self):
        self.headers = bearer(random_email())

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_ticket(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"ticketId": "does-not-exist", "quantity": 1},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (404,))

    @tag("edge")
    @task
    def non_positive_quantity(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"ticketId": "any", "quantity": random.choice([0, -5])},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, (400, 422))

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post(
            "/api/v1/bookings/",
            json={"ticketId": "any", "quantity": 1},
            catch_response=True,
        ) as resp:
            self._expect(resp, (401,))

    @tag("edge")
    @task
    def pay_unknown_booking(self):
        with self.client.post(
            "/api/v1/bookings/does-not-exist/payment",
            headers=bearer("load-payments@test.com", "payments"),
            catch_response=True,
        ) as resp:
            self._expect(resp, (404,))
