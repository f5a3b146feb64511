"""HTTP tests: auth, role guards, error mapping and the full booking flow."""

from datetime import date, timedelta

import pytest

API = "/api/v1"
PASSWORD = "secret123"


async def signup(client, email, role="customer", name="Sita Sharma", **extra):
    payload = {
        "email": email,
        "password": PASSWORD,
        "role": role,
        "name": name,
        "phone": "9800000000",
    }
    if role == "worker":
        payload.update({"service": "plumbing", "experience": "5 years"})
    payload.update(extra)
    return await client.post(f"{API}/auth/signup", json=payload)


async def login(client, email, role=None):
    response = await client.post(
        f"{API}/auth/login",
        json={"email": email, "password": PASSWORD, "role": role},
    )
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def customer_headers(client):
    await signup(client, "sita@fixsewa.com.np")
    return await login(client, "sita@fixsewa.com.np", "customer")


@pytest.fixture
async def worker_headers(client):
    await signup(client, "ram@fixsewa.com.np", role="worker", name="Ram Thapa")
    return await login(client, "ram@fixsewa.com.np", "worker")


@pytest.fixture
async def other_worker_headers(client):
    await signup(client, "hari@fixsewa.com.np", role="worker", name="Hari Gurung")
    return await login(client, "hari@fixsewa.com.np")


async def book(client, headers):
    response = await client.post(
        f"{API}/customer/bookings",
        json={
            "location": "kathmandu",
            "work": "plumbing",
            "date": (date.today() + timedelta(days=2)).isoformat(),
        },
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["booking_id"]


# =============================================================================
# Auth
# =============================================================================

async def test_signup_login_me(client):
    response = await signup(client, "Sita@FixSewa.com.np")
    assert response.status_code == 201
    assert response.json()["email"] == "sita@fixsewa.com.np"

    headers = await login(client, "sita@fixsewa.com.np")
    me = await client.get(f"{API}/auth/me", headers=headers)

    assert me.status_code == 200
    assert me.json()["name"] == "Sita Sharma"
    assert me.json()["role"] == "customer"


async def test_duplicate_email_is_conflict(client):
    await signup(client, "sita@fixsewa.com.np")
    response = await signup(client, "sita@fixsewa.com.np")

    assert response.status_code == 409
    assert response.json()["type"] == "DuplicateEmail"


async def test_worker_signup_needs_known_service(client):
    response = await signup(
        client, "ram@fixsewa.com.np", role="worker", name="Ram Thapa", service="astrology"
    )
    assert response.status_code == 400
    assert response.json()["type"] == "InvalidInput"


async def test_login_errors(client):
    await signup(client, "sita@fixsewa.com.np")

    unknown = await client.post(
        f"{API}/auth/login", json={"email": "nobody@fixsewa.com.np", "password": PASSWORD}
    )
    wrong_password = await client.post(
        f"{API}/auth/login", json={"email": "sita@fixsewa.com.np", "password": "wrong-one"}
    )
    wrong_role = await client.post(
        f"{API}/auth/login",
        json={"email": "sita@fixsewa.com.np", "password": PASSWORD, "role": "worker"},
    )

    assert unknown.status_code == 404
    assert wrong_password.status_code == 401
    assert wrong_role.status_code == 401


async def test_missing_and_bad_tokens(client):
    assert (await client.get(f"{API}/auth/me")).status_code == 401
    response = await client.get(f"{API}/auth/me", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


async def test_role_guards(client, customer_headers, worker_headers):
    assert (await client.get(f"{API}/worker/bookings", headers=customer_headers)).status_code == 403
    assert (await client.get(f"{API}/customer/bookings", headers=worker_headers)).status_code == 403


# =============================================================================
# Booking Flow
# =============================================================================

async def test_full_booking_flow(client, customer_headers, worker_headers):
    booking_id = await book(client, customer_headers)

    mine = (await client.get(f"{API}/customer/bookings", headers=customer_headers)).json()
    assert mine[0]["status"] == "pending"
    assert mine[0]["work_text"] == "Plumbing"
    assert mine[0]["location_text"] == "Kathmandu"

    assigned = await client.post(f"{API}/worker/bookings/{booking_id}/assign", headers=worker_headers)
    assert assigned.status_code == 200
    assert assigned.json()["status"] == "assigned"

    details = await client.post(
        f"{API}/worker/bookings/{booking_id}/details",
        json={"estimated_price": 1500, "notes": "Bring a spare washer"},
        headers=worker_headers,
    )
    assert details.json()["rows_affected"] == 1

    completed = await client.post(
        f"{API}/worker/bookings/{booking_id}/status",
        json={"status": "completed"},
        headers=worker_headers,
    )
    assert completed.json() == {
        "success": True,
        "message": "Status updated successfully",
        "rows_affected": 1,
    }

    board = (await client.get(f"{API}/worker/bookings?status=completed", headers=worker_headers)).json()
    assert [b["id"] for b in board] == [booking_id]
    assert board[0]["worker_name"] == "Ram Thapa"
    assert board[0]["estimated_price"] == 1500

    reviewable = (await client.get(f"{API}/customer/completed-bookings", headers=customer_headers)).json()
    assert [b["id"] for b in reviewable["bookings"]] == [booking_id]
    assert reviewable["bookings"][0]["already_reviewed"] is False

    review = await client.post(
        f"{API}/customer/reviews",
        json={"booking_id": booking_id, "rating": 5, "review_text": "great"},
        headers=customer_headers,
    )
    assert review.status_code == 201
    assert review.json()["rating"] == 5

    again = await client.post(
        f"{API}/customer/reviews",
        json={"booking_id": booking_id, "rating": 4},
        headers=customer_headers,
    )
    assert again.status_code == 409

    remaining = (await client.get(f"{API}/customer/completed-bookings", headers=customer_headers)).json()
    assert remaining["bookings"] == []

    everything = (
        await client.get(
            f"{API}/customer/completed-bookings?include_reviewed=true", headers=customer_headers
        )
    ).json()
    assert everything["bookings"][0]["already_reviewed"] is True

    history = (await client.get(f"{API}/worker/bookings/{booking_id}/history", headers=worker_headers)).json()
    assert [h["to_status"] for h in history] == ["pending", "assigned", "completed"]

    workers = (await client.get(f"{API}/workers?service=plumbing")).json()
    assert workers[0]["name"] == "Ram Thapa"
    assert workers[0]["average_rating"] == 5.0
    assert workers[0]["review_count"] == 1


async def test_other_worker_changes_nothing(client, customer_headers, worker_headers, other_worker_headers):
    booking_id = await book(client, customer_headers)
    await client.post(f"{API}/worker/bookings/{booking_id}/assign", headers=worker_headers)

    response = await client.post(
        f"{API}/worker/bookings/{booking_id}/status",
        json={"status": "completed"},
        headers=other_worker_headers,
    )

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["rows_affected"] == 0

    mine = (await client.get(f"{API}/customer/bookings", headers=customer_headers)).json()
    assert mine[0]["status"] == "assigned"
    assert mine[0]["worker_name"] == "Ram Thapa"


async def test_invalid_requests(client, customer_headers, worker_headers):
    unknown_work = await client.post(
        f"{API}/customer/bookings",
        json={"location": "kathmandu", "work": "astrology", "date": date.today().isoformat()},
        headers=customer_headers,
    )
    assert unknown_work.status_code == 400

    missing = await client.post(f"{API}/worker/bookings/999/assign", headers=worker_headers)
    assert missing.status_code == 404

    booking_id = await book(client, customer_headers)
    await client.post(f"{API}/worker/bookings/{booking_id}/assign", headers=worker_headers)
    bad_status = await client.post(
        f"{API}/worker/bookings/{booking_id}/status",
        json={"status": "teleported"},
        headers=worker_headers,
    )
    assert bad_status.status_code == 400

    bad_rating = await client.post(
        f"{API}/customer/reviews",
        json={"booking_id": booking_id, "rating": 9},
        headers=customer_headers,
    )
    assert bad_rating.status_code == 400


async def test_cancel_then_delete(client, customer_headers):
    booking_id = await book(client, customer_headers)

    cancelled = await client.post(
        f"{API}/customer/bookings/{booking_id}/cancel",
        json={"reason": "Fixed it myself"},
        headers=customer_headers,
    )
    assert cancelled.json()["status"] == "cancelled"

    deleted = await client.delete(f"{API}/customer/bookings/{booking_id}", headers=customer_headers)
    assert deleted.status_code == 204
    assert (await client.get(f"{API}/customer/bookings", headers=customer_headers)).json() == []


# =============================================================================
# Catalog & Notifications
# =============================================================================

async def test_services_catalog(client):
    response = await client.get(f"{API}/services")

    codes = [s["code"] for s in response.json()["services"]]
    assert "plumbing" in codes
    assert {"code": "kathmandu", "name": "Kathmandu"} in response.json()["locations"]


async def test_rating_of_unknown_worker_is_404(client, customer_headers):
    me = (await client.get(f"{API}/auth/me", headers=customer_headers)).json()
    assert (await client.get(f"{API}/workers/{me['id']}/rating")).status_code == 404


async def test_customer_is_notified_on_assignment(client, customer_headers, worker_headers):
    booking_id = await book(client, customer_headers)
    await client.post(f"{API}/worker/bookings/{booking_id}/assign", headers=worker_headers)

    notifications = (await client.get(f"{API}/notifications?unread_only=true", headers=customer_headers)).json()
    assert [n["trigger_event"] for n in notifications] == ["worker_assigned"]

    read = await client.post(f"{API}/notifications/{notifications[0]['id']}/read", headers=customer_headers)
    assert read.json()["is_read"] is True
    assert (await client.get(f"{API}/notifications?unread_only=true", headers=customer_headers)).json() == []
