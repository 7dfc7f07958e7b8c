from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from parkpass.main import app
from parkpass.timeutils import utcnow


API = "/api/v1"


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def spot(make_spot, owner):
    return make_spot(owner, price=25.0, price_type="hour", total_slots=2)


@pytest.fixture
def vehicle(make_vehicle, customer):
    return make_vehicle(customer)


def _window(days_ahead=2, hours=2):
    start = (utcnow() + timedelta(days=days_ahead)).replace(minute=0, second=0, microsecond=0)
    return start.isoformat(), (start + timedelta(hours=hours)).isoformat()


def _book(client, headers, spot, vehicle, days_ahead=2, hours=2):
    start, end = _window(days_ahead, hours)
    return client.post(
        f"{API}/bookings/",
        headers=headers,
        json={"spot_id": spot.id, "vehicle_id": vehicle.id, "start_time": start, "end_time": end},
    )


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json().get("status") == "healthy"

    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["docs"] == "/docs"


def test_register_login_and_profile(client):
    payload = {"name": "Jane Doe", "email": "jane@example.com", "password": "password123", "phone": "+1-555-0104"}
    r = client.post(f"{API}/auth/register", json=payload)
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "CUSTOMER"
    assert "password" not in r.json()

    r = client.post(f"{API}/auth/register", json=payload)
    assert r.status_code == 400

    r = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "wrong-password"})
    assert r.status_code == 401

    r = client.post(f"{API}/auth/login", json={"email": "jane@example.com", "password": "password123"})
    assert r.status_code == 200, r.text
    h = {"Authorization": f"Bearer {r.json()['access_token']}"}

    r = client.get(f"{API}/auth/me", headers=h)
    assert r.status_code == 200
    assert r.json()["email"] == "jane@example.com"

    r = client.post(
        f"{API}/auth/vehicles",
        headers=h,
        json={"make": "Honda", "model": "Civic", "license_plate": "XYZ-789", "color": "Red"},
    )
    assert r.status_code == 201, r.text
    r = client.get(f"{API}/auth/vehicles", headers=h)
    assert [v["license_plate"] for v in r.json()] == ["XYZ-789"]


def test_admin_cannot_self_register(client):
    r = client.post(
        f"{API}/auth/register",
        json={"name": "Mallory", "email": "mallory@example.com", "password": "password123", "role": "ADMIN"},
    )
    assert r.status_code == 400


def test_requests_without_token_are_rejected(client):
    r = client.get(f"{API}/bookings/my-bookings")
    assert r.status_code == 401


def test_owner_lists_and_updates_spot(client, owner, customer, auth_headers):
    payload = {
        "name": "Mall Parking",
        "address": "789 Shopping Center Blvd",
        "latitude": 40.7505,
        "longitude": -73.9934,
        "price": 15.0,
        "price_type": "hour",
        "total_slots": 4,
    }
    r = client.post(f"{API}/spots/", headers=auth_headers(customer), json=payload)
    assert r.status_code == 403

    r = client.post(f"{API}/spots/", headers=auth_headers(owner), json=payload)
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["available_slots"] == 4
    assert created["owner_id"] == owner.id

    r = client.put(f"{API}/spots/{created['id']}", headers=auth_headers(owner), json={"total_slots": 2})
    assert r.status_code == 200, r.text
    assert (r.json()["total_slots"], r.json()["available_slots"]) == (2, 2)

    r = client.get(f"{API}/spots/owner/my-spots", headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["pagination"]["total"] == 1

    r = client.get(f"{API}/spots/{created['id']}")
    assert r.status_code == 200
    r = client.get(f"{API}/spots/9999")
    assert r.status_code == 404


def test_search_filters_by_radius_and_sorts_by_distance(client, owner, make_spot):
    make_spot(owner, name="Downtown Garage", latitude=40.7128, longitude=-74.0060)
    make_spot(owner, name="Midtown Lot", latitude=40.7306, longitude=-73.9866)
    make_spot(owner, name="Airport Parking", latitude=40.6413, longitude=-73.7781)

    r = client.get(f"{API}/spots/", params={"lat": 40.7128, "lng": -74.0060, "radius": 5})
    assert r.status_code == 200, r.text
    body = r.json()
    assert [s["name"] for s in body["spots"]] == ["Downtown Garage", "Midtown Lot"]
    assert body["spots"][0]["distance_km"] == 0
    assert body["pagination"]["total"] == 2

    r = client.get(f"{API}/spots/", params={"search": "airport"})
    assert [s["name"] for s in r.json()["spots"]] == ["Airport Parking"]


def test_booking_lifecycle_over_http(client, db, customer, owner, spot, vehicle, auth_headers):
    h = auth_headers(customer)

    r = _book(client, h, spot, vehicle)
    assert r.status_code == 201, r.text
    booking = r.json()["booking"]
    assert booking["status"] == "PENDING"
    assert booking["total_cost"] == 50.0
    assert booking["spot"]["name"] == spot.name
    booking_id = booking["id"]

    r = client.get(f"{API}/bookings/my-bookings", headers=h)
    assert r.status_code == 200
    assert r.json()["pagination"] == {"page": 1, "limit": 10, "total": 1, "pages": 1}

    r = client.get(f"{API}/bookings/{booking_id}/qr", headers=h)
    assert r.status_code == 200, r.text
    assert r.json()["qr_code"] == booking["qr_code"]
    assert r.json()["image"].startswith("data:image/png;base64,")

    r = client.post(f"{API}/bookings/validate-entry", headers=auth_headers(owner), json={"code": booking["qr_code"]})
    assert r.status_code == 400
    assert r.json() == {"detail": "Booking has not started yet", "error": "not_started"}

    r = client.get(f"{API}/bookings/owner/bookings", headers=auth_headers(owner))
    assert r.status_code == 200
    assert r.json()["bookings"][0]["user"]["id"] == customer.id

    r = client.post(f"{API}/bookings/{booking_id}/cancel", headers=h)
    assert r.status_code == 200, r.text

    r = client.get(f"{API}/bookings/{booking_id}", headers=h)
    assert r.json()["status"] == "CANCELLED"
    assert [p["status"] for p in r.json()["payments"]] == ["REFUNDED"]

    r = client.get(f"{API}/spots/{spot.id}")
    assert r.json()["available_slots"] == 2


def test_full_spot_returns_conflict(client, customer, owner, make_spot, make_vehicle, auth_headers):
    spot = make_spot(owner, total_slots=1)
    h = auth_headers(customer)

    r = _book(client, h, spot, make_vehicle(customer, "ONE-1"))
    assert r.status_code == 201, r.text
    r = _book(client, h, spot, make_vehicle(customer, "TWO-2"))
    assert r.status_code == 409
    assert r.json() == {"detail": "No available slots", "error": "conflict"}


def test_inverted_window_is_bad_request(client, customer, spot, vehicle, auth_headers):
    r = _book(client, auth_headers(customer), spot, vehicle, hours=-1)
    assert r.status_code == 400
    assert r.json()["error"] == "invalid_duration"


def test_validate_entry_errors(client, customer, owner, spot, vehicle, auth_headers):
    r = client.post(f"{API}/bookings/validate-entry", headers=auth_headers(owner), json={"code": "0000"})
    assert r.status_code == 404
    assert r.json()["error"] == "not_found"

    r = client.post(f"{API}/bookings/validate-entry", headers=auth_headers(customer), json={"code": "0000"})
    assert r.status_code == 403

    for code in ("ABCD", "12345", "QR-123-xyz", " 0000 "):
        r = client.post(f"{API}/bookings/validate-entry", headers=auth_headers(owner), json={"code": code})
        assert r.status_code == 404, r.text
        assert r.json()["error"] == "not_found"


def test_entry_and_exit_over_http(client, db, customer, owner, spot, vehicle, auth_headers):
    r = _book(client, auth_headers(customer), spot, vehicle, days_ahead=0, hours=3)
    assert r.status_code == 201, r.text
    booking = r.json()["booking"]

    r = client.post(f"{API}/bookings/validate-entry", headers=auth_headers(owner), json={"code": booking["pin"]})
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["success"] is True
    assert body["booking"]["status"] == "ACTIVE"
    assert body["booking"]["customer_name"] == customer.name
    assert body["booking"]["vehicle"]["license_plate"] == "ABC-123"

    r = client.post(f"{API}/bookings/{booking['id']}/extend", headers=auth_headers(customer))
    assert r.status_code == 200, r.text
    assert r.json()["extension_cost"] == 25.0
    assert r.json()["booking"]["status"] == "EXTENDED"

    r = client.post(f"{API}/bookings/{booking['id']}/exit", headers=auth_headers(customer))
    assert r.status_code == 403

    r = client.post(f"{API}/bookings/{booking['id']}/exit", headers=auth_headers(owner))
    assert r.status_code == 200, r.text

    r = client.get(f"{API}/bookings/{booking['id']}", headers=auth_headers(owner))
    detail = r.json()
    assert detail["status"] == "COMPLETED"
    assert [log["action"] for log in detail["entry_logs"]] == ["ENTRY", "EXTEND", "EXIT"]


def test_payment_processing_and_history(client, customer, spot, vehicle, auth_headers):
    h = auth_headers(customer)
    booking = _book(client, h, spot, vehicle).json()["booking"]

    r = client.post(
        f"{API}/payments/process",
        headers=h,
        json={"booking_id": booking["id"], "method": "WALLET", "transaction_id": "txn-001"},
    )
    assert r.status_code == 200, r.text
    assert [(p["status"], p["method"]) for p in r.json()["payments"]] == [("COMPLETED", "WALLET")]

    r = client.post(f"{API}/payments/process", headers=h, json={"booking_id": booking["id"], "method": "WALLET"})
    assert r.status_code == 404

    r = client.get(f"{API}/bookings/{booking['id']}", headers=h)
    assert r.json()["status"] == "PENDING"

    r = client.get(f"{API}/payments/history", headers=h)
    assert r.status_code == 200
    assert r.json()["pagination"]["total"] == 1


def test_notifications_read_flow(client, customer, spot, vehicle, auth_headers):
    h = auth_headers(customer)
    _book(client, h, spot, vehicle)

    r = client.get(f"{API}/notifications/", headers=h)
    assert r.status_code == 200
    notifications = r.json()["notifications"]
    assert [n["title"] for n in notifications] == ["Booking Confirmed"]

    r = client.get(f"{API}/notifications/unread-count", headers=h)
    assert r.json() == {"count": 1}

    r = client.put(f"{API}/notifications/{notifications[0]['id']}/read", headers=h)
    assert r.status_code == 200
    r = client.get(f"{API}/notifications/unread-count", headers=h)
    assert r.json() == {"count": 0}

    r = client.put(f"{API}/notifications/read-all", headers=h)
    assert r.status_code == 200


def test_admin_endpoints(client, admin, customer, spot, vehicle, auth_headers):
    _book(client, auth_headers(customer), spot, vehicle)

    r = client.post(f"{API}/admin/sweeps/expired-reservations/run", headers=auth_headers(customer))
    assert r.status_code == 403

    r = client.post(f"{API}/admin/sweeps/expired-reservations/run", headers=auth_headers(admin))
    assert r.status_code == 200, r.text
    assert r.json() == {"sweep": "expired-reservations", "processed": 0}

    r = client.post(f"{API}/admin/sweeps/vacuum/run", headers=auth_headers(admin))
    assert r.status_code == 404

    r = client.get(f"{API}/admin/bookings", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["pagination"]["total"] == 1

    r = client.get(f"{API}/admin/overview", headers=auth_headers(admin))
    assert r.status_code == 200
    assert r.json()["bookings"]["PENDING"] == 1
    assert r.json()["slots"] == {"total": 2, "available": 1, "occupied": 1}
