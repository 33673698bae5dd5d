"""
Tests for the HTTP routes.
"""

from datetime import timedelta

from sqlalchemy import select

from venue_booking.models.audit_log import AuditLog
from venue_booking.models.reservation import STATUS_PENDING
from venue_booking.services.errors import StoreUnavailable
from venue_booking.services.stores import BookingStore

from .conftest import CUSTOMER_ID, auth_headers

API = "/api"


class TestPublicRoutes:
    """Tests for anonymous browsing."""

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}

    def test_list_and_get_venue(self, client, venue, make_venue):
        make_venue(name="Closed Hall", active=False)
        r = client.get(f"{API}/public/venues")
        assert r.status_code == 200
        assert [v["name"] for v in r.json()] == ["Garden Hall"]

        r = client.get(f"{API}/public/venues/{venue.id}")
        assert r.json()["max_capacity"] == 100

    def test_unknown_venue(self, client):
        assert client.get(f"{API}/public/venues/missing").status_code == 404

    def test_calendar(self, client, venue, add_reservation, today, tomorrow):
        add_reservation(venue, tomorrow, "09:00", "10:00")
        params = {"from_date": str(today), "to_date": str(tomorrow), "booking_type": "full_day"}
        r = client.get(f"{API}/public/venues/{venue.id}/calendar", params=params)
        assert r.status_code == 200
        body = r.json()
        assert body["booking_type"] == "full_day"
        assert [d["status"] for d in body["days"]] == ["available", "fully_booked"]

    def test_calendar_reports_partial_days(self, client, venue, add_reservation, tomorrow):
        add_reservation(venue, tomorrow, "09:00", "10:00")
        params = {"from_date": str(tomorrow), "to_date": str(tomorrow), "booking_type": "hourly"}
        days = client.get(f"{API}/public/venues/{venue.id}/calendar", params=params).json()["days"]
        assert days == [{"date": str(tomorrow), "status": "partially_booked"}]

    def test_calendar_rejects_reversed_range(self, client, venue, today):
        params = {"from_date": str(today), "to_date": str(today - timedelta(days=1))}
        assert client.get(f"{API}/public/venues/{venue.id}/calendar", params=params).status_code == 400

    def test_slots(self, client, venue, add_reservation, tomorrow):
        add_reservation(venue, tomorrow, "14:00", "16:00")
        r = client.get(f"{API}/public/venues/{venue.id}/slots", params={"date": str(tomorrow)})
        slots = r.json()["slots"]
        assert len(slots) == 22
        assert "14:00" not in slots
        assert "16:00" in slots


class TestBookingRoutes:
    """Tests for customer booking endpoints."""

    def test_requires_auth(self, client, venue, tomorrow):
        payload = {"venue_id": venue.id, "date": str(tomorrow), "start_time": "10:00", "end_time": "12:00", "guests": 20}
        r = client.post(f"{API}/bookings", json=payload)
        assert r.status_code in (401, 403)

        r = client.post(f"{API}/bookings", json=payload, headers={"Authorization": "Bearer not-a-token"})
        assert r.status_code == 401

    def test_validate_without_auth(self, client, venue, tomorrow):
        payload = {"venue_id": venue.id, "date": str(tomorrow), "start_time": "10:00", "end_time": "12:00", "guests": 500}
        body = client.post(f"{API}/bookings/validate", json=payload).json()
        assert body["ok"] is False
        assert body["reason"] == "capacity_out_of_range"

    def test_create_and_list_mine(self, client, venue, tomorrow, customer_headers):
        payload = {
            "venue_id": venue.id,
            "date": str(tomorrow),
            "start_time": "14:00",
            "end_time": "16:00",
            "guests": 50,
            "special_requests": "Stage lighting",
        }
        r = client.post(f"{API}/bookings", json=payload, headers=customer_headers)
        assert r.status_code == 200
        body = r.json()
        assert body["ok"] is True
        assert body["reservation"]["status"] == STATUS_PENDING
        assert body["reservation"]["user_id"] == CUSTOMER_ID

        again = client.post(f"{API}/bookings", json=payload, headers=customer_headers).json()
        assert again["reason"] == "slot_taken"

        mine = client.get(f"{API}/bookings/mine", headers=customer_headers).json()
        assert len(mine) == 1

    def test_booking_is_audited_without_special_requests(self, client, db, venue, tomorrow, customer_headers):
        payload = {
            "venue_id": venue.id,
            "date": str(tomorrow),
            "booking_type": "full_day",
            "guests": 20,
            "special_requests": "Call me on my private number",
        }
        client.post(f"{API}/bookings", json=payload, headers=customer_headers)

        log = db.execute(select(AuditLog).where(AuditLog.action_type == "BOOKING_CREATE")).scalar_one()
        assert log.venue_id == venue.id
        assert log.actor_user_id == CUSTOMER_ID
        assert log.diff_json["special_requests"] == "<redacted>"

    def test_rejects_malformed_time(self, client, venue, tomorrow, customer_headers):
        payload = {"venue_id": venue.id, "date": str(tomorrow), "start_time": "2pm", "end_time": "16:00", "guests": 20}
        assert client.post(f"{API}/bookings", json=payload, headers=customer_headers).status_code == 422

    def test_range_booking(self, client, venue, tomorrow, customer_headers):
        payload = {
            "venue_id": venue.id,
            "start_date": str(tomorrow),
            "end_date": str(tomorrow + timedelta(days=2)),
            "booking_type": "full_day",
            "guests": 20,
        }
        body = client.post(f"{API}/bookings/range", json=payload, headers=customer_headers).json()
        assert len(body["accepted_dates"]) == 3
        assert float(body["total_price"]) == 1500.0

    def test_cancel_own_booking(self, client, venue, add_reservation, tomorrow, customer_headers):
        r = add_reservation(venue, tomorrow, "10:00", "11:00")
        resp = client.post(f"{API}/bookings/{r.id}/cancel", json={"reason": "Sick"}, headers=customer_headers)
        assert resp.status_code == 200
        assert resp.json()["status"] == "cancelled"

        other = client.post(f"{API}/bookings/{r.id}/cancel", json={}, headers=auth_headers("someone-else"))
        assert other.status_code == 404

    def test_store_outage_is_503(self, client, venue, tomorrow, monkeypatch):
        def boom(self, *args, **kwargs):
            raise StoreUnavailable("list_reservations")

        monkeypatch.setattr(BookingStore, "list_reservations", boom)
        r = client.get(f"{API}/public/venues/{venue.id}/slots", params={"date": str(tomorrow)})
        assert r.status_code == 503
        assert r.json()["retryable"] is True


class TestOwnerRoutes:
    """Tests for venue owner endpoints."""

    def test_create_venue(self, client, owner_headers):
        payload = {"name": "Lake House", "city": "Aqaba", "min_capacity": 5, "max_capacity": 40, "price_per_hour": "75"}
        r = client.post(f"{API}/owner/venues", json=payload, headers=owner_headers)
        assert r.status_code == 200
        assert r.json()["name"] == "Lake House"
        assert len(client.get(f"{API}/owner/venues", headers=owner_headers).json()) == 1

    def test_create_venue_bad_capacity(self, client, owner_headers):
        payload = {"name": "Tiny", "min_capacity": 50, "max_capacity": 10}
        assert client.post(f"{API}/owner/venues", json=payload, headers=owner_headers).status_code == 400

    def test_confirm_reservation(self, client, venue, add_reservation, tomorrow, owner_headers, customer_headers):
        r = add_reservation(venue, tomorrow, "10:00", "11:00", status=STATUS_PENDING)
        url = f"{API}/owner/reservations/{r.id}/status"

        assert client.post(url, json={"status": "confirmed"}, headers=customer_headers).status_code == 403

        resp = client.post(url, json={"status": "confirmed"}, headers=owner_headers)
        assert resp.json()["status"] == "confirmed"

        listed = client.get(f"{API}/owner/reservations", params={"status": "confirmed"}, headers=owner_headers).json()
        assert [x["id"] for x in listed] == [r.id]

    def test_block_and_unblock(self, client, venue, tomorrow, owner_headers):
        url = f"{API}/owner/venues/{venue.id}/blocks"
        r = client.post(url, json={"date": str(tomorrow), "reason": "Renovation"}, headers=owner_headers)
        assert r.status_code == 200
        block_id = r.json()["id"]

        slots = client.get(f"{API}/public/venues/{venue.id}/slots", params={"date": str(tomorrow)}).json()
        assert slots["slots"] == []

        assert client.post(url, json={"date": str(tomorrow)}, headers=owner_headers).status_code == 409

        assert client.delete(f"{API}/owner/blocks/{block_id}", headers=owner_headers).json() == {"ok": True}
        assert client.get(url, headers=owner_headers).json() == []
