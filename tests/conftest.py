"""
Pytest configuration and fixtures.
Every test gets a fresh in-memory SQLite database.
"""

import os
from datetime import timedelta
from decimal import Decimal

# Must be set before venue_booking.db.session builds its engine
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TIMEZONE"] = "UTC"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import venue_booking.models  # noqa: F401
from venue_booking.core.deps import get_db
from venue_booking.core.security import create_access_token
from venue_booking.db.base import Base
from venue_booking.models.reservation import STATUS_CONFIRMED, Reservation
from venue_booking.models.venue import Venue
from venue_booking.services.availability_service import local_today

OWNER_ID = "owner-1"
CUSTOMER_ID = "customer-1"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def today():
    return local_today()


@pytest.fixture
def tomorrow(today):
    return today + timedelta(days=1)


@pytest.fixture
def make_venue(db):
    """Factory for venues owned by OWNER_ID unless told otherwise."""

    def _make(**overrides):
        fields = dict(
            name="Garden Hall",
            city="Amman",
            category="wedding",
            owner_id=OWNER_ID,
            min_capacity=10,
            max_capacity=100,
            price_per_hour=Decimal("50"),
            auto_confirm=False,
            active=True,
        )
        fields.update(overrides)
        venue = Venue(**fields)
        db.add(venue)
        db.commit()
        return venue

    return _make


@pytest.fixture
def venue(make_venue):
    return make_venue()


@pytest.fixture
def add_reservation(db):
    """Insert a reservation directly, bypassing validation."""

    def _add(venue, day, start_time, end_time, status=STATUS_CONFIRMED, user_id=CUSTOMER_ID, booking_type="hourly"):
        r = Reservation(
            venue_id=venue.id,
            user_id=user_id,
            date=day,
            start_time=start_time,
            end_time=end_time,
            booking_type=booking_type,
            guests=20,
            total_price=Decimal("0"),
            status=status,
        )
        db.add(r)
        db.commit()
        return r

    return _add


@pytest.fixture
def client(db):
    from venue_booking.main import app

    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def auth_headers(user_id):
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture
def owner_headers():
    return auth_headers(OWNER_ID)


@pytest.fixture
def customer_headers():
    return auth_headers(CUSTOMER_ID)
