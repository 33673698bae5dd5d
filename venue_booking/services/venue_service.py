from __future__ import annotations

from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from venue_booking.models.venue import Venue
from venue_booking.services.stores import VenueStore


def list_public_venues(db: Session, *, city: str | None = None, category: str | None = None) -> list[Venue]:
    return VenueStore(db).list_venues(city=city, category=category)


def list_owner_venues(db: Session, *, owner_id: str) -> list[Venue]:
    return VenueStore(db).list_venues(owner_id=owner_id)


def get_public_venue(db: Session, *, venue_id: str) -> Venue:
    venue = VenueStore(db).get_venue(venue_id)
    if venue is None or not venue.active:
        raise HTTPException(status_code=404, detail="Venue not found")
    return venue


def create_venue(
    db: Session,
    *,
    owner_id: str,
    name: str,
    city: str = "",
    category: str = "",
    min_capacity: int = 1,
    max_capacity: int = 100,
    price_per_hour: Decimal = Decimal("0"),
    auto_confirm: bool = False,
) -> Venue:
    if min_capacity > max_capacity:
        raise HTTPException(status_code=400, detail="Minimum capacity cannot exceed maximum capacity")
    venue = Venue(
        owner_id=owner_id,
        name=name,
        city=city,
        category=category,
        min_capacity=min_capacity,
        max_capacity=max_capacity,
        price_per_hour=price_per_hour,
        auto_confirm=auto_confirm,
        active=True,
    )
    return VenueStore(db).insert_venue(venue)
