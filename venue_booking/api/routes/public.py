from __future__ import annotations

from datetime import date, timedelta

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from venue_booking.core.deps import get_db
from venue_booking.schemas.availability import CalendarDay, CalendarResponse, SlotsResponse
from venue_booking.schemas.reservation import BookingType
from venue_booking.schemas.venue import VenueOut
from venue_booking.services.availability_service import available_slots, build_calendar, load_availability
from venue_booking.services.venue_service import get_public_venue, list_public_venues

router = APIRouter()

MAX_CALENDAR_DAYS = 366


@router.get("/venues", response_model=list[VenueOut])
def list_venues(city: str | None = None, category: str | None = None, db: Session = Depends(get_db)):
    return list_public_venues(db, city=city, category=category)


@router.get("/venues/{venue_id}", response_model=VenueOut)
def get_venue(venue_id: str, db: Session = Depends(get_db)):
    return get_public_venue(db, venue_id=venue_id)


@router.get("/venues/{venue_id}/calendar", response_model=CalendarResponse)
def venue_calendar(
    venue_id: str,
    from_date: date,
    to_date: date,
    booking_type: BookingType = Query(default="hourly"),
    db: Session = Depends(get_db),
):
    if from_date > to_date:
        raise HTTPException(status_code=400, detail="Invalid date range")
    if to_date - from_date > timedelta(days=MAX_CALENDAR_DAYS):
        raise HTTPException(status_code=400, detail="Date range too large")

    get_public_venue(db, venue_id=venue_id)
    days = build_calendar(db, venue_id=venue_id, from_date=from_date, to_date=to_date, booking_type=booking_type)
    return CalendarResponse(venue_id=venue_id, booking_type=booking_type, days=[CalendarDay(**d) for d in days])


@router.get("/venues/{venue_id}/slots", response_model=SlotsResponse)
def venue_slots(venue_id: str, day: date = Query(alias="date"), db: Session = Depends(get_db)):
    get_public_venue(db, venue_id=venue_id)
    availability = load_availability(db, venue_id=venue_id)
    slots = [] if day in availability.blocked_dates else available_slots(day, availability.reservations_by_date)
    return SlotsResponse(venue_id=venue_id, date=day, slots=slots)
