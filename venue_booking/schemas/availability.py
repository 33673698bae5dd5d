from __future__ import annotations

import datetime as dt

from pydantic import BaseModel

from venue_booking.services.availability_service import DateClassification


class CalendarDay(BaseModel):
    date: dt.date
    status: DateClassification


class CalendarResponse(BaseModel):
    venue_id: str
    booking_type: str
    days: list[CalendarDay]


class SlotsResponse(BaseModel):
    venue_id: str
    date: dt.date
    slots: list[str]  # HH:00 hour starts
