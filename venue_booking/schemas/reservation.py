from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

from venue_booking.schemas.blocked_interval import HHMM_PATTERN
from venue_booking.services.errors import RejectionReason

BookingType = Literal["hourly", "full_day"]


class BookingRequest(BaseModel):
    venue_id: str = Field(min_length=1)
    date: dt.date
    booking_type: BookingType = "hourly"
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    guests: int = Field(ge=1, le=100000)
    special_requests: str = Field(default="", max_length=2000)


class RangeBookingRequest(BaseModel):
    venue_id: str = Field(min_length=1)
    start_date: dt.date
    end_date: dt.date
    booking_type: BookingType = "hourly"
    start_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    end_time: str | None = Field(default=None, pattern=HHMM_PATTERN)
    guests: int = Field(ge=1, le=100000)
    special_requests: str = Field(default="", max_length=2000)


class ReservationOut(BaseModel):
    id: str
    venue_id: str
    user_id: str
    date: dt.date
    start_time: str
    end_time: str
    booking_type: str
    guests: int
    total_price: Decimal
    status: str
    special_requests: str
    cancel_reason: str

    class Config:
        from_attributes = True


class BookingDecisionOut(BaseModel):
    ok: bool
    reason: RejectionReason | None = None
    message: str = ""
    total_price: Decimal | None = None
    start_time: str | None = None
    end_time: str | None = None
    reservation: ReservationOut | None = None


class RangeDayOut(BaseModel):
    date: dt.date
    decision: BookingDecisionOut


class RangeDecisionOut(BaseModel):
    accepted_dates: list[dt.date]
    total_price: Decimal
    days: list[RangeDayOut]


class StatusUpdate(BaseModel):
    status: Literal["confirmed", "cancelled"]
    reason: str = Field(default="", max_length=255)


class CancelRequest(BaseModel):
    reason: str = Field(default="", max_length=255)
