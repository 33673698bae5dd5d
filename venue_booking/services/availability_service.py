from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Iterable, Mapping, Protocol
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from venue_booking.core.config import get_settings
from venue_booking.models.reservation import (
    ACTIVE_STATUSES,
    BOOKING_TYPE_FULL_DAY,
    BOOKING_TYPE_HOURLY,
    FULL_DAY_END,
    FULL_DAY_START,
)
from venue_booking.services.stores import BlockStore, BookingStore

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24
END_OF_DAY = "24:00"


class DateClassification(str, Enum):
    AVAILABLE = "available"
    PARTIALLY_BOOKED = "partially_booked"
    FULLY_BOOKED = "fully_booked"
    BLOCKED = "blocked"
    PAST = "past"


class TimeRange(Protocol):
    start_time: str
    end_time: str


@dataclass(frozen=True)
class Availability:
    venue_id: str
    reservations_by_date: dict[date, list] = field(default_factory=dict)
    blocked_dates: frozenset[date] = frozenset()


def parse_hhmm(value: str, *, allow_end_of_day: bool = False) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    if allow_end_of_day and value == END_OF_DAY:
        return HOURS_PER_DAY * 60
    try:
        hh, mm = value.split(":")
        hours, minutes = int(hh), int(mm)
    except (AttributeError, ValueError):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    if not (0 <= hours < HOURS_PER_DAY and 0 <= minutes < 60):
        raise ValueError(f"Invalid time {value!r}, expected HH:MM")
    return hours * 60 + minutes


def hour_label(hour: int) -> str:
    return f"{hour:02d}:00"


def is_full_day(item: TimeRange) -> bool:
    return item.start_time == FULL_DAY_START and item.end_time == FULL_DAY_END


def reservation_minutes(item: TimeRange) -> tuple[int, int]:
    """``[start, end)`` in minutes since midnight.

    A full-day reservation is stored as 00:00-23:59 but holds the venue
    until midnight.
    """
    if is_full_day(item):
        return 0, HOURS_PER_DAY * 60
    return parse_hhmm(item.start_time), parse_hhmm(item.end_time, allow_end_of_day=True)


def overlaps(a: tuple[int, int], b: tuple[int, int]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def occupied_hours(items: Iterable[TimeRange]) -> set[int]:
    """Hour buckets taken by the given reservations.

    An hour is taken when any minute of it is booked, so 09:30-10:15 takes
    both 09:00 and 10:00.
    """
    hours: set[int] = set()
    for item in items:
        start, end = reservation_minutes(item)
        hours.update(range(start // 60, -(-end // 60)))
    return hours


def local_today() -> date:
    settings = get_settings()
    return datetime.now(tz=ZoneInfo(settings.timezone)).date()


def load_availability(db: Session, *, venue_id: str) -> Availability:
    if not venue_id:
        raise ValueError("venue_id is required")

    reservations = BookingStore(db).list_reservations(venue_id, ACTIVE_STATUSES)
    blocks = BlockStore(db).list_blocked_intervals(venue_id)

    by_date: dict[date, list] = defaultdict(list)
    for r in reservations:
        by_date[r.date].append(r)

    return Availability(
        venue_id=venue_id,
        reservations_by_date=dict(by_date),
        blocked_dates=frozenset(b.date for b in blocks),
    )


def classify_date(
    day: date,
    reservations_by_date: Mapping[date, list],
    blocked_dates: Iterable[date],
    booking_type: str,
    *,
    fully_booked_threshold: int | None = None,
) -> DateClassification:
    if booking_type not in (BOOKING_TYPE_HOURLY, BOOKING_TYPE_FULL_DAY):
        raise ValueError(f"Unknown booking type {booking_type!r}")

    if day in blocked_dates:
        return DateClassification.BLOCKED

    day_reservations = reservations_by_date.get(day) or []

    if any(is_full_day(r) for r in day_reservations):
        return DateClassification.FULLY_BOOKED

    if booking_type == BOOKING_TYPE_FULL_DAY:
        # Any hourly booking rules out booking the whole day
        return DateClassification.FULLY_BOOKED if day_reservations else DateClassification.AVAILABLE

    if fully_booked_threshold is None:
        fully_booked_threshold = get_settings().fully_booked_hour_threshold
    taken = len(occupied_hours(day_reservations))
    if taken >= fully_booked_threshold:
        return DateClassification.FULLY_BOOKED
    if taken:
        return DateClassification.PARTIALLY_BOOKED
    return DateClassification.AVAILABLE


def available_slots(day: date, reservations_by_date: Mapping[date, list]) -> list[str]:
    taken = occupied_hours(reservations_by_date.get(day) or [])
    return [hour_label(h) for h in range(HOURS_PER_DAY) if h not in taken]


def _daterange(start: date, end: date):
    cur = start
    while cur <= end:
        yield cur
        cur = cur + timedelta(days=1)


def build_calendar(
    db: Session,
    *,
    venue_id: str,
    from_date: date,
    to_date: date,
    booking_type: str,
    today: date | None = None,
) -> list[dict]:
    """Classify every date in ``[from_date, to_date]`` for one venue."""
    if today is None:
        today = local_today()

    availability = load_availability(db, venue_id=venue_id)
    settings = get_settings()

    days: list[dict] = []
    for d in _daterange(from_date, to_date):
        if d < today:
            status = DateClassification.PAST
        else:
            status = classify_date(
                d,
                availability.reservations_by_date,
                availability.blocked_dates,
                booking_type,
                fully_booked_threshold=settings.fully_booked_hour_threshold,
            )
        days.append({"date": d, "status": status})

    logger.debug("Built calendar for venue %s: %d days from %s", venue_id, len(days), from_date)
    return days
