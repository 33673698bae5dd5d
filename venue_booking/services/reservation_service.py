from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy.orm import Session

from venue_booking.core.config import get_settings
from venue_booking.models.reservation import (
    ACTIVE_STATUSES,
    BOOKING_TYPE_FULL_DAY,
    BOOKING_TYPE_HOURLY,
    FULL_DAY_END,
    FULL_DAY_START,
    STATUS_CANCELLED,
    STATUS_CONFIRMED,
    STATUS_PENDING,
    Reservation,
)
from venue_booking.models.venue import Venue
from venue_booking.services.availability_service import local_today, overlaps, parse_hhmm, reservation_minutes
from venue_booking.services.errors import REJECTION_MESSAGES, ConstraintViolation, RejectionReason
from venue_booking.services.stores import BlockStore, BookingStore, VenueStore

logger = logging.getLogger(__name__)

MAX_RANGE_DAYS = 31

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    STATUS_PENDING: frozenset({STATUS_CONFIRMED, STATUS_CANCELLED}),
    STATUS_CONFIRMED: frozenset({STATUS_CANCELLED}),
    STATUS_CANCELLED: frozenset(),
}


@dataclass
class BookingDecision:
    ok: bool
    reason: RejectionReason | None = None
    message: str = ""
    total_price: Decimal | None = None
    start_time: str | None = None
    end_time: str | None = None
    reservation: Reservation | None = None
    venue: Venue | None = field(default=None, repr=False)

    @classmethod
    def rejected(cls, reason: RejectionReason) -> "BookingDecision":
        return cls(ok=False, reason=reason, message=REJECTION_MESSAGES[reason])


@dataclass
class RangeDecision:
    days: list[tuple[date, BookingDecision]]

    @property
    def accepted_dates(self) -> list[date]:
        return [d for d, decision in self.days if decision.ok]

    @property
    def total_price(self) -> Decimal:
        return sum((decision.total_price or Decimal("0") for _, decision in self.days if decision.ok), Decimal("0"))


def compute_total_price(venue: Venue, booking_type: str, start_hour: int = 0, end_hour: int = 0) -> Decimal:
    price_per_hour = Decimal(venue.price_per_hour or 0)
    if booking_type == BOOKING_TYPE_FULL_DAY:
        return price_per_hour * get_settings().full_day_price_multiplier
    return price_per_hour * (end_hour - start_hour)


def _reject(venue_id: str, day: date, reason: RejectionReason) -> BookingDecision:
    logger.info("Booking rejected for venue %s on %s: %s", venue_id, day, reason.value)
    return BookingDecision.rejected(reason)


def validate_booking(
    db: Session,
    *,
    venue_id: str,
    day: date,
    booking_type: str,
    guests: int,
    start_time: str | None = None,
    end_time: str | None = None,
    today: date | None = None,
) -> BookingDecision:
    """Check a booking request against blocks, capacity and existing bookings.

    Every failure is returned as a rejected decision; only store failures
    raise (``StoreUnavailable``).
    """
    if booking_type not in (BOOKING_TYPE_HOURLY, BOOKING_TYPE_FULL_DAY):
        raise ValueError(f"Unknown booking type {booking_type!r}")
    if today is None:
        today = local_today()

    venue = VenueStore(db).get_venue(venue_id)
    if venue is None or not venue.active:
        return _reject(venue_id, day, RejectionReason.VENUE_NOT_FOUND)

    if day < today:
        return _reject(venue_id, day, RejectionReason.PAST_DATE)

    block_store = BlockStore(db)
    blocked_dates = {b.date for b in block_store.list_blocked_intervals(venue_id)}
    if day in blocked_dates:
        return _reject(venue_id, day, RejectionReason.DATE_BLOCKED)

    if not (venue.min_capacity <= guests <= venue.max_capacity):
        return _reject(venue_id, day, RejectionReason.CAPACITY_OUT_OF_RANGE)

    existing = BookingStore(db).list_reservations(venue_id, ACTIVE_STATUSES, on_date=day)

    if booking_type == BOOKING_TYPE_HOURLY:
        if not start_time or not end_time:
            return _reject(venue_id, day, RejectionReason.INVALID_TIME_RANGE)
        try:
            cand_start = parse_hhmm(start_time)
            cand_end = parse_hhmm(end_time, allow_end_of_day=True)
        except ValueError:
            return _reject(venue_id, day, RejectionReason.INVALID_TIME_RANGE)

        start_hour, end_hour = cand_start // 60, cand_end // 60
        if start_hour >= end_hour:
            return _reject(venue_id, day, RejectionReason.INVALID_TIME_RANGE)

        for r in existing:
            if overlaps((cand_start, cand_end), reservation_minutes(r)):
                return _reject(venue_id, day, RejectionReason.SLOT_TAKEN)
    else:
        if existing:
            return _reject(venue_id, day, RejectionReason.DATE_FULLY_BOOKED)
        start_time, end_time = FULL_DAY_START, FULL_DAY_END
        start_hour = end_hour = 0

    # A block may have landed since the first read
    if block_store.exists_blocked_interval(venue_id, day):
        return _reject(venue_id, day, RejectionReason.DATE_BLOCKED)

    return BookingDecision(
        ok=True,
        total_price=compute_total_price(venue, booking_type, start_hour, end_hour),
        start_time=start_time,
        end_time=end_time,
        venue=venue,
    )


def create_booking(
    db: Session,
    *,
    venue_id: str,
    day: date,
    booking_type: str,
    guests: int,
    user_id: str,
    start_time: str | None = None,
    end_time: str | None = None,
    special_requests: str = "",
    today: date | None = None,
) -> BookingDecision:
    decision = validate_booking(
        db,
        venue_id=venue_id,
        day=day,
        booking_type=booking_type,
        guests=guests,
        start_time=start_time,
        end_time=end_time,
        today=today,
    )
    if not decision.ok:
        return decision

    venue = decision.venue
    reservation = Reservation(
        venue_id=venue_id,
        user_id=user_id,
        date=day,
        start_time=decision.start_time,
        end_time=decision.end_time,
        booking_type=booking_type,
        guests=guests,
        total_price=decision.total_price,
        status=STATUS_CONFIRMED if venue.auto_confirm else STATUS_PENDING,
        special_requests=special_requests or "",
    )
    try:
        BookingStore(db).insert_reservation(reservation)
    except ConstraintViolation:
        return _reject(venue_id, day, RejectionReason.SLOT_JUST_TAKEN)

    logger.info(
        "Created %s reservation %s for venue %s on %s %s-%s",
        reservation.status,
        reservation.id,
        venue_id,
        day,
        reservation.start_time,
        reservation.end_time,
    )
    decision.reservation = reservation
    return decision


def _range_days(start_date: date, end_date: date) -> list[date]:
    if start_date > end_date:
        raise HTTPException(status_code=400, detail="Invalid date range")
    span = (end_date - start_date).days + 1
    if span > MAX_RANGE_DAYS:
        raise HTTPException(status_code=400, detail=f"Date range cannot exceed {MAX_RANGE_DAYS} days")
    return [start_date + timedelta(days=i) for i in range(span)]


def validate_range_booking(
    db: Session,
    *,
    venue_id: str,
    start_date: date,
    end_date: date,
    booking_type: str,
    guests: int,
    start_time: str | None = None,
    end_time: str | None = None,
    today: date | None = None,
) -> RangeDecision:
    """Validate the same booking window on every date of a range."""
    days = _range_days(start_date, end_date)
    return RangeDecision(
        days=[
            (
                d,
                validate_booking(
                    db,
                    venue_id=venue_id,
                    day=d,
                    booking_type=booking_type,
                    guests=guests,
                    start_time=start_time,
                    end_time=end_time,
                    today=today,
                ),
            )
            for d in days
        ]
    )


def create_range_booking(
    db: Session,
    *,
    venue_id: str,
    start_date: date,
    end_date: date,
    booking_type: str,
    guests: int,
    user_id: str,
    start_time: str | None = None,
    end_time: str | None = None,
    special_requests: str = "",
    today: date | None = None,
) -> RangeDecision:
    """Book every date of a range that passes validation; skip the rest."""
    days = _range_days(start_date, end_date)
    return RangeDecision(
        days=[
            (
                d,
                create_booking(
                    db,
                    venue_id=venue_id,
                    day=d,
                    booking_type=booking_type,
                    guests=guests,
                    user_id=user_id,
                    start_time=start_time,
                    end_time=end_time,
                    special_requests=special_requests,
                    today=today,
                ),
            )
            for d in days
        ]
    )


def _get_reservation_or_404(store: BookingStore, reservation_id: str) -> Reservation:
    reservation = store.get_reservation(reservation_id)
    if reservation is None:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return reservation


def _apply_transition(store: BookingStore, reservation: Reservation, new_status: str, reason: str) -> Reservation:
    if new_status not in ALLOWED_TRANSITIONS.get(reservation.status, frozenset()):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot change a {reservation.status} booking to {new_status}",
        )
    old_status = reservation.status
    store.update_reservation_status(reservation, new_status, reason=reason)
    logger.info("Reservation %s moved from %s to %s", reservation.id, old_status, new_status)
    return reservation


def update_reservation_status(
    db: Session,
    *,
    reservation_id: str,
    new_status: str,
    owner_id: str,
    reason: str = "",
) -> Reservation:
    """Confirm or cancel a booking on behalf of the venue owner."""
    store = BookingStore(db)
    reservation = _get_reservation_or_404(store, reservation_id)

    venue = VenueStore(db).get_venue(reservation.venue_id)
    if venue is None or venue.owner_id != owner_id:
        raise HTTPException(status_code=403, detail="Only the venue owner can update this booking")

    return _apply_transition(store, reservation, new_status, reason)


def cancel_own_reservation(db: Session, *, reservation_id: str, user_id: str, reason: str = "") -> Reservation:
    store = BookingStore(db)
    reservation = _get_reservation_or_404(store, reservation_id)
    if reservation.user_id != user_id:
        raise HTTPException(status_code=404, detail="Reservation not found")
    return _apply_transition(store, reservation, STATUS_CANCELLED, reason)


def list_user_reservations(db: Session, *, user_id: str) -> list[Reservation]:
    return BookingStore(db).list_for_user(user_id)


def list_owner_reservations(
    db: Session,
    *,
    owner_id: str,
    venue_id: str | None = None,
    status: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
) -> list[Reservation]:
    return BookingStore(db).list_for_owner(
        owner_id,
        venue_id=venue_id,
        status=status,
        from_date=from_date,
        to_date=to_date,
    )

