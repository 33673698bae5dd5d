from __future__ import annotations

import logging
from datetime import date

from fastapi import HTTPException
from sqlalchemy.orm import Session

from venue_booking.models.blocked_interval import BlockedInterval
from venue_booking.models.reservation import ACTIVE_STATUSES
from venue_booking.models.venue import Venue
from venue_booking.services.availability_service import local_today, parse_hhmm
from venue_booking.services.stores import BlockStore, BookingStore, VenueStore

logger = logging.getLogger(__name__)


def _get_owned_venue(db: Session, venue_id: str, owner_id: str) -> Venue:
    venue = VenueStore(db).get_venue(venue_id)
    if venue is None:
        raise HTTPException(status_code=404, detail="Venue not found")
    if venue.owner_id != owner_id:
        raise HTTPException(status_code=403, detail="Only the venue owner can manage blocked dates")
    return venue


def list_blocks(db: Session, *, venue_id: str, owner_id: str) -> list[BlockedInterval]:
    _get_owned_venue(db, venue_id, owner_id)
    return BlockStore(db).list_blocked_intervals(venue_id)


def block_date(
    db: Session,
    *,
    venue_id: str,
    owner_id: str,
    day: date,
    is_full_day: bool = True,
    start_time: str | None = None,
    end_time: str | None = None,
    reason: str = "",
    today: date | None = None,
) -> BlockedInterval:
    _get_owned_venue(db, venue_id, owner_id)

    if today is None:
        today = local_today()
    if day < today:
        raise HTTPException(status_code=400, detail="Cannot block a date in the past")

    if is_full_day:
        start_time = end_time = None
    else:
        if not start_time or not end_time:
            raise HTTPException(status_code=400, detail="Start and end time are required for a partial block")
        try:
            if parse_hhmm(start_time) >= parse_hhmm(end_time, allow_end_of_day=True):
                raise HTTPException(status_code=400, detail="Invalid time range")
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid time format")

    block_store = BlockStore(db)
    for existing in block_store.list_blocked_intervals(venue_id, on_date=day):
        if existing.is_full_day or (existing.start_time == start_time and existing.end_time == end_time):
            raise HTTPException(status_code=409, detail="This date/time slot is already blocked")

    if BookingStore(db).list_reservations(venue_id, ACTIVE_STATUSES, on_date=day):
        raise HTTPException(
            status_code=409,
            detail="There are existing bookings on this date. Cancel those bookings first.",
        )

    block = block_store.insert_blocked_interval(
        BlockedInterval(
            venue_id=venue_id,
            date=day,
            is_full_day=is_full_day,
            start_time=start_time,
            end_time=end_time,
            reason=(reason or "")[:255],
            created_by_user_id=owner_id,
        )
    )
    logger.info("Venue %s blocked on %s (full_day=%s)", venue_id, day, is_full_day)
    return block


def unblock_date(db: Session, *, block_id: str, owner_id: str) -> BlockedInterval:
    store = BlockStore(db)
    block = store.get_blocked_interval(block_id)
    if block is None:
        raise HTTPException(status_code=404, detail="Blocked date not found")
    _get_owned_venue(db, block.venue_id, owner_id)

    store.delete_blocked_interval(block)
    logger.info("Venue %s unblocked on %s", block.venue_id, block.date)
    return block
