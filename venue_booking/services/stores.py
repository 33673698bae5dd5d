"""Persistence boundary for reservations, blocked intervals and venues.

Every store call goes through ``_store_call`` so that SQLAlchemy errors leave
this module only as ``StoreUnavailable`` or ``ConstraintViolation``.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Iterable, Iterator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from venue_booking.models.blocked_interval import BlockedInterval
from venue_booking.models.reservation import ACTIVE_STATUSES, STATUS_CANCELLED, Reservation
from venue_booking.models.venue import Venue
from venue_booking.services.errors import ConstraintViolation, StoreUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def _store_call(db: Session, operation: str) -> Iterator[None]:
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        logger.warning("Constraint violation during %s: %s", operation, exc.orig)
        raise ConstraintViolation(operation) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Store failure during %s: %s", operation, exc)
        raise StoreUnavailable(operation) from exc


class VenueStore:
    def __init__(self, db: Session):
        self.db = db

    def get_venue(self, venue_id: str) -> Venue | None:
        with _store_call(self.db, "get_venue"):
            return self.db.get(Venue, venue_id)

    def list_venues(self, *, city: str | None = None, category: str | None = None, owner_id: str | None = None) -> list[Venue]:
        q = select(Venue).order_by(Venue.name)
        if owner_id:
            q = q.where(Venue.owner_id == owner_id)
        else:
            q = q.where(Venue.active == True)  # noqa: E712
        if city:
            q = q.where(Venue.city == city)
        if category:
            q = q.where(Venue.category == category)
        with _store_call(self.db, "list_venues"):
            return list(self.db.execute(q).scalars().all())

    def insert_venue(self, venue: Venue) -> Venue:
        with _store_call(self.db, "insert_venue"):
            self.db.add(venue)
            self.db.commit()
            self.db.refresh(venue)
        return venue


class BookingStore:
    def __init__(self, db: Session):
        self.db = db

    def list_reservations(
        self,
        venue_id: str,
        statuses: Iterable[str] = ACTIVE_STATUSES,
        *,
        on_date: date | None = None,
    ) -> list[Reservation]:
        q = (
            select(Reservation)
            .where(Reservation.venue_id == venue_id)
            .where(Reservation.status.in_(list(statuses)))
        )
        if on_date is not None:
            q = q.where(Reservation.date == on_date)
        q = q.order_by(Reservation.date, Reservation.start_time)
        with _store_call(self.db, "list_reservations"):
            return list(self.db.execute(q).scalars().all())

    def get_reservation(self, reservation_id: str) -> Reservation | None:
        with _store_call(self.db, "get_reservation"):
            return self.db.get(Reservation, reservation_id)

    def list_for_user(self, user_id: str) -> list[Reservation]:
        q = (
            select(Reservation)
            .where(Reservation.user_id == user_id)
            .order_by(Reservation.date.desc(), Reservation.start_time)
        )
        with _store_call(self.db, "list_for_user"):
            return list(self.db.execute(q).scalars().all())

    def list_for_owner(
        self,
        owner_id: str,
        *,
        venue_id: str | None = None,
        status: str | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> list[Reservation]:
        q = select(Reservation).join(Venue, Venue.id == Reservation.venue_id).where(Venue.owner_id == owner_id)
        if venue_id:
            q = q.where(Reservation.venue_id == venue_id)
        if status:
            q = q.where(Reservation.status == status)
        if from_date:
            q = q.where(Reservation.date >= from_date)
        if to_date:
            q = q.where(Reservation.date <= to_date)
        q = q.order_by(Reservation.date, Reservation.start_time)
        with _store_call(self.db, "list_for_owner"):
            return list(self.db.execute(q.limit(1000)).scalars().all())

    def insert_reservation(self, reservation: Reservation) -> Reservation:
        with _store_call(self.db, "insert_reservation"):
            self.db.add(reservation)
            self.db.commit()
            self.db.refresh(reservation)
        return reservation

    def update_reservation_status(self, reservation: Reservation, new_status: str, *, reason: str = "") -> Reservation:
        with _store_call(self.db, "update_reservation_status"):
            reservation.status = new_status
            if new_status == STATUS_CANCELLED:
                reservation.cancelled_at = datetime.now(timezone.utc)
                reservation.cancel_reason = reason[:255]
            self.db.commit()
            self.db.refresh(reservation)
        return reservation


class BlockStore:
    def __init__(self, db: Session):
        self.db = db

    def list_blocked_intervals(self, venue_id: str, *, on_date: date | None = None) -> list[BlockedInterval]:
        q = select(BlockedInterval).where(BlockedInterval.venue_id == venue_id)
        if on_date is not None:
            q = q.where(BlockedInterval.date == on_date)
        q = q.order_by(BlockedInterval.date, BlockedInterval.start_time)
        with _store_call(self.db, "list_blocked_intervals"):
            return list(self.db.execute(q).scalars().all())

    def exists_blocked_interval(self, venue_id: str, on_date: date) -> bool:
        q = (
            select(BlockedInterval.id)
            .where(BlockedInterval.venue_id == venue_id)
            .where(BlockedInterval.date == on_date)
            .limit(1)
        )
        with _store_call(self.db, "exists_blocked_interval"):
            return self.db.execute(q).first() is not None

    def get_blocked_interval(self, block_id: str) -> BlockedInterval | None:
        with _store_call(self.db, "get_blocked_interval"):
            return self.db.get(BlockedInterval, block_id)

    def insert_blocked_interval(self, block: BlockedInterval) -> BlockedInterval:
        with _store_call(self.db, "insert_blocked_interval"):
            self.db.add(block)
            self.db.commit()
            self.db.refresh(block)
        return block

    def delete_blocked_interval(self, block: BlockedInterval) -> None:
        with _store_call(self.db, "delete_blocked_interval"):
            self.db.delete(block)
            self.db.commit()
