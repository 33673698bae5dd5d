from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

from sqlalchemy import Date, DateTime, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from venue_booking.db.base import Base
from venue_booking.models._mixins import TimestampMixin

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"

ACTIVE_STATUSES = frozenset({STATUS_PENDING, STATUS_CONFIRMED})

BOOKING_TYPE_HOURLY = "hourly"
BOOKING_TYPE_FULL_DAY = "full_day"

FULL_DAY_START = "00:00"
FULL_DAY_END = "23:59"


class Reservation(Base, TimestampMixin):
    __tablename__ = "reservations"
    __table_args__ = (
        # At most one live booking per exact slot; cancelled rows are inert
        Index(
            "uq_reservations_live_slot",
            "venue_id",
            "date",
            "start_time",
            "end_time",
            unique=True,
            postgresql_where=text("status <> 'cancelled'"),
            sqlite_where=text("status <> 'cancelled'"),
        ),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    venue_id: Mapped[str] = mapped_column(String(36), ForeignKey("venues.id"), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    end_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM, exclusive

    booking_type: Mapped[str] = mapped_column(String(16), nullable=False, default=BOOKING_TYPE_HOURLY)
    guests: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))

    status: Mapped[str] = mapped_column(String(16), nullable=False, default=STATUS_PENDING, index=True)  # pending/confirmed/cancelled

    special_requests: Mapped[str] = mapped_column(Text, nullable=False, default="")

    cancelled_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancel_reason: Mapped[str] = mapped_column(String(255), nullable=False, default="")
