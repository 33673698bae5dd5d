from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from venue_booking.db.base import Base
from venue_booking.models._mixins import TimestampMixin


class Venue(Base, TimestampMixin):
    __tablename__ = "venues"
    __table_args__ = (
        CheckConstraint("min_capacity >= 1", name="ck_venues_min_capacity"),
        CheckConstraint("max_capacity >= min_capacity", name="ck_venues_capacity_range"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(128), nullable=False, default="", index=True)
    category: Mapped[str] = mapped_column(String(128), nullable=False, default="", index=True)

    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)

    min_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    max_capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    price_per_hour: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("0"))

    # New bookings skip the pending state
    auto_confirm: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
