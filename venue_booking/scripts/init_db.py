from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.exc import ProgrammingError

from venue_booking.db.base import Base
from venue_booking.db.session import engine

# Import models to register with SQLAlchemy
import venue_booking.models  # noqa: F401

logger = logging.getLogger(__name__)

# Overlapping live bookings for the same venue and date are rejected by the database
RESERVATION_OVERLAP_CONSTRAINT = """
ALTER TABLE reservations
ADD CONSTRAINT reservations_no_overlap
EXCLUDE USING gist (
    venue_id WITH =,
    tsrange(
        date + start_time::time,
        CASE
            WHEN end_time = '24:00' OR booking_type = 'full_day' THEN (date + 1)::timestamp
            ELSE date + end_time::time
        END,
        '[)'
    ) WITH &&
)
WHERE (status <> 'cancelled');
"""


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if engine.dialect.name == "postgresql":
        # Extensions needed for exclusion constraints (overlap prevention)
        with engine.begin() as conn:
            conn.execute(text("CREATE EXTENSION IF NOT EXISTS btree_gist"))

    Base.metadata.create_all(bind=engine)

    if engine.dialect.name == "postgresql":
        try:
            with engine.begin() as conn:
                conn.execute(text(RESERVATION_OVERLAP_CONSTRAINT))
        except ProgrammingError as exc:
            if "already exists" not in str(exc):
                raise
            logger.info("Constraint reservations_no_overlap already exists")

    logger.info("DB initialized")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
