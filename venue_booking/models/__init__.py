# Import all models so that SQLAlchemy registers them for metadata.create_all
from venue_booking.models.audit_log import AuditLog
from venue_booking.models.blocked_interval import BlockedInterval
from venue_booking.models.reservation import Reservation
from venue_booking.models.venue import Venue

__all__ = [
    "AuditLog",
    "BlockedInterval",
    "Reservation",
    "Venue",
]
