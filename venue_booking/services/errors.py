from __future__ import annotations

from enum import Enum


class RejectionReason(str, Enum):
    VENUE_NOT_FOUND = "venue_not_found"
    PAST_DATE = "past_date"
    DATE_BLOCKED = "date_blocked"
    CAPACITY_OUT_OF_RANGE = "capacity_out_of_range"
    INVALID_TIME_RANGE = "invalid_time_range"
    SLOT_TAKEN = "slot_taken"
    DATE_FULLY_BOOKED = "date_fully_booked"
    SLOT_JUST_TAKEN = "slot_just_taken"


REJECTION_MESSAGES: dict[RejectionReason, str] = {
    RejectionReason.VENUE_NOT_FOUND: "This venue is not available for booking.",
    RejectionReason.PAST_DATE: "You cannot book a date in the past.",
    RejectionReason.DATE_BLOCKED: "This date has been blocked by the venue owner.",
    RejectionReason.CAPACITY_OUT_OF_RANGE: "The number of guests is outside this venue's capacity.",
    RejectionReason.INVALID_TIME_RANGE: "The end time must be after the start time.",
    RejectionReason.SLOT_TAKEN: "This time slot is already booked. Please choose another time.",
    RejectionReason.DATE_FULLY_BOOKED: "This date already has bookings and cannot be booked for the full day.",
    RejectionReason.SLOT_JUST_TAKEN: "This date just became unavailable. Please refresh and try again.",
}


class StoreUnavailable(Exception):
    """The booking or block store could not be reached. Callers may retry."""


class ConstraintViolation(Exception):
    """A write collided with a live reservation already in the store."""
