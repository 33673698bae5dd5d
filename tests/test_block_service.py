"""
Tests for owner-managed blocked dates.
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from venue_booking.models.reservation import STATUS_CANCELLED, STATUS_PENDING
from venue_booking.services.availability_service import DateClassification, build_calendar
from venue_booking.services.block_service import block_date, list_blocks, unblock_date

from .conftest import OWNER_ID


class TestBlockDate:
    """Tests for blocking a date or a window on a date."""

    def test_full_day_block(self, db, venue, tomorrow, today):
        block = block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, reason="Private event", today=today)
        assert block.is_full_day is True
        assert block.start_time is None
        assert block.reason == "Private event"
        assert block.created_by_user_id == OWNER_ID

        days = build_calendar(db, venue_id=venue.id, from_date=tomorrow, to_date=tomorrow, booking_type="hourly", today=today)
        assert days[0]["status"] == DateClassification.BLOCKED

    def test_full_day_ignores_times(self, db, venue, tomorrow, today):
        block = block_date(
            db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, start_time="09:00", end_time="10:00", today=today
        )
        assert (block.start_time, block.end_time) == (None, None)

    def test_partial_blocks_on_same_day(self, db, venue, tomorrow, today):
        block_date(
            db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, is_full_day=False,
            start_time="09:00", end_time="12:00", today=today,
        )
        block_date(
            db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, is_full_day=False,
            start_time="14:00", end_time="16:00", today=today,
        )
        assert len(list_blocks(db, venue_id=venue.id, owner_id=OWNER_ID)) == 2

    def test_today_can_be_blocked(self, db, venue, today):
        assert block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=today, today=today).date == today

    def test_past_date(self, db, venue, today):
        with pytest.raises(HTTPException) as exc:
            block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=today - timedelta(days=1), today=today)
        assert exc.value.status_code == 400

    @pytest.mark.parametrize(
        "start,end",
        [(None, "10:00"), ("09:00", None), ("12:00", "09:00"), ("12:00", "12:00"), ("noon", "13:00")],
    )
    def test_partial_block_needs_valid_window(self, db, venue, tomorrow, today, start, end):
        with pytest.raises(HTTPException) as exc:
            block_date(
                db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, is_full_day=False,
                start_time=start, end_time=end, today=today,
            )
        assert exc.value.status_code == 400

    def test_duplicate_blocks(self, db, venue, tomorrow, today):
        block_date(
            db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, is_full_day=False,
            start_time="09:00", end_time="12:00", today=today,
        )
        with pytest.raises(HTTPException) as exc:
            block_date(
                db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, is_full_day=False,
                start_time="09:00", end_time="12:00", today=today,
            )
        assert exc.value.status_code == 409

    def test_full_day_block_rules_out_more_blocks(self, db, venue, tomorrow, today):
        block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, today=today)
        with pytest.raises(HTTPException) as exc:
            block_date(
                db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, is_full_day=False,
                start_time="09:00", end_time="12:00", today=today,
            )
        assert exc.value.status_code == 409
        assert exc.value.detail == "This date/time slot is already blocked"

    def test_live_bookings_prevent_block(self, db, venue, add_reservation, tomorrow, today):
        add_reservation(venue, tomorrow, "09:00", "10:00", status=STATUS_PENDING)
        with pytest.raises(HTTPException) as exc:
            block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, today=today)
        assert exc.value.status_code == 409
        assert "Cancel those bookings first" in exc.value.detail

    def test_cancelled_bookings_do_not_prevent_block(self, db, venue, add_reservation, tomorrow, today):
        add_reservation(venue, tomorrow, "09:00", "10:00", status=STATUS_CANCELLED)
        assert block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, today=today).id

    def test_owner_only(self, db, venue, tomorrow, today):
        with pytest.raises(HTTPException) as exc:
            block_date(db, venue_id=venue.id, owner_id="intruder", day=tomorrow, today=today)
        assert exc.value.status_code == 403

    def test_unknown_venue(self, db, tomorrow, today):
        with pytest.raises(HTTPException) as exc:
            block_date(db, venue_id="missing", owner_id=OWNER_ID, day=tomorrow, today=today)
        assert exc.value.status_code == 404


class TestUnblockDate:
    """Tests for removing a blocked date."""

    def test_unblock_frees_the_date(self, db, venue, tomorrow, today):
        block = block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, today=today)
        removed = unblock_date(db, block_id=block.id, owner_id=OWNER_ID)
        assert removed.date == tomorrow
        assert list_blocks(db, venue_id=venue.id, owner_id=OWNER_ID) == []

        days = build_calendar(db, venue_id=venue.id, from_date=tomorrow, to_date=tomorrow, booking_type="full_day", today=today)
        assert days[0]["status"] == DateClassification.AVAILABLE

    def test_unknown_block(self, db):
        with pytest.raises(HTTPException) as exc:
            unblock_date(db, block_id="missing", owner_id=OWNER_ID)
        assert exc.value.status_code == 404

    def test_owner_only(self, db, venue, tomorrow, today):
        block = block_date(db, venue_id=venue.id, owner_id=OWNER_ID, day=tomorrow, today=today)
        with pytest.raises(HTTPException) as exc:
            unblock_date(db, block_id=block.id, owner_id="intruder")
        assert exc.value.status_code == 403
        assert len(list_blocks(db, venue_id=venue.id, owner_id=OWNER_ID)) == 1
