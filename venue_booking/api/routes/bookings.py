from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from venue_booking.core.deps import get_current_user_id, get_db
from venue_booking.schemas.reservation import (
    BookingDecisionOut,
    BookingRequest,
    CancelRequest,
    RangeBookingRequest,
    RangeDayOut,
    RangeDecisionOut,
    ReservationOut,
)
from venue_booking.services.audit_service import write_audit_log
from venue_booking.services.reservation_service import (
    BookingDecision,
    RangeDecision,
    cancel_own_reservation,
    create_booking,
    create_range_booking,
    list_user_reservations,
    validate_booking,
    validate_range_booking,
)

router = APIRouter()


def _decision_out(decision: BookingDecision) -> BookingDecisionOut:
    return BookingDecisionOut(
        ok=decision.ok,
        reason=decision.reason,
        message=decision.message,
        total_price=decision.total_price,
        start_time=decision.start_time,
        end_time=decision.end_time,
        reservation=ReservationOut.model_validate(decision.reservation) if decision.reservation else None,
    )


def _range_out(result: RangeDecision) -> RangeDecisionOut:
    return RangeDecisionOut(
        accepted_dates=result.accepted_dates,
        total_price=result.total_price,
        days=[RangeDayOut(date=d, decision=_decision_out(decision)) for d, decision in result.days],
    )


@router.post("/validate", response_model=BookingDecisionOut)
def validate(payload: BookingRequest, db: Session = Depends(get_db)):
    decision = validate_booking(
        db,
        venue_id=payload.venue_id,
        day=payload.date,
        booking_type=payload.booking_type,
        guests=payload.guests,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    return _decision_out(decision)


@router.post("", response_model=BookingDecisionOut)
def create(
    payload: BookingRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    decision = create_booking(
        db,
        venue_id=payload.venue_id,
        day=payload.date,
        booking_type=payload.booking_type,
        guests=payload.guests,
        user_id=user_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        special_requests=payload.special_requests,
    )
    if decision.reservation is not None:
        r = decision.reservation
        write_audit_log(
            db,
            actor_user_id=user_id,
            venue_id=r.venue_id,
            action_type="BOOKING_CREATE",
            target_type="reservation",
            target_id=r.id,
            summary="Booking created",
            diff_json={"date": str(r.date), "status": r.status, "special_requests": r.special_requests},
            request=request,
        )
    return _decision_out(decision)


@router.post("/range/validate", response_model=RangeDecisionOut)
def validate_range(payload: RangeBookingRequest, db: Session = Depends(get_db)):
    result = validate_range_booking(
        db,
        venue_id=payload.venue_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        booking_type=payload.booking_type,
        guests=payload.guests,
        start_time=payload.start_time,
        end_time=payload.end_time,
    )
    return _range_out(result)


@router.post("/range", response_model=RangeDecisionOut)
def create_range(
    payload: RangeBookingRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    result = create_range_booking(
        db,
        venue_id=payload.venue_id,
        start_date=payload.start_date,
        end_date=payload.end_date,
        booking_type=payload.booking_type,
        guests=payload.guests,
        user_id=user_id,
        start_time=payload.start_time,
        end_time=payload.end_time,
        special_requests=payload.special_requests,
    )
    if result.accepted_dates:
        write_audit_log(
            db,
            actor_user_id=user_id,
            venue_id=payload.venue_id,
            action_type="BOOKING_CREATE_RANGE",
            target_type="venue",
            target_id=payload.venue_id,
            summary="Range booking created",
            diff_json={"dates": [str(d) for d in result.accepted_dates]},
            request=request,
        )
    return _range_out(result)


@router.get("/mine", response_model=list[ReservationOut])
def my_bookings(db: Session = Depends(get_db), user_id: str = Depends(get_current_user_id)):
    return list_user_reservations(db, user_id=user_id)


@router.post("/{reservation_id}/cancel", response_model=ReservationOut)
def cancel(
    reservation_id: str,
    payload: CancelRequest,
    request: Request,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    r = cancel_own_reservation(db, reservation_id=reservation_id, user_id=user_id, reason=payload.reason)
    write_audit_log(
        db,
        actor_user_id=user_id,
        venue_id=r.venue_id,
        action_type="BOOKING_CANCEL",
        target_type="reservation",
        target_id=r.id,
        summary="Booking cancelled by customer",
        request=request,
    )
    return r
