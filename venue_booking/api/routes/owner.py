from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from venue_booking.core.deps import get_current_user_id, get_db
from venue_booking.schemas.blocked_interval import BlockCreate, BlockOut
from venue_booking.schemas.reservation import ReservationOut, StatusUpdate
from venue_booking.schemas.venue import VenueCreate, VenueOut
from venue_booking.services.audit_service import write_audit_log
from venue_booking.services.block_service import block_date, list_blocks, unblock_date
from venue_booking.services.reservation_service import list_owner_reservations, update_reservation_status
from venue_booking.services.venue_service import create_venue, list_owner_venues

router = APIRouter()


@router.get("/venues", response_model=list[VenueOut])
def my_venues(db: Session = Depends(get_db), owner_id: str = Depends(get_current_user_id)):
    return list_owner_venues(db, owner_id=owner_id)


@router.post("/venues", response_model=VenueOut)
def add_venue(
    payload: VenueCreate,
    request: Request,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_user_id),
):
    v = create_venue(db, owner_id=owner_id, **payload.model_dump())
    write_audit_log(db, actor_user_id=owner_id, venue_id=v.id, action_type="VENUE_CREATE", target_type="venue", target_id=v.id, summary="Created venue", request=request)
    return v


@router.get("/reservations", response_model=list[ReservationOut])
def owner_reservations(
    venue_id: str | None = None,
    status: str | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_user_id),
):
    return list_owner_reservations(
        db,
        owner_id=owner_id,
        venue_id=venue_id,
        status=status,
        from_date=from_date,
        to_date=to_date,
    )


@router.post("/reservations/{reservation_id}/status", response_model=ReservationOut)
def set_reservation_status(
    reservation_id: str,
    payload: StatusUpdate,
    request: Request,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_user_id),
):
    r = update_reservation_status(
        db,
        reservation_id=reservation_id,
        new_status=payload.status,
        owner_id=owner_id,
        reason=payload.reason,
    )
    write_audit_log(
        db,
        actor_user_id=owner_id,
        venue_id=r.venue_id,
        action_type="RESERVATION_STATUS",
        target_type="reservation",
        target_id=r.id,
        summary=f"Reservation {payload.status}",
        diff_json={"status": payload.status},
        request=request,
    )
    return r


@router.get("/venues/{venue_id}/blocks", response_model=list[BlockOut])
def venue_blocks(venue_id: str, db: Session = Depends(get_db), owner_id: str = Depends(get_current_user_id)):
    return list_blocks(db, venue_id=venue_id, owner_id=owner_id)


@router.post("/venues/{venue_id}/blocks", response_model=BlockOut)
def create_block(
    venue_id: str,
    payload: BlockCreate,
    request: Request,
    db: Session = Depends(get_db),
    owner_id: str = Depends(get_current_user_id),
):
    b = block_date(
        db,
        venue_id=venue_id,
        owner_id=owner_id,
        day=payload.date,
        is_full_day=payload.is_full_day,
        start_time=payload.start_time,
        end_time=payload.end_time,
        reason=payload.reason,
    )
    write_audit_log(
        db,
        actor_user_id=owner_id,
        venue_id=venue_id,
        action_type="CALENDAR_BLOCK_CREATE",
        target_type="block",
        target_id=b.id,
        summary="Blocked date",
        diff_json={"date": str(b.date), "is_full_day": b.is_full_day, "reason": b.reason},
        request=request,
    )
    return b


@router.delete("/blocks/{block_id}")
def delete_block(block_id: str, request: Request, db: Session = Depends(get_db), owner_id: str = Depends(get_current_user_id)):
    b = unblock_date(db, block_id=block_id, owner_id=owner_id)
    write_audit_log(
        db,
        actor_user_id=owner_id,
        venue_id=b.venue_id,
        action_type="CALENDAR_BLOCK_DELETE",
        target_type="block",
        target_id=block_id,
        summary="Unblocked date",
        diff_json={"date": str(b.date)},
        request=request,
    )
    return {"ok": True}
