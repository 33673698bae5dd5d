from __future__ import annotations

from fastapi import APIRouter

from venue_booking.api.routes import bookings, owner, public

api_router = APIRouter()

api_router.include_router(public.router, prefix="/public", tags=["public"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(owner.router, prefix="/owner", tags=["owner"])
