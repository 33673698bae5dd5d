from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from venue_booking.core.security import decode_access_token
from venue_booking.db.session import SessionLocal

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user_id(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    """Resolve the caller's user id from the bearer token.

    Services never read identity from ambient state; routes pass this value
    down explicitly as ``owner_id`` or ``current_user_id``.
    """
    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        logger.warning("Rejected request with an invalid access token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return str(user_id)
