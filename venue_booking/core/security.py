from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt

from venue_booking.core.config import get_settings


def create_access_token(user_id: str, extra_claims: Optional[Dict[str, Any]] = None) -> str:
    """Sign a bearer token whose ``sub`` is the customer or venue owner id."""
    settings = get_settings()
    issued_at = datetime.now(timezone.utc)

    claims: Dict[str, Any] = {
        "sub": user_id,
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + timedelta(minutes=settings.access_token_exp_minutes)).timestamp()),
    }
    if extra_claims:
        claims.update(extra_claims)

    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    # Raises JWTError on a bad signature or an expired token
    settings = get_settings()
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
