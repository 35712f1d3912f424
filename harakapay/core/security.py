"""Access token utilities for the HarakaPay gateway.

The backend's auth service issues HS256 JWTs whose ``sub`` claim is the user's
UUID. The gateway verifies them with the shared secret and forwards the raw
token to the backend so row-level security applies as that user.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from harakapay.core.settings import get_settings


def create_access_token(user_id: str, email: Optional[str] = None, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    expire_delta = timedelta(
        minutes=expires_minutes if expires_minutes is not None else getattr(settings, "ACCESS_TOKEN_EXPIRE_MINUTES", 60)
    )
    expire = datetime.now(timezone.utc) + expire_delta
    payload = {
        "sub": str(user_id),
        "exp": expire,
        "aud": settings.jwt_audience,
        "role": "authenticated",
    }
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.SECRET_KEY, algorithm="HS256")


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=["HS256"], audience=settings.jwt_audience)
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc


def mask_phone(phone: str | None) -> str:
    """Hide all but the last four digits of a phone number for log output."""
    if not phone:
        return ""
    return "*" * max(len(phone) - 4, 0) + phone[-4:]
