"""Authentication dependencies for retrieving the current user."""

from fastapi import Header, HTTPException
from pydantic import BaseModel

from harakapay.core.security import decode_access_token


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    access_token: str


def get_current_user(authorization: str | None = Header(default=None)) -> CurrentUser:
    # Expect Authorization: Bearer <token>
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    try:
        payload = decode_access_token(token)
    except ValueError:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return CurrentUser(id=str(user_id), email=payload.get("email"), access_token=token)
