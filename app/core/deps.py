from __future__ import annotations

import uuid
from dataclasses import dataclass

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError

from app.core.config import settings
from app.core.security import decode_jwt

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class UserContext:
    user_id: uuid.UUID
    email: str | None = None


def get_current_user(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> UserContext:
    if not creds:
        raise HTTPException(status_code=401, detail="Unauthorized")
    try:
        claims = decode_jwt(creds.credentials, settings.SESSION_JWT_SECRET)
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid session token")
    try:
        user_id = uuid.UUID(str(claims.get("sub") or ""))
    except ValueError:
        raise HTTPException(status_code=401, detail="Invalid session token")
    email = str(claims.get("email") or "").strip() or None
    return UserContext(user_id=user_id, email=email)


def get_optional_user(creds: HTTPAuthorizationCredentials | None = Depends(bearer)) -> UserContext | None:
    if not creds:
        return None
    try:
        return get_current_user(creds)
    except HTTPException:
        # Stale or malformed tokens fall back to anonymous access.
        return None
