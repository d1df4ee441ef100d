from typing import Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from core.config import Settings
from core.database import get_db
from core.errors import AuthError
from core.security import decode_access_token
from crud.user_crud import get_user


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    parts = authorization.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    token = _extract_bearer_token(authorization)
    if not token:
        raise AuthError("No token provided")

    user_id = decode_access_token(token, settings)

    user = get_user(db, user_id)
    if not user:
        raise AuthError("User not found")
    return user
