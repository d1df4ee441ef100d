from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from core.config import Settings
from core.errors import AuthError, ValidationError


def hash_secret(plain: str, rounds: int = 10) -> str:
    encoded = plain.encode("utf-8")
    if len(encoded) > 72:
        # bcrypt only looks at the first 72 bytes
        raise ValidationError("Password or answer is too long")
    return bcrypt.hashpw(encoded, bcrypt.gensalt(rounds)).decode("utf-8")


def verify_secret(plain: str, hashed: str | None) -> bool:
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: str, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": now,
        "exp": now + timedelta(days=settings.TOKEN_EXPIRE_DAYS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> str:
    """Return the user id bound to ``token``.

    Raises AuthError when the signature is wrong, the token has expired, or the
    payload carries no id.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")
    user_id = payload.get("id")
    if not isinstance(user_id, str) or not user_id:
        raise AuthError("Invalid token")
    return user_id
