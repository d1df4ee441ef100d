"""Credential signup/login, the security-question recovery flow, and profile edits."""
import logging

from sqlalchemy.orm import Session

from core.config import Settings
from core.errors import AuthError, ConflictError, NotFoundError, ValidationError
from core.security import create_access_token, hash_secret, verify_secret
from crud.user_crud import (
    create_user,
    find_conflicting_user,
    get_user_by_email,
    get_user_by_login,
    update_user,
)
from models.user import User
from schemas.auth_schema import LoginRequest, ResetPasswordRequest, SignupRequest
from schemas.user_schema import ProfileUpdate

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INCORRECT_ANSWER = "Incorrect answer to security question"


def signup(db: Session, payload: SignupRequest, settings: Settings) -> tuple[User, str]:
    fields = (
        payload.name,
        payload.username,
        payload.email,
        payload.password,
        payload.security_question,
        payload.security_answer,
    )
    if not all(fields):
        raise ValidationError("All fields are required")

    if find_conflicting_user(db, payload.username, payload.email):
        raise ConflictError("Email or username already exists")

    user = create_user(
        db,
        name=payload.name,
        username=payload.username,
        email=payload.email,
        password_hash=hash_secret(payload.password, settings.BCRYPT_ROUNDS),
        security_question=payload.security_question,
        security_answer_hash=hash_secret(payload.security_answer, settings.BCRYPT_ROUNDS),
    )
    logger.info("Signed up user %s", user.id)
    return user, create_access_token(user.id, settings)


def login(db: Session, payload: LoginRequest, settings: Settings) -> tuple[User, str]:
    if not payload.email_or_username or not payload.password:
        raise ValidationError("Please enter both email/username and password")

    user = get_user_by_login(db, payload.email_or_username)
    if not user or not verify_secret(payload.password, user.password_hash):
        logger.warning("Failed login for %r", payload.email_or_username)
        raise AuthError(INVALID_CREDENTIALS)
    return user, create_access_token(user.id, settings)


def _require_user(db: Session, email_or_username: str | None) -> User:
    if not email_or_username:
        raise ValidationError("Email or username required")
    user = get_user_by_login(db, email_or_username)
    if not user:
        raise NotFoundError("User not found")
    return user


def security_question_for(user: User) -> dict:
    return {
        "has_security_question": bool(user.security_question),
        "question": user.security_question,
        "security_question": user.security_question,
    }


def lookup_security_question(db: Session, email_or_username: str | None) -> dict:
    return security_question_for(_require_user(db, email_or_username))


def lookup_security_question_by_email(db: Session, email: str | None) -> dict:
    if not email:
        raise ValidationError("Email required")
    user = get_user_by_email(db, email)
    if not user:
        raise NotFoundError("User not found")
    return security_question_for(user)


def verify_security_answer(db: Session, email_or_username: str | None, answer: str | None) -> User:
    user = _require_user(db, email_or_username)
    if not verify_secret(answer, user.security_answer_hash):
        logger.warning("Wrong security answer for user %s", user.id)
        raise AuthError(INCORRECT_ANSWER)
    return user


def reset_password(db: Session, payload: ResetPasswordRequest, settings: Settings) -> None:
    if not all((payload.email_or_username, payload.security_answer, payload.new_password, payload.confirm_new_password)):
        raise ValidationError("All fields are required")
    if payload.new_password != payload.confirm_new_password:
        raise ValidationError("Passwords do not match")

    user = verify_security_answer(db, payload.email_or_username, payload.security_answer)
    update_user(db, user, password_hash=hash_secret(payload.new_password, settings.BCRYPT_ROUNDS))
    logger.info("Password reset for user %s", user.id)


def update_profile(db: Session, user: User, payload: ProfileUpdate) -> User:
    username = payload.username or None
    email = payload.email or None
    if find_conflicting_user(db, username, email, exclude_user_id=user.id):
        raise ConflictError("Email or username already exists")
    return update_user(db, user, username=username, email=email)
