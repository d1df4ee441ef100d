from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.auth import get_current_user, get_settings
from core.config import Settings
from core.database import get_db
from schemas.auth_schema import (
    AuthTokenResponse,
    CheckUserRequest,
    ForgotPasswordRequest,
    LoginRequest,
    MessageResponse,
    ResetPasswordRequest,
    SecurityQuestionResponse,
    SignupRequest,
    VerifyAnswerRequest,
)
from schemas.user_schema import ProfileResponse, ProfileUpdate, ProfileUpdateResponse
from services import auth_service

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/signup", response_model=AuthTokenResponse, status_code=201)
def signup(payload: SignupRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    user, token = auth_service.signup(db, payload, settings)
    return {"token": token, "user": user}


@router.post("/login", response_model=AuthTokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    user, token = auth_service.login(db, payload, settings)
    return {"token": token, "user": user}


@router.post("/forgot-password", response_model=SecurityQuestionResponse)
def forgot_password(payload: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Return the security question of the user identified by email or username."""
    return auth_service.lookup_security_question(db, payload.email_or_username)


@router.post("/check-user", response_model=SecurityQuestionResponse)
def check_user(payload: CheckUserRequest, db: Session = Depends(get_db)):
    """Email-only variant of /forgot-password kept for older clients."""
    return auth_service.lookup_security_question_by_email(db, payload.email)


@router.post("/verify-answer", response_model=MessageResponse)
def verify_answer(payload: VerifyAnswerRequest, db: Session = Depends(get_db)):
    auth_service.verify_security_answer(db, payload.email_or_username, payload.answer)
    return {"message": "Security answer verified"}


@router.post("/reset-password", response_model=MessageResponse)
def reset_password(payload: ResetPasswordRequest, db: Session = Depends(get_db), settings: Settings = Depends(get_settings)):
    auth_service.reset_password(db, payload, settings)
    return {"message": "Password reset successful"}


@router.get("/profile", response_model=ProfileResponse)
def get_profile(current_user = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=ProfileUpdateResponse)
def update_profile(payload: ProfileUpdate, db: Session = Depends(get_db), current_user = Depends(get_current_user)):
    user = auth_service.update_profile(db, current_user, payload)
    return {"message": "Profile updated successfully", "user": user}
