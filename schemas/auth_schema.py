from pydantic import AliasChoices, Field

from schemas.base_schema import CamelModel


class SignupRequest(CamelModel):
    name: str | None = None
    username: str | None = None
    email: str | None = None
    password: str | None = None
    security_question: str | None = None
    security_answer: str | None = None


class LoginRequest(CamelModel):
    email_or_username: str | None = None
    password: str | None = None


class ForgotPasswordRequest(CamelModel):
    email_or_username: str | None = None


class CheckUserRequest(CamelModel):
    email: str | None = None


class VerifyAnswerRequest(CamelModel):
    # Older clients send the identity as ``email``
    email_or_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("emailOrUsername", "email", "email_or_username"),
    )
    answer: str | None = None


class ResetPasswordRequest(CamelModel):
    email_or_username: str | None = None
    security_answer: str | None = None
    new_password: str | None = None
    confirm_new_password: str | None = None


class AuthUser(CamelModel):
    name: str
    email: str


class AuthTokenResponse(CamelModel):
    token: str
    user: AuthUser


class SecurityQuestionResponse(CamelModel):
    has_security_question: bool
    question: str | None = None
    security_question: str | None = None


class MessageResponse(CamelModel):
    message: str
