"""Error kinds raised below the HTTP boundary.

Routers and services raise these; the handlers registered in ``main.create_app``
turn them into ``{"message": ...}`` JSON responses with the matching status.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class AuthError(AppError):
    status_code = 401
    default_message = "Not authenticated"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    # Duplicate username/email has always been reported as a plain 400
    status_code = 400
    default_message = "Email or username already exists"


class FormatError(AppError):
    status_code = 400
    default_message = "Uploaded file could not be read as a spreadsheet"


class ServerError(AppError):
    pass
