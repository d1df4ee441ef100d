from schemas.base_schema import CamelModel


class ProfileResponse(CamelModel):
    name: str
    username: str
    email: str


class ProfileUpdate(CamelModel):
    username: str | None = None
    email: str | None = None


class ProfileUpdateResponse(CamelModel):
    message: str
    user: ProfileResponse
