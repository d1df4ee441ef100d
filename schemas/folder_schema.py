from datetime import datetime

from schemas.base_schema import CamelModel


class FolderCreate(CamelModel):
    name: str | None = None


class FolderResponse(CamelModel):
    id: str
    user_id: str
    name: str
    created_at: datetime | None = None
