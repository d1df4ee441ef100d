import uuid
from sqlalchemy import Column, String, ForeignKey, Index
from models.base import Base, TimestampMixin

class Folder(Base, TimestampMixin):
    __tablename__ = "folders"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    name = Column(String(255), nullable=False)

Index("idx_folders_user_id_created_at", Folder.user_id, Folder.created_at.desc())
