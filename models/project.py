import uuid
from sqlalchemy import Column, String, ForeignKey, Index, JSON
from models.base import Base, TimestampMixin

class Project(Base, TimestampMixin):
    __tablename__ = "projects"

    id = Column(String(64), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(64), ForeignKey("user.id", ondelete="CASCADE"), nullable=False)
    project_name = Column(String(255), nullable=False)
    chart_type = Column(String(32), nullable=False)
    file_path = Column(String(512), nullable=False)
    original_file_name = Column(String(255), nullable=False)
    content_type = Column(String(128), nullable=True)
    data = Column(JSON, nullable=True)
    preview_data = Column(JSON, nullable=False, default=list)
    chart_config = Column(JSON, nullable=False, default=dict)
    # Plain reference: folders are never cascaded into their projects
    folder_id = Column(String(64), nullable=True, index=True)

Index("idx_projects_user_id_created_at", Project.user_id, Project.created_at.desc())
