from sqlalchemy.orm import Session
from sqlalchemy import desc
from models.project import Project

# Every query below filters on the owner so one user can never reach another's rows


def get_project(db: Session, project_id: str, user_id: str):
    return db.query(Project).filter(Project.id == project_id, Project.user_id == user_id).first()


def list_projects(db: Session, user_id: str, folder_id: str | None = None, skip: int = 0, limit: int | None = 100):
    q = db.query(Project).filter(Project.user_id == user_id)
    if folder_id is not None:
        q = q.filter(Project.folder_id == folder_id)
    return q.order_by(desc(Project.created_at)).offset(skip).limit(limit).all()


def create_project(db: Session, user_id: str, **fields):
    proj = Project(user_id=user_id, **fields)
    db.add(proj)
    db.commit()
    db.refresh(proj)
    return proj


def update_project(db: Session, proj: Project, **fields):
    for k, v in fields.items():
        setattr(proj, k, v)
    db.commit()
    db.refresh(proj)
    return proj


def delete_project(db: Session, project_id: str, user_id: str) -> bool:
    deleted = (
        db.query(Project)
        .filter(Project.id == project_id, Project.user_id == user_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return deleted > 0
