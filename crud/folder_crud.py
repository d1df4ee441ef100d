from sqlalchemy.orm import Session
from sqlalchemy import desc
from models.folder import Folder


def get_folder(db: Session, folder_id: str, user_id: str):
    return db.query(Folder).filter(Folder.id == folder_id, Folder.user_id == user_id).first()


def list_folders(db: Session, user_id: str):
    return db.query(Folder).filter(Folder.user_id == user_id).order_by(desc(Folder.created_at)).all()


def create_folder(db: Session, user_id: str, name: str):
    folder = Folder(user_id=user_id, name=name)
    db.add(folder)
    db.commit()
    db.refresh(folder)
    return folder
