from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from core.errors import ConflictError
from models.user import User


def get_user(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user_by_login(db: Session, email_or_username: str):
    return (
        db.query(User)
        .filter(or_(User.email == email_or_username, User.username == email_or_username))
        .first()
    )


def find_conflicting_user(db: Session, username: str | None, email: str | None, exclude_user_id: str | None = None):
    clauses = []
    if username:
        clauses.append(User.username == username)
    if email:
        clauses.append(User.email == email)
    if not clauses:
        return None
    q = db.query(User).filter(or_(*clauses))
    if exclude_user_id:
        q = q.filter(User.id != exclude_user_id)
    return q.first()


def _commit_unique(db: Session):
    # Another request may have claimed the username/email since the lookup
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Email or username already exists")


def create_user(
    db: Session,
    name: str,
    username: str,
    email: str,
    password_hash: str,
    security_question: str | None = None,
    security_answer_hash: str | None = None,
):
    user = User(
        name=name,
        username=username,
        email=email,
        password_hash=password_hash,
        security_question=security_question,
        security_answer_hash=security_answer_hash,
    )
    db.add(user)
    _commit_unique(db)
    db.refresh(user)
    return user


def update_user(db: Session, user: User, **fields):
    for k, v in fields.items():
        if v is not None:
            setattr(user, k, v)
    _commit_unique(db)
    db.refresh(user)
    return user
